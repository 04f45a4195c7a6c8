# actionfsm/core/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Hashable, TypeVar

S = TypeVar("S", bound=Hashable)
A = TypeVar("A", bound=Hashable)

# Callback Types
ActionHandler = Callable[[Any], Any]
ChangeHandler = Callable[[Any, Any, Any], None]
LabelFormatter = Callable[[Any], str]
