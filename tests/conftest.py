# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from tests.load_machine import build_load_machine


@pytest.fixture
def recorded_callbacks():
    """Listener calls recorded by the load machine, in call order."""
    return []


@pytest.fixture
def load_machine(recorded_callbacks):
    """The loading machine with a history bound of 3 and three recording listeners."""
    return build_load_machine(length=3, recorded=recorded_callbacks)


@pytest.fixture
def machine_factory():
    """Returns a factory function to build load machines with a given history bound."""

    def _factory(length: int = 3, recorded=None):
        return build_load_machine(length=length, recorded=recorded)

    return _factory


@pytest.fixture
def mock_hook():
    """A hook mock exposing on_transition, on_reject and on_error."""
    hook = MagicMock()
    hook.on_transition = MagicMock()
    hook.on_reject = MagicMock()
    hook.on_error = MagicMock()
    return hook


@pytest.fixture
def validator():
    """A default Validator."""
    from actionfsm.core.validations import Validator

    return Validator()


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from actionfsm.core.errors import StateMachineError, ValidationError

    return (StateMachineError, ValidationError)
