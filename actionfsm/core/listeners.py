# actionfsm/core/listeners.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Hashable, Iterable, Optional

from actionfsm.core.types import ChangeHandler


def _as_filter(states: Optional[Iterable[Hashable]]) -> Optional[FrozenSet[Hashable]]:
    if states is None:
        return None
    return frozenset(states)


@dataclass(frozen=True)
class ChangeListener:
    """
    A callback registered with ``StateMachine.on_change``.

    A ``None`` filter accepts any state.
    """

    callback: ChangeHandler
    from_states: Optional[FrozenSet[Hashable]] = None
    to_states: Optional[FrozenSet[Hashable]] = None

    @classmethod
    def create(
        cls,
        callback: ChangeHandler,
        from_states: Optional[Iterable[Hashable]] = None,
        to_states: Optional[Iterable[Hashable]] = None,
    ) -> "ChangeListener":
        return cls(callback, _as_filter(from_states), _as_filter(to_states))

    def matches(self, old_state: Any, new_state: Any) -> bool:
        if self.from_states is not None and old_state not in self.from_states:
            return False
        if self.to_states is not None and new_state not in self.to_states:
            return False
        return True

    def notify(self, machine: Any, old_state: Any, new_state: Any) -> None:
        self.callback(machine, old_state, new_state)
