# actionfsm/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Hashable, Iterable, Tuple

from actionfsm.core.types import ActionHandler


def _ordered_unique(states: Iterable[Hashable]) -> Tuple[Hashable, ...]:
    # dict keeps first-occurrence order, unlike set
    return tuple(dict.fromkeys(states))


@dataclass(frozen=True)
class ActionRegistration:
    """
    An entry of the action table: the states an action may run from, the states
    its handler may return and the handler itself.

    The state collections are stored as ordered tuples (caller order, duplicates
    dropped) so rendering stays deterministic, with frozenset views for membership.
    """

    from_states: Tuple[Hashable, ...]
    to_states: Tuple[Hashable, ...]
    handler: ActionHandler
    _from_set: FrozenSet[Hashable] = field(init=False, repr=False, compare=False)
    _to_set: FrozenSet[Hashable] = field(init=False, repr=False, compare=False)

    @classmethod
    def create(
        cls, from_states: Iterable[Hashable], to_states: Iterable[Hashable], handler: ActionHandler
    ) -> "ActionRegistration":
        return cls(_ordered_unique(from_states), _ordered_unique(to_states), handler)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_from_set", frozenset(self.from_states))
        object.__setattr__(self, "_to_set", frozenset(self.to_states))

    def allows_source(self, state: Any) -> bool:
        """True if the action may run while the machine is in ``state``."""
        try:
            return state in self._from_set
        except TypeError:
            return False

    def allows_target(self, state: Any) -> bool:
        """True if the handler is allowed to return ``state``."""
        try:
            return state in self._to_set
        except TypeError:
            return False
