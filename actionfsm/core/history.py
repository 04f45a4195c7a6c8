# actionfsm/core/history.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from collections import deque
from typing import Any, Iterator, Tuple


class StateHistory:
    """
    Bounded record of the states a machine has been in, oldest first.

    Once ``max_length`` entries are stored, appending evicts the oldest one.
    A ``max_length`` of 0 disables recording entirely.
    """

    def __init__(self, max_length: int) -> None:
        self._max_length = max_length
        self._entries: deque = deque(maxlen=max_length)

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def enabled(self) -> bool:
        return self._max_length > 0

    def record(self, state: Any) -> None:
        if self.enabled:
            self._entries.append(state)

    def snapshot(self) -> Tuple[Any, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Any:
        return self._entries[index]
