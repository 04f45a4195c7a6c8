# actionfsm/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Protocol

if TYPE_CHECKING:
    from actionfsm.core.errors import FailureReason


class HookProtocol(Protocol):
    """
    Shape of a hook object. Every method is optional; the manager only calls
    the ones a hook actually defines.
    """

    def on_transition(self, machine: Any, old_state: Any, new_state: Any) -> None:
        ...

    def on_reject(self, machine: Any, action: Any, reason: "FailureReason") -> None:
        ...

    def on_error(self, error: Exception) -> None:
        ...


class HookManager:
    """
    Manages the registration and execution of hooks that observe the machine
    (successful transitions, rejected actions and handler errors). Users can
    attach logging, monitoring, or custom side effects without altering core logic.
    """

    def __init__(self, hooks: Optional[List[HookProtocol]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List[HookProtocol] = list(hooks or [])

    @property
    def hooks(self) -> List[HookProtocol]:
        return list(self._hooks)

    def register_hook(self, hook: HookProtocol) -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some of the HookProtocol methods.
        """
        self._hooks.append(hook)

    def execute_on_transition(self, machine: Any, old_state: Any, new_state: Any) -> None:
        """
        Run all hooks' on_transition logic after the state has changed.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_transition"):
                hook.on_transition(machine, old_state, new_state)

    def execute_on_reject(self, machine: Any, action: Any, reason: "FailureReason") -> None:
        """
        Run all hooks' on_reject logic when an action did not change the state.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_reject"):
                hook.on_reject(machine, action, reason)

    def execute_on_error(self, error: Exception) -> None:
        """
        Run all hooks' on_error logic when an action handler raises.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_error"):
                hook.on_error(error)
