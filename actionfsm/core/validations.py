# actionfsm/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, List

from actionfsm.core.errors import ValidationError

if TYPE_CHECKING:
    from actionfsm.core.actions import ActionRegistration
    from actionfsm.core.state_machine import StateMachine


class Validator:
    """
    Checks machine configuration and action registrations, and reports
    structural problems of a machine's action table.
    """

    def validate_history_length(self, max_history_length: Any) -> None:
        """
        :raises ValidationError: If the bound is not a non-negative integer.
        """
        if isinstance(max_history_length, bool) or not isinstance(max_history_length, int):
            raise ValidationError(f"max_history_length must be an int, got {max_history_length!r}")
        if max_history_length < 0:
            raise ValidationError(f"max_history_length must be >= 0, got {max_history_length}")

    def validate_state(self, state: Any) -> None:
        if not isinstance(state, Hashable):
            raise ValidationError(f"State {state!r} is not hashable")

    def validate_registration(self, action: Any, registration: "ActionRegistration") -> None:
        """
        Check that a registration is usable. The handler's behavior is not
        checked here; its result is validated when the action is performed.

        :raises ValidationError: If validation fails.
        """
        if not isinstance(action, Hashable):
            raise ValidationError(f"Action {action!r} is not hashable")
        if not registration.from_states:
            raise ValidationError(f"Action {action!r} needs at least one source state")
        if not registration.to_states:
            raise ValidationError(f"Action {action!r} needs at least one target state")
        if not callable(registration.handler):
            raise ValidationError(f"Handler for action {action!r} is not callable")

    def validate_delay(self, delay: float) -> None:
        if delay < 0:
            raise ValidationError(f"delay must be >= 0, got {delay}")

    def validate_state_machine(self, machine: "StateMachine") -> List[str]:
        """
        Report structural problems of the action table without raising.

        :return: A list of human-readable problems; empty if none were found.
        """
        errors: List[str] = []
        registrations = machine.registrations()
        if not registrations:
            return errors

        if not any(reg.allows_source(machine.initial_state) for _, reg in registrations):
            errors.append(f"Initial state {machine.initial_state!r} is not a source of any action")

        reachable = {machine.initial_state}
        frontier = [machine.initial_state]
        while frontier:
            current = frontier.pop()
            for _, reg in registrations:
                if not reg.allows_source(current):
                    continue
                for target in reg.to_states:
                    if target not in reachable:
                        reachable.add(target)
                        frontier.append(target)

        declared = []
        for _, reg in registrations:
            for state in reg.from_states + reg.to_states:
                if state not in declared:
                    declared.append(state)
        for state in declared:
            if state not in reachable:
                errors.append(f"State {state!r} is not reachable from initial state {machine.initial_state!r}")

        return errors
