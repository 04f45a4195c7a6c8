# actionfsm/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Tuple

from actionfsm.core.actions import ActionRegistration
from actionfsm.core.errors import FailureReason
from actionfsm.core.history import StateHistory
from actionfsm.core.hooks import HookManager, HookProtocol
from actionfsm.core.listeners import ChangeListener
from actionfsm.core.types import A, ActionHandler, ChangeHandler, S
from actionfsm.core.validations import Validator
from actionfsm.runtime.graph import FlowDiagram
from actionfsm.runtime.scheduler import DeferredActionScheduler

logger = logging.getLogger(__name__)


class ErrorRecoveryStrategy:
    """
    Interface for handling exceptions raised by action handlers.
    Subclasses can implement custom logic in `recover`.
    """

    def recover(self, error: Exception, state_machine: "StateMachine") -> None:
        pass


class StateMachine(Generic[S, A]):
    """
    A finite state machine whose state only changes through registered actions.

    Each action is registered with the states it may run from, the states its
    handler may return and the handler itself. Performing an action runs the
    handler and, if the returned state is allowed, moves the machine to it,
    records it in the bounded history and notifies change listeners in the
    order they were registered.

    Failed actions never raise: ``perform_action`` returns None, the reason is
    kept in ``last_failure``, logged as a warning and passed to hooks.

    The machine is meant for single-threaded use and does no locking of its own.
    """

    def __init__(
        self,
        initial_state: S,
        max_history_length: int = 10,
        hooks: Optional[List[HookProtocol]] = None,
        validator: Optional[Validator] = None,
        error_recovery: Optional[ErrorRecoveryStrategy] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        :param initial_state: The state in which this machine begins.
        :param max_history_length: How many states the history keeps; 0 disables it.
        :param hooks: Optional list of hook objects implementing on_transition, on_reject, on_error.
        :param validator: Optional validator for configuration checks.
        :param error_recovery: Optional strategy for exceptions raised by action handlers.
        :param loop: Event loop for delayed actions; defaults to the running loop.
        """
        self._validator = validator or Validator()
        self._validator.validate_state(initial_state)
        self._validator.validate_history_length(max_history_length)

        self._initial_state = initial_state
        self._state = initial_state
        self._history = StateHistory(max_history_length)
        self._history.record(initial_state)

        self._actions: Dict[A, ActionRegistration] = {}
        self._listeners: List[ChangeListener] = []
        self._hooks = HookManager(hooks)
        self._error_recovery = error_recovery
        self._scheduler = DeferredActionScheduler(self, loop=loop)

        self._handler_running = False
        self._rejecting = False
        self._last_failure: Optional[FailureReason] = None

    @property
    def initial_state(self) -> S:
        return self._initial_state

    @property
    def state(self) -> S:
        """The current state of the machine."""
        return self._state

    @property
    def history(self) -> Tuple[S, ...]:
        """States the machine has been in, oldest first; the last one is the current state."""
        return self._history.snapshot()

    @property
    def max_history_length(self) -> int:
        return self._history.max_length

    @property
    def last_failure(self) -> Optional[FailureReason]:
        """Why the most recent action failed, or None if it succeeded."""
        return self._last_failure

    @property
    def hooks(self) -> HookManager:
        return self._hooks

    @property
    def scheduler(self) -> DeferredActionScheduler:
        return self._scheduler

    @property
    def actions(self) -> Tuple[A, ...]:
        """Registered actions in table order."""
        return tuple(self._actions)

    def registrations(self) -> Tuple[Tuple[A, ActionRegistration], ...]:
        """Read-only snapshot of the action table in table order."""
        return tuple(self._actions.items())

    def get_registration(self, action: A) -> Optional[ActionRegistration]:
        return self._actions.get(action)

    def register_action(
        self,
        action: A,
        from_states: Iterable[S],
        to_states: Iterable[S],
        handler: ActionHandler,
    ) -> None:
        """
        Register the handler to run when ``action`` is performed.

        The action only runs while the machine is in one of ``from_states``, and
        the handler must return one of ``to_states``. Registering an action again
        replaces the previous registration.

        :param action: The action key.
        :param from_states: States from which the action can be performed.
        :param to_states: States the handler may return.
        :param handler: Called with the machine; returns the new state.
        :raises ValidationError: If either state collection is empty or the handler is not callable.
        """
        registration = ActionRegistration.create(from_states, to_states, handler)
        self._validator.validate_registration(action, registration)
        self._actions[action] = registration

    def on_change(
        self,
        callback: ChangeHandler,
        from_states: Optional[Iterable[S]] = None,
        to_states: Optional[Iterable[S]] = None,
    ) -> None:
        """
        Register a callback to run after the state changes.

        The callback runs only if the old state is in ``from_states`` and the new
        state is in ``to_states``; None accepts any state. A transition to the
        same state still counts as a change. Callbacks run in registration order
        and receive ``(machine, old_state, new_state)``.
        """
        self._listeners.append(ChangeListener.create(callback, from_states, to_states))

    def can_perform(self, action: A) -> bool:
        """True if ``action`` is registered and allowed from the current state."""
        registration = self._actions.get(action)
        return registration is not None and registration.allows_source(self._state)

    def perform_action(self, action: A, delay: Optional[float] = None) -> Optional[S]:
        """
        Perform a registered action.

        Without a delay the handler and the matching change listeners run
        before this returns. Calling this from inside a handler or listener of
        the same machine is rejected; pass a delay to chain actions instead.

        :param action: The action to perform.
        :param delay: Seconds after which to perform the action on the event loop.
        :return: The new state, or None if the action failed or was deferred.
        """
        if delay is not None:
            self.schedule_action(action, delay)
            return None

        if self._handler_running:
            return self._reject(
                action,
                FailureReason.REENTRANT,
                "The action %r is ignored because there is still another unfinished action. "
                "If you called perform_action (indirectly) from within an action handler "
                "or change listener, consider setting a delay.",
                action,
            )

        registration = self._actions.get(action)
        if registration is None:
            return self._reject(
                action, FailureReason.UNREGISTERED_ACTION, "The action %r is not registered.", action
            )

        if not registration.allows_source(self._state):
            return self._reject(
                action,
                FailureReason.ILLEGAL_SOURCE_STATE,
                "The action %r cannot be performed from state %r.",
                action,
                self._state,
            )

        try:
            with self._running():
                new_state = registration.handler(self)
        except Exception as error:
            self._hooks.execute_on_error(error)
            if self._error_recovery is None:
                raise
            self._last_failure = FailureReason.HANDLER_ERROR
            logger.exception("Handler for action %r raised; state kept at %r.", action, self._state)
            self._error_recovery.recover(error, self)
            return None

        if not registration.allows_target(new_state):
            return self._reject(
                action,
                FailureReason.ILLEGAL_TARGET_STATE,
                "The action handler for %r returned the state %r but the state machine expects "
                "one of these states: %r. State kept at %r.",
                action,
                new_state,
                registration.to_states,
                self._state,
            )

        self._set_state(new_state)
        return self._state

    def schedule_action(self, action: A, delay: float) -> asyncio.TimerHandle:
        """
        Perform ``action`` after ``delay`` seconds on the machine's event loop.

        :return: A handle whose ``cancel()`` drops the action if it has not run yet.
        :raises ValidationError: If the delay is negative.
        """
        self._validator.validate_delay(delay)
        return self._scheduler.schedule(action, delay)

    def validate(self) -> List[str]:
        """Report structural problems of the action table."""
        return self._validator.validate_state_machine(self)

    @property
    def flow_diagram(self) -> str:
        """The action table as Graphviz digraph text."""
        return FlowDiagram(self).render()

    def _set_state(self, new_state: S) -> None:
        old_state = self._state
        self._state = new_state
        self._history.record(new_state)
        self._last_failure = None
        logger.debug("Transition %r -> %r", old_state, new_state)

        with self._running():
            for listener in list(self._listeners):
                if listener.matches(old_state, new_state):
                    listener.notify(self, old_state, new_state)
            self._hooks.execute_on_transition(self, old_state, new_state)

    def _reject(self, action: A, reason: FailureReason, message: str, *args) -> None:
        logger.warning(message, *args)
        # reject hooks are not notified about rejections they caused themselves
        if not self._rejecting:
            self._rejecting = True
            try:
                with self._running():
                    self._hooks.execute_on_reject(self, action, reason)
            finally:
                self._rejecting = False
        self._last_failure = reason
        return None

    @contextmanager
    def _running(self) -> Iterator[None]:
        previous = self._handler_running
        self._handler_running = True
        try:
            yield
        finally:
            self._handler_running = previous

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state!r}, actions={len(self._actions)})"
