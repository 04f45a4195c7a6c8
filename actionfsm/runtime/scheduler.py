# actionfsm/runtime/scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import itertools
import logging
import weakref
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from actionfsm.core.state_machine import StateMachine

logger = logging.getLogger(__name__)


class DeferredActionScheduler:
    """
    Runs ``perform_action`` for a machine after a delay, on an asyncio event loop.

    The loop acts as the serial execution context: the deferred call runs on the
    loop's thread with the machine's normal synchronous semantics. The machine
    is held through a weak reference, so a scheduled action never keeps it
    alive; if the machine has been collected the callback does nothing.

    Not thread-safe. Schedule from the loop's own thread.
    """

    def __init__(self, machine: "StateMachine", loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        :param machine: The machine the deferred actions run against.
        :param loop: Loop to schedule on. Defaults to the loop running when
                     ``schedule`` is called.
        """
        self._machine_ref = weakref.ref(machine)
        self._loop = loop
        self._tickets = itertools.count()
        self._pending: Dict[int, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> int:
        """Number of scheduled actions that have neither fired nor been cancelled."""
        return sum(1 for handle in self._pending.values() if not handle.cancelled())

    def schedule(self, action: Any, delay: float) -> asyncio.TimerHandle:
        """
        Schedule ``action`` to be performed after ``delay`` seconds.

        :return: The timer handle; call ``cancel()`` on it to drop the action.
        :raises RuntimeError: If no loop was given and none is running.
        """
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        self._prune_cancelled()
        ticket = next(self._tickets)
        handle = loop.call_later(delay, self._fire, ticket, action)
        self._pending[ticket] = handle
        logger.debug("Scheduled action %r in %.3fs", action, delay)
        return handle

    def cancel_all(self) -> int:
        """
        Cancel every scheduled action that has not fired yet.

        :return: The number of actions cancelled.
        """
        cancelled = 0
        for handle in self._pending.values():
            if not handle.cancelled():
                handle.cancel()
                cancelled += 1
        self._pending.clear()
        return cancelled

    def _prune_cancelled(self) -> None:
        # handles cancelled directly never reach _fire
        self._pending = {ticket: handle for ticket, handle in self._pending.items() if not handle.cancelled()}

    def _fire(self, ticket: int, action: Any) -> None:
        self._pending.pop(ticket, None)
        machine = self._machine_ref()
        if machine is None:
            logger.debug("Dropping deferred action %r: machine no longer exists", action)
            return
        machine.perform_action(action)
