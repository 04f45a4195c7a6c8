# tests/unit/runtime/test_scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
import gc
import logging

import pytest

from actionfsm.core.errors import ValidationError
from actionfsm.core.state_machine import StateMachine
from actionfsm.runtime.scheduler import DeferredActionScheduler
from tests.load_machine import LoadAction, LoadState, build_load_machine


@pytest.mark.asyncio
async def test_delayed_action_runs_later(load_machine, recorded_callbacks):
    assert load_machine.perform_action(LoadAction.LOAD, delay=0.01) is None
    assert load_machine.state is LoadState.EMPTY
    assert load_machine.scheduler.pending == 1

    await asyncio.sleep(0.05)

    assert load_machine.state is LoadState.LOADING
    assert [record[0] for record in recorded_callbacks] == [1]
    assert load_machine.scheduler.pending == 0


@pytest.mark.asyncio
async def test_cancelled_action_never_runs(load_machine):
    handle = load_machine.schedule_action(LoadAction.LOAD, 0.01)
    handle.cancel()

    await asyncio.sleep(0.05)

    assert load_machine.state is LoadState.EMPTY
    assert load_machine.scheduler.pending == 0


@pytest.mark.asyncio
async def test_cancel_all(load_machine):
    load_machine.schedule_action(LoadAction.LOAD, 0.01)
    load_machine.schedule_action(LoadAction.FINISH_LOADING, 0.02)

    assert load_machine.scheduler.cancel_all() == 2
    await asyncio.sleep(0.05)

    assert load_machine.state is LoadState.EMPTY


@pytest.mark.asyncio
async def test_listener_chains_action_with_delay(load_machine):
    load_machine.on_change(
        lambda m, old, new: m.perform_action(LoadAction.FINISH_LOADING, delay=0),
        to_states=[LoadState.LOADING],
    )

    assert load_machine.perform_action(LoadAction.LOAD) is LoadState.LOADING
    await asyncio.sleep(0.01)

    assert load_machine.state is LoadState.COMPLETE
    assert load_machine.history == (LoadState.EMPTY, LoadState.LOADING, LoadState.COMPLETE)


@pytest.mark.asyncio
async def test_deferred_action_is_dropped_when_machine_is_gone(caplog):
    machine = build_load_machine()
    scheduler = machine.scheduler
    machine.schedule_action(LoadAction.LOAD, 0.01)
    del machine
    gc.collect()

    with caplog.at_level(logging.DEBUG, logger="actionfsm.runtime.scheduler"):
        await asyncio.sleep(0.05)

    assert scheduler.pending == 0
    assert any("no longer exists" in record.getMessage() for record in caplog.records)


def test_schedule_on_explicit_loop():
    loop = asyncio.new_event_loop()
    try:
        machine = StateMachine("idle", loop=loop)
        machine.register_action("start", ["idle"], ["running"], lambda m: "running")

        handle = machine.schedule_action("start", 0)
        assert isinstance(handle, asyncio.TimerHandle)
        assert machine.state == "idle"

        loop.run_until_complete(asyncio.sleep(0.01))
        assert machine.state == "running"
    finally:
        loop.close()


def test_schedule_without_running_loop(load_machine):
    with pytest.raises(RuntimeError):
        load_machine.schedule_action(LoadAction.LOAD, 1.0)


def test_negative_delay_is_rejected(load_machine):
    with pytest.raises(ValidationError):
        load_machine.perform_action(LoadAction.LOAD, delay=-1)
    assert load_machine.scheduler.pending == 0


def test_scheduler_holds_weak_reference():
    machine = StateMachine("idle")
    scheduler = DeferredActionScheduler(machine)
    del machine
    gc.collect()

    assert scheduler._machine_ref() is None


@pytest.mark.asyncio
async def test_individually_cancelled_handles_are_released():
    machine = StateMachine("idle")
    machine.register_action("start", ["idle"], ["running"], lambda m: "running")

    for _ in range(100):
        machine.schedule_action("start", 10).cancel()
    machine.schedule_action("start", 0)

    assert len(machine.scheduler._pending) == 1
    await asyncio.sleep(0.01)

    assert machine.state == "running"
    assert len(machine.scheduler._pending) == 0
