# tests/unit/core/test_actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import dataclasses

import pytest

from actionfsm.core.actions import ActionRegistration


def handler(machine):
    return "b"


def test_registration_create_keeps_order():
    registration = ActionRegistration.create(iter(["b", "a", "b"]), ("c",), handler)

    assert registration.from_states == ("b", "a")
    assert registration.to_states == ("c",)
    assert registration.handler is handler


def test_registration_membership():
    registration = ActionRegistration.create({"a"}, {"b", "c"}, handler)

    assert registration.allows_source("a")
    assert not registration.allows_source("b")
    assert registration.allows_target("c")
    assert not registration.allows_target("a")


def test_registration_is_frozen():
    registration = ActionRegistration.create(["a"], ["b"], handler)
    with pytest.raises(dataclasses.FrozenInstanceError):
        registration.from_states = ("z",)


def test_identical_registrations_compare_equal():
    assert ActionRegistration.create(["a"], ["b"], handler) == ActionRegistration.create(["a"], ["b"], handler)


def test_unhashable_states_are_not_allowed():
    registration = ActionRegistration.create(["a"], ["b"], handler)

    assert not registration.allows_source(["a"])
    assert not registration.allows_target(["b"])
