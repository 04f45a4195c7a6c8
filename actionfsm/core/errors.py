# actionfsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum


class StateMachineError(Exception):
    """
    Base exception class for errors within the state machine library.
    """


class ValidationError(StateMachineError, ValueError):
    """
    Raised when a machine, action registration or schedule request is misconfigured.
    """


class FailureReason(Enum):
    """Why perform_action did not change the state."""

    UNREGISTERED_ACTION = "unregistered_action"  # no registration for the action
    ILLEGAL_SOURCE_STATE = "illegal_source_state"  # current state not in from_states
    ILLEGAL_TARGET_STATE = "illegal_target_state"  # handler returned a state not in to_states
    REENTRANT = "reentrant"  # called while a handler or listener was running
    HANDLER_ERROR = "handler_error"  # handler raised and the error recovery strategy handled it
