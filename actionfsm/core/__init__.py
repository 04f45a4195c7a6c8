"""
Core package providing the state machine engine.

Architecture:
- StateMachine owns current state, history, action table and listeners
- ActionRegistration and ChangeListener are immutable table entries
- HookManager and logging form the diagnostics channel
- Validator checks configuration and reports table structure
"""

# Import order matters to avoid circular dependencies
from .errors import FailureReason, StateMachineError, ValidationError
from .actions import ActionRegistration
from .listeners import ChangeListener
from .history import StateHistory
from .hooks import HookManager, HookProtocol
from .validations import Validator
from .state_machine import ErrorRecoveryStrategy, StateMachine

__all__ = [
    # Errors
    "FailureReason",
    "StateMachineError",
    "ValidationError",
    # Table entries
    "ActionRegistration",
    "ChangeListener",
    "StateHistory",
    # Diagnostics and validation
    "HookManager",
    "HookProtocol",
    "Validator",
    # Machine
    "ErrorRecoveryStrategy",
    "StateMachine",
]
