"""actionfsm: action-driven finite state machine runtime

The state of a machine can only change through registered actions. Each action
declares the states it may run from and the states its handler may return; the
machine rejects anything else.

Responsibilities:
    - Action registration and validated transitions
    - Bounded state history
    - Change listeners fired in registration order
    - Flow diagram rendering (Graphviz digraph text)

Interactions:
    - Client code through the StateMachine API
    - asyncio event loop for delayed actions
    - Logging system for diagnostics

Cross-cutting Concerns:
    Thread Safety:
        - Machines are not thread-safe; callers serialize access

    Error Handling:
        - Configuration errors raise ValidationError
        - Failed actions return None and report a FailureReason

    Logging:
        - Rejected actions are logged as warnings
        - No handlers are installed by the library
"""

from .core.errors import FailureReason, StateMachineError, ValidationError
from .core.state_machine import ErrorRecoveryStrategy, StateMachine
from .runtime.graph import FlowDiagram

__version__ = "0.1.0"

__all__ = [
    "StateMachine",
    "ErrorRecoveryStrategy",
    "FailureReason",
    "StateMachineError",
    "ValidationError",
    "FlowDiagram",
]
