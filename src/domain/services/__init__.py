"""Domain services for Stack Keeper.

Pure functions with no infrastructure dependencies and no state held
between calls.

Available services:
- order_stack: Orders waiting speaking requests
- explain_position: Explains an item's position from the same signals
- evaluate_votes: Decides whether a proposal resolves automatically
"""

from src.domain.services.consensus_rules import (
    DEFAULT_PASS_THRESHOLD,
    ConsensusDecision,
    evaluate_votes,
    required_support,
)
from src.domain.services.ordering_explanation import (
    FIFO_REASON,
    describe_signals,
    explain_position,
)
from src.domain.services.stack_ordering import (
    StackSignals,
    compute_stack_signals,
    order_stack,
    point_priority,
    progressive_priority,
    stack_sort_key,
)

__all__ = [
    "ConsensusDecision",
    "DEFAULT_PASS_THRESHOLD",
    "FIFO_REASON",
    "StackSignals",
    "compute_stack_signals",
    "describe_signals",
    "evaluate_votes",
    "explain_position",
    "order_stack",
    "point_priority",
    "progressive_priority",
    "required_support",
    "stack_sort_key",
]
