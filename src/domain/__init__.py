"""
Domain layer - Pure facilitation logic for Stack Keeper.

This layer contains:
- Domain models (QueueItem, Meeting, Proposal, Vote, etc.)
- Domain services (stack ordering, ordering explanation, consensus rules)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import FacilitationError

__all__: list[str] = ["FacilitationError"]
