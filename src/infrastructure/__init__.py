"""
Infrastructure layer - External adapters for Stack Keeper.

This layer contains:
- System clock adapter
- In-memory repository stubs
- Structured logging configuration
- Prometheus metrics

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

from src.infrastructure.adapters import SystemTimeAuthority

__all__: list[str] = ["SystemTimeAuthority"]
