"""Infrastructure adapters for Stack Keeper.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external services.
"""

from src.infrastructure.adapters.time_authority import SystemTimeAuthority

__all__: list[str] = ["SystemTimeAuthority"]
