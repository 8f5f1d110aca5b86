"""
Application layer - Use cases and orchestration for Stack Keeper.

This layer contains:
- Application services (queue lifecycle, stack queries, consensus,
  meetings, export)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, bootstrap
"""
