"""
Stack Keeper - Meeting Facilitation Core

Decides who speaks next from a pool of competing speaking requests and
resolves group proposals into outcomes from asynchronous consensus votes.

Guiding rules:
- Ordering is a pure function of its inputs and always explainable
- Progressive stack amplifies voices that have not been heard recently
- A single block is decisive; passing requires full participation
- Failed operations commit nothing
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
