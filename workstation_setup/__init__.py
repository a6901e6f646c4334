"""Developer workstation setup (macOS).

Core design goals:
- Ordered, idempotent steps (check first, act only when needed)
- Resumable from a persisted state file
- Every external effect goes through a Host
- Centralized logging
"""

__all__ = []
