"""Process-local scheduling primitives."""

from infrastructure.scheduling.delayed import DelayedTaskQueue

__all__ = ["DelayedTaskQueue"]
