"""Planning and executing image deletions."""

from vaultprune.deletion.executor import DeletionExecutor
from vaultprune.deletion.planner import DeletionPlanner

__all__ = ["DeletionExecutor", "DeletionPlanner"]
