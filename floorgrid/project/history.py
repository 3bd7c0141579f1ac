from __future__ import annotations

import logging
from typing import List, Optional

from floorgrid.core.config import DEFAULT_CONFIG
from floorgrid.project.store import NodeStore, StoreSnapshot

logger = logging.getLogger(__name__)


class UndoHistory:
    """Bounded snapshot undo/redo stacks over a node store."""

    def __init__(self, store: NodeStore, limit: int = DEFAULT_CONFIG.undo_limit) -> None:
        if limit <= 0:
            raise ValueError("undo limit must be > 0")
        self.store = store
        self.limit = int(limit)
        self.undo_stack: List[StoreSnapshot] = []
        self.redo_stack: List[StoreSnapshot] = []

    def push(self, snapshot: Optional[StoreSnapshot] = None, label: str = "edit") -> None:
        snap = snapshot if snapshot is not None else self.store.snapshot(label=label)
        self.undo_stack.append(snap)
        if len(self.undo_stack) > self.limit:
            del self.undo_stack[: len(self.undo_stack) - self.limit]
        self.redo_stack = []
        logger.debug("undo push %r (depth=%d)", snap.label or label, len(self.undo_stack))

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        current = self.store.snapshot(label="redo_snapshot")
        snap = self.undo_stack.pop()
        self.redo_stack.append(current)
        self.store.restore(snap)
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        current = self.store.snapshot(label="undo_snapshot")
        snap = self.redo_stack.pop()
        self.undo_stack.append(current)
        self.store.restore(snap)
        return True

    def clear(self) -> None:
        self.undo_stack = []
        self.redo_stack = []

    @property
    def undo_depth(self) -> int:
        return len(self.undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self.redo_stack)
