# -*- coding: utf-8 -*-
"""Undo/redo of hinge edits.

Every edit is stored as a pair of :class:`HingeConfig` snapshots. Undoing
re-applies the ``before`` snapshot, redoing re-applies ``after``, so edits
never need their own inverse logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import HingeConfig


@dataclass
class EditCommand:
    desc: str
    before: HingeConfig
    after: HingeConfig
    apply: Callable[[HingeConfig], None]

    def do(self):
        self.apply(self.after)

    def undo(self):
        self.apply(self.before)


class EditHistory:
    def __init__(self, on_change: Optional[Callable[[], None]] = None, limit: int = 200):
        self._undo: List[EditCommand] = []
        self._redo: List[EditCommand] = []
        self._on_change = on_change
        self._limit = max(1, int(limit))

    def clear(self):
        self._undo.clear()
        self._redo.clear()
        self._changed()

    def _changed(self):
        if self._on_change:
            self._on_change()

    def push(self, cmd: EditCommand, execute: bool = True):
        if cmd.before == cmd.after:
            return
        if execute:
            cmd.do()
        self._undo.append(cmd)
        if len(self._undo) > self._limit:
            del self._undo[0]
        self._redo.clear()
        self._changed()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        cmd = self._undo.pop()
        cmd.undo()
        self._redo.append(cmd)
        self._changed()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        cmd = self._redo.pop()
        cmd.do()
        self._undo.append(cmd)
        self._changed()
        return True

    def undo_text(self) -> str:
        return self._undo[-1].desc if self._undo else ""

    def redo_text(self) -> str:
        return self._redo[-1].desc if self._redo else ""
