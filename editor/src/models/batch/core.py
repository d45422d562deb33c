"""
Calendar Page Editor - Batch Store

THE MODEL for the editor. Owns the batch of calendar pages, the active
page index and the undo history. Components never hold documents of their
own: they call methods on the store and re-read ``store.current``.

This class handles:
- Active page tracking (clamped, never raises on bad indices)
- Partial page updates (active or by index) with optional history recording
- Whole-batch replacement (imports)
- Undo/redo through the HistoryManager
- Style overrides, nudges and deletion (BatchStyleMixin)
- Free layers (BatchLayerMixin)
- Date navigation, image mapping and custom templates (BatchPageMixin)

The store is INDEPENDENT of UI:
- No Qt imports
- No selection state (that's the InteractionController)
- No rendering

Every mutation builds a new batch tuple out of frozen Documents, so a
snapshot already in the history can never be changed by a later edit.

Usage:
    store = BatchStore()
    store.update_current({'lunar_cn': '腊月初五'})
    store.nudge_target('author_name', 5, -5)
    store.undo()
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from models.document import DEFAULT_DOCUMENT, Document
from utils.history_manager import HistoryManager
from .style_mixin import BatchStyleMixin
from .layer_mixin import BatchLayerMixin
from .page_mixin import BatchPageMixin

logger = logging.getLogger(__name__)


class BatchStore(BatchStyleMixin, BatchLayerMixin, BatchPageMixin):
    """Single owner of the batch, the active index and the history

    Properties:
        batch: Tuple of Documents (never empty)
        current_index: Active page, always within [0, len(batch))
        current: The active Document
        history: HistoryManager holding batch snapshots
    """

    def __init__(self, documents: Optional[Sequence[Document]] = None,
                 history: Optional[HistoryManager] = None):
        """Create a store

        Args:
            documents: Initial pages; a single default page when empty or None
            history: History to record into (a fresh one by default)
        """
        self._batch: Tuple[Document, ...] = tuple(documents) if documents else (DEFAULT_DOCUMENT,)
        self._current_index = 0
        self._history = history if history is not None else HistoryManager()
        self._listeners: List[Callable[['BatchStore'], None]] = []
        self._custom_templates = []
        self._history.save_state(self._batch, "Initial state")

    # ========================================
    # Query API
    # ========================================

    @property
    def batch(self) -> Tuple[Document, ...]:
        return self._batch

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current(self) -> Document:
        return self._batch[self._current_index]

    @property
    def history(self) -> HistoryManager:
        return self._history

    def __len__(self):
        return len(self._batch)

    def can_prev(self) -> bool:
        return self._current_index > 0

    def can_next(self) -> bool:
        return self._current_index < len(self._batch) - 1

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback: Callable[['BatchStore'], None]):
        """Register a callback invoked with the store after every change"""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    # ========================================
    # Mutation primitives
    # ========================================

    def _clamp(self, index: int) -> int:
        return max(0, min(int(index), len(self._batch) - 1))

    def _commit(self, batch: Sequence[Document], description: str, record_history: bool = True):
        """Replace the batch tuple, optionally record it, notify listeners"""
        self._batch = tuple(batch)
        self._current_index = self._clamp(self._current_index)
        if record_history:
            self._history.save_state(self._batch, description)
        self._notify()

    def _replace_current(self, document: Document, description: str, record_history: bool = True):
        batch = list(self._batch)
        batch[self._current_index] = document
        self._commit(batch, description, record_history)

    # ========================================
    # Page updates
    # ========================================

    def update_current(self, patch: Mapping[str, Any], record_history: bool = True,
                       description: str = "Update page"):
        """Shallow-merge ``patch`` into the active Document

        Args:
            patch: Document attribute name -> new value (whole blocks, e.g. 'author')
            record_history: Push the resulting batch to the history
            description: History entry label

        Raises:
            TypeError: A key is not a Document attribute
        """
        self._replace_current(self.current.update(patch), description, record_history)

    def page_index(self, page_id: str, hint: Optional[int] = None) -> Optional[int]:
        """Index of the page with ``page_id``, or None when it left the batch

        ``hint`` is where the page was last seen; it wins when it still
        holds that page, so duplicate ids resolve to the page that was
        captured.
        """
        if hint is not None and 0 <= hint < len(self._batch) and self._batch[hint].page_id == page_id:
            return hint
        for index, document in enumerate(self._batch):
            if document.page_id == page_id:
                return index
        return None

    def update_page(self, index: int, patch: Mapping[str, Any], record_history: bool = True,
                    description: str = "Update page"):
        """Shallow-merge ``patch`` into the page at ``index`` without activating it

        Raises:
            IndexError: ``index`` is outside the batch
            TypeError: A key is not a Document attribute
        """
        if not 0 <= index < len(self._batch):
            raise IndexError(f"No page at index {index}")
        batch = list(self._batch)
        batch[index] = batch[index].update(patch)
        self._commit(batch, description, record_history)

    def update_field(self, path: str, value: Any, record_history: bool = True) -> Document:
        """Set a dotted field on the active page (inline edits, image picks)

        Raises:
            KeyError: Unknown field path
            ValueError: Value does not fit the field (e.g. non-numeric day)
        """
        document = self.current.with_field(path, value)
        self._replace_current(document, f"Edit {path}", record_history)
        return document

    def replace_batch(self, documents: Sequence[Document]):
        """Atomically swap in a new batch (imports)

        Raises:
            ValueError: ``documents`` is empty
        """
        documents = tuple(documents)
        if not documents:
            raise ValueError("A batch needs at least one page")
        self._current_index = 0
        self._commit(documents, f"Load batch ({len(documents)} pages)")
        logger.info("Loaded batch with %d pages", len(documents))

    # ========================================
    # Navigation
    # ========================================

    def set_index(self, index: int) -> int:
        """Activate a page; out-of-range requests are clamped

        Returns:
            The index actually selected
        """
        clamped = self._clamp(index)
        if clamped != self._current_index:
            self._current_index = clamped
            self._notify()
        return clamped

    def next_page(self) -> int:
        return self.set_index(self._current_index + 1)

    def prev_page(self) -> int:
        return self.set_index(self._current_index - 1)

    # ========================================
    # Undo / Redo
    # ========================================

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False at the oldest entry."""
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        """Restore the next snapshot. Returns False at the newest entry."""
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def _restore(self, snapshot: Tuple[Document, ...]):
        self._batch = snapshot
        self._current_index = self._clamp(self._current_index)
        self._notify()
