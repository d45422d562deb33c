"""
Undo/Redo History Manager for the Calendar Page Editor

Manages batch history with undo/redo functionality.
Every committed edit (field edits, overrides, nudges, layer changes,
imports) saves the whole batch as one entry.

Snapshots are tuples of frozen Documents, so entries are stored and
returned as-is: nothing in the history can be mutated after it is saved.
"""

import logging

from constants import MAX_HISTORY_ENTRIES

logger = logging.getLogger(__name__)


class HistoryManager:
	"""Manages undo/redo history with batch snapshots"""

	def __init__(self, max_history=MAX_HISTORY_ENTRIES):
		"""
		Initialize the history manager

		Args:
			max_history: Maximum number of snapshots to keep in history
		"""
		self.max_history = max_history
		self.history = []  # List of {'data': batch, 'description': str}
		self.current_index = -1  # Current position in history (-1 means no states)
		self._listeners = []  # Callbacks to notify on state changes

	def save_state(self, batch, description=""):
		"""
		Save a new batch snapshot to history

		Args:
			batch: Tuple of Documents (immutable snapshot)
			description: Optional description of the change
		"""
		# A new edit after undo discards the redo future
		if self.current_index < len(self.history) - 1:
			self.history = self.history[:self.current_index + 1]

		self.history.append({'data': tuple(batch), 'description': description})
		self.current_index += 1

		# Evict the oldest entries beyond capacity
		while len(self.history) > self.max_history:
			self.history.pop(0)
			self.current_index -= 1

		self._notify_listeners()

		logger.debug("State saved: %s (index: %d, total: %d)", description, self.current_index, len(self.history))

	def undo(self):
		"""
		Move back one entry in history

		Returns:
			The previous batch snapshot, or None if at the beginning
		"""
		if not self.can_undo():
			logger.debug("Cannot undo - at beginning of history")
			return None

		self.current_index -= 1
		entry = self.history[self.current_index]

		self._notify_listeners()

		logger.debug("Undo to: %s (index: %d)", entry['description'], self.current_index)
		return entry['data']

	def redo(self):
		"""
		Move forward one entry in history

		Returns:
			The next batch snapshot, or None if at the end
		"""
		if not self.can_redo():
			logger.debug("Cannot redo - at end of history")
			return None

		self.current_index += 1
		entry = self.history[self.current_index]

		self._notify_listeners()

		logger.debug("Redo to: %s (index: %d)", entry['description'], self.current_index)
		return entry['data']

	def can_undo(self):
		"""Check if undo is available"""
		return self.current_index > 0

	def can_redo(self):
		"""Check if redo is available"""
		return self.current_index < len(self.history) - 1

	def clear(self):
		"""Clear all history"""
		self.history = []
		self.current_index = -1
		self._notify_listeners()
		logger.debug("History cleared")

	def add_listener(self, callback):
		"""
		Add a listener to be notified when history state changes

		Args:
			callback: Function to call when history changes (receives can_undo, can_redo)
		"""
		self._listeners.append(callback)

	def remove_listener(self, callback):
		"""Remove a listener"""
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify_listeners(self):
		"""Notify all listeners of history state change"""
		for callback in self._listeners:
			try:
				callback(self.can_undo(), self.can_redo())
			except Exception:
				logger.exception("Error notifying history listener")

	def get_current_description(self):
		"""Get the description of the current entry"""
		if 0 <= self.current_index < len(self.history):
			return self.history[self.current_index]['description']
		return ""

	def get_undo_description(self):
		"""Get the description of the state that would be restored by undo"""
		if self.can_undo():
			return self.history[self.current_index - 1]['description']
		return ""

	def get_redo_description(self):
		"""Get the description of the entry that redo would restore"""
		if self.can_redo():
			return self.history[self.current_index + 1]['description']
		return ""
