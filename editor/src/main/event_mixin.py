"""Window event handlers for CalendarEditor"""

from PyQt5.QtWidgets import QApplication, QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox


class EventMixin:
	"""Window event handlers (resize, keyPress, close)"""

	def _text_input_focused(self):
		"""True while a text field owns the keyboard"""
		focus = QApplication.focusWidget()
		return isinstance(focus, (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox))

	def resizeEvent(self, event):
		"""Handle window resize"""
		super().resizeEvent(event)
		# The canvas reports its own viewport size; refresh stats only
		if hasattr(self, 'status_right'):
			self._update_status_bar()

	def keyPressEvent(self, event):
		"""Route shortcuts to the controller unless a text field has focus"""
		if self.controller.key_press(event.key(), event.modifiers(), self._text_input_focused()):
			event.accept()
			return
		super().keyPressEvent(event)

	def closeEvent(self, event):
		"""Stop background calls and persist settings"""
		self.shutdown_collaborators()
		self._save_config()
		event.accept()
