"""Page canvas widget.

Shows the active page at the view transform's scale and forwards mouse and
keyboard input to the InteractionController. Template slots are drawn by
an optional page painter (the external layout renderer):

    page_painter(painter, document, variant, view) -> None

Layers, the page frame, the selection outline and the resize handle are
painted here.
"""

import logging

from PyQt5.QtCore import Qt, QRectF, QPointF, pyqtSignal
from PyQt5.QtGui import QPainter, QColor, QPen, QFont
from PyQt5.QtWidgets import QWidget, QPlainTextEdit, QFileDialog

from constants import (
	PAGE_WIDTH, PAGE_HEIGHT, SELECTION_OUTLINE_COLOR, RESIZE_HANDLE_HIT_RADIUS, DEFAULT_FONT_SIZE,
)
from models.layer import LayerVariant
from models.transform import Rect, Vec2
from components.interaction import EditMode

logger = logging.getLogger(__name__)


class InlineTextEditor(QPlainTextEdit):
	"""Text field placed over the edited element"""

	committed = pyqtSignal(str)
	cancelled = pyqtSignal()

	def __init__(self, parent=None):
		super().__init__(parent)
		self._closing = False

	def keyPressEvent(self, event):
		if event.key() == Qt.Key_Escape:
			self._close(cancel=True)
			return
		if event.key() in (Qt.Key_Return, Qt.Key_Enter) and event.modifiers() & Qt.ControlModifier:
			self._close(cancel=False)
			return
		super().keyPressEvent(event)

	def focusOutEvent(self, event):
		super().focusOutEvent(event)
		self._close(cancel=False)

	def _close(self, cancel):
		if self._closing:
			return
		self._closing = True
		if cancel:
			self.cancelled.emit()
		else:
			self.committed.emit(self.toPlainText())
		self.hide()
		self.deleteLater()


class CanvasWidget(QWidget):
	"""Canvas for one page; input goes through the controller"""

	def __init__(self, controller, page_painter=None, parent=None):
		super().__init__(parent)
		self.controller = controller
		self.page_painter = page_painter
		self._inline_editor = None

		self.setFocusPolicy(Qt.StrongFocus)
		self.setMinimumSize(400, 400)

		controller.selectionChanged.connect(lambda _id: self.update())
		controller.viewChanged.connect(self.update)
		controller.editRequested.connect(self._open_editor)
		controller.store.add_listener(lambda _store: self.update())

	@property
	def view(self):
		return self.controller.view

	def text_input_focused(self) -> bool:
		return self._inline_editor is not None and self._inline_editor.hasFocus()

	# ========================================
	# Coordinate helpers
	# ========================================

	def _screen_rect(self, rect: Rect) -> QRectF:
		top_left = self.view.page_to_screen(Vec2(rect.x, rect.y))
		scale = self.view.effective_scale
		return QRectF(top_left.x, top_left.y, rect.width * scale, rect.height * scale)

	# ========================================
	# Qt events
	# ========================================

	def resizeEvent(self, event):
		super().resizeEvent(event)
		self.controller.resize_viewport(self.width(), self.height())

	def mousePressEvent(self, event):
		self.setFocus()
		if self.controller.pointer_down(event.pos(), event.button(), self.text_input_focused()):
			event.accept()
		else:
			super().mousePressEvent(event)

	def mouseMoveEvent(self, event):
		if self.controller.pointer_move(event.pos()):
			event.accept()
		else:
			super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		if self.controller.pointer_up(event.pos()):
			event.accept()
		else:
			super().mouseReleaseEvent(event)

	def mouseDoubleClickEvent(self, event):
		if self.controller.double_activate(event.pos()) is None:
			super().mouseDoubleClickEvent(event)

	def wheelEvent(self, event):
		"""Ctrl+wheel zooms"""
		if event.modifiers() & Qt.ControlModifier:
			if event.angleDelta().y() > 0:
				self.controller.zoom_in()
			elif event.angleDelta().y() < 0:
				self.controller.zoom_out()
			event.accept()
		else:
			super().wheelEvent(event)

	def keyPressEvent(self, event):
		if self.controller.key_press(event.key(), event.modifiers(), self.text_input_focused()):
			event.accept()
		else:
			super().keyPressEvent(event)

	# ========================================
	# Inline editing
	# ========================================

	def _open_editor(self, session):
		if session.mode == EditMode.IMAGE:
			filename, _ = QFileDialog.getOpenFileName(
				self, "Choose Image", "", "Images (*.png *.jpg *.jpeg *.webp *.gif);;All Files (*)"
			)
			if filename:
				self.controller.commit_image(filename)
			else:
				self.controller.cancel_edit()
			return

		bounds = self.controller.scene.bounds_of(
			self.controller.store.current, session.target_id, self.controller.active_variant()
		)
		if bounds is None:
			bounds = Rect(0, 0, *session.box_size)
		editor = InlineTextEditor(self)
		editor.setPlainText(session.text)
		editor.setGeometry(self._screen_rect(bounds).toRect())
		editor.committed.connect(self._on_editor_committed)
		editor.cancelled.connect(self._on_editor_cancelled)
		self._inline_editor = editor
		editor.show()
		editor.setFocus()

	def _on_editor_committed(self, text):
		self._inline_editor = None
		self.controller.commit_text(text)

	def _on_editor_cancelled(self):
		self._inline_editor = None
		self.controller.cancel_edit()

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		painter.fillRect(self.rect(), QColor('#e5e7eb'))

		document = self.controller.store.current
		variant = self.controller.active_variant()

		page_rect = self._screen_rect(Rect(0, 0, PAGE_WIDTH, PAGE_HEIGHT))
		painter.fillRect(page_rect, QColor(document.theme.background_color))

		if self.page_painter is not None:
			painter.save()
			self.page_painter(painter, document, variant, self.view)
			painter.restore()

		for layer in document.layers:
			if not layer.style.hidden:
				self._paint_layer(painter, layer)

		self._paint_selection(painter, document, variant)
		painter.end()

	def _paint_layer(self, painter, layer):
		rect = self._screen_rect(layer.bounds())
		style = layer.style
		if layer.variant == LayerVariant.TEXT:
			font = QFont()
			font.setPixelSize(max(1, int((style.font_size or DEFAULT_FONT_SIZE) * self.view.effective_scale)))
			painter.setFont(font)
			painter.setPen(QColor(style.color or '#000000'))
			painter.drawText(rect, Qt.TextWordWrap, layer.text or '')
			return

		fill = QColor(style.background_color or layer.fill)
		painter.setPen(Qt.NoPen)
		painter.setBrush(fill)
		if layer.variant == LayerVariant.CIRCLE or style.border_radius == '50%':
			painter.drawEllipse(rect)
		else:
			painter.drawRect(rect)

	def _paint_selection(self, painter, document, variant):
		selected = self.controller.selected_id
		if selected is None:
			return
		bounds = self.controller.scene.bounds_of(document, selected, variant)
		if bounds is None:
			return
		rect = self._screen_rect(bounds)
		pen = QPen(QColor(SELECTION_OUTLINE_COLOR), 2)
		painter.setPen(pen)
		painter.setBrush(Qt.NoBrush)
		painter.drawRect(rect)

		# Corner resize handle
		radius = RESIZE_HANDLE_HIT_RADIUS / 2
		painter.setBrush(QColor('white'))
		painter.drawEllipse(QPointF(rect.right(), rect.bottom()), radius, radius)
