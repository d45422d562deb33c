"""Selection and interaction controller for the page canvas.

Turns pointer and keyboard input into store operations. Positions are
screen pixels relative to the canvas; the controller maps them to page
space through the ViewTransform and picks elements through the Scene.

Per gesture (press to release) at most one of these is active:
	- PENDING: pressed on an element, nothing moved yet
	- DRAGGING: moved more than DRAG_THRESHOLD_PX on either axis
	- RESIZING: pressed on the selected element's corner handle
	- PANNING: hand tool or middle button

Drag frames are written with ``record_history=False``: only the visual
state follows the pointer, the next discrete edit records history.

The controller has no widget. The canvas widget forwards its Qt events
here, which keeps the state machine usable without a window.
"""

import logging
from typing import Optional

from PyQt5.QtCore import QObject, Qt, pyqtSignal

from constants import (
	DRAG_THRESHOLD_PX,
	NUDGE_STEP, NUDGE_STEP_LARGE,
	RESIZE_TEXT_DIVISOR, MIN_FONT_SIZE, MIN_ELEMENT_SIZE,
	RESIZE_HANDLE_HIT_RADIUS,
	DEFAULT_FONT_SIZE, DEFAULT_ELEMENT_SIZE,
)
from models.layer import Layer, LayerVariant, is_layer_id
from models.style import StylePatch
from models.transform import Vec2
from services.slot_catalog import ElementKind, color_field, kind_of, slot_spec
from services.template_selector import TemplateMode, TemplateVariant, resolve_template
from .drag_context import DragContext, GestureState, Tool
from .edit_session import EditMode, EditSession

logger = logging.getLogger(__name__)

_ARROW_KEYS = {
	Qt.Key_Left: (-1, 0),
	Qt.Key_Right: (1, 0),
	Qt.Key_Up: (0, -1),
	Qt.Key_Down: (0, 1),
}


def _to_vec(pos) -> Vec2:
	"""Accept Vec2, QPoint/QPointF or an (x, y) pair"""
	if isinstance(pos, Vec2):
		return pos
	if hasattr(pos, 'x') and callable(pos.x):
		return Vec2(float(pos.x()), float(pos.y()))
	x, y = pos
	return Vec2(float(x), float(y))


def _read_path(obj, path: str):
	for part in path.split('.'):
		obj = getattr(obj, part)
	return obj


class InteractionController(QObject):
	"""Pointer/keyboard state machine over a BatchStore

	Signals:
		selectionChanged(object): new selected id or None
		viewChanged(): zoom, pan or viewport changed
		editRequested(object): an EditSession was opened
	"""

	selectionChanged = pyqtSignal(object)
	viewChanged = pyqtSignal()
	editRequested = pyqtSignal(object)

	def __init__(self, store, scene, view, parent=None):
		"""
		Args:
			store: BatchStore to edit
			scene: Scene with the slot geometry of the layouts
			view: ViewTransform of the canvas
		"""
		super().__init__(parent)
		self.store = store
		self.scene = scene
		self.view = view
		self.tool = Tool.SELECT
		self.template_mode = TemplateMode.AUTO

		self._selected_id: Optional[str] = None
		self._drag: Optional[DragContext] = None
		self._edit: Optional[EditSession] = None

		# Gesture-scoped handlers, set at press and released at release
		self._move_handler = None
		self._up_handler = None

	# ========================================
	# State queries
	# ========================================

	@property
	def selected_id(self) -> Optional[str]:
		return self._selected_id

	@property
	def gesture_state(self) -> GestureState:
		return self._drag.state if self._drag else GestureState.IDLE

	@property
	def edit_session(self) -> Optional[EditSession]:
		return self._edit

	def active_variant(self) -> TemplateVariant:
		return resolve_template(self.store.current, self.template_mode)

	def selected_kind(self) -> Optional[ElementKind]:
		if self._selected_id is None:
			return None
		return kind_of(self.store.current, self._selected_id, self.active_variant())

	# ========================================
	# Selection / tool / template mode
	# ========================================

	def select(self, element_id: Optional[str]):
		if element_id == self._selected_id:
			return
		self._selected_id = element_id
		self.selectionChanged.emit(element_id)

	def clear_selection(self):
		self.select(None)

	def set_tool(self, tool: Tool):
		"""Switch between select and hand; the hand tool drops the selection"""
		self.tool = Tool(tool)
		self._release_gesture()
		if self.tool == Tool.HAND:
			self.clear_selection()

	def set_template_mode(self, mode: TemplateMode):
		self.template_mode = TemplateMode(mode)
		self.viewChanged.emit()

	def validate_selection(self):
		"""Drop a selection whose layer no longer exists (after undo, page change)"""
		if is_layer_id(self._selected_id) and self.store.current.layer(self._selected_id) is None:
			self.clear_selection()

	# ========================================
	# View
	# ========================================

	def resize_viewport(self, width: float, height: float):
		self.view.on_viewport_resized(width, height)
		self.viewChanged.emit()

	def zoom_in(self):
		self.view.zoom_in()
		self.viewChanged.emit()

	def zoom_out(self):
		self.view.zoom_out()
		self.viewChanged.emit()

	def set_zoom(self, zoom: float):
		self.view.set_zoom(zoom)
		self.viewChanged.emit()

	# ========================================
	# Pointer
	# ========================================

	def pointer_down(self, pos, button=Qt.LeftButton, text_input_focused: bool = False) -> bool:
		"""Start a gesture. Returns True when the press was consumed."""
		pos = _to_vec(pos)
		# A press while a gesture is still registered means its release was lost
		self._release_gesture()

		if self.tool == Tool.HAND or button == Qt.MiddleButton:
			self._begin(DragContext(GestureState.PANNING, origin=pos, last_pos=pos,
									start_pan=self.view.pan_offset),
						self._on_pan_move)
			return True

		if button != Qt.LeftButton or text_input_focused:
			return False

		document = self.store.current
		variant = self.active_variant()
		page_pos = self.view.screen_to_page(pos)

		if self._selected_id is not None:
			radius = RESIZE_HANDLE_HIT_RADIUS / self.view.effective_scale
			if self.scene.handle_hit(document, self._selected_id, page_pos, variant, radius):
				self._begin(DragContext(GestureState.RESIZING, origin=pos, last_pos=pos,
										target_id=self._selected_id,
										kind=kind_of(document, self._selected_id, variant)),
							self._on_resize_move)
				return True

		hit = self.scene.hit_test(document, page_pos, variant)
		if hit is None:
			self.clear_selection()
			return False

		self.select(hit.id)
		self._begin(DragContext(GestureState.PENDING, origin=pos, last_pos=pos,
								target_id=hit.id, kind=hit.kind),
					self._on_pending_move)
		return True

	def pointer_move(self, pos) -> bool:
		"""Feed a pointer move to the active gesture (no-op when idle)"""
		if self._move_handler is None:
			return False
		self._move_handler(_to_vec(pos))
		return True

	def pointer_up(self, pos=None) -> bool:
		"""End the active gesture. Handlers are released however it ends."""
		if self._up_handler is None:
			return False
		try:
			self._up_handler(_to_vec(pos) if pos is not None else None)
		finally:
			self._release_gesture()
		return True

	def cancel_gesture(self):
		self._release_gesture()

	def _begin(self, context: DragContext, move_handler):
		self._drag = context
		self._move_handler = move_handler
		self._up_handler = self._on_up
		logger.debug("Gesture %s on %s", context.state.value, context.target_id)

	def _release_gesture(self):
		self._move_handler = None
		self._up_handler = None
		self._drag = None

	# ── gesture handlers ────────────────────────────────────────────

	def _on_pending_move(self, pos: Vec2):
		ctx = self._drag
		delta = pos - ctx.origin
		if abs(delta.x) <= DRAG_THRESHOLD_PX and abs(delta.y) <= DRAG_THRESHOLD_PX:
			return
		ctx.state = GestureState.DRAGGING
		ctx.last_pos = pos
		self._move_handler = self._on_drag_move
		self.select(ctx.target_id)
		# One patch for the whole displacement since press
		self._translate_target(ctx.target_id, self.view.screen_delta_to_page(delta.x, delta.y))

	def _on_drag_move(self, pos: Vec2):
		ctx = self._drag
		delta = pos - ctx.last_pos
		ctx.last_pos = pos
		if delta.x == 0 and delta.y == 0:
			return
		self._translate_target(ctx.target_id, self.view.screen_delta_to_page(delta.x, delta.y))

	def _on_resize_move(self, pos: Vec2):
		ctx = self._drag
		delta = pos - ctx.last_pos
		ctx.last_pos = pos
		if delta.x == 0 and delta.y == 0:
			return
		self._resize_target(ctx.target_id, ctx.kind, self.view.screen_delta_to_page(delta.x, delta.y))

	def _on_pan_move(self, pos: Vec2):
		ctx = self._drag
		ctx.last_pos = pos
		self.view.set_pan(ctx.start_pan + (pos - ctx.origin))
		self.viewChanged.emit()

	def _on_up(self, pos: Optional[Vec2]):
		ctx = self._drag
		if ctx.state == GestureState.PANNING and pos is not None:
			self._on_pan_move(pos)
		logger.debug("Gesture %s ended", ctx.state.value)

	# ── style writes ────────────────────────────────────────────────

	def _translate_target(self, target_id: str, delta: Vec2):
		offset = self.store.style_of(target_id).offset
		self.store.apply_override(target_id, StylePatch(translate=offset + delta), record_history=False)

	def _resize_target(self, target_id: str, kind: ElementKind, delta: Vec2):
		style = self.store.style_of(target_id)
		if kind == ElementKind.TEXT:
			current = style.font_size
			if current is None:
				current = self.scene.base_font_size(target_id, self.active_variant()) or DEFAULT_FONT_SIZE
			scale = 1 + (delta.x + delta.y) / RESIZE_TEXT_DIVISOR
			patch = StylePatch(font_size=max(MIN_FONT_SIZE, current * scale))
		else:
			width, height = self._current_size(target_id, style)
			patch = StylePatch(
				width=max(MIN_ELEMENT_SIZE, width + delta.x),
				height=max(MIN_ELEMENT_SIZE, height + delta.y),
			)
		self.store.apply_override(target_id, patch, record_history=False)

	def _current_size(self, target_id, style):
		bounds = self.scene.bounds_of(self.store.current, target_id, self.active_variant())
		width = style.width if style.width is not None else (bounds.width if bounds else DEFAULT_ELEMENT_SIZE)
		height = style.height if style.height is not None else (bounds.height if bounds else DEFAULT_ELEMENT_SIZE)
		return width, height

	# ========================================
	# Keyboard
	# ========================================

	def key_press(self, key, modifiers=Qt.NoModifier, text_input_focused: bool = False) -> bool:
		"""Handle an editor shortcut. Returns True when the key was consumed."""
		if text_input_focused:
			return False

		command = bool(modifiers & (Qt.ControlModifier | Qt.MetaModifier))
		shift = bool(modifiers & Qt.ShiftModifier)

		if command and key == Qt.Key_Z:
			if shift:
				self.redo()
			else:
				self.undo()
			return True
		if command and key == Qt.Key_Y:
			self.redo()
			return True

		if key in (Qt.Key_Delete, Qt.Key_Backspace):
			return self.delete_selection()

		if key in _ARROW_KEYS and self._selected_id is not None:
			step = NUDGE_STEP_LARGE if shift else NUDGE_STEP
			dx, dy = _ARROW_KEYS[key]
			return self.store.nudge_target(self._selected_id, dx * step, dy * step)

		return False

	def undo(self) -> bool:
		changed = self.store.undo()
		self.validate_selection()
		return changed

	def redo(self) -> bool:
		changed = self.store.redo()
		self.validate_selection()
		return changed

	def delete_selection(self) -> bool:
		if self._selected_id is None:
			return False
		deleted = self.store.delete_target(self._selected_id)
		self.clear_selection()
		return deleted

	# ========================================
	# Property edits of the selection
	# ========================================

	def apply_color(self, color: str) -> bool:
		"""Text targets get ``color``, shapes and blocks ``background_color``"""
		kind = self.selected_kind()
		if kind is None:
			return False
		patch = StylePatch(**{color_field(kind): color})
		return self.store.apply_override(self._selected_id, patch)

	def apply_font_size(self, size: float) -> bool:
		if self._selected_id is None:
			return False
		return self.store.apply_override(self._selected_id, StylePatch(font_size=max(MIN_FONT_SIZE, float(size))))

	def add_layer(self, variant: LayerVariant) -> Layer:
		layer = self.store.add_layer(variant)
		self.select(layer.id)
		return layer

	# ========================================
	# Inline editing
	# ========================================

	def double_activate(self, pos) -> Optional[EditSession]:
		"""Open an inline editor for the text or image element under ``pos``"""
		self._release_gesture()
		document = self.store.current
		variant = self.active_variant()
		hit = self.scene.hit_test(document, self.view.screen_to_page(_to_vec(pos)), variant)
		if hit is None:
			return None

		box_size = (hit.bounds.width, hit.bounds.height)
		if is_layer_id(hit.id):
			layer = document.layer(hit.id)
			if not layer.is_text:
				return None
			session = EditSession(hit.id, EditMode.TEXT, hit.kind, text=layer.text or '', box_size=box_size)
		else:
			spec = slot_spec(variant, hit.id)
			if spec is None or spec.field_path is None:
				return None
			if spec.kind == ElementKind.TEXT:
				text = str(_read_path(document, spec.field_path))
				session = EditSession(hit.id, EditMode.TEXT, spec.kind, text=text,
									  box_size=box_size, field_path=spec.field_path)
			elif spec.kind == ElementKind.IMAGE:
				session = EditSession(hit.id, EditMode.IMAGE, spec.kind,
									  box_size=box_size, field_path=spec.field_path)
			else:
				return None

		self.select(hit.id)
		self._edit = session
		self.editRequested.emit(session)
		return session

	def commit_text(self, value: str) -> bool:
		"""Write the edited text through and close the session"""
		session, self._edit = self._edit, None
		if session is None or session.mode != EditMode.TEXT:
			return False
		if session.field_path is None:
			return self.store.set_layer_text(session.target_id, value)
		try:
			self.store.update_field(session.field_path, value)
		except ValueError as e:
			logger.warning("Rejected edit of %s: %s", session.field_path, e)
			return False
		return True

	def commit_image(self, ref: str) -> bool:
		session, self._edit = self._edit, None
		if session is None or session.mode != EditMode.IMAGE:
			return False
		self.store.update_field(session.field_path, ref)
		return True

	def cancel_edit(self):
		self._edit = None
