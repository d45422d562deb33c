"""History management and undo/redo for CalendarEditor"""


class HistoryMixin:
	"""Undo/redo actions, store change handling, and status bar updates

	This mixin assumes the parent class has:
		- self.store (BatchStore)
		- self.controller (InteractionController)
		- self.canvas_widget (CanvasWidget)
	"""

	def _init_history(self):
		"""Hook history and store listeners up to the window"""
		self.store.history.add_listener(self._on_history_changed)
		self.store.add_listener(self._on_store_changed)
		self.controller.selectionChanged.connect(lambda _id: self._update_status_bar())

	def undo(self):
		"""Undo the last action"""
		if not self.controller.undo():
			self.statusBar().showMessage("Nothing to undo", 2000)

	def redo(self):
		"""Redo the last undone action"""
		if not self.controller.redo():
			self.statusBar().showMessage("Nothing to redo", 2000)

	def _on_history_changed(self, can_undo, can_redo):
		"""Called when history state changes to update UI"""
		if hasattr(self, 'undo_action'):
			self.undo_action.setEnabled(can_undo)
		if hasattr(self, 'redo_action'):
			self.redo_action.setEnabled(can_redo)
		self._update_status_bar()

	def _on_store_changed(self, store):
		"""Active page or batch changed"""
		self.controller.validate_selection()
		if hasattr(self, 'prev_action'):
			self.prev_action.setEnabled(store.can_prev())
		if hasattr(self, 'next_action'):
			self.next_action.setEnabled(store.can_next())
		self._update_status_bar()

	def _update_status_bar(self):
		"""Update status bar with current action and page stats"""
		if not hasattr(self, 'status_left'):
			return

		# Left side: Last action
		current_desc = self.store.history.get_current_description()
		if current_desc:
			left_msg = f"Last action: {current_desc}"
		else:
			left_msg = "Ready"

		# Right side: Stats
		document = self.store.current
		right_parts = [
			f"Page {self.store.current_index + 1}/{len(self.store)}",
			document.date_gregorian,
			f"Template {self.controller.active_variant().value}",
		]
		if document.layers:
			right_parts.append(f"{len(document.layers)} layer(s)")
		if self.controller.selected_id:
			right_parts.append(f"Selected: {self.controller.selected_id}")

		self.status_left.setText(left_msg)
		self.status_right.setText(" | ".join(right_parts))
