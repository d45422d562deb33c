"""Content generation and export for CalendarEditor"""

import logging

from PyQt5.QtWidgets import QFileDialog, QInputDialog

from constants import COLLABORATOR_SHUTDOWN_WAIT_MS, DEFAULT_IMAGE_ASPECT_RATIO
from services.async_task import BusyTask, run_collaborator
from services.export import export_png, export_pdf
from services.generation import (
	content_request, image_request, target_current, apply_generated, apply_generated_image,
)
from services.template_selector import resolve_template

logger = logging.getLogger(__name__)


class GeneratorMixin:
	"""Background collaborators: text generation, image generation, export

	Each collaborator has its own BusyTask, so a second trigger is refused
	while one is running and results re-enter the store on the UI thread.
	Generated results go to the page that was active when the request
	started, even if the user has moved to another page since.

	This mixin assumes the parent class has:
		- self.store, self.controller
		- self.content_generator(request, token) -> mapping, or None
		  (request: {'prompt', 'context': {'year', 'month', 'day'}})
		- self.image_generator(request, token) -> image reference, or None
		  (request: {'prompt', 'aspect_ratio'})
		- self.renderer(document, variant) -> PIL image
		- self.collaborator_timeout_s (ConfigMixin)
	"""

	def _init_collaborators(self):
		timeout = self.collaborator_timeout_s
		self.content_task = BusyTask("Generate content", timeout)
		self.image_task = BusyTask("Generate image", timeout)
		self.export_task = BusyTask("Export", timeout)
		self.image_aspect_ratio = DEFAULT_IMAGE_ASPECT_RATIO
		# Calls whose worker thread has not finished yet (a timed-out call stays here)
		self._running_calls = []

	def collaborator_tasks(self):
		return [self.content_task, self.image_task, self.export_task]

	def _start(self, task, fn, on_success):
		"""Start a collaborator call and keep it alive until its thread ends"""
		call = run_collaborator(task, fn, on_success, parent=self)
		if call is None:
			self.statusBar().showMessage(f"{task.name} is already running", 2000)
			return None
		self._running_calls.append(call)
		call.done.connect(lambda: self._on_call_done(call))
		call.timer.timeout.connect(self._update_collaborator_actions)
		self._update_collaborator_actions()
		return call

	def _on_call_done(self, call):
		if call in self._running_calls:
			self._running_calls.remove(call)
		self._update_collaborator_actions()

	def shutdown_collaborators(self, timeout_ms=COLLABORATOR_SHUTDOWN_WAIT_MS):
		"""Cancel every call and wait for the worker threads (window close)"""
		for task in self.collaborator_tasks():
			task.cancel()
		for call in list(self._running_calls):
			call.shutdown(timeout_ms)
		self._running_calls.clear()

	def _update_collaborator_actions(self):
		"""Disable triggers whose collaborator is busy"""
		for task in self.collaborator_tasks():
			for action in getattr(self, 'action_for_task', {}).get(task.name, []):
				action.setEnabled(not task.busy)

	def _ask_prompt(self, title, label):
		text, ok = QInputDialog.getText(self, title, label)
		return text if ok else ''

	# ========================================
	# Generation
	# ========================================

	def generate_content(self, prompt=None):
		"""Ask the content generator for the active page's text"""
		if self.content_generator is None:
			self.statusBar().showMessage("No content generator configured", 3000)
			return None
		if prompt is None:
			prompt = self._ask_prompt("Generate Content", "Describe the page:")
		try:
			request = content_request(prompt, self.store.current)
		except ValueError as e:
			self.statusBar().showMessage(str(e), 2000)
			return None
		target = target_current(self.store)
		generator = self.content_generator
		return self._start(
			self.content_task,
			lambda token: generator(request, token),
			lambda generated: self._on_content_generated(generated, target),
		)

	def _on_content_generated(self, generated, target):
		apply_generated(self.store, generated, target)
		self.statusBar().showMessage("Content generated", 2000)

	def generate_image(self, prompt=None):
		"""Ask the image generator for the active page's main image"""
		if self.image_generator is None:
			self.statusBar().showMessage("No image generator configured", 3000)
			return None
		if prompt is None:
			prompt = self._ask_prompt("Generate Image", f"Describe the image ({self.image_aspect_ratio}):")
		try:
			request = image_request(prompt, self.image_aspect_ratio)
		except ValueError as e:
			self.statusBar().showMessage(str(e), 2000)
			return None
		target = target_current(self.store)
		generator = self.image_generator
		return self._start(
			self.image_task,
			lambda token: generator(request, token),
			lambda image_ref: self._on_image_generated(image_ref, target),
		)

	def _on_image_generated(self, image_ref, target):
		apply_generated_image(self.store, image_ref, target)
		self.statusBar().showMessage("Image generated", 2000)

	# ========================================
	# Export
	# ========================================

	def export_page_png(self):
		"""Export the active page as PNG"""
		document = self.store.current
		filename, _ = QFileDialog.getSaveFileName(
			self, "Export Page as PNG", f"calendar_{document.date_gregorian}.png", "PNG Files (*.png);;All Files (*)"
		)
		if not filename:
			return
		variant = self.controller.active_variant()
		renderer = self.renderer
		self._start(
			self.export_task,
			lambda token: export_png(document, variant, renderer, filename),
			self._on_exported,
		)

	def export_batch_pdf(self):
		"""Export every page, ordered by date, into one PDF"""
		filename, _ = QFileDialog.getSaveFileName(
			self, "Export Batch as PDF", "calendar_batch.pdf", "PDF Files (*.pdf);;All Files (*)"
		)
		if not filename:
			return
		documents = self.store.sorted_for_export()
		mode = self.controller.template_mode
		renderer = self.renderer
		self._start(
			self.export_task,
			lambda token: export_pdf(documents, lambda document: resolve_template(document, mode), renderer, filename),
			self._on_exported,
		)

	def _on_exported(self, path):
		logger.info("Export written to %s", path)
		self.statusBar().showMessage(f"Exported to {path}", 3000)
