import sys
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # Output to console
    ]
)

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    # Get the directory containing this file (editor/src)
    current_dir = os.path.dirname(os.path.abspath(__file__))
    # Add it to the Python path
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5.QtWidgets import QMainWindow, QApplication, QLabel

# Model imports
from models.batch import BatchStore

# Component imports
from components.canvas_widget import CanvasWidget
from components.scene import Scene
from components.view_transform import ViewTransform
from components.interaction import InteractionController

# Utility imports
from utils.logger import set_main_window

# Service imports
from services.batch_import import import_file_into
from services.calendar_dates import lunar_python_converter
from services.export import render_layers

# Mixin imports
from main.menu_mixin import MenuMixin
from main.event_mixin import EventMixin
from main.config_mixin import ConfigMixin
from main.history_mixin import HistoryMixin
from main.generator_mixin import GeneratorMixin


class CalendarEditor(MenuMixin, EventMixin, ConfigMixin, HistoryMixin, GeneratorMixin, QMainWindow):
    """Editor window for a batch of daily calendar pages

    Collaborators are injected so the window runs without them:
        page_painter: paints template slots onto the canvas
        renderer: rasterises a page for export (defaults to layers only)
        content_generator / image_generator: background generation calls
        lunar_converter: Gregorian date to lunar label
    """

    def __init__(self, documents=None, page_painter=None, renderer=None,
                 content_generator=None, image_generator=None, lunar_converter=None, slot_bounds=None):
        super().__init__()
        self.setWindowTitle("Calendar Page Editor")
        self.resize(1280, 900)
        self.setMinimumSize(800, 600)

        self.renderer = renderer or render_layers
        self.content_generator = content_generator
        self.image_generator = image_generator
        self.lunar_converter = lunar_converter

        # Settings first: the collaborator timeout comes from the config file
        self._init_config()

        # Batch store (single source of truth for all page data)
        self.store = BatchStore(documents)

        # Slot geometry is published by the layout renderer
        self.scene = Scene()
        for variant, mapping in (slot_bounds or {}).items():
            self.scene.set_slot_bounds(variant, mapping)

        self.view = ViewTransform()
        self.controller = InteractionController(self.store, self.scene, self.view, parent=self)

        # Initialize global logger with main window reference
        set_main_window(self)

        self.canvas_widget = CanvasWidget(self.controller, page_painter=page_painter, parent=self)
        self.setCentralWidget(self.canvas_widget)

        self._init_collaborators()
        self._create_menu_bar()
        self._create_toolbar()
        self._setup_status_bar()
        self._init_history()

        self._on_history_changed(self.store.history.can_undo(), self.store.history.can_redo())
        self._on_store_changed(self.store)
        self.canvas_widget.setFocus()

    def _setup_status_bar(self):
        """Status bar: last action on the left, page stats on the right"""
        self.status_left = QLabel("Ready")
        self.status_right = QLabel("")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)

    def import_batch_file(self, filepath):
        """Replace the batch from a JSON, CSV or Excel file

        A failed import leaves the current batch untouched.
        """
        if not import_file_into(self.store, filepath, self.lunar_converter):
            return False
        self.controller.clear_selection()
        self._add_to_recent_files(filepath)
        self.statusBar().showMessage(f"Imported {len(self.store)} page(s) from {os.path.basename(filepath)}", 3000)
        return True


def main():
    app = QApplication(sys.argv)
    window = CalendarEditor(lunar_converter=lunar_python_converter)
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
