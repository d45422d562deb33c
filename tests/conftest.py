"""
Shared fixtures for Calendar Page Editor tests.

Provides a fresh store, a scene with template A slot geometry, a view at
scale 1 with no pan (screen pixels == page pixels) and a controller wired
to all three.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))


# ── Template A slot geometry (page pixels) ──────────────────────────────

SLOT_BOUNDS_A = {
    'date_number': (60, 60, 200, 160),
    'main_image': (40, 300, 1000, 600),
    'main_quote': (100, 1000, 880, 120),
    'author_name': (100, 1200, 400, 60),
}


@pytest.fixture
def store():
    """Fresh store holding the single default page"""
    from models.batch import BatchStore
    return BatchStore()


@pytest.fixture
def scene():
    """Scene with template A slots registered"""
    from components.scene import Scene
    from models.transform import Rect
    from services.template_selector import TemplateVariant
    scene = Scene()
    scene.set_slot_bounds(TemplateVariant.A, {slot: Rect(*box) for slot, box in SLOT_BOUNDS_A.items()})
    return scene


@pytest.fixture(scope='session')
def qapp():
    """Core application for queued signals between worker threads and tests"""
    from PyQt5.QtCore import QCoreApplication
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def view():
    """Identity view: viewport == page size, scale 1, no pan"""
    from components.view_transform import ViewTransform
    from constants import PAGE_WIDTH, PAGE_HEIGHT
    view = ViewTransform()
    view.viewport_width = PAGE_WIDTH
    view.viewport_height = PAGE_HEIGHT
    view.auto_scale = 1.0
    return view


@pytest.fixture
def controller(store, scene, view):
    from components.interaction import InteractionController
    return InteractionController(store, scene, view)


@pytest.fixture
def change_counter(store):
    """Counts store change notifications"""
    calls = []
    store.add_listener(lambda s: calls.append(s.current))
    return calls


@pytest.fixture
def sample_batch_json():
    """Two-page batch as JSON text, dates out of order"""
    return """[
        {"page_id": "p2", "date_gregorian": "2026-02-02", "month": 2, "day": 2,
         "author": {"name_cn": "李四"}, "content": {"quote_cn": "让我们一起出发", "tags": ["AI"]}},
        {"page_id": "p1", "date_gregorian": "2026-02-01", "month": 2, "day": 1,
         "is_holiday": true, "holiday_name_cn": "春节"}
    ]"""
