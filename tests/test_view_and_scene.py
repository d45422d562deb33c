"""
Tests for the view transform and scene hit testing.
"""
import pytest

from components.scene import Scene
from components.view_transform import ViewTransform, compute_auto_scale
from constants import AUTO_SCALE_INITIAL, AUTO_SCALE_MAX, AUTO_SCALE_MIN
from models.document import DEFAULT_DOCUMENT
from models.layer import Layer, LayerVariant
from models.style import StylePatch
from models.transform import Rect, Vec2
from services.slot_catalog import ElementKind
from services.template_selector import TemplateVariant

A = TemplateVariant.A


# ══════════════════════════════════════════════════════════════════════════
# View transform
# ══════════════════════════════════════════════════════════════════════════

class TestAutoScale:

    def test_capped(self):
        assert compute_auto_scale(4000, 4000) == AUTO_SCALE_MAX

    def test_fits_height(self):
        assert compute_auto_scale(600, 800) == pytest.approx(700 / 1620)

    def test_tiny_viewport_floor(self):
        assert compute_auto_scale(50, 50) == AUTO_SCALE_MIN

    def test_initial_scale_before_resize(self):
        assert ViewTransform().auto_scale == AUTO_SCALE_INITIAL


class TestZoomAndPan:

    @pytest.fixture
    def vt(self):
        return ViewTransform(1000, 1000)

    def test_zoom_clamped(self, vt):
        assert vt.set_zoom(3) == 2.0
        assert vt.set_zoom(0.1) == 0.5

    def test_zoom_steps(self, vt):
        assert vt.zoom_in() == 1.1
        assert vt.zoom_out() == 1.0
        assert vt.get_zoom_percent() == 100

    def test_zoom_limits(self, vt):
        for _ in range(30):
            vt.zoom_in()
        assert vt.manual_zoom == 2.0
        assert not vt.can_zoom_in()
        assert vt.can_zoom_out()

    def test_effective_scale(self, vt):
        vt.set_zoom(2)
        assert vt.effective_scale == pytest.approx(1.1)

    def test_page_is_centred(self, vt):
        origin = vt.page_to_screen(Vec2(0, 0))
        assert origin.x == pytest.approx((1000 - 1080 * 0.55) / 2)
        assert origin.y == pytest.approx((1000 - 1620 * 0.55) / 2)

    def test_pan_shifts_origin(self, vt):
        before = vt.page_origin()
        vt.set_pan(Vec2(30, -20))
        after = vt.page_origin()
        assert after.x - before.x == pytest.approx(30)
        assert after.y - before.y == pytest.approx(-20)

    def test_screen_page_inverse(self, vt):
        vt.set_zoom(1.5)
        vt.set_pan(Vec2(12, 7))
        point = Vec2(321, 654)
        back = vt.screen_to_page(vt.page_to_screen(point))
        assert back.x == pytest.approx(point.x)
        assert back.y == pytest.approx(point.y)

    def test_delta_ignores_pan(self, vt):
        vt.set_pan(Vec2(500, 500))
        delta = vt.screen_delta_to_page(11, -5.5)
        assert delta.x == pytest.approx(20)
        assert delta.y == pytest.approx(-10)

    def test_reset_view(self, vt):
        vt.set_zoom(1.7)
        vt.set_pan(Vec2(5, 5))
        vt.reset_view()
        assert vt.manual_zoom == 1.0
        assert vt.pan_offset == Vec2(0, 0)


# ══════════════════════════════════════════════════════════════════════════
# Scene
# ══════════════════════════════════════════════════════════════════════════

class TestScene:

    def test_slot_bounds_with_override(self, scene):
        doc = DEFAULT_DOCUMENT.with_override('author_name', StylePatch(translate=Vec2(10, -5), width=500))
        assert scene.bounds_of(doc, 'author_name', A) == Rect(110, 1195, 500, 60)

    def test_unregistered_slot_has_no_bounds(self, scene):
        assert scene.bounds_of(DEFAULT_DOCUMENT, 'brand_text', A) is None

    def test_hit_slot(self, scene):
        hit = scene.hit_test(DEFAULT_DOCUMENT, Vec2(150, 1220), A)
        assert hit.id == 'author_name'
        assert hit.kind == ElementKind.TEXT

    def test_miss(self, scene):
        assert scene.hit_test(DEFAULT_DOCUMENT, Vec2(1070, 5), A) is None

    def test_hidden_slot_not_hit(self, scene):
        doc = DEFAULT_DOCUMENT.with_override('author_name', StylePatch(hidden=True))
        assert scene.hit_test(doc, Vec2(150, 1220), A) is None

    def test_layers_above_slots(self, scene):
        layer = Layer.create(LayerVariant.RECT, layer_id='layer_1')
        doc = DEFAULT_DOCUMENT.with_layers([layer])
        assert scene.hit_test(doc, Vec2(150, 150), A).id == 'layer_1'

    def test_later_layer_on_top(self, scene):
        doc = DEFAULT_DOCUMENT.with_layers([
            Layer.create(LayerVariant.RECT, layer_id='layer_1'),
            Layer.create(LayerVariant.CIRCLE, layer_id='layer_2'),
        ])
        assert scene.hit_test(doc, Vec2(200, 200), A).id == 'layer_2'

    def test_moved_slot_hit_at_new_place(self, scene):
        doc = DEFAULT_DOCUMENT.with_override('author_name', StylePatch(translate=Vec2(0, -100)))
        assert scene.hit_test(doc, Vec2(150, 1140), A).id == 'author_name'

    def test_handle_hit(self, scene):
        doc = DEFAULT_DOCUMENT
        assert scene.handle_hit(doc, 'author_name', Vec2(505, 1255), A)
        assert not scene.handle_hit(doc, 'author_name', Vec2(300, 1230), A)
        assert not scene.handle_hit(doc, 'brand_text', Vec2(0, 0), A)

    def test_slot_bounds_copy(self):
        scene = Scene()
        scene.set_slot_bounds(A, {'main_image': Rect(0, 0, 10, 10)})
        scene.slot_bounds(A).clear()
        assert 'main_image' in scene.slot_bounds(A)

    def test_base_font_size_from_layout(self, scene):
        assert scene.base_font_size('author_name', A) == 36
        assert scene.base_font_size('author_name', TemplateVariant.D) == 34
        assert scene.base_font_size('main_image', A) is None
        assert scene.base_font_size('layer_1', A) is None

    def test_published_font_size_wins(self, scene):
        scene.set_slot_font_sizes(TemplateVariant.B, {'main_quote': 30})
        assert scene.base_font_size('main_quote', TemplateVariant.B) == 30
        assert scene.base_font_size('main_quote', A) == 42
