"""
Tests for StylePatch merge semantics and the CSS boundary.
"""
from models.style import StylePatch
from models.transform import Vec2


class TestMerge:

    def test_fields_from_both_patches_survive(self):
        merged = StylePatch(font_size=20).merge(StylePatch(color='red'))
        assert merged.font_size == 20
        assert merged.color == 'red'

    def test_incoming_field_replaces(self):
        merged = StylePatch(color='red').merge(StylePatch(color='blue'))
        assert merged.color == 'blue'

    def test_unset_fields_do_not_clear(self):
        merged = StylePatch(translate=Vec2(3, 4)).merge(StylePatch(width=10))
        assert merged.translate == Vec2(3, 4)

    def test_extra_is_merged_by_key(self):
        merged = StylePatch(extra={'opacity': 0.5}).merge(StylePatch(extra={'zIndex': 2}))
        assert merged.extra == {'opacity': 0.5, 'zIndex': 2}

    def test_merge_returns_new_patch(self):
        base = StylePatch(color='red')
        base.merge(StylePatch(color='blue'))
        assert base.color == 'red'

    def test_is_empty(self):
        assert StylePatch().is_empty()
        assert not StylePatch(hidden=True).is_empty()

    def test_offset_defaults_to_origin(self):
        assert StylePatch().offset == Vec2(0, 0)


class TestCssBoundary:

    def test_to_css_uses_renderer_names(self):
        css = StylePatch(translate=Vec2(5, -5), width=200, font_size=18.5,
                         background_color='#fff', hidden=True).to_css()
        assert css == {
            'transform': 'translate(5px,-5px)',
            'width': '200px',
            'fontSize': '18.5px',
            'backgroundColor': '#fff',
            'display': 'none',
        }

    def test_from_css_reads_typed_fields(self):
        patch = StylePatch.from_css({
            'transform': 'translate(10px, 20px)',
            'fontSize': '24px',
            'width': 300,
            'color': '#123456',
            'display': 'none',
        })
        assert patch.translate == Vec2(10, 20)
        assert patch.font_size == 24
        assert patch.width == 300
        assert patch.color == '#123456'
        assert patch.hidden is True

    def test_from_css_keeps_other_transform_functions(self):
        patch = StylePatch.from_css({'transform': 'translate(1px, 2px) rotate(15deg)'})
        assert patch.translate == Vec2(1, 2)
        assert patch.transform_extra == 'rotate(15deg)'
        assert patch.to_css()['transform'] == 'translate(1px,2px) rotate(15deg)'

    def test_from_css_passes_unknown_properties_through(self):
        patch = StylePatch.from_css({'opacity': 0.4, 'width': 'auto'})
        assert patch.width is None
        assert patch.extra == {'opacity': 0.4, 'width': 'auto'}
        assert patch.to_css() == {'opacity': 0.4, 'width': 'auto'}

    def test_from_css_empty(self):
        assert StylePatch.from_css(None).is_empty()
