"""
Tests for page-level operations: dates, image mapping, theme, custom templates.
"""
import pytest

from models.batch import BatchStore
from models.document import DEFAULT_DOCUMENT, Document
from models.layer import LayerVariant
from models.style import StylePatch
from services.template_selector import TemplateVariant


def _page(date_str):
    year, month, day = (int(part) for part in date_str.split('-'))
    return Document.from_dict({'page_id': date_str, 'date_gregorian': date_str, 'month': month, 'day': day})


# ══════════════════════════════════════════════════════════════════════════
# Dates
# ══════════════════════════════════════════════════════════════════════════

class TestSelectDate:

    def test_jumps_to_existing_page(self):
        store = BatchStore([_page('2026-01-01'), _page('2026-01-02')])
        assert store.select_date(2026, 1, 2) == 1
        assert len(store) == 2

    def test_appends_missing_page(self, store):
        store.update_field('author.name_cn', '李四')
        index = store.select_date(2026, 2, 14)
        assert index == 1
        page = store.current
        assert page.page_id == '2026-02-14'
        assert (page.month, page.day) == (2, 14)
        assert page.weekday_cn == '星期六'
        assert page.author.name_cn == '李四'
        assert page.lunar_cn == ''

    def test_new_page_uses_lunar_converter(self, store):
        store.select_date(2026, 2, 17, lambda y, m, d: '正月初一')
        assert store.current.lunar_cn == '正月初一'

    def test_invalid_date(self, store):
        with pytest.raises(ValueError):
            store.select_date(2026, 2, 30)
        assert len(store) == 1

    def test_find_date(self, store):
        assert store.find_date(DEFAULT_DOCUMENT.date_gregorian) == 0
        assert store.find_date('1999-01-01') is None


# ══════════════════════════════════════════════════════════════════════════
# Images and theme
# ══════════════════════════════════════════════════════════════════════════

class TestMapImages:

    def test_maps_from_active_page(self):
        store = BatchStore([_page('2026-01-01'), _page('2026-01-02'), _page('2026-01-03')])
        store.set_index(1)
        assert store.map_images(['a.png', 'b.png', 'c.png']) == 2
        assert store.batch[0].image == DEFAULT_DOCUMENT.image
        assert store.batch[1].image.main_url == 'a.png'
        assert store.batch[2].image.main_url == 'b.png'
        assert store.history.current_index == 1

    def test_nothing_to_map(self, store):
        assert store.map_images([]) == 0
        assert store.history.current_index == 0


class TestTheme:

    def test_set_theme_partial(self, store):
        store.set_theme(background_color='#000000')
        assert store.current.theme.background_color == '#000000'
        assert store.current.theme.primary_color == DEFAULT_DOCUMENT.theme.primary_color

    def test_set_theme_no_changes(self, store):
        store.set_theme()
        assert store.history.current_index == 0


# ══════════════════════════════════════════════════════════════════════════
# Custom templates
# ══════════════════════════════════════════════════════════════════════════

class TestCustomTemplates:

    def test_save_and_apply(self):
        store = BatchStore([_page('2026-01-01'), _page('2026-01-02')])
        store.apply_override('author_name', StylePatch(color='red'))
        store.add_layer(LayerVariant.TEXT)
        template = store.save_custom_template('Red names', TemplateVariant.A)

        store.next_page()
        assert store.apply_custom_template(template.id)
        assert store.current.override('author_name').color == 'red'
        assert len(store.current.layers) == 1
        assert store.current.page_id == '2026-01-02'

    def test_ids_strictly_increase(self, store):
        first = store.save_custom_template('a', TemplateVariant.A)
        second = store.save_custom_template('b', TemplateVariant.B)
        assert first.id.startswith('custom_')
        assert int(second.id[len('custom_'):]) > int(first.id[len('custom_'):])
        assert [t.name for t in store.custom_templates] == ['a', 'b']

    def test_empty_name_rejected(self, store):
        with pytest.raises(ValueError):
            store.save_custom_template('   ', TemplateVariant.A)

    def test_unknown_template(self, store):
        assert not store.apply_custom_template('custom_0')


class TestExportOrder:

    def test_sorted_by_date(self):
        store = BatchStore([_page('2026-01-03'), _page('2026-01-01'), _page('2026-01-02')])
        assert [d.day for d in store.sorted_for_export()] == [1, 2, 3]
