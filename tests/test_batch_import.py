"""
Tests for batch import from JSON text, CSV and Excel files.
"""
import pandas as pd
import pytest

from models.document import DEFAULT_DOCUMENT
from services.batch_import import (
    BatchImportError,
    documents_from_rows,
    import_file_into,
    import_json_into,
    import_tabular_into,
    load_batch_file,
    parse_batch_json,
)


# ══════════════════════════════════════════════════════════════════════════
# JSON
# ══════════════════════════════════════════════════════════════════════════

class TestParseBatchJson:

    def test_keeps_order_and_fills_defaults(self, sample_batch_json):
        pages = parse_batch_json(sample_batch_json)
        assert [p.page_id for p in pages] == ['p2', 'p1']
        assert pages[0].author.name_cn == '李四'
        assert pages[0].author.bio_cn == DEFAULT_DOCUMENT.author.bio_cn
        assert pages[0].content.tags == ('AI',)
        assert pages[1].is_holiday is True
        assert pages[1].holiday_name_cn == '春节'

    @pytest.mark.parametrize("text", [
        'not json',
        '{"page_id": "p1"}',
        '[]',
        '[1, 2]',
        '[{"day": "x"}]',
    ])
    def test_rejected(self, text):
        with pytest.raises(BatchImportError):
            parse_batch_json(text)

    def test_overrides_and_layers_survive(self):
        pages = parse_batch_json(
            '[{"overrides": {"author_name": {"transform": "translate(5px, 0px)", "color": "red"}},'
            '  "layers": [{"id": "layer_7", "type": "circle", "x": 1, "y": 2, "width": 30, "height": 30}]}]'
        )
        assert pages[0].override('author_name').color == 'red'
        assert pages[0].override('author_name').offset.x == 5
        assert pages[0].layers[0].id == 'layer_7'


class TestImportJsonInto:

    def test_replaces_batch(self, store, sample_batch_json, change_counter):
        assert import_json_into(store, sample_batch_json)
        assert len(store) == 2
        assert store.current_index == 0
        assert store.current.page_id == 'p2'
        assert store.history.get_current_description() == "Load batch (2 pages)"
        assert len(change_counter) == 1

    def test_failure_leaves_store_untouched(self, store, change_counter):
        before = store.batch
        assert not import_json_into(store, '[{"day": "x"}]')
        assert store.batch == before
        assert store.history.current_index == 0
        assert change_counter == []

    def test_import_is_undoable(self, store, sample_batch_json):
        import_json_into(store, sample_batch_json)
        store.undo()
        assert store.batch == (DEFAULT_DOCUMENT,)


# ══════════════════════════════════════════════════════════════════════════
# Tabular
# ══════════════════════════════════════════════════════════════════════════

CSV_TEXT = (
    "Date,Quote,作者,Holiday,Tags\n"
    "2026-03-01,Hello there,王五,是,\"设计，AI\"\n"
    ",,,,\n"
)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / 'pages.csv'
    path.write_text(CSV_TEXT, encoding='utf-8')
    return path


class TestTabular:

    def test_csv_rows(self, csv_file):
        first, second = load_batch_file(csv_file)
        assert first.page_id == 'batch-0-2026-03-01'
        assert (first.month, first.day) == (3, 1)
        assert first.weekday_cn == '星期日'
        assert first.content.quote_cn == 'Hello there'
        assert first.author.name_cn == '王五'
        assert first.is_holiday is True
        assert first.content.tags == ('设计', 'AI')

    def test_empty_row_uses_defaults(self, csv_file):
        _, second = load_batch_file(csv_file)
        assert second.page_id == 'batch-1-2026-01-01'
        assert second.date_gregorian == '2026-01-01'
        assert second.weekday_cn == '星期四'
        assert second.is_holiday is False
        assert second.content.quote_cn == DEFAULT_DOCUMENT.content.quote_cn
        assert second.author.name_cn == DEFAULT_DOCUMENT.author.name_cn
        assert second.content.tags == DEFAULT_DOCUMENT.content.tags

    def test_excel(self, tmp_path):
        path = tmp_path / 'pages.xlsx'
        pd.DataFrame({
            '日期': ['2026-05-04', 46023],
            '金句': ['Keep going', 'Day one'],
            '图片': ['a.png', None],
        }).to_excel(path, index=False)
        first, second = load_batch_file(path)
        assert first.date_gregorian == '2026-05-04'
        assert first.image.main_url == 'a.png'
        assert second.date_gregorian == '2026-01-01'
        assert second.image.main_url == DEFAULT_DOCUMENT.image.main_url

    def test_lunar_column_beats_converter(self):
        rows = [{'date': '2026-02-17', 'lunar': '正月初一'}, {'date': '2026-02-18'}]
        pages = documents_from_rows(rows, lambda y, m, d: f'conv-{d}')
        assert pages[0].lunar_cn == '正月初一'
        assert pages[1].lunar_cn == 'conv-18'

    def test_holiday_false_strings(self):
        pages = documents_from_rows([{'holiday': '否'}, {'holiday': 'false'}, {'holiday': 1}])
        assert [p.is_holiday for p in pages] == [False, False, True]

    def test_empty_csv(self, tmp_path):
        path = tmp_path / 'empty.csv'
        path.write_text('', encoding='utf-8')
        with pytest.raises(BatchImportError):
            load_batch_file(path)

    def test_header_only_csv(self, tmp_path):
        path = tmp_path / 'header.csv'
        path.write_text('Date,Quote\n', encoding='utf-8')
        with pytest.raises(BatchImportError):
            load_batch_file(path)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / 'pages.txt'
        path.write_text('hello', encoding='utf-8')
        with pytest.raises(BatchImportError):
            load_batch_file(path)

    def test_json_file(self, tmp_path, sample_batch_json):
        path = tmp_path / 'pages.json'
        path.write_text(sample_batch_json, encoding='utf-8')
        assert len(load_batch_file(path)) == 2

    def test_corrupt_xlsx(self, tmp_path):
        path = tmp_path / 'pages.xlsx'
        path.write_bytes(b'PK\x03\x04garbage' * 10)
        with pytest.raises(BatchImportError):
            load_batch_file(path)

    def test_corrupt_xls(self, tmp_path):
        path = tmp_path / 'pages.xls'
        path.write_bytes(b'not a workbook' * 40)
        with pytest.raises(BatchImportError):
            load_batch_file(path)


class TestTabularInto:

    def test_import(self, store, csv_file):
        assert import_tabular_into(store, csv_file)
        assert len(store) == 2

    def test_missing_file(self, store, tmp_path):
        assert not import_file_into(store, tmp_path / 'nope.csv')
        assert store.batch == (DEFAULT_DOCUMENT,)

    def test_corrupt_xlsx_leaves_store_untouched(self, store, tmp_path, change_counter):
        path = tmp_path / 'pages.xlsx'
        path.write_bytes(b'PK\x03\x04garbage' * 10)
        assert not import_tabular_into(store, path)
        assert store.batch == (DEFAULT_DOCUMENT,)
        assert change_counter == []
