"""
Tests for PNG / PDF export and the fallback layer renderer.
"""
from dataclasses import replace

import pytest
from PIL import Image

from constants import PAGE_HEIGHT, PAGE_WIDTH
from models.document import DEFAULT_DOCUMENT
from models.layer import Layer, LayerVariant
from models.style import StylePatch
from models.transform import Vec2
from services.export import ExportError, export_pdf, export_png, place_on_a4, render_layers
from services.template_selector import TemplateVariant, select_template


def _page(date_str):
    return replace(DEFAULT_DOCUMENT, page_id=date_str, date_gregorian=date_str)


def _solid_renderer(document, variant):
    return Image.new('RGB', (PAGE_WIDTH, PAGE_HEIGHT), 'red')


class TestRenderLayers:

    def test_background(self):
        image = render_layers(DEFAULT_DOCUMENT, TemplateVariant.A)
        assert image.size == (PAGE_WIDTH, PAGE_HEIGHT)
        assert image.getpixel((5, 5)) == (255, 255, 255)

    def test_shape_layers(self):
        rect = Layer.create(LayerVariant.RECT, layer_id='layer_1')
        circle = Layer.create(LayerVariant.CIRCLE, layer_id='layer_2').with_style(
            StylePatch(translate=Vec2(500, 500), background_color='#00ff00'))
        doc = DEFAULT_DOCUMENT.with_layers([rect, circle])
        image = render_layers(doc, TemplateVariant.A)
        assert image.getpixel((150, 150)) == (0x3b, 0x82, 0xf6)
        assert image.getpixel((600, 600)) == (0, 255, 0)
        # corner of the circle's box stays background
        assert image.getpixel((502, 502)) == (255, 255, 255)

    def test_hidden_layer_skipped(self):
        rect = Layer.create(LayerVariant.RECT, layer_id='layer_1').with_style(StylePatch(hidden=True))
        image = render_layers(DEFAULT_DOCUMENT.with_layers([rect]), TemplateVariant.A)
        assert image.getpixel((150, 150)) == (255, 255, 255)


class TestPng:

    def test_writes_file(self, tmp_path):
        path = export_png(DEFAULT_DOCUMENT, TemplateVariant.A, _solid_renderer, tmp_path / 'page.png')
        with Image.open(path) as image:
            assert image.size == (PAGE_WIDTH, PAGE_HEIGHT)

    def test_renderer_failure(self, tmp_path):
        def broken(document, variant):
            raise RuntimeError("no fonts")

        with pytest.raises(ExportError):
            export_png(DEFAULT_DOCUMENT, TemplateVariant.A, broken, tmp_path / 'page.png')

    def test_renderer_wrong_type(self, tmp_path):
        with pytest.raises(ExportError):
            export_png(DEFAULT_DOCUMENT, TemplateVariant.A, lambda d, v: None, tmp_path / 'page.png')

    def test_unwritable(self, tmp_path):
        with pytest.raises(ExportError):
            export_png(DEFAULT_DOCUMENT, TemplateVariant.A, _solid_renderer, tmp_path / 'missing' / 'page.png')


class TestPdf:

    def test_a4_placement(self):
        sheet = place_on_a4(Image.new('RGB', (PAGE_WIDTH, PAGE_HEIGHT), 'red'))
        assert sheet.size == (1190, 1684)
        # white margins left and right of the centred page
        assert sheet.getpixel((10, 800)) == (255, 255, 255)
        assert sheet.getpixel((595, 800)) == (255, 0, 0)

    def test_pages_ordered_by_date(self, tmp_path):
        rendered = []

        def renderer(document, variant):
            rendered.append(document.page_id)
            return _solid_renderer(document, variant)

        pages = [_page('2026-01-03'), _page('2026-01-01'), _page('2026-01-02')]
        path = export_pdf(pages, select_template, renderer, tmp_path / 'batch.pdf')
        assert rendered == ['2026-01-01', '2026-01-02', '2026-01-03']
        assert path.read_bytes().startswith(b'%PDF')

    def test_variant_per_page(self, tmp_path):
        variants = []

        def renderer(document, variant):
            variants.append(variant)
            return _solid_renderer(document, variant)

        holiday = replace(_page('2026-01-02'), is_holiday=True)
        export_pdf([_page('2026-01-01'), holiday], select_template, renderer, tmp_path / 'batch.pdf')
        assert variants == [TemplateVariant.A, TemplateVariant.C]

    def test_empty_batch(self, tmp_path):
        with pytest.raises(ExportError):
            export_pdf([], select_template, _solid_renderer, tmp_path / 'batch.pdf')
