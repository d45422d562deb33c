"""
Page export to PNG and multi-page PDF.

Rasterisation is external: callers pass a ``renderer(document, variant)``
that returns a PIL image of one page. This module only handles ordering,
placement on A4 paper and writing the files with Pillow.
"""

import logging
from pathlib import Path
from typing import Callable, Sequence

from PIL import Image, ImageDraw, ImageFont

from constants import (
    PAGE_WIDTH, PAGE_HEIGHT, PDF_PAGE_SIZE, PDF_IMAGE_WIDTH, PDF_RESOLUTION,
    TRANSPARENT, DEFAULT_TEXT_COLOR,
)
from models.document import Document
from services.async_task import CollaboratorError
from services.template_selector import TemplateVariant

logger = logging.getLogger(__name__)

PageRenderer = Callable[[Document, TemplateVariant], Image.Image]


class ExportError(CollaboratorError):
    """Export could not be produced"""


def _render(renderer: PageRenderer, document: Document, variant: TemplateVariant) -> Image.Image:
    try:
        image = renderer(document, variant)
    except Exception as e:
        raise ExportError(f"Rendering page {document.page_id} failed: {e}") from e
    if not isinstance(image, Image.Image):
        raise ExportError(f"Renderer returned {type(image).__name__} for page {document.page_id}")
    return image


def render_layers(document: Document, variant: TemplateVariant) -> Image.Image:
    """Fallback renderer: theme background plus free layers, no template slots

    Used when no layout renderer is installed. Safe to call off the UI thread.
    """
    image = Image.new('RGB', (PAGE_WIDTH, PAGE_HEIGHT), document.theme.background_color)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    for layer in document.layers:
        style = layer.style
        if style.hidden:
            continue
        box = layer.bounds()
        xy = (box.x, box.y, box.right, box.bottom)
        if layer.is_text:
            draw.multiline_text((box.x, box.y), layer.text or '', fill=style.color or DEFAULT_TEXT_COLOR, font=font)
            continue
        fill = style.background_color or layer.fill
        if fill == TRANSPARENT:
            continue
        if style.border_radius == '50%':
            draw.ellipse(xy, fill=fill)
        else:
            draw.rectangle(xy, fill=fill)
    return image


def export_png(document: Document, variant: TemplateVariant, renderer: PageRenderer, path) -> Path:
    """Render one page and save it as PNG

    Returns:
        Path written
    """
    path = Path(path)
    image = _render(renderer, document, variant)
    try:
        image.save(path, 'PNG')
    except OSError as e:
        raise ExportError(f"Cannot write {path}: {e}") from e
    logger.info("Exported %s to %s", document.page_id, path)
    return path


def place_on_a4(image: Image.Image) -> Image.Image:
    """Centre a page image on a white A4 sheet (PDF_RESOLUTION dpi)"""
    px_per_pt = PDF_RESOLUTION / 72.0
    sheet_size = (round(PDF_PAGE_SIZE[0] * px_per_pt), round(PDF_PAGE_SIZE[1] * px_per_pt))
    width = round(PDF_IMAGE_WIDTH * px_per_pt)
    height = round(width * PAGE_HEIGHT / PAGE_WIDTH)

    sheet = Image.new('RGB', sheet_size, 'white')
    page = image.convert('RGB').resize((width, height), Image.Resampling.LANCZOS)
    sheet.paste(page, ((sheet_size[0] - width) // 2, max(0, (sheet_size[1] - height) // 2)))
    return sheet


def export_pdf(documents: Sequence[Document], resolve_variant: Callable[[Document], TemplateVariant],
               renderer: PageRenderer, path) -> Path:
    """Render every page, ordered by date, into one PDF

    Args:
        documents: Pages to export (any order)
        resolve_variant: Template variant for each page
        renderer: Page rasteriser
        path: Output file

    Raises:
        ExportError: Empty batch, render failure or unwritable file
    """
    if not documents:
        raise ExportError("Nothing to export")
    path = Path(path)
    ordered = sorted(documents, key=lambda document: document.date_gregorian)
    sheets = [place_on_a4(_render(renderer, document, resolve_variant(document))) for document in ordered]

    try:
        sheets[0].save(path, 'PDF', save_all=True, append_images=sheets[1:], resolution=PDF_RESOLUTION)
    except OSError as e:
        raise ExportError(f"Cannot write {path}: {e}") from e
    logger.info("Exported %d pages to %s", len(sheets), path)
    return path
