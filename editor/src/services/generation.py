"""Applying generated content to pages.

The generative services are external collaborators. The content generator
receives the user's prompt plus the page's date (``content_request``) and
returns a partial page record using the Document field names; the image
generator receives a prompt and an aspect ratio (``image_request``) and
returns an image reference.

A request is tied to the page that was active when it started
(``PageTarget``). Results go back to that page even when the user has
moved on, and only through the store's ordinary update path, so they are
recorded in the history like any other edit.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Dict, Mapping, Optional

from constants import DEFAULT_IMAGE_ASPECT_RATIO
from models.document import Document
from services.async_task import CollaboratorError

logger = logging.getLogger(__name__)

# Blocks the generator may not touch
_PROTECTED_FIELDS = ('overrides', 'layers', 'page_id')


@dataclass(frozen=True)
class PageTarget:
    """The page a generation request belongs to"""
    page_id: str
    index: int


def target_current(store) -> PageTarget:
    return PageTarget(store.current.page_id, store.current_index)


def request_context(document: Document) -> Dict[str, int]:
    """Date context sent along with a generation prompt"""
    try:
        year = date.fromisoformat(document.date_gregorian).year
    except ValueError:
        year = date.today().year
    return {'year': year, 'month': document.month, 'day': document.day}


def content_request(prompt: str, document: Document) -> Dict[str, Any]:
    """Prompt and date context for the content generator

    Raises:
        ValueError: Blank prompt
    """
    prompt = (prompt or '').strip()
    if not prompt:
        raise ValueError("A prompt is required")
    return {'prompt': prompt, 'context': request_context(document)}


def image_request(prompt: str, aspect_ratio: str = DEFAULT_IMAGE_ASPECT_RATIO) -> Dict[str, str]:
    """Prompt and aspect ratio ("W:H") for the image generator

    Raises:
        ValueError: Blank prompt or malformed aspect ratio
    """
    prompt = (prompt or '').strip()
    if not prompt:
        raise ValueError("A prompt is required")
    width, sep, height = (aspect_ratio or '').partition(':')
    if not sep or not width.isdigit() or not height.isdigit() or int(width) == 0 or int(height) == 0:
        raise ValueError(f"Aspect ratio must look like '3:4', got {aspect_ratio!r}")
    return {'prompt': prompt, 'aspect_ratio': aspect_ratio}


def merge_generated(document: Document, generated: Mapping[str, Any]) -> Document:
    """Merge a generated record into a page

    Top-level values replace the page's; nested blocks (author, content,
    image, branding, theme) are merged field by field, so a result that
    only carries ``author.name_cn`` keeps the existing bio and avatar.

    Raises:
        CollaboratorError: The result is not an object or has wrong value types
    """
    if not isinstance(generated, Mapping):
        raise CollaboratorError(f"Generated content must be an object, got {type(generated).__name__}")
    record = {key: value for key, value in generated.items() if key not in _PROTECTED_FIELDS}
    ignored = set(generated) - set(record)
    if ignored:
        logger.debug("Ignoring generated fields %s", sorted(ignored))
    try:
        return Document.from_dict(record, defaults=document)
    except (TypeError, ValueError) as e:
        raise CollaboratorError(f"Generated content is malformed: {e}") from e


def _target_index(store, target: Optional[PageTarget]) -> int:
    if target is None:
        return store.current_index
    index = store.page_index(target.page_id, target.index)
    if index is None:
        raise CollaboratorError(f"Page {target.page_id} is no longer in the batch")
    return index


def apply_generated(store, generated: Mapping[str, Any], target: Optional[PageTarget] = None) -> Document:
    """Merge generated content into the target page (one history entry)

    Without a target the active page is used.
    """
    index = _target_index(store, target)
    merged = merge_generated(store.batch[index], generated)
    patch = {f.name: getattr(merged, f.name) for f in fields(merged) if f.name not in _PROTECTED_FIELDS}
    store.update_page(index, patch, description="Generate content")
    return store.batch[index]


def apply_generated_image(store, image_ref: str, target: Optional[PageTarget] = None) -> Document:
    """Use a generated image as the target page's main image"""
    if not image_ref:
        raise CollaboratorError("Image generation returned no image")
    index = _target_index(store, target)
    document = store.batch[index].with_field('image.main_url', image_ref)
    store.update_page(index, {'image': document.image}, description="Generate image")
    return store.batch[index]
