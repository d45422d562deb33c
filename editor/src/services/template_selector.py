"""Template selection.

Classifies a page into one of the four built-in layouts. The rule is
priority-ordered and pure, so the same Document always gets the same
variant:

1. festival badge enabled or holiday   -> C
2. manifesto phrasing in the quote     -> B
3. illustration/art/poster style tags  -> D
4. everything else                     -> A

A pinned template mode bypasses the rule entirely.
"""

from enum import Enum

from constants import ART_TAG_KEYWORDS, MANIFESTO_KEYWORDS
from models.document import Document


class TemplateVariant(str, Enum):
    A = 'A'
    B = 'B'
    C = 'C'
    D = 'D'


class TemplateMode(str, Enum):
    AUTO = 'Auto'
    A = 'A'
    B = 'B'
    C = 'C'
    D = 'D'


_ART_TAGS_LOWER = tuple(keyword.lower() for keyword in ART_TAG_KEYWORDS)


def select_template(document: Document) -> TemplateVariant:
    if document.festival_badge.enabled or document.is_holiday:
        return TemplateVariant.C

    quote = document.content.quote_cn or ''
    if any(keyword in quote for keyword in MANIFESTO_KEYWORDS):
        return TemplateVariant.B

    for tag in document.content.tags:
        tag = tag.lower()
        if any(keyword in tag for keyword in _ART_TAGS_LOWER):
            return TemplateVariant.D

    return TemplateVariant.A


def resolve_template(document: Document, mode: TemplateMode = TemplateMode.AUTO) -> TemplateVariant:
    """Variant to render: the pinned one, or the rule's choice in AUTO mode"""
    mode = TemplateMode(mode)
    if mode == TemplateMode.AUTO:
        return select_template(document)
    return TemplateVariant(mode.value)
