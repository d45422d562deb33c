"""
Batch Page Mixin

Page-level operations on the batch:
    - select_date: jump to (or create) the page for a calendar date
    - map_images: assign a run of images to consecutive pages
    - save_custom_template / apply_custom_template: session-local presets
    - set_theme
    - sorted_for_export
"""

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from constants import CUSTOM_TEMPLATE_ID_PREFIX
from models.document import DEFAULT_DOCUMENT, Document, Theme
from models.layer import Layer
from models.style import StylePatch
from services.calendar_dates import LunarConverter, lunar_label, weekday_cn
from services.template_selector import TemplateVariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomTemplate:
    """A saved look: overrides, layers and theme on top of a base layout"""
    id: str
    name: str
    base_variant: TemplateVariant
    overrides: Dict[str, StylePatch] = field(default_factory=dict)
    layers: Tuple[Layer, ...] = ()
    theme: Theme = field(default_factory=Theme)


class BatchPageMixin:
    """Mixin providing page-level operations for BatchStore

    This mixin assumes the parent class has:
        - self._batch, self._current_index, self.current
        - self._custom_templates: list of CustomTemplate
        - self._commit(batch, description, record_history)
        - self.update_current(patch, record_history, description)
        - self.set_index(index)
    """

    # ========================================
    # Dates
    # ========================================

    def find_date(self, date_gregorian: str) -> Optional[int]:
        for index, document in enumerate(self._batch):
            if document.date_gregorian == date_gregorian:
                return index
        return None

    def select_date(self, year: int, month: int, day: int,
                    lunar_converter: Optional[LunarConverter] = None) -> int:
        """Activate the page for a date, appending one if the batch has none

        A new page starts from the defaults but keeps the author, branding
        and theme of the page that was active.

        Returns:
            Index of the activated page

        Raises:
            ValueError: Not a valid calendar date
        """
        target = date(year, month, day)
        date_str = target.isoformat()
        existing = self.find_date(date_str)
        if existing is not None:
            return self.set_index(existing)

        current = self.current
        page = replace(
            DEFAULT_DOCUMENT,
            page_id=date_str,
            date_gregorian=date_str,
            month=target.month,
            day=target.day,
            weekday_cn=weekday_cn(target),
            lunar_cn=lunar_label(target, lunar_converter),
            author=current.author,
            branding=current.branding,
            theme=current.theme,
        )
        self._current_index = len(self._batch)
        self._commit(self._batch + (page,), f"Add page {date_str}")
        logger.debug("Appended page for %s", date_str)
        return self._current_index

    # ========================================
    # Images
    # ========================================

    def map_images(self, refs: Sequence[str]) -> int:
        """Assign images to pages starting at the active one

        ``refs[0]`` goes to the active page, ``refs[1]`` to the next, and so
        on. References past the end of the batch are ignored.

        Returns:
            Number of pages updated
        """
        batch = list(self._batch)
        start = self._current_index
        count = 0
        for offset, ref in enumerate(refs):
            index = start + offset
            if index >= len(batch):
                break
            page = batch[index]
            batch[index] = replace(page, image=replace(page.image, main_url=str(ref)))
            count += 1
        if count:
            self._commit(batch, f"Map {count} images")
        if count < len(refs):
            logger.info("Ignored %d images past the end of the batch", len(refs) - count)
        return count

    # ========================================
    # Theme
    # ========================================

    def set_theme(self, background_color: Optional[str] = None, primary_color: Optional[str] = None,
                  text_color: Optional[str] = None, record_history: bool = True):
        changes = {}
        if background_color is not None:
            changes['background_color'] = background_color
        if primary_color is not None:
            changes['primary_color'] = primary_color
        if text_color is not None:
            changes['text_color'] = text_color
        if not changes:
            return
        theme = replace(self.current.theme, **changes)
        self.update_current({'theme': theme}, record_history, description="Change theme")

    # ========================================
    # Custom templates
    # ========================================

    @property
    def custom_templates(self) -> List[CustomTemplate]:
        return list(self._custom_templates)

    def save_custom_template(self, name: str, base_variant: TemplateVariant) -> CustomTemplate:
        """Capture the active page's overrides, layers and theme

        Raises:
            ValueError: Empty name
        """
        name = (name or '').strip()
        if not name:
            raise ValueError("Custom template needs a name")
        stamp = int(time.time() * 1000)
        if self._custom_templates:
            last = int(self._custom_templates[-1].id[len(CUSTOM_TEMPLATE_ID_PREFIX):])
            stamp = max(stamp, last + 1)
        document = self.current
        template = CustomTemplate(
            id=f"{CUSTOM_TEMPLATE_ID_PREFIX}{stamp}",
            name=name,
            base_variant=TemplateVariant(base_variant),
            overrides=dict(document.overrides),
            layers=document.layers,
            theme=document.theme,
        )
        self._custom_templates.append(template)
        logger.info("Saved custom template %s (%s)", template.name, template.id)
        return template

    def get_custom_template(self, template_id: str) -> Optional[CustomTemplate]:
        for template in self._custom_templates:
            if template.id == template_id:
                return template
        return None

    def apply_custom_template(self, template_id: str) -> bool:
        """Replace the active page's overrides, layers and theme with a preset"""
        template = self.get_custom_template(template_id)
        if template is None:
            logger.warning("Unknown custom template %s", template_id)
            return False
        self.update_current(
            {'overrides': dict(template.overrides), 'layers': template.layers, 'theme': template.theme},
            description=f"Apply template {template.name}",
        )
        return True

    # ========================================
    # Export ordering
    # ========================================

    def sorted_for_export(self) -> List[Document]:
        """Pages ordered by gregorian date (stable for equal dates)"""
        return sorted(self._batch, key=lambda document: document.date_gregorian)
