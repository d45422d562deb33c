"""
Batch Style Mixin

Applies style patches to the targets of the active page. A target is either
a free layer (id with the ``layer_`` prefix) or a fixed template slot.

Methods:
    - apply_override
    - delete_target
    - nudge_target
    - style_of
"""

import logging
from dataclasses import replace

from models.layer import is_layer_id
from models.style import StylePatch
from models.transform import Vec2

logger = logging.getLogger(__name__)


class BatchStyleMixin:
    """Mixin providing override/layer style operations for BatchStore

    This mixin assumes the parent class has:
        - self.current: active Document
        - self._replace_current(document, description, record_history)
    """

    # ========================================
    # Queries
    # ========================================

    def style_of(self, target_id: str) -> StylePatch:
        """Current style of a target (empty patch when nothing is set)"""
        document = self.current
        if is_layer_id(target_id):
            layer = document.layer(target_id)
            return layer.style if layer is not None else StylePatch()
        return document.override(target_id)

    def has_target(self, target_id: str) -> bool:
        if is_layer_id(target_id):
            return self.current.layer(target_id) is not None
        return bool(target_id)

    # ========================================
    # Operations
    # ========================================

    def apply_override(self, target_id: str, patch: StylePatch, record_history: bool = True) -> bool:
        """Merge ``patch`` into a layer's style or a slot's override

        Fields set in ``patch`` replace the old values; everything else is kept.

        Returns:
            False if ``target_id`` names a layer that no longer exists
        """
        document = self.current
        if is_layer_id(target_id):
            if document.layer(target_id) is None:
                logger.warning("Style patch for missing layer %s ignored", target_id)
                return False
            document = document.with_layers(
                layer.with_style(patch) if layer.id == target_id else layer
                for layer in document.layers
            )
        else:
            document = document.with_override(target_id, patch)
        self._replace_current(document, f"Style {target_id}", record_history)
        return True

    def delete_target(self, target_id: str) -> bool:
        """Remove a layer, or hide a template slot

        Template slots belong to the layout and cannot be removed, so
        deleting one sets ``hidden`` on its override instead.
        """
        if not self.has_target(target_id):
            return False
        document = self.current
        if is_layer_id(target_id):
            document = document.with_layers(l for l in document.layers if l.id != target_id)
            self._replace_current(document, f"Delete {target_id}")
        else:
            document = document.with_override(target_id, StylePatch(hidden=True))
            self._replace_current(document, f"Hide {target_id}")
        logger.debug("Deleted target %s", target_id)
        return True

    def nudge_target(self, target_id: str, dx: float, dy: float, record_history: bool = True) -> bool:
        """Move a target by (dx, dy) page pixels

        The new transform is translation-only: any rotate/scale functions
        kept from an import are dropped.
        """
        if not self.has_target(target_id):
            return False
        style = self.style_of(target_id)
        style = replace(style, translate=style.offset + Vec2(dx, dy), transform_extra=None)
        self._set_style(target_id, style, f"Nudge {target_id}", record_history)
        return True

    def _set_style(self, target_id: str, style: StylePatch, description: str, record_history: bool):
        """Replace a target's whole style (no merge)"""
        document = self.current
        if is_layer_id(target_id):
            document = document.with_layers(
                replace(layer, style=style) if layer.id == target_id else layer
                for layer in document.layers
            )
        else:
            document = replace(document, overrides={**document.overrides, target_id: style})
        self._replace_current(document, description, record_history)
