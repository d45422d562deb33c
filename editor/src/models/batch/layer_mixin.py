"""
Batch Layer Mixin

Free-form layers of the active page. Layers are drawn above the template
in sequence order; there is no z-order operation.
"""

import logging
from dataclasses import replace
from typing import Optional

from models.layer import Layer, LayerVariant

logger = logging.getLogger(__name__)


class BatchLayerMixin:
    """Mixin providing layer creation and text editing for BatchStore

    This mixin assumes the parent class has:
        - self.current: active Document
        - self._replace_current(document, description, record_history)
    """

    def add_layer(self, variant: LayerVariant) -> Layer:
        """Append a layer with default geometry to the active page

        Args:
            variant: rect, circle or text

        Returns:
            The new Layer (callers select it)
        """
        layer = Layer.create(variant)
        document = self.current
        self._replace_current(document.with_layers(document.layers + (layer,)), f"Add {layer.variant.value} layer")
        logger.debug("Added layer %s", layer.id)
        return layer

    def get_layer(self, layer_id: str) -> Optional[Layer]:
        return self.current.layer(layer_id)

    def set_layer_text(self, layer_id: str, text: str, record_history: bool = True) -> bool:
        """Commit an inline text edit to a text layer"""
        document = self.current
        layer = document.layer(layer_id)
        if layer is None or not layer.is_text:
            logger.warning("Cannot set text on %s", layer_id)
            return False
        document = document.with_layers(
            replace(l, text=text) if l.id == layer_id else l for l in document.layers
        )
        self._replace_current(document, f"Edit text {layer_id}", record_history)
        return True
