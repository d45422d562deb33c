"""Batch store package"""

from .style_mixin import BatchStyleMixin
from .layer_mixin import BatchLayerMixin
from .page_mixin import BatchPageMixin, CustomTemplate
from .core import BatchStore

__all__ = [
    'BatchStore',
    'CustomTemplate',
    'BatchStyleMixin',
    'BatchLayerMixin',
    'BatchPageMixin',
]
