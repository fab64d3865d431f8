"""
Numeric backend: dense kernels, sparse kernels and the dispatch layer.

``mathops`` is the entry point used by the tensor methods and by the autograd
operations. ``MathFn`` is the elementwise function registry.
"""

from .._math_fn import MathFn
from . import _mathops as mathops
from ._dense import broadcast_shape

__all__ = [
    MathFn.__name__,
    "mathops",
    broadcast_shape.__name__,
]
