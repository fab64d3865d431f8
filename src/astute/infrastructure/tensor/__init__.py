"""
Dense and sparse tensor representations.

- ``Tensor``: strided N-dimensional view over a flat ``float64`` buffer.
- ``SparseVector``: rank-1 vector storing only its non-zero entries.
- Factories building dense tensors of a given shape.
"""

from ._tensor import Tensor
from ._sparse import SparseVector
from ._factories import (
    fill_like,
    zeros_like,
    ones_like,
    uniform_like,
    normal_like,
    number_to_tensor,
)

__all__ = [
    Tensor.__name__,
    SparseVector.__name__,
    fill_like.__name__,
    zeros_like.__name__,
    ones_like.__name__,
    uniform_like.__name__,
    normal_like.__name__,
    number_to_tensor.__name__,
]
