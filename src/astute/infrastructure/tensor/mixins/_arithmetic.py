"""
Arithmetic mixin shared by dense and sparse tensors.

This module declares :class:`TensorMixinArithmetic`, the method surface for
binary arithmetic, scaled combinations, reductions and products. Every method
is a thin forwarder into the numeric dispatch layer (``..ops._mathops``), so
`t.add(o, dest)` and `mathops.add(t, o, dest)` are the same operation and
follow the same dense/sparse routing rules.

The dispatch layer is imported lazily inside each method to avoid an import
cycle between the tensor classes and the kernels that construct them.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional, Union

from ....domain._tensor import ITensor

Number = Union[int, float]


class TensorMixinArithmetic(ABC):
    """
    Arithmetic surface of a tensor.

    Notes
    -----
    - Every method accepts an optional `dest` tensor. When given, the result
      is written into it and `dest` is returned; otherwise a new tensor is
      allocated.
    - Plain numbers on the right-hand side are promoted to shape ``(1,)``
      tensors and broadcast.
    """

    def add(self: ITensor, other, dest=None):
        """
        Elementwise ``self + other`` with broadcasting.
        """
        from ...ops import _mathops as mathops

        return mathops.add(self, other, dest)

    def sub(self: ITensor, other, dest=None):
        """
        Elementwise ``self - other`` with broadcasting.
        """
        from ...ops import _mathops as mathops

        return mathops.sub(self, other, dest)

    def mul(self: ITensor, other, dest=None):
        """
        Elementwise ``self * other`` with broadcasting.
        """
        from ...ops import _mathops as mathops

        return mathops.mul(self, other, dest)

    def div(self: ITensor, other, dest=None):
        """
        Elementwise ``self / other`` with broadcasting.

        Raises
        ------
        UnsupportedOperationError
            If `other` is a sparse vector.
        """
        from ...ops import _mathops as mathops

        return mathops.div(self, other, dest)

    def add_scale(
        self: ITensor, other, scale1: Number = 1.0, scale2: Number = 1.0, dest=None
    ):
        """
        Elementwise ``scale1 * self + scale2 * other``.
        """
        from ...ops import _mathops as mathops

        return mathops.add_scale(self, other, scale1, scale2, dest)

    def multiply_scale(self: ITensor, other, scale: Number = 1.0, dest=None):
        """
        Elementwise ``scale * self * other``.
        """
        from ...ops import _mathops as mathops

        return mathops.multiply_scale(self, other, scale, dest)

    def divide_scale(self: ITensor, other, scale: Number = 1.0, dest=None):
        """
        Elementwise ``scale * self / other``.
        """
        from ...ops import _mathops as mathops

        return mathops.divide_scale(self, other, scale, dest)

    def scale(self: ITensor, factor: Number, dest=None):
        from ...ops import _mathops as mathops

        return mathops.scale(self, factor, dest)

    def square(self: ITensor, dest=None):
        from ...ops import _mathops as mathops

        return mathops.square(self, dest)

    def sum(self: ITensor):
        """
        Sum of all elements as a shape ``(1,)`` dense tensor.
        """
        from ...ops import _mathops as mathops

        return mathops.sum(self)

    def dot(self: ITensor, other, dest=None):
        """
        Inner product.

        Dense/dense is matrix multiplication (contraction over one dimension).
        If either side is sparse, the result is ``Tensor([p])`` holding the
        scalar product.
        """
        from ...ops import _mathops as mathops

        return mathops.dot(self, other, dest)

    def mat_mul(self: ITensor, other, dest=None):
        """
        Matrix product, routed to the sparse kernel when either side is sparse.
        """
        from ...ops import _mathops as mathops

        return mathops.mat_mul(self, other, dest)

    def same_shape(self: ITensor, other: Optional[ITensor]) -> bool:
        from ...ops import _mathops as mathops

        return mathops.same_shape(self, other)
