"""
Constructors for dense tensors of a given shape.

Every factory accepts either a shape tuple or an existing tensor whose shape
is copied. A sparse vector contributes ``(resolved_length,)``.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ...domain._tensor import is_sparse
from ._tensor import Tensor

Number = Union[int, float]


def _as_shape(like) -> tuple[int, ...]:
    if is_sparse(like):
        return (like.resolved_length(),)
    if isinstance(like, Tensor):
        return like.shape
    if isinstance(like, (int, np.integer)):
        return (int(like),)
    return tuple(like)


def fill_like(value: Number, like: Union[Sequence[int], Tensor]) -> Tensor:
    """
    Return a new dense tensor of `like`'s shape filled with `value`.
    """
    return Tensor(shape=_as_shape(like)).fill(value)


def zeros_like(like: Union[Sequence[int], Tensor]) -> Tensor:
    return Tensor(shape=_as_shape(like))


def ones_like(like: Union[Sequence[int], Tensor]) -> Tensor:
    return fill_like(1.0, like)


def uniform_like(
    like: Union[Sequence[int], Tensor], low: Number = 0.0, high: Number = 1.0
) -> Tensor:
    """
    Return a new dense tensor filled from ``Uniform(low, high)``.
    """
    return Tensor(shape=_as_shape(like)).fill_uniform(low, high)


def normal_like(
    like: Union[Sequence[int], Tensor], mean: Number = 0.0, std_dev: Number = 1.0
) -> Tensor:
    """
    Return a new dense tensor filled from ``Normal(mean, std_dev)``.
    """
    return Tensor(shape=_as_shape(like)).fill_normal(mean, std_dev)


def number_to_tensor(value) -> Tensor:
    """
    Promote a plain number to a shape ``(1,)`` tensor.

    Tensors and sparse vectors are returned unchanged.
    """
    if isinstance(value, Tensor) or is_sparse(value):
        return value
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        return Tensor([float(value)])
    raise TypeError(f"expected a number or a tensor, got {type(value).__name__}")
