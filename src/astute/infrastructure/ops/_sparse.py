"""
Sparse-vector kernels.

Every kernel here takes a `SparseVector` as its first operand. The dispatch
layer swaps operands of commutative operations so that the sparse one always
comes first.

Result representation
---------------------
- sparse op number, or sparse op single-element dense tensor: sparse, since
  the operation reduces to a scaling of the stored entries.
- sparse * sparse: sparse, over the intersection of stored indices.
- sparse + sparse: sparse, over the union of stored indices.
- sparse + dense, sparse * dense, sparse / dense: dense rank-1.
- dot: dense ``(1,)``. mat_mul: dense rank-1 of the matrix's column count.

Dense operands paired with a sparse vector must be rank 1 (or hold a single
element). Stored indices beyond the dense length raise `OutOfRangeError`.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

import numpy as np

from ...domain._errors import (
    OutOfRangeError,
    ShapeMismatchError,
    UnsupportedOperationError,
)
from ...domain._tensor import is_sparse
from .._math_fn import MathFn
from ..tensor import SparseVector, Tensor, number_to_tensor
from ._dense import apply_binary_fn as _dense_binary
from ._dense import apply_fn as _dense_apply
from ._dense import write_result

Number = Union[int, float]


# ----------------------------------------------------------------------
# Operand helpers
# ----------------------------------------------------------------------
def _is_scalar(other) -> bool:
    if is_sparse(other):
        return False
    if isinstance(other, Tensor):
        return other.total_size() == 1
    return True


def _scalar_value(other) -> float:
    if isinstance(other, Tensor):
        return float(other.view().reshape(-1)[0])
    return float(other)


def operand_at(other, index: int) -> float:
    """
    Read `other` at `index` as seen from a sparse vector.

    Numbers and single-element tensors broadcast; sparse vectors read 0 at
    unstored indices; dense tensors must be rank 1.
    """
    if is_sparse(other):
        return other.entries.get(index, 0.0)
    if _is_scalar(other):
        return _scalar_value(other)
    if other.num_dimensions != 1:
        raise ShapeMismatchError("sparse", (None,), other.shape)
    return other.at(index)


def _merged_length(a: SparseVector, b: SparseVector) -> Optional[int]:
    if a.length is None:
        return b.length
    if b.length is None:
        return a.length
    return max(a.length, b.length)


def _dense_length(sparse: SparseVector, dense: Tensor, op: str) -> int:
    if dense.num_dimensions != 1:
        raise ShapeMismatchError(op, sparse.shape, dense.shape)
    if sparse.length is not None and sparse.length != dense.shape[0]:
        raise ShapeMismatchError(op, sparse.shape, dense.shape)
    return dense.shape[0]


def _store_sparse(
    entries: Dict[int, float], length: Optional[int], dest
) -> Union[SparseVector, Tensor]:
    if dest is None:
        return SparseVector(entries, length)
    if is_sparse(dest):
        dest.clear()
    else:
        dest.fill(0.0)
    for index, value in entries.items():
        dest.set(index, value)
    return dest


def _scatter(values: np.ndarray, index: int, value: float) -> None:
    if index >= values.shape[0]:
        raise OutOfRangeError(index, values.shape[0])
    values[index] += value


# ----------------------------------------------------------------------
# Arithmetic
# ----------------------------------------------------------------------
def scale(sparse: SparseVector, factor: Number, dest=None):
    """
    Multiply every stored entry by `factor`; the result stays sparse.
    """
    with np.errstate(all="ignore"):
        entries = {
            index: float(np.float64(factor) * value)
            for index, value in sparse.entries.items()
        }
    return _store_sparse(entries, sparse.length, dest)


def multiply_scale(sparse: SparseVector, other, factor: Number = 1.0, dest=None):
    """
    Compute ``factor * sparse * other``.
    """
    if _is_scalar(other):
        return scale(sparse, factor * _scalar_value(other), dest)

    if is_sparse(other):
        entries = {
            index: factor * value * other.entries[index]
            for index, value in sparse.entries.items()
            if index in other.entries
        }
        return _store_sparse(entries, _merged_length(sparse, other), dest)

    length = _dense_length(sparse, other, "multiply_scale")
    values = np.zeros(length, dtype=np.float64)
    for index, value in sparse.entries.items():
        _scatter(values, index, factor * value * other.at(index))
    return write_result("multiply_scale", values, dest)


def divide_scale(sparse: SparseVector, other, factor: Number = 1.0, dest=None):
    """
    Compute ``factor * sparse / other``.

    Raises
    ------
    UnsupportedOperationError
        If `other` is sparse.
    """
    if is_sparse(other):
        raise UnsupportedOperationError(
            "divide_scale", "cannot divide by a sparse vector"
        )

    if _is_scalar(other):
        with np.errstate(all="ignore"):
            ratio = np.float64(factor) / np.float64(_scalar_value(other))
        return scale(sparse, float(ratio), dest)

    length = _dense_length(sparse, other, "divide_scale")
    values = np.zeros(length, dtype=np.float64)
    with np.errstate(all="ignore"):
        for index, value in sparse.entries.items():
            divisor = np.float64(other.at(index))
            _scatter(values, index, float(factor * value / divisor))
    return write_result("divide_scale", values, dest)


def add_scale(
    sparse: SparseVector,
    other,
    scale1: Number = 1.0,
    scale2: Number = 1.0,
    dest=None,
):
    """
    Compute ``scale1 * sparse + scale2 * other``.

    Two sparse operands give a new sparse vector over the union of stored
    indices; neither input is modified unless it is passed as `dest`. Any
    dense or numeric `other` gives a dense rank-1 result.
    """
    if is_sparse(other):
        entries: Dict[int, float] = {
            index: scale1 * value for index, value in sparse.entries.items()
        }
        for index, value in other.entries.items():
            entries[index] = entries.get(index, 0.0) + scale2 * value
        return _store_sparse(entries, _merged_length(sparse, other), dest)

    other = number_to_tensor(other)
    if other.total_size() == 1:
        length = sparse.resolved_length()
        values = np.full(length, scale2 * _scalar_value(other), dtype=np.float64)
    else:
        length = _dense_length(sparse, other, "add_scale")
        values = scale2 * other.to_numpy()

    for index, value in sparse.entries.items():
        _scatter(values, index, scale1 * value)
    return write_result("add_scale", values, dest)


def sum(sparse: SparseVector) -> Tensor:
    """
    Sum of stored entries as a shape ``(1,)`` dense tensor.
    """
    total = 0.0
    for value in sparse.entries.values():
        total += value
    return Tensor([total])


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------
def dot(sparse: SparseVector, other, dest=None) -> Tensor:
    """
    Scalar product of a sparse vector with a sparse or dense rank-1 vector.

    Returns
    -------
    Tensor
        ``Tensor([p])``.
    """
    product = 0.0
    if is_sparse(other):
        for index, value in sparse.entries.items():
            if index in other.entries:
                product += value * other.entries[index]
    else:
        other = number_to_tensor(other)
        if other.num_dimensions != 1:
            raise ShapeMismatchError("dot", sparse.shape, other.shape)
        for index, value in sparse.entries.items():
            product += value * other.at(index)
    return write_result("dot", np.array([product]), dest)


def mat_mul(sparse: SparseVector, matrix, dest=None) -> Tensor:
    """
    Row-vector times matrix: ``out[j] = sum_i sparse[i] * matrix[i, j]``.

    Raises
    ------
    UnsupportedOperationError
        If `matrix` is not a rank-2 dense tensor.
    """
    if not isinstance(matrix, Tensor) or matrix.num_dimensions != 2:
        raise UnsupportedOperationError(
            "mat_mul", "a sparse vector multiplies only a rank-2 dense matrix"
        )
    rows, cols = matrix.shape
    view = matrix.view()
    values = np.zeros(cols, dtype=np.float64)
    for index, value in sparse.entries.items():
        if index >= rows:
            raise OutOfRangeError(index, rows)
        values += value * view[index]
    return write_result("mat_mul", values, dest)


# ----------------------------------------------------------------------
# Elementwise functions
# ----------------------------------------------------------------------
def _densify(sparse: SparseVector, partner=None) -> Tensor:
    if (
        isinstance(partner, Tensor)
        and partner.num_dimensions == 1
        and partner.total_size() != 1
    ):
        return sparse.to_dense(partner.shape[0])
    return sparse.to_dense()


def apply_fn(fn: MathFn, sparse: SparseVector, dest=None):
    """
    Apply a unary registry function.

    Zero-preserving functions visit only stored entries and keep the result
    sparse; the others are evaluated on the densified vector.
    """
    if not fn.preserves_zero:
        return _dense_apply(fn, sparse.to_dense(), dest)
    with np.errstate(all="ignore"):
        entries = {
            index: float(fn.forward(np.float64(value)))
            for index, value in sparse.entries.items()
        }
    return _store_sparse(entries, sparse.length, dest)


def apply_binary_fn(fn: MathFn, a, b, dest=None):
    """
    Apply a binary registry function where at least one operand is sparse.

    Two sparse operands under a function with ``f(0, 0) == 0`` stay sparse
    over the union of stored indices. Everything else is densified.
    """
    if is_sparse(a) and is_sparse(b) and fn.preserves_zero:
        with np.errstate(all="ignore"):
            entries = {
                index: float(
                    fn.forward(
                        np.float64(a.entries.get(index, 0.0)),
                        np.float64(b.entries.get(index, 0.0)),
                    )
                )
                for index in set(a.entries) | set(b.entries)
            }
        return _store_sparse(entries, _merged_length(a, b), dest)

    if is_sparse(a) and is_sparse(b):
        length = _merged_length(a, b)
        if length is None:
            length = max(a.resolved_length(), b.resolved_length())
        return _dense_binary(fn, a.to_dense(length), b.to_dense(length), dest)
    if is_sparse(a):
        return _dense_binary(fn, _densify(a, b), b, dest)
    return _dense_binary(fn, a, _densify(b, a), dest)


def sqrt_backward(root: SparseVector, grad) -> SparseVector:
    """
    Derivative of ``sqrt`` over the stored entries of a sparse root.

    Computes ``0.5 * grad / root`` at each stored index of `root`; unstored
    entries, where the derivative is undefined, are left out.
    """
    return root.apply_binary(lambda value, g: 0.5 * g / value, grad)
