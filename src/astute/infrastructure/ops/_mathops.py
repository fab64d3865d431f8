"""
Numeric dispatch layer.

Routes every arithmetic call to the dense or the sparse kernel based on the
operands' `kind` tag:

- Plain numbers are promoted to shape ``(1,)`` tensors.
- If either operand of `add_scale`, `multiply_scale`, `dot` or `mat_mul` is
  sparse, the sparse kernel is used. For the commutative operations the
  operands (and their scales) are swapped so the sparse vector comes first.
- Dividing by a sparse vector raises `UnsupportedOperationError`.
- `mat_mul(dense, sparse)` is evaluated as ``sparse.mat_mul(dense.T)``.

`add`, `sub`, `mul` and `div` are the unit-scale forms of the scaled
operations. Every function takes an optional `dest` output tensor.
"""

from __future__ import annotations

from typing import Optional, Union

from ...domain._errors import UnsupportedOperationError
from ...domain._tensor import ITensor, is_sparse
from .._math_fn import MathFn
from ..tensor import number_to_tensor
from . import _dense, _sparse
from ._dense import broadcast_shape

Number = Union[int, float]


# ----------------------------------------------------------------------
# Scaled arithmetic
# ----------------------------------------------------------------------
def add_scale(a, b, scale1: Number = 1.0, scale2: Number = 1.0, dest=None):
    """
    Compute ``scale1 * a + scale2 * b``.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a):
        return _sparse.add_scale(a, b, scale1, scale2, dest)
    if is_sparse(b):
        return _sparse.add_scale(b, a, scale2, scale1, dest)
    return _dense.add_scale(a, b, scale1, scale2, dest)


def multiply_scale(a, b, scale: Number = 1.0, dest=None):
    """
    Compute ``scale * a * b``.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a):
        return _sparse.multiply_scale(a, b, scale, dest)
    if is_sparse(b):
        return _sparse.multiply_scale(b, a, scale, dest)
    return _dense.multiply_scale(a, b, scale, dest)


def divide_scale(a, b, scale: Number = 1.0, dest=None):
    """
    Compute ``scale * a / b``.

    Raises
    ------
    UnsupportedOperationError
        If `b` is sparse.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a):
        return _sparse.divide_scale(a, b, scale, dest)
    if is_sparse(b):
        raise UnsupportedOperationError(
            "divide_scale", "cannot divide by a sparse vector"
        )
    return _dense.divide_scale(a, b, scale, dest)


def scale(a, factor: Number, dest=None):
    a = number_to_tensor(a)
    if is_sparse(a):
        return _sparse.scale(a, factor, dest)
    return _dense.scale(a, factor, dest)


def add(a, b, dest=None):
    return add_scale(a, b, 1.0, 1.0, dest)


def sub(a, b, dest=None):
    return add_scale(a, b, 1.0, -1.0, dest)


def mul(a, b, dest=None):
    return multiply_scale(a, b, 1.0, dest)


def div(a, b, dest=None):
    return divide_scale(a, b, 1.0, dest)


def square(a, dest=None):
    return multiply_scale(a, a, 1.0, dest)


def sum(a):
    """
    Sum every element into a dense shape ``(1,)`` tensor.
    """
    a = number_to_tensor(a)
    if is_sparse(a):
        return _sparse.sum(a)
    return _dense.sum(a)


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------
def dot(a, b, dest=None):
    """
    Inner product.

    If either side is sparse the result is the scalar product as
    ``Tensor([p])``. Two dense operands are matrix-multiplied.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a):
        return _sparse.dot(a, b, dest)
    if is_sparse(b):
        return _sparse.dot(b, a, dest)
    return _dense.contract(a, b, 1, dest)


def mat_mul(a, b, dest=None):
    """
    Matrix product (contraction over one dimension).
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a):
        return _sparse.mat_mul(a, b, dest)
    if is_sparse(b):
        return _sparse.mat_mul(b, a.transpose(), dest)
    return _dense.contract(a, b, 1, dest)


def contract(a, b, dims_to_contract: int, dest=None):
    """
    Generalized contraction of two dense tensors.

    Raises
    ------
    UnsupportedOperationError
        If either operand is sparse.
    """
    if is_sparse(a) or is_sparse(b):
        raise UnsupportedOperationError("contract", "operands must be dense")
    return _dense.contract(a, b, dims_to_contract, dest)


def same_shape(a: Optional[ITensor], b: Optional[ITensor]) -> bool:
    """
    Return True if `a` and `b` have the same rank and dimensions.

    An unknown sparse length (None) matches any dimension.
    """
    if a is None or b is None:
        return False
    shape_a, shape_b = number_to_tensor(a).shape, number_to_tensor(b).shape
    if len(shape_a) != len(shape_b):
        return False
    return all(
        x is None or y is None or x == y for x, y in zip(shape_a, shape_b)
    )


# ----------------------------------------------------------------------
# Elementwise functions
# ----------------------------------------------------------------------
def apply_fn(fn: MathFn, a, dest=None):
    """
    Apply a unary registry function elementwise.
    """
    if fn.is_binary:
        raise ValueError(f"{fn.label} takes two operands")
    a = number_to_tensor(a)
    if is_sparse(a):
        return _sparse.apply_fn(fn, a, dest)
    return _dense.apply_fn(fn, a, dest)


def apply_derivative(fn: MathFn, a):
    """
    Evaluate the derivative of a unary registry function at `a`.

    The result is always dense.
    """
    a = number_to_tensor(a)
    return _dense.apply_derivative(fn, a.to_dense())


def apply_binary_fn(fn: MathFn, a, b, dest=None):
    """
    Apply a binary registry function elementwise with broadcasting.
    """
    if not fn.is_binary:
        raise ValueError(f"{fn.label} takes one operand")
    a, b = number_to_tensor(a), number_to_tensor(b)
    if is_sparse(a) or is_sparse(b):
        return _sparse.apply_binary_fn(fn, a, b, dest)
    return _dense.apply_binary_fn(fn, a, b, dest)


def _unary(fn: MathFn):
    def op(a, dest=None):
        return apply_fn(fn, a, dest)

    op.__name__ = fn.label
    op.__doc__ = f"Elementwise ``{fn.label}``."
    return op


def _binary(fn: MathFn):
    def op(a, b, dest=None):
        return apply_binary_fn(fn, a, b, dest)

    op.__name__ = fn.label
    op.__doc__ = f"Elementwise ``{fn.label}(a, b)``."
    return op


exp = _unary(MathFn.EXP)
log = _unary(MathFn.LOG)
sqrt = _unary(MathFn.SQRT)
abs = _unary(MathFn.ABS)
sign = _unary(MathFn.SIGN)
sin = _unary(MathFn.SIN)
cos = _unary(MathFn.COS)
tan = _unary(MathFn.TAN)
asin = _unary(MathFn.ASIN)
acos = _unary(MathFn.ACOS)
atan = _unary(MathFn.ATAN)
sinh = _unary(MathFn.SINH)
cosh = _unary(MathFn.COSH)
tanh = _unary(MathFn.TANH)
asinh = _unary(MathFn.ASINH)
acosh = _unary(MathFn.ACOSH)
atanh = _unary(MathFn.ATANH)
erf = _unary(MathFn.ERF)
floor = _unary(MathFn.FLOOR)
ceil = _unary(MathFn.CEIL)
round = _unary(MathFn.ROUND)

maximum = _binary(MathFn.MAX)
minimum = _binary(MathFn.MIN)
power = _binary(MathFn.POW)
fmod = _binary(MathFn.FMOD)

__all__ = [
    "broadcast_shape",
    "add_scale",
    "multiply_scale",
    "divide_scale",
    "scale",
    "add",
    "sub",
    "mul",
    "div",
    "square",
    "sum",
    "dot",
    "mat_mul",
    "contract",
    "same_shape",
    "apply_fn",
    "apply_derivative",
    "apply_binary_fn",
    "exp",
    "log",
    "sqrt",
    "abs",
    "sign",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "asinh",
    "acosh",
    "atanh",
    "erf",
    "floor",
    "ceil",
    "round",
    "maximum",
    "minimum",
    "power",
    "fmod",
]
