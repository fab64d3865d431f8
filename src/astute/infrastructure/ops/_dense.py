"""
Dense NumPy kernels.

Every kernel reads its operands through `Tensor.view()` (a strided NumPy view
over the shared flat buffer), so transposed or offset views are handled
without copying. Results are written into `dest` when one is given,
otherwise into a freshly allocated contiguous tensor.

The full right-hand side is evaluated before anything is written, so `dest`
may alias either operand.

Broadcasting follows NumPy: shapes are aligned on their trailing dimensions
and each aligned pair must be equal or contain a 1. Incompatible shapes raise
`ShapeMismatchError`.

IEEE-754 semantics are kept for division by zero and for functions evaluated
outside their domain (inf and nan propagate silently).
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ...domain._errors import ShapeMismatchError
from .._math_fn import MathFn
from ..tensor import Tensor, number_to_tensor

Number = Union[int, float]


def broadcast_shape(
    shape_a: Sequence[int], shape_b: Sequence[int], op: str = "broadcast"
) -> Tuple[int, ...]:
    """
    Return the broadcast shape of two dense shapes.

    Raises
    ------
    ShapeMismatchError
        If an aligned pair of dimensions is neither equal nor 1.
    """
    try:
        return tuple(np.broadcast_shapes(tuple(shape_a), tuple(shape_b)))
    except ValueError:
        raise ShapeMismatchError(op, shape_a, shape_b) from None


def write_result(op: str, result, dest: Optional[Tensor]) -> Tensor:
    result = np.asarray(result, dtype=np.float64)
    if result.ndim == 0:
        result = result.reshape(1)
    if dest is None:
        return Tensor(result)
    if not isinstance(dest, Tensor):
        raise TypeError(f"{op}: dest must be a dense Tensor, got {type(dest).__name__}")
    try:
        np.broadcast_to(result, dest.shape)
    except ValueError:
        raise ShapeMismatchError(op, result.shape, dest.shape) from None
    dest.view()[...] = result
    return dest


def add_scale(
    a, b, scale1: Number = 1.0, scale2: Number = 1.0, dest: Optional[Tensor] = None
) -> Tensor:
    """
    Compute ``scale1 * a + scale2 * b`` with broadcasting.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    broadcast_shape(a.shape, b.shape, "add_scale")
    result = scale1 * a.view() + scale2 * b.view()
    return write_result("add_scale", result, dest)


def multiply_scale(
    a, b, scale: Number = 1.0, dest: Optional[Tensor] = None
) -> Tensor:
    """
    Compute ``scale * a * b`` with broadcasting.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    broadcast_shape(a.shape, b.shape, "multiply_scale")
    result = scale * (a.view() * b.view())
    return write_result("multiply_scale", result, dest)


def divide_scale(a, b, scale: Number = 1.0, dest: Optional[Tensor] = None) -> Tensor:
    """
    Compute ``scale * a / b`` with broadcasting.
    """
    a, b = number_to_tensor(a), number_to_tensor(b)
    broadcast_shape(a.shape, b.shape, "divide_scale")
    with np.errstate(divide="ignore", invalid="ignore"):
        result = scale * (a.view() / b.view())
    return write_result("divide_scale", result, dest)


def scale(a, factor: Number, dest: Optional[Tensor] = None) -> Tensor:
    a = number_to_tensor(a)
    return write_result("scale", factor * a.view(), dest)


def sum(a) -> Tensor:
    """
    Sum every element into a shape ``(1,)`` tensor.
    """
    a = number_to_tensor(a)
    return Tensor([float(np.sum(a.view()))])


def apply_fn(fn: MathFn, a, dest: Optional[Tensor] = None) -> Tensor:
    a = number_to_tensor(a)
    with np.errstate(all="ignore"):
        result = fn.forward(a.view())
    return write_result(fn.label, result, dest)


def apply_derivative(fn: MathFn, a) -> Tensor:
    """
    Evaluate ``fn``'s first derivative at every element of `a`.
    """
    a = number_to_tensor(a)
    with np.errstate(all="ignore"):
        result = fn.derivative(a.view())
    return write_result(fn.label, result, None)


def apply_binary_fn(fn: MathFn, a, b, dest: Optional[Tensor] = None) -> Tensor:
    a, b = number_to_tensor(a), number_to_tensor(b)
    broadcast_shape(a.shape, b.shape, fn.label)
    with np.errstate(all="ignore"):
        result = fn.forward(a.view(), b.view())
    return write_result(fn.label, result, dest)


# ----------------------------------------------------------------------
# Contraction
# ----------------------------------------------------------------------
def _contracted_shape(a: Tensor, b: Tensor, k: int) -> Tuple[int, ...]:
    if k < 0 or k > a.num_dimensions or k > b.num_dimensions:
        raise ShapeMismatchError("contract", a.shape, b.shape)
    split = a.num_dimensions - k
    if a.shape[split:] != b.shape[:k]:
        raise ShapeMismatchError("contract", a.shape, b.shape)
    return a.shape[:split] + b.shape[k:]


def contract(
    a: Tensor, b: Tensor, dims_to_contract: int, dest: Optional[Tensor] = None
) -> Tensor:
    """
    Contract the last `dims_to_contract` dimensions of `a` with the first
    `dims_to_contract` dimensions of `b`.

    Parameters
    ----------
    a, b : Tensor
        Dense operands (any strides).
    dims_to_contract : int
        Number of dimensions summed over. 0 gives the outer product.
    dest : Tensor, optional
        Output tensor.

    Returns
    -------
    Tensor
        Tensor of shape ``a.shape[:-k] + b.shape[k:]``, or ``(1,)`` if that
        is empty.

    Raises
    ------
    ShapeMismatchError
        If the contracted dimensions differ or `dims_to_contract` exceeds
        either operand's rank.
    """
    k = int(dims_to_contract)
    out_shape = _contracted_shape(a, b, k) or (1,)
    result = np.tensordot(a.view(), b.view(), axes=k).reshape(out_shape)
    return write_result("contract", result, dest)


def _grad_view(grad: Tensor, shape: Tuple[int, ...]) -> np.ndarray:
    view = number_to_tensor(grad).view()
    if view.size == 1:
        return np.broadcast_to(view.reshape(()), shape)
    return view.reshape(shape)


def contract_grads(
    a: Tensor, b: Tensor, dims_to_contract: int, grad: Tensor
) -> Tuple[Tensor, Tensor]:
    """
    Vector-Jacobian products of `contract` with respect to both operands.

    Parameters
    ----------
    a, b : Tensor
        Forward operands.
    dims_to_contract : int
        Number of contracted dimensions used in the forward pass.
    grad : Tensor
        Upstream derivative with the forward output's element count (or a
        single element, which is broadcast).

    Returns
    -------
    tuple[Tensor, Tensor]
        Derivatives shaped like `a` and `b`.
    """
    k = int(dims_to_contract)
    out_shape = _contracted_shape(a, b, k)
    g = _grad_view(grad, out_shape)

    free_a = a.num_dimensions - k
    free_b = b.num_dimensions - k

    grad_a = np.tensordot(
        g,
        b.view(),
        axes=(list(range(free_a, free_a + free_b)), list(range(k, k + free_b))),
    )
    grad_b = np.tensordot(
        a.view(), g, axes=(list(range(free_a)), list(range(free_a)))
    )
    return (
        write_result("contract", np.reshape(grad_a, a.shape), None),
        write_result("contract", np.reshape(grad_b, b.shape), None),
    )
