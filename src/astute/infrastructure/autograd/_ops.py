"""
Differentiable operations.

Each operation is a stateless `Function` subclass whose static `forward`
computes the value through the numeric dispatch layer and whose static
`backward` returns the vector-Jacobian product for one input. The free
function of the same name (lower-case) creates a fresh `Operation` node and
runs it.

Binary elementwise operations require both inputs to have exactly the same
shape (an unknown sparse length matches anything) and raise
`ShapeMismatchError` otherwise. No gradient is ever broadcast.
"""

from __future__ import annotations

from typing import Union

from ...domain._errors import ShapeMismatchError
from ...domain._function import Function
from ...domain._tensor import is_sparse
from .._math_fn import MathFn
from ..ops import _dense, _sparse, mathops
from ..tensor import ones_like
from ._operation import Operation
from ._variable import Variable

Number = Union[int, float]


def _run(function, *args, **meta) -> Variable:
    return Operation(function, saved_meta=dict(meta)).forward_wrapper(*args)


def _require_same_shape(op: str, x, y) -> None:
    if not mathops.same_shape(x, y):
        raise ShapeMismatchError(op, x.shape, y.shape)


# ----------------------------------------------------------------------
# Binary arithmetic
# ----------------------------------------------------------------------
class Add(Function):
    """
    ``x + y``; the derivative passes through unchanged to both inputs.
    """

    @staticmethod
    def forward(ctx, x, y):
        _require_same_shape("add", x, y)
        return mathops.add(x, y)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        return grad_out


class Sub(Function):
    @staticmethod
    def forward(ctx, x, y):
        _require_same_shape("sub", x, y)
        return mathops.sub(x, y)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        if arg_index == 0:
            return grad_out
        return mathops.scale(grad_out, -1.0)


class Mul(Function):
    """
    Elementwise ``x * y``.
    """

    @staticmethod
    def forward(ctx, x, y):
        _require_same_shape("mul", x, y)
        ctx.save_for_backward(x, y)
        return mathops.mul(x, y)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        x, y = ctx.get_saved_data()
        return mathops.mul(grad_out, y if arg_index == 0 else x)


class Div(Function):
    """
    Elementwise ``x / y``.

    Backward: ``d / y`` for `x` and ``-d * x / y**2`` for `y`.
    """

    @staticmethod
    def forward(ctx, x, y):
        _require_same_shape("div", x, y)
        ctx.save_for_backward(x, y)
        return mathops.div(x, y)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        x, y = ctx.get_saved_data()
        if arg_index == 0:
            return mathops.div(grad_out, y)
        quotient = mathops.divide_scale(grad_out, mathops.square(y), -1.0)
        return mathops.mul(quotient, x)


class Scale(Function):
    """
    ``factor * x`` for a constant `factor` fixed at construction.
    """

    @staticmethod
    def forward(ctx, x):
        return mathops.scale(x, ctx.saved_meta["factor"])

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        return mathops.scale(grad_out, ctx.saved_meta["factor"])


class AddScalar(Function):
    @staticmethod
    def forward(ctx, x):
        return mathops.add_scale(x, ctx.saved_meta["value"], 1.0, 1.0)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        return grad_out


class Dot(Function):
    """
    Inner product (matrix product for dense rank-2 operands).

    Notes
    -----
    A side whose Variable has ``stop_grad`` set gets no derivative. For two
    rank-1 operands the derivative w.r.t. one side is ``d * other``, which
    keeps a sparse other side sparse.
    """

    @staticmethod
    def forward(ctx, x, y):
        ctx.save_for_backward(x, y)
        return mathops.dot(x, y)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        if ctx.parents[arg_index].stop_grad:
            return None
        x, y = ctx.get_saved_data()
        if x.num_dimensions == 1 and y.num_dimensions == 1:
            return mathops.multiply_scale(y if arg_index == 0 else x, grad_out)
        return _dense.contract_grads(x, y, 1, grad_out)[arg_index]


# ----------------------------------------------------------------------
# Unary
# ----------------------------------------------------------------------
class Square(Function):
    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.square(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        return mathops.multiply_scale(grad_out, x, 2.0)


class Exp(Function):
    """
    ``exp(x)``; the forward result is cached and reused by backward.
    """

    @staticmethod
    def forward(ctx, x):
        result = mathops.exp(x)
        ctx.save_for_backward(result)
        return result

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (result,) = ctx.get_saved_data()
        return mathops.mul(grad_out, result)


class Sqrt(Function):
    """
    ``sqrt(x)``; backward is ``d / (2 * sqrt(x))``.

    For sparse input the derivative is only formed at the stored entries.
    """

    @staticmethod
    def forward(ctx, x):
        root = mathops.sqrt(x)
        ctx.save_for_backward(root)
        return root

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (root,) = ctx.get_saved_data()
        if is_sparse(root):
            return _sparse.sqrt_backward(root, grad_out)
        return mathops.divide_scale(grad_out, root, 0.5)


class Sin(Function):
    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.sin(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        return mathops.mul(grad_out, mathops.cos(x))


class Cos(Function):
    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.cos(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        return mathops.multiply_scale(grad_out, mathops.sin(x), -1.0)


class Tan(Function):
    """
    ``tan(x)``; backward is ``d * (1 + tan(x)**2)`` from the cached result.
    """

    @staticmethod
    def forward(ctx, x):
        result = mathops.tan(x)
        ctx.save_for_backward(result)
        return result

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (result,) = ctx.get_saved_data()
        secant_sq = mathops.add_scale(mathops.square(result), 1.0)
        return mathops.mul(grad_out, secant_sq)


class Sum(Function):
    """
    Sum of all elements; backward broadcasts `d` back to the input shape.
    """

    @staticmethod
    def forward(ctx, x):
        ctx.saved_meta["shape"] = (
            (x.resolved_length(),) if is_sparse(x) else x.shape
        )
        return mathops.sum(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        return mathops.mul(grad_out, ones_like(ctx.saved_meta["shape"]))


class Log(Function):
    """
    Natural logarithm.

    Sparse input is densified by the forward rule (``log(0)`` is not 0); its
    backward divides by the input and therefore rejects a sparse input with
    `UnsupportedOperationError`.
    """

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.log(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        return mathops.div(grad_out, x)


class Abs(Function):
    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.abs(x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        return mathops.mul(mathops.sign(x), grad_out)


class ElementwiseFn(Function):
    """
    Any unary `MathFn`, differentiated through its registered derivative.
    """

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return mathops.apply_fn(ctx.saved_meta["math_fn"], x)

    @staticmethod
    def backward(ctx, grad_out, arg_index):
        (x,) = ctx.get_saved_data()
        derivative = mathops.apply_derivative(ctx.saved_meta["math_fn"], x)
        return mathops.mul(grad_out, derivative)


# ----------------------------------------------------------------------
# Free functions
# ----------------------------------------------------------------------
def add(x, y) -> Variable:
    return _run(Add, x, y)


def sub(x, y) -> Variable:
    return _run(Sub, x, y)


def mul(x, y) -> Variable:
    return _run(Mul, x, y)


def div(x, y) -> Variable:
    return _run(Div, x, y)


def scale(x, factor: Number) -> Variable:
    return _run(Scale, x, factor=float(factor))


def add_scalar(x, value: Number) -> Variable:
    return _run(AddScalar, x, value=float(value))


def dot(x, y) -> Variable:
    return _run(Dot, x, y)


def square(x) -> Variable:
    return _run(Square, x)


def exp(x) -> Variable:
    return _run(Exp, x)


def sqrt(x) -> Variable:
    return _run(Sqrt, x)


def sin(x) -> Variable:
    return _run(Sin, x)


def cos(x) -> Variable:
    return _run(Cos, x)


def tan(x) -> Variable:
    return _run(Tan, x)


def sum(x) -> Variable:
    return _run(Sum, x)


def log(x) -> Variable:
    return _run(Log, x)


def abs(x) -> Variable:
    return _run(Abs, x)


def apply_fn(x, fn: Union[MathFn, str]) -> Variable:
    """
    Apply any unary registry function, e.g. ``apply_fn(v, "tanh")``.
    """
    if isinstance(fn, str):
        fn = MathFn[fn.upper()]
    if fn.is_binary:
        raise ValueError(f"{fn.label} takes two operands")
    return _run(ElementwiseFn, x, math_fn=fn)


def tanh(x) -> Variable:
    return apply_fn(x, MathFn.TANH)
