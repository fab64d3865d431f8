"""
Elementwise-function mixin shared by dense and sparse tensors.

Each method applies one entry of the :class:`~astute.infrastructure.ops.MathFn`
registry. Functions that map zero to zero keep a sparse operand sparse and
only visit its stored entries; the others densify it first.
"""

from __future__ import annotations

from abc import ABC

from ..._math_fn import MathFn


def _unary_method(fn: MathFn):
    def method(self, dest=None):
        from ...ops import _mathops as mathops

        return mathops.apply_fn(fn, self, dest)

    method.__name__ = fn.label
    method.__doc__ = f"Elementwise ``{fn.label}`` (see ``MathFn.{fn.name}``)."
    return method


def _binary_method(fn: MathFn):
    def method(self, other, dest=None):
        from ...ops import _mathops as mathops

        return mathops.apply_binary_fn(fn, self, other, dest)

    method.__name__ = fn.label
    method.__doc__ = f"Elementwise ``{fn.label}(self, other)`` with broadcasting."
    return method


class TensorMixinElementwise(ABC):
    """
    Elementwise math surface of a tensor.

    Notes
    -----
    - All methods accept an optional `dest` and return it when given.
    - `max` and `min` are commutative, so a sparse right-hand side is treated
      exactly as a sparse left-hand side.
    """

    exp = _unary_method(MathFn.EXP)
    log = _unary_method(MathFn.LOG)
    sqrt = _unary_method(MathFn.SQRT)
    abs = _unary_method(MathFn.ABS)
    sign = _unary_method(MathFn.SIGN)
    sin = _unary_method(MathFn.SIN)
    cos = _unary_method(MathFn.COS)
    tan = _unary_method(MathFn.TAN)
    asin = _unary_method(MathFn.ASIN)
    acos = _unary_method(MathFn.ACOS)
    atan = _unary_method(MathFn.ATAN)
    sinh = _unary_method(MathFn.SINH)
    cosh = _unary_method(MathFn.COSH)
    tanh = _unary_method(MathFn.TANH)
    asinh = _unary_method(MathFn.ASINH)
    acosh = _unary_method(MathFn.ACOSH)
    atanh = _unary_method(MathFn.ATANH)
    erf = _unary_method(MathFn.ERF)
    floor = _unary_method(MathFn.FLOOR)
    ceil = _unary_method(MathFn.CEIL)
    round = _unary_method(MathFn.ROUND)

    max = _binary_method(MathFn.MAX)
    min = _binary_method(MathFn.MIN)
    pow = _binary_method(MathFn.POW)
    fmod = _binary_method(MathFn.FMOD)
