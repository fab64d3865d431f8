"""
Registry of elementwise math functions.

Each `MathFn` member bundles a forward kernel, the kernel of its first
derivative and a flag telling whether ``f(0) == 0``. That flag decides whether
a sparse operand can stay sparse: zero-preserving functions only need to be
evaluated at the stored entries of a sparse vector.

Kernels take and return NumPy arrays.
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

_erf = np.vectorize(math.erf, otypes=[np.float64])


def _round_half_up(x):
    return np.floor(x + 0.5)


def _zero_derivative(x):
    return np.zeros_like(x)


class MathFn(Enum):
    """
    Elementwise function registry.

    Attributes
    ----------
    label : str
        Public function name.
    forward : Callable[[np.ndarray], np.ndarray]
        Value kernel.
    derivative : Callable[[np.ndarray], np.ndarray]
        First-derivative kernel, evaluated at the forward input.
    preserves_zero : bool
        True if ``f(0) == 0`` (``f(0, 0) == 0`` for binary functions), so
        sparse operands stay sparse.
    """

    EXP = ("exp", np.exp, np.exp, False)
    LOG = ("log", np.log, lambda x: 1.0 / x, False)
    SQRT = ("sqrt", np.sqrt, lambda x: 0.5 / np.sqrt(x), True)
    ABS = ("abs", np.abs, np.sign, True)
    SIGN = ("sign", np.sign, _zero_derivative, True)
    SIN = ("sin", np.sin, np.cos, True)
    COS = ("cos", np.cos, lambda x: -np.sin(x), False)
    TAN = ("tan", np.tan, lambda x: 1.0 + np.tan(x) ** 2, True)
    ASIN = ("asin", np.arcsin, lambda x: 1.0 / np.sqrt(1.0 - x * x), True)
    ACOS = ("acos", np.arccos, lambda x: -1.0 / np.sqrt(1.0 - x * x), False)
    ATAN = ("atan", np.arctan, lambda x: 1.0 / (1.0 + x * x), True)
    SINH = ("sinh", np.sinh, np.cosh, False)
    COSH = ("cosh", np.cosh, np.sinh, False)
    TANH = ("tanh", np.tanh, lambda x: 1.0 - np.tanh(x) ** 2, False)
    ASINH = ("asinh", np.arcsinh, lambda x: 1.0 / np.sqrt(x * x + 1.0), False)
    ACOSH = ("acosh", np.arccosh, lambda x: 1.0 / np.sqrt(x * x - 1.0), False)
    ATANH = ("atanh", np.arctanh, lambda x: 1.0 / (1.0 - x * x), False)
    ERF = (
        "erf",
        _erf,
        lambda x: 2.0 / math.sqrt(math.pi) * np.exp(-x * x),
        True,
    )
    FLOOR = ("floor", np.floor, _zero_derivative, True)
    CEIL = ("ceil", np.ceil, _zero_derivative, True)
    ROUND = ("round", _round_half_up, _zero_derivative, True)

    # binary
    MAX = ("max", np.maximum, None, True)
    MIN = ("min", np.minimum, None, True)
    POW = ("pow", np.power, None, False)
    FMOD = ("fmod", np.fmod, None, False)

    def __init__(self, label, forward, derivative, preserves_zero) -> None:
        self.label = label
        self.forward = forward
        self.derivative = derivative
        self.preserves_zero = preserves_zero

    @property
    def is_binary(self) -> bool:
        return self in _BINARY


_BINARY = frozenset({MathFn.MAX, MathFn.MIN, MathFn.POW, MathFn.FMOD})
