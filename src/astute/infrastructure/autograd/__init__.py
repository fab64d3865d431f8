"""
Reverse-mode automatic differentiation.

- ``Variable``: graph leaf or operation output carrying `data` and `grad`.
- ``Operation``: per-call graph node linking inputs to the output.
- Concrete operations (``Add``, ``Mul``, ``Dot``, ``Exp`` ...) and their
  free-function entry points (``add``, ``mul``, ``dot``, ``exp`` ...).
"""

from ._variable import Variable, make_variable
from ._operation import Operation
from ._ops import (
    Add,
    Sub,
    Mul,
    Div,
    Scale,
    AddScalar,
    Dot,
    Square,
    Exp,
    Sqrt,
    Sin,
    Cos,
    Tan,
    Sum,
    Log,
    Abs,
    ElementwiseFn,
    add,
    sub,
    mul,
    div,
    scale,
    add_scalar,
    dot,
    square,
    exp,
    sqrt,
    sin,
    cos,
    tan,
    sum,
    log,
    abs,
    apply_fn,
    tanh,
)

__all__ = [
    Variable.__name__,
    make_variable.__name__,
    Operation.__name__,
    Add.__name__,
    Sub.__name__,
    Mul.__name__,
    Div.__name__,
    Scale.__name__,
    AddScalar.__name__,
    Dot.__name__,
    Square.__name__,
    Exp.__name__,
    Sqrt.__name__,
    Sin.__name__,
    Cos.__name__,
    Tan.__name__,
    Sum.__name__,
    Log.__name__,
    Abs.__name__,
    ElementwiseFn.__name__,
    "add",
    "sub",
    "mul",
    "div",
    "scale",
    "add_scalar",
    "dot",
    "square",
    "exp",
    "sqrt",
    "sin",
    "cos",
    "tan",
    "sum",
    "log",
    "abs",
    "apply_fn",
    "tanh",
]
