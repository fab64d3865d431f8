"""
Astute: reverse-mode automatic differentiation over dense and sparse tensors.

Public API
----------
- Tensors: ``Tensor``, ``SparseVector`` and the ``*_like`` factories.
- Numeric dispatch: ``mathops`` and the ``MathFn`` registry.
- Autograd: ``Variable``, ``Operation``, ``Function`` and the differentiable
  free functions (``add``, ``mul``, ``dot``, ``exp`` ...).
- Training: ``SGD``, ``AdaGrad``, ``FreeRex`` and the ``linear`` helpers.
- Errors: ``ShapeMismatchError``, ``OutOfRangeError``,
  ``UnsupportedOperationError``.
"""

from .domain import (
    Function,
    ITensor,
    IOptimizer,
    OutOfRangeError,
    ShapeMismatchError,
    TensorKind,
    UnsupportedOperationError,
    is_sparse,
)
from .infrastructure._config import AstuteConfig, get_config, set_config
from .infrastructure.tensor import (
    SparseVector,
    Tensor,
    fill_like,
    normal_like,
    number_to_tensor,
    ones_like,
    uniform_like,
    zeros_like,
)
from .infrastructure.ops import MathFn, broadcast_shape, mathops
from .infrastructure.autograd import (
    Operation,
    Variable,
    make_variable,
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
from .infrastructure.optimizers import AdaGrad, FreeRex, Optimizer, SGD
from .infrastructure import linear

__version__ = "0.1.0"
