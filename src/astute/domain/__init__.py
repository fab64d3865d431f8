from ._errors import ShapeMismatchError, OutOfRangeError, UnsupportedOperationError
from ._tensor import ITensor, TensorKind, is_sparse
from ._function import Function
from ._optimizers import IOptimizer

__all__ = [
    ShapeMismatchError.__name__,
    OutOfRangeError.__name__,
    UnsupportedOperationError.__name__,
    ITensor.__name__,
    TensorKind.__name__,
    is_sparse.__name__,
    Function.__name__,
    IOptimizer.__name__,
]
