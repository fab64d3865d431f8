"""
Method mixins shared by the dense and sparse tensor classes.

Both mixins only forward to the numeric dispatch layer; they hold no state
and perform no computation themselves.
"""

from ._arithmetic import TensorMixinArithmetic
from ._elementwise import TensorMixinElementwise

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinElementwise.__name__,
]
