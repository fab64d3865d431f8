"""
First-order optimizers operating on `Variable` objects.
"""

from ._optimizer import Optimizer
from ._sgd import SGD
from ._adagrad import AdaGrad
from ._freerex import FreeRex

__all__ = [
    Optimizer.__name__,
    SGD.__name__,
    AdaGrad.__name__,
    FreeRex.__name__,
]
