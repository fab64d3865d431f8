"""
Linear-model helpers: training examples, losses and feature normalization.
"""

from ._example import Example
from ._loss import logistic_loss, squared_loss
from ._normalize import NormalizedOptimizer, normalize_optimizer

__all__ = [
    Example.__name__,
    logistic_loss.__name__,
    squared_loss.__name__,
    NormalizedOptimizer.__name__,
    normalize_optimizer.__name__,
]
