"""
Loss functions for linear prediction.

Both losses are compositions of graph operations, so they differentiate
through the autograd engine when `pred` is a Variable. They also evaluate
directly on a plain `Tensor` prediction through the tensor methods.
"""

from __future__ import annotations


def logistic_loss(pred, label: float):
    """
    ``log(1 + exp(-label * pred))`` for labels in ``{-1, +1}``.
    """
    return pred.scale(-label).exp().add(1.0).log()


def squared_loss(pred, label: float):
    """
    ``0.5 * (pred - label) ** 2``.
    """
    return pred.sub(label).square().scale(0.5)
