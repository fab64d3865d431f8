"""
Scale-normalized training of a linear model.

`NormalizedOptimizer` keeps, per coordinate, the largest absolute feature
value seen so far and trains the weights on features divided by it. The
wrapped optimizer therefore sees inputs in ``[-1, 1]`` regardless of the raw
feature scales, and `get_weights()` maps the learned weights back to the raw
feature space.
"""

from __future__ import annotations

import logging
from typing import Callable, Type, Union

from ..autograd import Variable, make_variable
from ..ops import mathops
from ..optimizers import Optimizer
from ..tensor import Tensor, fill_like, zeros_like
from ._example import Example

logger = logging.getLogger(__name__)

EPSILON = 1e-4


def _update_scalings(scalings: Variable, feature: Variable) -> None:
    mathops.maximum(scalings.data, mathops.abs(feature.data), scalings.data)


class NormalizedOptimizer:
    """
    Wraps an optimizer so it trains on per-coordinate normalized features.

    Parameters
    ----------
    optimizer_cls : type[Optimizer]
        Optimizer class, constructed as ``optimizer_cls([weights], **kwargs)``.
    weights : Tensor, Variable or int
        Initial weights. An integer creates a zero vector of that length.
    **optimizer_kwargs
        Forwarded to `optimizer_cls`.

    Attributes
    ----------
    weights : Variable
        Weights in normalized feature space.
    scalings : Variable
        Per-coordinate normalizers, starting at ``1e-4``.
    iterations : int
        Number of `update` calls.
    cumulative_loss : float
        Sum of the losses observed by `update`.
    """

    def __init__(
        self,
        optimizer_cls: Type[Optimizer],
        weights: Union[Tensor, Variable, int],
        **optimizer_kwargs,
    ) -> None:
        if isinstance(weights, int) and not isinstance(weights, bool):
            weights = zeros_like((weights,))
        self.weights = make_variable(weights)
        self.optimizer = optimizer_cls([self.weights], **optimizer_kwargs)
        self.scalings = Variable(
            fill_like(EPSILON, self.weights.data),
            requires_grad=False,
            stop_grad=True,
        )
        self.iterations = 0
        self.cumulative_loss = 0.0

    def update(self, loss_fn: Callable, example: Example) -> Variable:
        """
        Take one optimizer step on `example`.

        Parameters
        ----------
        loss_fn : Callable[[Variable, float], Variable]
            Loss of a prediction against a label, e.g. `logistic_loss`.
        example : Example
            Training example.

        Returns
        -------
        Variable
            The loss evaluated before the step.
        """
        _update_scalings(self.scalings, example.feature)

        prediction = self.weights.dot(example.feature.div(self.scalings))
        loss = loss_fn(prediction, example.label)
        self.optimizer.step(loss)

        self.iterations += 1
        self.cumulative_loss += loss.data.at(0)
        logger.debug(
            "normalized update %d: loss=%g", self.iterations, loss.data.at(0)
        )
        return loss

    def average_loss(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.cumulative_loss / self.iterations

    def get_weights(self) -> Tensor:
        """
        Return the weights in raw feature space (``weights / scalings``).
        """
        return mathops.div(self.weights.data, self.scalings.data)


def normalize_optimizer(
    optimizer_cls: Type[Optimizer],
    weights: Union[Tensor, Variable, int],
    **optimizer_kwargs,
) -> NormalizedOptimizer:
    return NormalizedOptimizer(optimizer_cls, weights, **optimizer_kwargs)
