"""
AdaGrad optimizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from ..autograd import Variable
from ..ops import mathops
from ..tensor import fill_like
from ._optimizer import Optimizer, _check_lr

EPSILON = 1e-6


@dataclass
class AdaGrad(Optimizer):
    """
    AdaGrad optimizer.

    Keeps a per-coordinate running sum of squared gradients and divides each
    step by its square root.

    Update rule
    -----------
        sum_grad_sq <- sum_grad_sq + grad ** 2
        data        <- data - lr * grad / sqrt(sum_grad_sq)

    `sum_grad_sq` starts at ``1e-6`` so the first step is finite.

    Parameters
    ----------
    variables : Iterable[Variable]
        Variables to optimize.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1.0.
    """

    lr: float = 1.0

    def __init__(self, variables: Iterable[Variable], lr: float = 1.0) -> None:
        self.lr = _check_lr(lr)
        super().__init__(variables)

    def make_slots(self, variables: List[Variable]) -> None:
        for variable in variables:
            self.set_slot(variable, "sum_grad_sq", fill_like(EPSILON, variable.data))

    def apply_grads(self, variables: List[Variable]) -> None:
        self.t += 1
        for variable in variables:
            grad = variable.grad
            if grad is None:
                continue
            sum_grad_sq = self.get_slot(variable, "sum_grad_sq")
            mathops.add(sum_grad_sq, mathops.square(grad), sum_grad_sq)

            update = mathops.divide_scale(grad, mathops.sqrt(sum_grad_sq), -self.lr)
            variable.data = mathops.add(variable.data, update)
