"""
FreeRex: a scale-free, parameter-free online learner.

The iterate is a closed-form function of the running gradient sum, so the
optimizer needs no tuned step size; `lr` only rescales the exponent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from ..autograd import Variable
from ..ops import mathops
from ..tensor import fill_like, zeros_like
from ._optimizer import Optimizer, _check_lr

EPSILON = 1e-6


@dataclass
class FreeRex(Optimizer):
    """
    FreeRex optimizer.

    Update rule
    -----------
    With ``g`` the current gradient, per coordinate:

        abs_sum          = |sum_grad|                  (before the update)
        sum_grad        <- sum_grad + g
        l_max           <- max(l_max, |g|)
        one_over_eta_sq <- max(one_over_eta_sq + 2 g**2, l_max * abs_sum)
        data            <- -sign(sum_grad)
                           * (exp(lr * abs_sum / sqrt(one_over_eta_sq)) - 1)

    Parameters
    ----------
    variables : Iterable[Variable]
        Variables to optimize.
    lr : float, optional
        Exponent scale. Must be positive. Defaults to 0.45.
    """

    lr: float = 0.45

    def __init__(self, variables: Iterable[Variable], lr: float = 0.45) -> None:
        self.lr = _check_lr(lr)
        super().__init__(variables)

    def make_slots(self, variables: List[Variable]) -> None:
        for variable in variables:
            self.set_slot(variable, "sum_grad", zeros_like(variable.data))
            self.set_slot(
                variable, "one_over_eta_sq", fill_like(EPSILON, variable.data)
            )
            self.set_slot(variable, "l_max", zeros_like(variable.data))

    def apply_grads(self, variables: List[Variable]) -> None:
        self.t += 1
        for variable in variables:
            grad = variable.grad
            if grad is None:
                continue

            sum_grad = self.get_slot(variable, "sum_grad")
            one_over_eta_sq = self.get_slot(variable, "one_over_eta_sq")
            l_max = self.get_slot(variable, "l_max")

            abs_grad = mathops.abs(grad)
            abs_sum = mathops.abs(sum_grad)

            mathops.add(sum_grad, grad, sum_grad)
            mathops.maximum(l_max, abs_grad, l_max)
            mathops.maximum(
                mathops.add_scale(one_over_eta_sq, mathops.square(abs_grad), 1.0, 2.0),
                mathops.mul(l_max, abs_sum),
                one_over_eta_sq,
            )

            exponent = mathops.divide_scale(
                abs_sum, mathops.sqrt(one_over_eta_sq), self.lr
            )
            magnitude = mathops.add_scale(mathops.exp(exponent), 1.0, 1.0, -1.0)
            direction = mathops.scale(mathops.sign(sum_grad), -1.0)
            variable.data = mathops.mul(direction, magnitude)
