"""
Stochastic gradient descent with a ``1 / sqrt(t)`` step-size decay.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

from ..autograd import Variable
from ..ops import mathops
from ._optimizer import Optimizer, _check_lr


@dataclass
class SGD(Optimizer):
    """
    SGD optimizer.

    Update rule
    -----------
    At step ``t`` (starting at 1):

        data <- data - lr / sqrt(t) * grad

    Parameters
    ----------
    variables : Iterable[Variable]
        Variables to optimize.
    lr : float, optional
        Base learning rate. Must be positive. Defaults to 0.1.
    """

    lr: float = 0.1

    def __init__(self, variables: Iterable[Variable], lr: float = 0.1) -> None:
        self.lr = _check_lr(lr)
        super().__init__(variables)

    def apply_grads(self, variables: List[Variable]) -> None:
        self.t += 1
        step_size = self.lr / math.sqrt(self.t)
        for variable in variables:
            if variable.grad is None:
                continue
            variable.data = mathops.add_scale(
                variable.data, variable.grad, 1.0, -step_size
            )
