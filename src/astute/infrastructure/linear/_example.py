"""
Labelled training example.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..autograd import Variable, make_variable

Number = Union[int, float]


@dataclass
class Example:
    """
    One training example for a linear model.

    Parameters
    ----------
    feature : Tensor, SparseVector or Variable
        Input features. Stored as a constant Variable (``stop_grad=True``,
        ``requires_grad=False``) so no gradient is ever formed for it.
    label : float
        Target value (``+1``/``-1`` for logistic loss).
    weight : float, optional
        Importance weight of the example. Defaults to 1.0.
    """

    feature: Variable
    label: float
    weight: float = 1.0

    def __init__(self, feature, label: Number, weight: Number = 1.0) -> None:
        self.feature = make_variable(feature, stop_grad=True, requires_grad=False)
        self.label = float(label)
        self.weight = float(weight)
