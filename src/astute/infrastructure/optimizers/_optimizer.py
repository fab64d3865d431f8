"""
Optimizer base class.

Optimizers consume only the public `Variable` interface: they read `grad`
after a backward pass and replace `data` with the updated value. Per-variable
state is kept in named slots keyed by the variable's identity.

Design notes
------------
- Variables with ``grad is None`` are skipped, so partially connected graphs
  and frozen variables are supported.
- `step(loss)` runs the whole cycle: reset every gradient upstream of `loss`,
  backpropagate from it, then apply one update.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..autograd import Variable

logger = logging.getLogger(__name__)


class Optimizer:
    """
    Base class for first-order optimizers.

    Parameters
    ----------
    variables : Iterable[Variable]
        Variables to optimize. The iterable is consumed and stored.

    Attributes
    ----------
    variables : list[Variable]
        Managed variables.
    t : int
        Number of `apply_grads` calls so far.

    Notes
    -----
    Subclasses implement `apply_grads` and may override `make_slots`, which
    runs once at construction to create per-variable state.
    """

    def __init__(self, variables: Iterable[Variable]) -> None:
        self.variables: List[Variable] = list(variables)
        self.t = 0
        self._slots: Dict[int, Dict[str, Any]] = {}
        self.make_slots(self.variables)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def make_slots(self, variables: List[Variable]) -> None:
        """
        Create per-variable state. The base optimizer keeps none.
        """

    def set_slot(self, variable: Variable, name: str, value: Any) -> None:
        self._slots.setdefault(id(variable), {})[name] = value

    def get_slot(self, variable: Variable, name: str) -> Any:
        """
        Return the named state of `variable`.

        Raises
        ------
        KeyError
            If the slot was never set.
        """
        return self._slots[id(variable)][name]

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    def zero_grad(self) -> None:
        for variable in self.variables:
            variable.zero_grad()

    def step(self, loss: Variable, variables: Optional[Iterable[Variable]] = None) -> None:
        """
        Backpropagate from `loss` and apply one update.

        Parameters
        ----------
        loss : Variable
            Objective to minimize.
        variables : Iterable[Variable], optional
            Subset to update. Defaults to every managed variable.
        """
        loss.zero_grad()
        loss.backward()
        targets = self.variables if variables is None else list(variables)
        self.apply_grads(targets)
        logger.debug(
            "%s: step %d over %d variable(s)",
            type(self).__name__,
            self.t,
            len(targets),
        )

    def apply_grads(self, variables: List[Variable]) -> None:
        """
        Update `variables` in place from their current gradients.
        """
        raise NotImplementedError("apply_grads Not Implemented!")


def _check_lr(lr: float) -> float:
    lr = float(lr)
    if lr <= 0.0:
        raise ValueError(f"lr must be > 0, got {lr}")
    return lr
