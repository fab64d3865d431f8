"""
Domain-level optimizer contracts for Astute.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations (e.g., SGD, AdaGrad).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers read `grad` off leaf Variables and write their `data` directly.
  The details of gradient computation (autograd engine) are outside the scope
  of this protocol.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `step(loss)` resets gradients reachable from `loss`, runs the backward
      pass and applies one update to the managed variables.
    - `apply_grads(variables)` applies one update from already computed
      gradients.
    """

    def step(self, loss: Any, variables: Optional[Iterable[Any]] = None) -> None:
        """
        Run backward from `loss` and apply one optimization update.
        """
        ...

    def apply_grads(self, variables: Iterable[Any]) -> None:
        """
        Apply one update to `variables` from their stored gradients.

        Implementations should skip variables whose `grad` is None.
        """
        ...

    @property
    def variables(self) -> Iterable[Any]:
        """
        Return the variables managed by this optimizer.
        """
        ...
