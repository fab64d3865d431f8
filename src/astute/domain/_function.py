"""
Autograd function interface definitions.

This module defines the base class for differentiable operations used by the
reverse-mode engine. A `Function` subclass carries no state of its own: it
supplies a forward numeric rule and an analytic backward rule (a
vector-Jacobian product), both as static methods. All per-invocation state
(the input Variables, values saved for backward, scalar parameters) lives on
the graph node passed in as `ctx`.

This mirrors function-level autograd systems (e.g., PyTorch's
`autograd.Function`): the behaviour is keyed on the Function class, and the
data lives on a fresh node created for every call.
"""

from typing import Any, Optional


class Function:
    """
    Base class for differentiable operations.

    Subclasses must override both `forward` and `backward`. The base
    implementations raise `NotImplementedError`, which signals a malformed
    custom operation at the first call that reaches it.

    Notes
    -----
    - Methods are declared as `@staticmethod` to avoid implicit state on the
      function object itself.
    - The `ctx` argument is the graph node for one invocation. Use
      `ctx.save_for_backward(...)` during `forward` and
      `ctx.get_saved_data()` during `backward`; scalar parameters given at
      construction are available from `ctx.saved_meta`.
    """

    @staticmethod
    def forward(ctx, *inputs: Any) -> Any:
        """
        Perform the forward computation.

        Parameters
        ----------
        ctx : Operation
            The graph node for this invocation.
        *inputs : Tensor or SparseVector
            The unwrapped data of each input Variable, in call order.

        Returns
        -------
        Tensor or SparseVector
            The numeric result of the operation.
        """
        raise NotImplementedError("Forward Not Implemented!")

    @staticmethod
    def backward(ctx, grad_out: Any, arg_index: int) -> Optional[Any]:
        """
        Compute the derivative with respect to one input.

        Parameters
        ----------
        ctx : Operation
            The graph node populated during the forward pass.
        grad_out : Tensor or SparseVector
            Derivative of the final output with respect to this operation's
            output.
        arg_index : int
            Index (in call order) of the input to differentiate against.

        Returns
        -------
        Optional[Tensor or SparseVector]
            The derivative with respect to input `arg_index`, or None when no
            derivative should be propagated to it.
        """
        raise NotImplementedError("Backward Not Implemented!")
