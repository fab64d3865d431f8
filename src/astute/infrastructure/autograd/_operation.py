"""
Per-invocation graph node.

An `Operation` records one application of a `Function`: the input Variables
(`parents`, in call order), whatever the forward rule saved for the backward
pass, and the single output Variable (`child`). A fresh node is created for
every call and is never reused.

`forward_wrapper` is the only place graph edges are created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from ...domain._function import Function
from ._variable import Variable

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Operation:
    """
    Backward context of one operation call.

    Attributes
    ----------
    fn : type[Function]
        The operation's forward/backward rules.
    parents : list[Variable]
        Input Variables in call order.
    saved_data : list
        Values cached by the forward rule for use in backward (e.g. the
        output of ``exp``).
    saved_meta : dict[str, Any]
        Non-tensor parameters of the call (e.g. a scale factor).
    child : Variable or None
        The output Variable, set once forward has run.
    """

    fn: Type[Function]
    parents: List[Variable] = field(default_factory=list)
    saved_data: List[Any] = field(default_factory=list)
    saved_meta: Dict[str, Any] = field(default_factory=dict)
    child: Optional[Variable] = None

    def save_for_backward(self, *values: Any) -> None:
        """
        Cache values needed by the backward rule.
        """
        self.saved_data.extend(values)

    def get_saved_data(self) -> tuple:
        return tuple(self.saved_data)

    def forward_wrapper(self, *args) -> Variable:
        """
        Run the forward rule and link the result into the graph.

        Parameters
        ----------
        *args : Variable, Tensor, SparseVector or number
            Inputs in call order. Anything that is not a Variable is wrapped
            as a fresh leaf.

        Returns
        -------
        Variable
            The output Variable, whose `parent` is this node.

        Notes
        -----
        Edges into the inputs' `children` lists are only registered once the
        forward rule has succeeded, so a failing call leaves its inputs
        untouched.

        Edges are never removed. A long-lived Variable (e.g. model weights
        reused across training steps) keeps every node that ever consumed it,
        together with that node's saved tensors, reachable through
        `children`. Memory therefore grows with the number of calls made on
        such a Variable.
        """
        inputs = [arg if isinstance(arg, Variable) else Variable(arg) for arg in args]
        self.parents = list(inputs)

        result = self.fn.forward(self, *(variable.data for variable in inputs))

        for variable in inputs:
            variable.children.append(self)

        output = result if isinstance(result, Variable) else Variable(result)
        output.parent = self
        self.child = output

        logger.debug(
            "%s: created node over %d input(s)", self.fn.__name__, len(inputs)
        )
        return output

    def backward_wrapper(self, derivative) -> None:
        """
        Propagate `derivative` (w.r.t. `child`) into every parent that
        requires a gradient.

        Parents with ``requires_grad=False`` are skipped without computing
        anything for them. A backward rule may also return None to skip one
        side.
        """
        logger.debug("%s: backward", self.fn.__name__)

        input_derivatives = []
        for index, parent in enumerate(self.parents):
            if not parent.requires_grad:
                continue
            input_derivatives.append(
                (parent, self.fn.backward(self, derivative, index))
            )

        for parent, input_derivative in input_derivatives:
            if input_derivative is not None:
                parent.backward(input_derivative)

    def zero_grad(self) -> None:
        """
        Clear the gradients of every Variable upstream of this node.
        """
        for parent in self.parents:
            parent.zero_grad()
