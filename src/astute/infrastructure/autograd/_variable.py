"""
Graph leaves and outputs.

A `Variable` wraps a dense `Tensor` or a `SparseVector` and participates in
reverse-mode differentiation. Leaves are constructed explicitly; every other
Variable is the single output of an `Operation` and points back to it through
`parent`.

Gradient state moves from unset (``grad is None``) to set on the first
backward contribution, accumulates on every later one, and returns to unset
through `zero_grad()`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

from ...domain._tensor import is_sparse
from ..ops import mathops
from ..tensor import SparseVector, Tensor, number_to_tensor, ones_like

if TYPE_CHECKING:
    from ._operation import Operation

TensorLike = Union[Tensor, SparseVector]


class Variable:
    """
    Differentiable value in a computation graph.

    Parameters
    ----------
    data : Tensor, SparseVector, number, nested sequence or numpy.ndarray
        The wrapped value. Anything that is not already a tensor is converted
        with `Tensor(data)`.
    stop_grad : bool, optional
        If True, backward records this Variable's own gradient but does not
        propagate past it into its producing operation. Defaults to False.
    requires_grad : bool, optional
        If False, no gradient is ever computed or stored for this Variable.
        Defaults to True.

    Attributes
    ----------
    data : Tensor or SparseVector
        Current value. Optimizers replace it in place of the old one.
    grad : Tensor, SparseVector or None
        Accumulated gradient, None until the first backward contribution.
    parent : Operation or None
        The operation that produced this Variable; None for leaves.
    children : list[Operation]
        Operations that consumed this Variable. Entries are never removed,
        so every consuming node stays reachable from here.
    """

    def __init__(
        self,
        data,
        *,
        stop_grad: bool = False,
        requires_grad: bool = True,
    ) -> None:
        if not isinstance(data, (Tensor, SparseVector)):
            data = Tensor(data)
        self.data: TensorLike = data
        self.grad: Optional[TensorLike] = None
        self.parent: Optional["Operation"] = None
        self.children: List["Operation"] = []
        self.stop_grad = bool(stop_grad)
        self.requires_grad = bool(requires_grad)

    @property
    def shape(self):
        return self.data.shape

    @property
    def is_leaf(self) -> bool:
        return self.parent is None

    def __repr__(self) -> str:
        return (
            f"Variable(data={self.data!r}, stop_grad={self.stop_grad}, "
            f"requires_grad={self.requires_grad})"
        )

    # ------------------------------------------------------------------
    # Gradient bookkeeping
    # ------------------------------------------------------------------
    def _accumulate_grad_(self, derivative: TensorLike) -> None:
        """
        Add one backward contribution to `grad`.

        The first contribution is stored as a private copy so later in-place
        accumulation never writes into a tensor owned by another node.
        """
        if self.grad is None:
            self.grad = derivative.clone()
            return

        in_place = (
            not is_sparse(self.grad)
            and not is_sparse(derivative)
            and mathops.broadcast_shape(self.grad.shape, derivative.shape)
            == self.grad.shape
        )
        if in_place:
            mathops.add(self.grad, derivative, self.grad)
        else:
            self.grad = mathops.add(self.grad, derivative)

    def backward(self, derivative=None) -> None:
        """
        Run reverse-mode differentiation from this Variable.

        Parameters
        ----------
        derivative : Tensor, SparseVector or number, optional
            Upstream derivative of the final objective with respect to this
            Variable. Defaults to ones shaped like `data` (``Tensor([1.0])``
            for sparse data).

        Notes
        -----
        The derivative is recorded on this Variable first. Propagation into
        `parent` then happens unless `stop_grad` is set. Variables created with
        ``requires_grad=False`` ignore the call entirely.
        """
        if not self.requires_grad:
            return

        if derivative is None:
            if is_sparse(self.data):
                derivative = Tensor([1.0])
            else:
                derivative = ones_like(self.data.shape)
        else:
            derivative = number_to_tensor(derivative)

        self._accumulate_grad_(derivative)

        if self.parent is not None and not self.stop_grad:
            self.parent.backward_wrapper(derivative)

    def zero_grad(self) -> None:
        """
        Clear this Variable's gradient and every gradient upstream of it.
        """
        self.grad = None
        if self.parent is not None:
            self.parent.zero_grad()

    # ------------------------------------------------------------------
    # Graph-building methods (equivalent to the free functions)
    # ------------------------------------------------------------------
    def add(self, other) -> "Variable":
        from . import _ops

        return _ops.add(self, other)

    def sub(self, other) -> "Variable":
        from . import _ops

        return _ops.sub(self, other)

    def mul(self, other) -> "Variable":
        from . import _ops

        return _ops.mul(self, other)

    def div(self, other) -> "Variable":
        from . import _ops

        return _ops.div(self, other)

    def scale(self, factor) -> "Variable":
        from . import _ops

        return _ops.scale(self, factor)

    def add_scalar(self, value) -> "Variable":
        from . import _ops

        return _ops.add_scalar(self, value)

    def dot(self, other) -> "Variable":
        from . import _ops

        return _ops.dot(self, other)

    def square(self) -> "Variable":
        from . import _ops

        return _ops.square(self)

    def exp(self) -> "Variable":
        from . import _ops

        return _ops.exp(self)

    def sqrt(self) -> "Variable":
        from . import _ops

        return _ops.sqrt(self)

    def sin(self) -> "Variable":
        from . import _ops

        return _ops.sin(self)

    def cos(self) -> "Variable":
        from . import _ops

        return _ops.cos(self)

    def tan(self) -> "Variable":
        from . import _ops

        return _ops.tan(self)

    def sum(self) -> "Variable":
        from . import _ops

        return _ops.sum(self)

    def log(self) -> "Variable":
        from . import _ops

        return _ops.log(self)

    def abs(self) -> "Variable":
        from . import _ops

        return _ops.abs(self)

    def tanh(self) -> "Variable":
        from . import _ops

        return _ops.tanh(self)

    def apply_fn(self, fn) -> "Variable":
        from . import _ops

        return _ops.apply_fn(self, fn)


def make_variable(value, **options) -> Variable:
    """
    Return `value` as a Variable.

    Existing Variables are returned as-is, with any given `options`
    (``stop_grad``, ``requires_grad``) applied to them.
    """
    if isinstance(value, Variable):
        for name, option in options.items():
            if name not in ("stop_grad", "requires_grad"):
                raise TypeError(f"unknown Variable option {name!r}")
            setattr(value, name, bool(option))
        return value
    return Variable(value, **options)
