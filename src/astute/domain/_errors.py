"""
Tensor- and graph-related exceptions for Astute.

This module defines the error types raised by the tensor data model, the
numeric dispatch layer and the autograd engine. Every error is raised
synchronously at the call that detects it and is never recovered internally;
it propagates to the caller.

The base classes are chosen so that callers catching the builtin categories
(`ValueError`, `IndexError`, `RuntimeError`) keep working.
"""

from typing import Any, Optional


class ShapeMismatchError(ValueError):
    """
    Raised when two operands have incompatible shapes.

    This error is raised by autograd-level elementwise operations (which
    require exact shape equality), by the dense broadcasting rule when two
    aligned dimensions are neither equal nor 1, and by tensor contraction
    when the contracted dimensions disagree.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "add", "contract").
    shape_a : tuple
        Shape of the first operand.
    shape_b : tuple
        Shape of the second operand.
    """

    def __init__(self, op: str, shape_a: Any, shape_b: Any) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name that rejected the operands.
        shape_a : tuple
            Shape of the first operand.
        shape_b : tuple
            Shape of the second operand.
        """
        super().__init__(
            f"{op}: shape mismatch between {tuple(shape_a)} and {tuple(shape_b)}."
        )
        self.op = op
        self.shape_a = tuple(shape_a)
        self.shape_b = tuple(shape_b)


class OutOfRangeError(IndexError):
    """
    Raised when a tensor coordinate lies outside its shape.

    Attributes
    ----------
    coord : int
        The offending coordinate value.
    dimension : int
        The size of the dimension the coordinate was checked against.
    """

    def __init__(self, coord: int, dimension: int) -> None:
        super().__init__(
            f"coordinate out of range! coord: {coord} dimension: {dimension}"
        )
        self.coord = coord
        self.dimension = dimension


class UnsupportedOperationError(RuntimeError):
    """
    Raised when an operation has no defined semantics for its operands.

    Typical causes are dividing by a sparse vector (which would require an
    explicit zero everywhere the divisor is absent) and calling `mat_mul`
    with a sparse vector against an operand that is not a rank-2 matrix.

    Attributes
    ----------
    op : str
        The name of the rejected operation.
    """

    def __init__(self, op: str, reason: Optional[str] = None) -> None:
        message = f"{op} is not supported"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message + ".")
        self.op = op
