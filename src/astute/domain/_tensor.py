"""
Tensor interface definitions.

This module defines the domain-level view of the two tensor kinds handled by
Astute: dense strided tensors and sparse vectors. The kinds form a closed
tagged variant, identified by `TensorKind`, and share the small capability
interface `ITensor` that the dispatch layer and the autograd engine rely on.

Notes
-----
Routing between kernels is performed on the `kind` tag, never on class
inheritance, so a new tensor kind requires an explicit new tag.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence, Union, runtime_checkable

Number = Union[int, float]


class TensorKind(Enum):
    """
    Tag identifying which representation a tensor uses.
    """

    DENSE = "dense"
    SPARSE = "sparse"


@runtime_checkable
class ITensor(Protocol):
    """
    Capability interface shared by dense tensors and sparse vectors.

    An `ITensor` exposes a shape (whose entries may be `None` for a sparse
    vector of unknown length), its representation tag, elementwise read
    access and densification.
    """

    @property
    def shape(self) -> tuple[Optional[int], ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[Optional[int], ...]
            The tensor's shape. A sparse vector of undefined length reports
            ``(None,)``.
        """
        ...

    @property
    def kind(self) -> TensorKind:
        """
        Return the representation tag of this tensor.
        """
        ...

    @property
    def sparse(self) -> bool:
        """
        Return True for sparse vectors and False for dense tensors.
        """
        ...

    @property
    def num_dimensions(self) -> int:
        """
        Return the number of dimensions.
        """
        ...

    def at(self, *coords: Union[int, Sequence[int]]) -> float:
        """
        Read one element.

        Parameters
        ----------
        *coords : int or Sequence[int]
            Either one coordinate per dimension, or a single sequence of
            coordinates.

        Returns
        -------
        float
            The stored element (0.0 for unstored sparse entries).
        """
        ...

    def to_dense(self) -> "ITensor":
        """
        Return a dense representation of this tensor.
        """
        ...


def is_sparse(value: object) -> bool:
    """
    Return True if `value` is tagged as a sparse tensor.

    Plain numbers and objects without a `kind` tag are treated as dense.
    """
    return getattr(value, "kind", None) is TensorKind.SPARSE
