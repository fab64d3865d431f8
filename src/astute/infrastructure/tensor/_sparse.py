"""
Sparse rank-1 vector.

A `SparseVector` stores only its non-zero entries in a dict mapping index to
value, plus an optional logical length. Absent entries read as 0 and writing
0 removes an entry, so the dict never holds explicit zeros.

A vector whose length is None is unbounded: reads at any non-negative index
succeed, and its dense length is inferred from its largest stored index.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

import numpy as np

from ...domain._errors import OutOfRangeError
from ...domain._tensor import TensorKind
from ._tensor import Tensor
from .mixins import TensorMixinArithmetic, TensorMixinElementwise

Number = Union[int, float]


class SparseVector(TensorMixinArithmetic, TensorMixinElementwise):
    """
    Sparse rank-1 vector keyed by integer index.

    Parameters
    ----------
    entries : Mapping[int, float] or Iterable[tuple[int, float]], optional
        Initial entries. Zero values are dropped.
    length : int, optional
        Logical length. None leaves the vector unbounded.

    Notes
    -----
    - `shape` is always ``(length,)``; its only entry is None while the vector
      is unbounded.
    - Arithmetic through the mixins follows the dispatch rules of
      ``ops._mathops``: a sparse operand is always handed to the sparse kernel,
      whichever side it is on.
    """

    def __init__(
        self,
        entries: Optional[
            Union[Mapping[int, Number], Iterable[Tuple[int, Number]]]
        ] = None,
        length: Optional[int] = None,
    ) -> None:
        self._entries: Dict[int, float] = {}
        self._length: Optional[int] = None
        self.set_length(length)

        if entries is None:
            return
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for index, value in pairs:
            self.set(index, value)

    # ------------------------------------------------------------------
    # Core attributes
    # ------------------------------------------------------------------
    @property
    def length(self) -> Optional[int]:
        return self._length

    def set_length(self, length: Optional[int]) -> None:
        if length is not None:
            if isinstance(length, bool) or not isinstance(length, (int, np.integer)):
                raise TypeError(f"length must be an integer or None, got {length!r}")
            if length < 0:
                raise ValueError(f"length must be non-negative, got {length}")
            length = int(length)
        self._length = length

    @property
    def shape(self) -> Tuple[Optional[int]]:
        return (self._length,)

    @property
    def num_dimensions(self) -> int:
        return 1

    @property
    def entries(self) -> Dict[int, float]:
        """
        Return the index-to-value map of stored entries.
        """
        return self._entries

    @property
    def kind(self) -> TensorKind:
        return TensorKind.SPARSE

    @property
    def sparse(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(self._entries.items())

    def __repr__(self) -> str:
        return f"SparseVector(entries={self._entries!r}, length={self._length})"

    def total_size(self) -> Optional[int]:
        return self._length

    def resolved_length(self) -> int:
        """
        Return the logical length, or one past the largest stored index if
        the vector is unbounded.
        """
        if self._length is not None:
            return self._length
        return max(self._entries) + 1 if self._entries else 0

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _index(self, coords) -> int:
        if len(coords) == 1 and isinstance(coords[0], (list, tuple, np.ndarray)):
            coords = tuple(coords[0])
        if len(coords) != 1:
            raise ValueError(f"expected 1 coordinate, got {len(coords)}")
        index = int(coords[0])
        if index < 0 or (self._length is not None and index >= self._length):
            raise OutOfRangeError(index, self._length)
        return index

    def at(self, *coords) -> float:
        """
        Read one entry; unstored entries read as 0.

        Raises
        ------
        OutOfRangeError
            If the index is negative or beyond a known length.
        """
        return self._entries.get(self._index(coords), 0.0)

    def set(self, coords, value: Number) -> float:
        """
        Store `value` at `coords`; storing 0 removes the entry.
        """
        if not isinstance(coords, (list, tuple, np.ndarray)):
            coords = (coords,)
        index = self._index(tuple(coords))
        if value == 0:
            self._entries.pop(index, None)
        else:
            self._entries[index] = float(value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def clone(self) -> "SparseVector":
        return SparseVector(dict(self._entries), self._length)

    def copy_from(self, other: "SparseVector") -> "SparseVector":
        """
        Replace this vector's entries and length with those of `other`.
        """
        entries = dict(other.entries)
        self._entries = entries
        self._length = other.length
        return self

    def to_dense(self, length: Optional[int] = None) -> Tensor:
        """
        Materialize as a dense rank-1 `Tensor`.

        Parameters
        ----------
        length : int, optional
            Dense length. Defaults to `resolved_length()`.
        """
        if length is None:
            length = self.resolved_length()
        out = Tensor(shape=(length,))
        for index, value in self._entries.items():
            out.set(index, value)
        return out

    # ------------------------------------------------------------------
    # Functional helpers
    # ------------------------------------------------------------------
    def apply(
        self,
        func: Callable[[float], float],
        dest: Optional["SparseVector"] = None,
    ) -> "SparseVector":
        """
        Apply `func` to every stored entry.

        `func` is assumed to map 0 to 0; unstored entries are not visited.
        """
        out = {index: func(value) for index, value in self._entries.items()}
        if dest is None:
            dest = SparseVector(length=self._length)
        dest.clear()
        for index, value in out.items():
            dest.set(index, value)
        return dest

    def apply_binary(
        self,
        func: Callable[[float, float], float],
        other,
        dest: Optional["SparseVector"] = None,
    ) -> "SparseVector":
        """
        Combine every stored entry with the matching value of `other`.

        `other` may be a number, a sparse vector or a dense tensor that is
        either rank 1 or holds a single element.
        """
        from ..ops import _sparse

        out = {
            index: func(value, _sparse.operand_at(other, index))
            for index, value in self._entries.items()
        }
        if dest is None:
            dest = SparseVector(length=self._length)
        dest.clear()
        for index, value in out.items():
            dest.set(index, value)
        return dest
