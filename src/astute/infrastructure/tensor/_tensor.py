"""
Concrete dense Tensor implementation (NumPy backend).

A `Tensor` is an N-dimensional view over a flat double-precision buffer. The
view is described by `shape`, `strides` (in elements, not bytes) and a base
`offset` into the buffer. Several Tensors may share one buffer: `transpose()`
returns such a view, and writing through one view is visible through every
other view of the same buffer.

Design notes
------------
- The flat buffer is a 1-D NumPy ``float64`` array. `view()` exposes the
  logical N-dimensional window as a NumPy strided view, which is what the
  kernels in `..ops` operate on.
- Arithmetic and elementwise methods come from the shared mixins and
  delegate to the numeric dispatch layer, so `t.add(o)` is exactly
  `mathops.add(t, o)`.
- Only IEEE-754 double precision is supported.
"""

from __future__ import annotations

from numbers import Number as _NumberABC
from typing import Optional, Sequence, Union

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ...domain._errors import OutOfRangeError, ShapeMismatchError
from ...domain._tensor import TensorKind
from .._config import get_rng
from .mixins import TensorMixinArithmetic, TensorMixinElementwise

Number = Union[int, float]

DTYPE = np.float64


def _row_major_strides(shape: Sequence[int]) -> tuple[int, ...]:
    """
    Compute element strides so the last dimension is fastest-varying.
    """
    strides = [0] * len(shape)
    current = 1
    for i in range(len(shape) - 1, -1, -1):
        strides[i] = current
        current *= shape[i]
    return tuple(strides)


def _normalize_shape(shape: Union[int, Sequence[int]]) -> tuple[int, ...]:
    if isinstance(shape, (int, np.integer)):
        shape = (shape,)
    out = []
    for dim in shape:
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise TypeError(f"shape entries must be integers, got {dim!r}")
        if dim < 0:
            raise ValueError(f"shape entries must be non-negative, got {tuple(shape)}")
        out.append(int(dim))
    return tuple(out)


class Tensor(TensorMixinArithmetic, TensorMixinElementwise):
    """
    Dense strided tensor of doubles.

    Parameters
    ----------
    data : nested sequence, number or numpy.ndarray, optional
        Initial values. Nested sequences have their shape inferred by depth
        and length and are flattened depth-first. A bare number becomes a
        tensor of shape ``(1,)``.
    shape : tuple[int, ...], optional
        Tensor shape. Without `data` and `buffer`, a zero-filled buffer of
        this shape is allocated. With `data`, the values are reshaped to it.
    strides : tuple[int, ...], optional
        Element strides of a view over `buffer`. Defaults to row-major.
    offset : int, optional
        Base index of the view into `buffer`. Defaults to 0.
    buffer : numpy.ndarray, optional
        Existing flat ``float64`` buffer to view without copying.

    Notes
    -----
    - `data` and `buffer` both refer to the flat backing storage; for a view
      that is not contiguous and row-major, use `to_numpy()` to read values in
      logical order.
    - `at` and `set` fail with `OutOfRangeError` for any coordinate outside
      ``[0, shape[i])``.
    """

    def __init__(
        self,
        data=None,
        *,
        shape: Optional[Sequence[int]] = None,
        strides: Optional[Sequence[int]] = None,
        offset: int = 0,
        buffer: Optional[np.ndarray] = None,
    ) -> None:
        if data is not None:
            if isinstance(data, Tensor):
                arr = data.to_numpy()
            elif isinstance(data, (_NumberABC, np.number)) and not isinstance(
                data, bool
            ):
                arr = np.array([data], dtype=DTYPE)
            else:
                arr = np.asarray(data, dtype=DTYPE)
            if arr.ndim == 0:
                arr = arr.reshape(1)
            if shape is not None:
                arr = arr.reshape(_normalize_shape(shape))
            self._shape = tuple(int(d) for d in arr.shape)
            self._strides = _row_major_strides(self._shape)
            self._offset = 0
            self._buffer = np.array(arr, dtype=DTYPE, copy=True).reshape(-1)
            return

        if shape is None:
            raise ValueError("Tensor requires either data or a shape")

        self._shape = _normalize_shape(shape)
        self._strides = (
            _row_major_strides(self._shape)
            if strides is None
            else tuple(int(s) for s in strides)
        )
        if len(self._strides) != len(self._shape):
            raise ValueError(
                f"strides {self._strides} do not match shape {self._shape}"
            )
        self._offset = int(offset)

        if buffer is None:
            self._buffer = np.zeros(self.total_size(), dtype=DTYPE)
        else:
            if not isinstance(buffer, np.ndarray) or buffer.dtype != DTYPE:
                raise TypeError("buffer must be a float64 numpy.ndarray")
            if buffer.ndim != 1 or not buffer.flags.c_contiguous:
                raise ValueError("buffer must be a 1-D contiguous array")
            self._buffer = buffer
        self._check_extent()

    def _check_extent(self) -> None:
        """
        Ensure every element addressed by this view lies inside the buffer.

        Raises
        ------
        OutOfRangeError
            If the lowest or highest addressed index falls outside
            ``[0, buffer.size)``.
        """
        if self.total_size() == 0:
            return
        low = high = self._offset
        for dim, stride in zip(self._shape, self._strides):
            if stride >= 0:
                high += (dim - 1) * stride
            else:
                low += (dim - 1) * stride
        size = self._buffer.shape[0]
        if low < 0:
            raise OutOfRangeError(low, size)
        if high >= size:
            raise OutOfRangeError(high, size)

    # ------------------------------------------------------------------
    # Core attributes
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the tensor shape.
        """
        return self._shape

    @property
    def num_dimensions(self) -> int:
        return len(self._shape)

    @property
    def strides(self) -> tuple[int, ...]:
        """
        Return the per-dimension element strides of this view.
        """
        return self._strides

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def buffer(self) -> np.ndarray:
        """
        Return the flat backing buffer (possibly shared with other views).
        """
        return self._buffer

    @property
    def data(self) -> np.ndarray:
        """
        Alias of `buffer`.
        """
        return self._buffer

    @property
    def kind(self) -> TensorKind:
        return TensorKind.DENSE

    @property
    def sparse(self) -> bool:
        return False

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self._shape}, strides={self._strides}, "
            f"offset={self._offset})"
        )

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _flat_index(self, coords: Sequence[int]) -> int:
        if len(coords) == 1 and isinstance(coords[0], (list, tuple, np.ndarray)):
            coords = tuple(coords[0])
        if len(coords) != len(self._shape):
            raise ValueError(
                f"expected {len(self._shape)} coordinates, got {len(coords)}"
            )
        index = self._offset
        for coord, dim, stride in zip(coords, self._shape, self._strides):
            coord = int(coord)
            if coord < 0 or coord >= dim:
                raise OutOfRangeError(coord, dim)
            index += coord * stride
        return index

    def at(self, *coords: Union[int, Sequence[int]]) -> float:
        """
        Read the element at `coords`.

        Parameters
        ----------
        *coords : int or Sequence[int]
            One coordinate per dimension, or a single sequence of them.

        Returns
        -------
        float
            The element value.

        Raises
        ------
        OutOfRangeError
            If any coordinate lies outside ``[0, shape[i])``.
        """
        return float(self._buffer[self._flat_index(coords)])

    def set(self, coords: Union[int, Sequence[int]], value: Number) -> float:
        """
        Write `value` at `coords` and return it.

        Raises
        ------
        OutOfRangeError
            If any coordinate lies outside ``[0, shape[i])``.
        """
        if not isinstance(coords, (list, tuple, np.ndarray)):
            coords = (coords,)
        self._buffer[self._flat_index(tuple(coords))] = value
        return value

    def total_size(self) -> int:
        return int(np.prod(self._shape, dtype=np.int64))

    # ------------------------------------------------------------------
    # NumPy bridge
    # ------------------------------------------------------------------
    def view(self) -> np.ndarray:
        """
        Return a NumPy strided view of this tensor over the shared buffer.

        Writes into the returned array are written into the buffer and are
        therefore visible through every Tensor aliasing it.
        """
        itemsize = self._buffer.itemsize
        return as_strided(
            self._buffer[self._offset :],
            shape=self._shape,
            strides=tuple(s * itemsize for s in self._strides),
        )

    def to_numpy(self) -> np.ndarray:
        """
        Return a logically ordered copy of the tensor values.
        """
        return np.array(self.view(), dtype=DTYPE, copy=True)

    def copy_from_numpy(self, arr: np.ndarray) -> None:
        """
        Write values from a NumPy array (same shape) through this view.

        Raises
        ------
        ShapeMismatchError
            If `arr` does not have this tensor's shape.
        """
        arr = np.asarray(arr, dtype=DTYPE)
        if arr.shape != self._shape:
            raise ShapeMismatchError("copy_from_numpy", self._shape, arr.shape)
        self.view()[...] = arr

    def fill(self, value: Number) -> "Tensor":
        self.view()[...] = value
        return self

    # ------------------------------------------------------------------
    # Copies and views
    # ------------------------------------------------------------------
    def clone(self) -> "Tensor":
        """
        Deep copy with a fresh buffer and the same layout.
        """
        return Tensor(
            shape=self._shape,
            strides=self._strides,
            offset=self._offset,
            buffer=self._buffer.copy(),
        )

    def compacted(self) -> "Tensor":
        """
        Copy into a fresh contiguous row-major buffer.
        """
        return Tensor(self.to_numpy())

    def is_contiguous(self) -> bool:
        return self._strides == _row_major_strides(self._shape)

    def transpose(self) -> "Tensor":
        """
        Return a zero-copy view with shape and strides reversed.

        The result shares this tensor's buffer; no element is moved.
        """
        return Tensor(
            shape=tuple(reversed(self._shape)),
            strides=tuple(reversed(self._strides)),
            offset=self._offset,
            buffer=self._buffer,
        )

    def to_dense(self) -> "Tensor":
        return self

    # ------------------------------------------------------------------
    # Contraction
    # ------------------------------------------------------------------
    def contract(
        self, other: "Tensor", dims_to_contract: int, dest: Optional["Tensor"] = None
    ) -> "Tensor":
        """
        Generalized tensor contraction.

        Sums the product of the last `dims_to_contract` dimensions of this
        tensor against the first `dims_to_contract` dimensions of `other`.
        The result shape is ``shape[:rank-k] + other.shape[k:]`` (``(1,)`` if
        that is empty). ``k = 0`` is the outer product and ``k = 1`` on two
        matrices is ordinary matrix multiplication.
        """
        from ..ops import _dense

        return _dense.contract(self, other, dims_to_contract, dest)

    def outer_product(
        self, other: "Tensor", dest: Optional["Tensor"] = None
    ) -> "Tensor":
        return self.contract(other, 0, dest)

    # ------------------------------------------------------------------
    # Random fills
    # ------------------------------------------------------------------
    def fill_uniform(self, low: Number, high: Number) -> "Tensor":
        """
        Fill in place from ``Uniform(low, high)`` and return self.
        """
        self.view()[...] = get_rng().uniform(low, high, size=self._shape)
        return self

    def fill_normal(self, mean: Number, std_dev: Number) -> "Tensor":
        """
        Fill in place from ``Normal(mean, std_dev)`` and return self.
        """
        self.view()[...] = get_rng().normal(mean, std_dev, size=self._shape)
        return self
