from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np

__all__ = ["DataPair", "TrainingSet"]


class DataPair(NamedTuple):
    """A single training sample.

    Attributes
    ----------
    input : ndarray
        Input vector presented to the network
    ideal : ndarray
        Target output vector
    significance : float
        Weight of this sample in the error
    """

    input: np.ndarray
    ideal: np.ndarray
    significance: float = 1.0


def _as_rows(values, name: str) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.ndim == 1:
        arr = arr[:, None]
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 1D or 2D array, got shape {arr.shape}")
    return arr


class TrainingSet:
    """Fixed, randomly accessible collection of training samples.

    The data is copied on construction and stored in read-only arrays, so the
    set cannot change while a trainer holds on to it.

    Parameters
    ----------
    inputs : array_like, shape (n, input_size)
        Input vectors, one per row.  A 1D array is treated as ``n`` samples with
        a single input each.
    ideals : array_like, shape (n, ideal_size)
        Target vectors, one per row.  A 1D array is treated as ``n`` samples
        with a single target each.
    significance : array_like, shape (n,), optional
        Per-sample weight of the error.  Defaults to one for every sample.

    Examples
    --------
    >>> xor = TrainingSet([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 1, 1, 0])
    >>> len(xor), xor.input_size, xor.ideal_size
    (4, 2, 1)
    >>> xor[1].ideal
    array([1.])
    """

    def __init__(self, inputs, ideals, significance=None):
        inputs = _as_rows(inputs, "inputs")
        ideals = _as_rows(ideals, "ideals")
        if inputs.shape[0] != ideals.shape[0]:
            raise ValueError(
                f"Got {inputs.shape[0]} input rows but {ideals.shape[0]} ideal rows"
            )

        if significance is None:
            significance = np.ones(inputs.shape[0])
        else:
            significance = np.array(significance, dtype=float)
            if significance.shape != (inputs.shape[0],):
                raise ValueError(
                    f"Expected significance of shape ({inputs.shape[0]},), got "
                    f"{significance.shape}"
                )

        for arr in (inputs, ideals, significance):
            arr.setflags(write=False)

        self.inputs = inputs
        self.ideals = ideals
        self.significance = significance

    @property
    def input_size(self) -> int:
        return self.inputs.shape[1]

    @property
    def ideal_size(self) -> int:
        return self.ideals.shape[1]

    def __len__(self) -> int:
        return self.inputs.shape[0]

    def __getitem__(self, index: int) -> DataPair:
        return DataPair(
            self.inputs[index], self.ideals[index], float(self.significance[index])
        )

    def __iter__(self) -> Iterator[DataPair]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self):
        return (
            f"TrainingSet(n={len(self)}, input_size={self.input_size}, "
            f"ideal_size={self.ideal_size})"
        )
