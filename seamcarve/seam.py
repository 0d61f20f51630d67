"""
Seam computation by dynamic programming.

A seam runs through every level of the energy map (every row for a vertical
seam, every column for a horizontal one) and moves at most one pixel
sideways between consecutive levels. The first and last coordinates of each
level are never part of a seam.

The horizontal search is the vertical search over the transposed energy map.
"""

import operator
from typing import Callable, NamedTuple, Optional

import torch

DIRECTIONS = ('vertical', 'horizontal')

Comparator = Callable[[torch.Tensor, torch.Tensor], torch.Tensor]

_INT64_MAX = torch.iinfo(torch.int64).max


class WeightedCell(NamedTuple):
    """One DP cell: accumulated cost and the coordinate it was reached from."""
    weight: int
    predecessor: int


class PathResult(NamedTuple):
    """
    A seam and its cost.

    path[i] is the column of the seam in row i (vertical) or the row of the
    seam in column i (horizontal).
    """
    path: torch.Tensor
    total_energy: int


class SeamBuffer:
    """
    Reusable DP table for repeated seam searches.

    Holds weights and predecessors for up to ``levels + 1`` levels of
    ``extent`` cells each. A buffer sized for the largest energy map of a
    carving loop serves every smaller map, so it can be allocated once and
    passed to each search. Contents after a search are unspecified, and a
    buffer must not be used by two searches at the same time.
    """

    def __init__(self, levels: int, extent: int, device='cpu'):
        if levels < 1 or extent < 1:
            raise ValueError(f"Invalid buffer size: {levels} levels x {extent} cells")
        self.levels = levels
        self.extent = extent
        self.weights = torch.zeros(levels + 1, extent, dtype=torch.int64, device=device)
        self.predecessors = torch.full((levels + 1, extent), -1, dtype=torch.int64,
                                       device=device)

    @classmethod
    def for_energy(cls, energy: torch.Tensor, direction: str = 'vertical'):
        """Allocate a buffer large enough for seams of ``direction`` through ``energy``."""
        levels, extent = _levels_and_extent(energy.shape, direction)
        return cls(levels, extent, device=energy.device)

    @property
    def device(self) -> torch.device:
        return self.weights.device

    def fits(self, levels: int, extent: int) -> bool:
        return levels <= self.levels and extent <= self.extent

    def table(self, levels: int, extent: int):
        """Views of the (levels + 1, extent) region used by one search."""
        if not self.fits(levels, extent):
            raise ValueError(
                f"Seam buffer too small: need {levels + 1}x{extent} cells, "
                f"have {self.levels + 1}x{self.extent}")
        return (self.weights[:levels + 1, :extent],
                self.predecessors[:levels + 1, :extent])

    def cell(self, level: int, index: int) -> WeightedCell:
        return WeightedCell(int(self.weights[level, index]),
                            int(self.predecessors[level, index]))


def _levels_and_extent(shape, direction: str):
    if len(shape) != 2:
        raise ValueError(f"Energy map must be 2D (H, W), got shape {tuple(shape)}")
    H, W = shape
    if direction == 'vertical':
        return H, W
    elif direction == 'horizontal':
        return W, H
    else:
        raise ValueError(f"Invalid direction: {direction}")


def _check_energy(energy: torch.Tensor, direction: str):
    levels, extent = _levels_and_extent(energy.shape, direction)

    if energy.dtype == torch.bool or energy.dtype.is_floating_point or energy.is_complex():
        raise ValueError(f"Energy map must have an integer dtype, got {energy.dtype}")
    if levels < 1:
        raise ValueError("Energy map has no levels to search")
    if extent < 3:
        axis = 'columns' if direction == 'vertical' else 'rows'
        raise ValueError(
            f"A {direction} seam needs at least 3 {axis}, energy map has {extent}")

    lowest = int(energy.min())
    if lowest < 0:
        raise ValueError(f"Energy values must be non-negative, found {lowest}")
    highest = int(energy.max())
    if highest * levels > _INT64_MAX:
        raise OverflowError(
            f"Accumulated energy can reach {highest * levels}, which does not fit in int64")

    return levels, extent


def _best_index(values: torch.Tensor, cmp: Comparator) -> int:
    """Index of the best value under ``cmp``; the first one wins ties."""
    # argmin / argmax return the first extreme value
    if cmp is operator.lt:
        return int(torch.argmin(values))
    if cmp is operator.gt:
        return int(torch.argmax(values))
    best = 0
    for index in range(1, values.shape[0]):
        if cmp(values[index], values[best]):
            best = index
    return best


def _search_levels(energy: torch.Tensor, weights: torch.Tensor,
                   predecessors: torch.Tensor, cmp: Comparator) -> PathResult:
    """
    Best seam through the rows of ``energy`` (levels x extent) under ``cmp``.

    ``weights`` and ``predecessors`` have one more level than ``energy``.
    """
    levels, extent = energy.shape
    energy = energy.to(torch.int64)
    device = energy.device

    # Eligible coordinates are 1 .. extent-2; k indexes them from 0.
    n = extent - 2
    interior = slice(1, extent - 1)
    coords = torch.arange(1, extent - 1, dtype=torch.int64, device=device)
    has_left = torch.arange(n, device=device) >= 1
    has_right = torch.arange(n, device=device) <= n - 2

    # Border cells never take part; clear them so no stale state survives.
    weights[:, 0] = 0
    weights[:, extent - 1] = 0
    predecessors[:, 0] = -1
    predecessors[:, extent - 1] = -1

    weights[0, interior] = energy[0, interior]
    predecessors[0, interior] = -1

    for level in range(1, levels):
        prev = weights[level - 1, interior]

        best = prev.clone()
        best_from = coords.clone()

        # (p - 1)
        left = torch.roll(prev, 1)
        take = has_left & cmp(left, best)
        best = torch.where(take, left, best)
        best_from = torch.where(take, coords - 1, best_from)

        # (p + 1)
        right = torch.roll(prev, -1)
        take = has_right & cmp(right, best)
        best = torch.where(take, right, best)
        best_from = torch.where(take, coords + 1, best_from)

        weights[level, interior] = best + energy[level, interior]
        predecessors[level, interior] = best_from

    # Bookkeeping level: straight predecessors, no added energy.
    weights[levels, interior] = weights[levels - 1, interior]
    predecessors[levels, interior] = coords

    last = weights[levels]
    best_index = _best_index(last[interior], cmp) + 1

    # Backtrace, one predecessor per level
    path = [int(predecessors[levels, best_index])]
    for level in range(levels - 1, 0, -1):
        path.append(int(predecessors[level, path[-1]]))
    path.reverse()

    return PathResult(torch.tensor(path, dtype=torch.long, device=device),
                      int(last[best_index]))


def find_seam(energy: torch.Tensor, direction: str = 'vertical',
              cmp: Comparator = operator.lt,
              buffer: Optional[SeamBuffer] = None) -> PathResult:
    """
    Find the best seam through an energy map.

    Args:
        energy: Integer energy map (H, W), non-negative
        direction: 'vertical' or 'horizontal'
        cmp: cmp(a, b) is True where a is strictly better than b. Applied
            elementwise to tensors. Defaults to less-than (minimum seam).
        buffer: Optional reusable DP table. Borrowed, not owned: the caller
            keeps it and may pass it to the next search.

    Returns:
        PathResult - for vertical: (H,) path with column index per row
                     for horizontal: (W,) path with row index per column
    """
    levels, extent = _check_energy(energy, direction)

    if buffer is not None:
        if buffer.device != energy.device:
            raise ValueError(
                f"Seam buffer is on {buffer.device}, energy map is on {energy.device}")
        weights, predecessors = buffer.table(levels, extent)
    else:
        weights = torch.empty(levels + 1, extent, dtype=torch.int64, device=energy.device)
        predecessors = torch.empty(levels + 1, extent, dtype=torch.int64,
                                   device=energy.device)

    if direction == 'horizontal':
        energy = energy.t()
    return _search_levels(energy, weights, predecessors, cmp)


def find_vert_seam(energy: torch.Tensor, buffer: Optional[SeamBuffer] = None,
                   cmp: Comparator = operator.lt) -> PathResult:
    """Best vertical seam: one column index per row."""
    return find_seam(energy, 'vertical', cmp=cmp, buffer=buffer)


def find_hori_seam(energy: torch.Tensor, buffer: Optional[SeamBuffer] = None,
                   cmp: Comparator = operator.lt) -> PathResult:
    """Best horizontal seam: one row index per column."""
    return find_seam(energy, 'horizontal', cmp=cmp, buffer=buffer)


def seam_energy(energy: torch.Tensor, path, direction: str = 'vertical') -> int:
    """Sum of the energy values a seam passes through."""
    path = torch.as_tensor(path.path if isinstance(path, PathResult) else path,
                           dtype=torch.long, device=energy.device)
    levels = torch.arange(path.shape[0], device=energy.device)
    if direction == 'vertical':
        values = energy[levels, path]
    elif direction == 'horizontal':
        values = energy[path, levels]
    else:
        raise ValueError(f"Invalid direction: {direction}")
    return int(values.to(torch.int64).sum())
