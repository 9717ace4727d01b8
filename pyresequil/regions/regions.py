#!/usr/bin/python3
# -*- coding: utf-8 -*-

"""
    pyResEquil - Equilibration initialisation of black-oil reservoir models
              Copyright (C) 2022, Mark Burgoyne

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    The GNU General Public License can be found in the LICENSE directory,
    and at  <https://www.gnu.org/licenses/>.

          Contact author at mark.w.burgoyne@gmail.com
"""

import logging
from typing import Callable, Iterator, Optional, Tuple

import numpy as np
import numpy.typing as npt

from pyresequil.classes import EquilConfigError

logger = logging.getLogger(__name__)

def global_cell_lookup(global_cell: Optional[npt.ArrayLike] = None) -> Callable[[int], int]:
    """ Returns a function mapping a local (active) cell index to its position in global deck arrays
        global_cell: Optional local-to-global index map. The identity mapping is used if not provided
    """
    if global_cell is None:
        return lambda cell: cell
    gc = np.asarray(global_cell, dtype=int)
    return lambda cell: int(gc[cell])


def equilnum(num_cells: int, eqlnum: Optional[npt.ArrayLike] = None,
             lookup: Callable[[int], int] = None) -> np.ndarray:
    """ Returns the 0-based equilibration region of every active cell
        num_cells: Number of active grid cells
        eqlnum: Optional 1-based region numbers in global (deck) cell order. All cells are placed in region 0 if not provided
        lookup: Local-to-global cell index function (see global_cell_lookup). Defaults to the identity
    """
    if eqlnum is None:
        # No explicit equilibration region, all cells in region zero.
        return np.zeros(num_cells, dtype=int)

    if lookup is None:
        lookup = global_cell_lookup()
    e = np.asarray(eqlnum, dtype=int)
    regions = np.empty(num_cells, dtype=int)
    for cell in range(num_cells):
        deck_pos = lookup(cell)
        if deck_pos < 0 or deck_pos >= e.size:
            raise EquilConfigError(f"EQLNUM has no entry for cell {cell} (deck position {deck_pos})")
        regions[cell] = e[deck_pos] - 1
    return regions


class RegionMapping:
    """ Inverse of a per-cell region array: for every region id, the ordered cells that belong to it.

        region_ids: 0-based region id of every cell. Ids must be non-negative; regions
                    without any cells are allowed and yield an empty cell range
    """
    def __init__(self, region_ids: npt.ArrayLike):
        reg = np.asarray(region_ids, dtype=int).ravel()
        if reg.size and reg.min() < 0:
            bad = int(np.argmax(reg < 0))
            raise EquilConfigError(f"Cell {bad} has invalid region id {reg[bad]} (ids must be 1-based in the deck)")
        self._reg = reg
        nreg = int(reg.max()) + 1 if reg.size else 0
        # Stable sort keeps ascending cell order within each region
        order = np.argsort(reg, kind='stable')
        counts = np.bincount(reg, minlength=nreg)
        self._start = np.concatenate(([0], np.cumsum(counts)))
        self._cells = order
        logger.debug("Region mapping: %d cells in %d regions", reg.size, nreg)

    @property
    def num_regions(self) -> int:
        return len(self._start) - 1

    @property
    def num_cells(self) -> int:
        return self._reg.size

    def region(self, cell: int) -> int:
        """Region id of a cell."""
        return int(self._reg[cell])

    def cells(self, r: int) -> np.ndarray:
        """Ordered cell indices of region r."""
        if r < 0 or r >= self.num_regions:
            raise IndexError(f"Region {r} outside range 0 - {self.num_regions - 1}")
        return self._cells[self._start[r]:self._start[r + 1]]

    def __iter__(self) -> Iterator[Tuple[int, np.ndarray]]:
        for r in range(self.num_regions):
            yield r, self.cells(r)

    def __len__(self) -> int:
        return self.num_regions
