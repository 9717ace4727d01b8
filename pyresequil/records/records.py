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
from typing import Callable, List, Mapping, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd

from pyresequil.classes import EquilConfigError
from pyresequil.shared_fns import interp_table, is_non_decreasing

logger = logging.getLogger(__name__)

EQUIL_ITEMS = ['datum_depth', 'datum_pressure', 'woc_depth', 'pcow_woc', 'goc_depth',
               'pcgo_goc', 'live_oil_table_index', 'wet_gas_table_index', 'accuracy']


class EquilRecord:
    """ One region's equilibration data (ECLIPSE keyword EQUIL). Read-only once created.

        datum_depth: Datum depth (m)
        datum_pressure: Pressure at datum depth (Pa)
        woc_depth: Depth of the water-oil contact (m)
        pcow_woc: Oil-water capillary pressure at the water-oil contact (Pa)
        goc_depth: Depth of the gas-oil contact (m)
        pcgo_goc: Gas-oil capillary pressure at the gas-oil contact (Pa)
        live_oil_table_index: 1-based RSVD table index, or 0 for none. Defaults to 0
        wet_gas_table_index: 1-based RVVD table index, or 0 for none. Defaults to 0
        accuracy: Initialisation target accuracy. Only 0 is supported. Defaults to 0
    """
    __slots__ = ['_datum_depth', '_datum_pressure', '_woc_depth', '_pcow_woc', '_goc_depth',
                 '_pcgo_goc', '_live_oil_table_index', '_wet_gas_table_index', '_accuracy']

    def __init__(self, datum_depth, datum_pressure, woc_depth, pcow_woc, goc_depth, pcgo_goc,
                 live_oil_table_index=0, wet_gas_table_index=0, accuracy=0):
        if accuracy != 0:
            raise EquilConfigError("kw EQUIL, item 9: Only N=0 supported.")
        if live_oil_table_index < 0 or wet_gas_table_index < 0:
            raise EquilConfigError("kw EQUIL, items 7-8: Table indices must be zero or positive")
        self._datum_depth = float(datum_depth)
        self._datum_pressure = float(datum_pressure)
        self._woc_depth = float(woc_depth)
        self._pcow_woc = float(pcow_woc)
        self._goc_depth = float(goc_depth)
        self._pcgo_goc = float(pcgo_goc)
        self._live_oil_table_index = int(live_oil_table_index)
        self._wet_gas_table_index = int(wet_gas_table_index)
        self._accuracy = int(accuracy)

    @classmethod
    def from_row(cls, row: Sequence[float]) -> "EquilRecord":
        """ Creates a record from one EQUIL row (items 1-9). Missing or blank items default to zero, contact depths to the datum depth """
        row = list(row)
        if len(row) < 2:
            raise EquilConfigError("kw EQUIL: Datum depth and pressure must be provided")
        if len(row) > len(EQUIL_ITEMS):
            row = row[:len(EQUIL_ITEMS)]
        row = row + [None] * (len(EQUIL_ITEMS) - len(row))
        # Blank cells of a ragged table arrive as NaN
        row = [None if v is None or pd.isna(v) else v for v in row]
        if row[0] is None or row[1] is None:
            raise EquilConfigError("kw EQUIL: Datum depth and pressure must be provided")
        # Defaulted contact depths sit at the datum
        for i in (2, 4):
            if row[i] is None:
                row[i] = row[0]
        row = [0 if v is None else v for v in row]
        return cls(*row)

    datum_depth = property(lambda self: self._datum_depth)
    datum_pressure = property(lambda self: self._datum_pressure)
    woc_depth = property(lambda self: self._woc_depth)
    pcow_woc = property(lambda self: self._pcow_woc)
    goc_depth = property(lambda self: self._goc_depth)
    pcgo_goc = property(lambda self: self._pcgo_goc)
    live_oil_table_index = property(lambda self: self._live_oil_table_index)
    wet_gas_table_index = property(lambda self: self._wet_gas_table_index)
    accuracy = property(lambda self: self._accuracy)

    def as_list(self) -> list:
        return [getattr(self, item) for item in EQUIL_ITEMS]

    def __eq__(self, other):
        if not isinstance(other, EquilRecord):
            return NotImplemented
        return self.as_list() == other.as_list()

    def __repr__(self):
        items = ', '.join(f"{k}={v}" for k, v in zip(EQUIL_ITEMS, self.as_list()))
        return f"EquilRecord({items})"


class DepthTable:
    """ Ratio versus depth table (ECLIPSE RSVD or RVVD), linearly interpolated and held constant beyond its ends

        depth: Depth column (m), non-decreasing
        values: Ratio column (sm³/sm³), same length as depth
        name: Table keyword, used in diagnostics. Defaults to 'RSVD'
    """
    def __init__(self, depth: npt.ArrayLike, values: npt.ArrayLike, name: str = 'RSVD'):
        depth = np.asarray(depth, dtype=float).ravel()
        values = np.asarray(values, dtype=float).ravel()
        if depth.size == 0 or depth.size != values.size:
            raise EquilConfigError(f"{name} table needs matching, non-empty depth and value columns")
        if not is_non_decreasing(depth):
            raise EquilConfigError(f"{name} table depth column must be non-decreasing")
        self.depth = depth
        self.values = values
        self.name = name

    @classmethod
    def from_df(cls, df: pd.DataFrame, name: str = 'RSVD') -> "DepthTable":
        """ Creates table from a two column DataFrame (depth first, ratio second) """
        if df.shape[1] < 2:
            raise EquilConfigError(f"{name} table needs two columns")
        return cls(df.iloc[:, 0].values, df.iloc[:, 1].values, name)

    def __call__(self, depth):
        return interp_table(depth, self.depth, self.values)

    def __len__(self):
        return self.depth.size


# ============================================================================
#  Deck access. A deck is a mapping of keyword to already parsed data.
# ============================================================================

def deck_has(deck: Mapping, keyword: str) -> bool:
    """ True if keyword is present in deck and not switched off (None or False) """
    if keyword not in deck:
        return False
    value = deck[keyword]
    return value is not None and value is not False


def get_equil(deck: Mapping) -> List[EquilRecord]:
    """ Returns one EquilRecord per equilibration region from the EQUIL keyword
        deck: Mapping with 'EQUIL' holding a list of rows, a 2D array or a DataFrame (one row per region)
    """
    if not deck_has(deck, 'EQUIL'):
        raise EquilConfigError("Deck does not provide equilibration data.")
    data = deck['EQUIL']
    if isinstance(data, pd.DataFrame):
        rows = data.values.tolist()
    else:
        rows = [list(r) if not isinstance(r, EquilRecord) else r for r in data]
    records = [r if isinstance(r, EquilRecord) else EquilRecord.from_row(r) for r in rows]
    if not records:
        raise EquilConfigError("kw EQUIL contains no records.")
    return records


def _get_depth_tables(deck: Mapping, keyword: str) -> List[DepthTable]:
    if not deck_has(deck, keyword):
        return []
    tables = []
    for t in deck[keyword]:
        if isinstance(t, DepthTable):
            tables.append(t)
        elif isinstance(t, pd.DataFrame):
            tables.append(DepthTable.from_df(t, keyword))
        else:
            t = np.asarray(t, dtype=float)
            if t.ndim != 2 or t.shape[1] < 2:
                raise EquilConfigError(f"{keyword} tables must have two columns (depth, ratio)")
            tables.append(DepthTable(t[:, 0], t[:, 1], keyword))
    return tables


def get_rsvd(deck: Mapping) -> List[DepthTable]:
    """ Returns RSVD tables (dissolved gas-oil ratio versus depth) """
    return _get_depth_tables(deck, 'RSVD')


def get_rvvd(deck: Mapping) -> List[DepthTable]:
    """ Returns RVVD tables (vaporised oil-gas ratio versus depth) """
    return _get_depth_tables(deck, 'RVVD')


def get_swatinit(deck: Mapping, num_cells: int,
                 lookup: Optional[Callable[[int], int]] = None) -> Optional[np.ndarray]:
    """ Returns SWATINIT water saturations in active cell order, or None if the keyword is absent
        deck: Mapping holding 'SWATINIT' in global (deck) cell order
        num_cells: Number of active cells
        lookup: Local-to-global cell index function. Defaults to the identity
    """
    if not deck_has(deck, 'SWATINIT'):
        return None
    swat = np.asarray(deck['SWATINIT'], dtype=float)
    if lookup is None:
        pos = np.arange(num_cells)
    else:
        pos = np.array([lookup(c) for c in range(num_cells)], dtype=int)
    if pos.size and pos.max() >= swat.size:
        raise EquilConfigError(f"SWATINIT has {swat.size} values, too few for the grid")
    return swat[pos]
