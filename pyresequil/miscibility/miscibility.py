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
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np
import numpy.typing as npt

from pyresequil.classes import misc_method, EquilConfigError
from pyresequil.constants import T_STANDARD, RATIO_DP
from pyresequil.records import DepthTable

logger = logging.getLogger(__name__)


class RsFunction(ABC):
    """ Maximum dissolved gas-oil ratio (Rs) or vaporised oil-gas ratio (Rv) as a function of depth and pressure """
    method = None

    @abstractmethod
    def __call__(self, depth: float, press: float, temp: float, sat: float = 0.0) -> float:
        """ depth: Depth (m)
            press: Pressure of the phase holding the dissolved component (Pa)
            temp: Temperature (K)
            sat: Saturation of the complementary phase (free gas for Rs, free oil for Rv)
        """

    def derivative(self, depth: float, press: float, temp: float, sat: float = 0.0) -> float:
        """ Pressure derivative of the ratio, by central difference """
        dp = RATIO_DP
        return (self(depth, press + dp, temp, sat) - self(depth, press - dp, temp, sat)) / (2 * dp)


class NoMixing(RsFunction):
    """ No dissolution or vaporisation. Ratio is identically zero """
    method = misc_method.NOMIX

    def __call__(self, depth, press, temp, sat=0.0):
        return 0.0

    def derivative(self, depth, press, temp, sat=0.0):
        return 0.0


class _SaturatedRatio(RsFunction):
    # Ratio capped at a reference value while the complementary phase is absent
    def __init__(self, props, cell: int):
        self.props = props
        self.cell = int(cell)

    @abstractmethod
    def sat_ratio(self, press: float, temp: float) -> float:
        ...

    @abstractmethod
    def reference(self, depth: float) -> float:
        ...

    def __call__(self, depth, press, temp, sat=0.0):
        if sat > 0.0:
            return self.sat_ratio(press, temp)
        return min(self.sat_ratio(press, temp), self.reference(depth))


class RsVD(_SaturatedRatio):
    """ Rs interpolated linearly in an RSVD table of Rs versus depth.

        props: Property object
        cell: Representative cell of the region
        depth: Depth column (m)
        rs: Dissolved gas-oil ratio column (sm³/sm³)
    """
    method = misc_method.VD

    def __init__(self, props, cell: int, depth: npt.ArrayLike, rs: npt.ArrayLike):
        super().__init__(props, cell)
        self.table = DepthTable(depth, rs, 'RSVD')

    def sat_ratio(self, press, temp):
        return self.props.rs_sat(press, temp, self.cell)

    def reference(self, depth):
        return self.table(depth)


class RvVD(_SaturatedRatio):
    """ Rv interpolated linearly in an RVVD table of Rv versus depth.

        props: Property object
        cell: Representative cell of the region
        depth: Depth column (m)
        rv: Vaporised oil-gas ratio column (sm³/sm³)
    """
    method = misc_method.VD

    def __init__(self, props, cell: int, depth: npt.ArrayLike, rv: npt.ArrayLike):
        super().__init__(props, cell)
        self.table = DepthTable(depth, rv, 'RVVD')

    def sat_ratio(self, press, temp):
        return self.props.rv_sat(press, temp, self.cell)

    def reference(self, depth):
        return self.table(depth)


class RsSatAtContact(_SaturatedRatio):
    """ Rs saturated at the gas-oil contact, held constant with depth.

        props: Property object
        cell: Representative cell of the region
        p_contact: Oil pressure at the gas-oil contact (Pa)
        T_contact: Temperature at the gas-oil contact (K)
    """
    method = misc_method.SATCONTACT

    def __init__(self, props, cell: int, p_contact: float, T_contact: float):
        super().__init__(props, cell)
        self.rs_sat_contact = self.sat_ratio(p_contact, T_contact)

    def sat_ratio(self, press, temp):
        return self.props.rs_sat(press, temp, self.cell)

    def reference(self, depth):
        return self.rs_sat_contact


class RvSatAtContact(_SaturatedRatio):
    """ Rv saturated at the gas-oil contact, held constant with depth.

        props: Property object
        cell: Representative cell of the region
        p_contact: Gas pressure at the gas-oil contact (Pa)
        T_contact: Temperature at the gas-oil contact (K)
    """
    method = misc_method.SATCONTACT

    def __init__(self, props, cell: int, p_contact: float, T_contact: float):
        super().__init__(props, cell)
        self.rv_sat_contact = self.sat_ratio(p_contact, T_contact)

    def sat_ratio(self, press, temp):
        return self.props.rv_sat(press, temp, self.cell)

    def reference(self, depth):
        return self.rv_sat_contact


# ============================================================================
#  Per-region selection
# ============================================================================

def _select(kind, props, records, region_mapping, tables, enabled, T_contact):
    if kind == 'RSVD':
        table_index = lambda rec: rec.live_oil_table_index
        contact_pressure = lambda rec: rec.datum_pressure
        vd, at_contact = RsVD, RsSatAtContact
    else:
        table_index = lambda rec: rec.wet_gas_table_index
        contact_pressure = lambda rec: rec.datum_pressure + rec.pcgo_goc
        vd, at_contact = RvVD, RvSatAtContact

    if not enabled:
        return [NoMixing() for _ in records]

    funcs = []
    for i, rec in enumerate(records):
        index = table_index(rec)
        if index > 0:
            if index > len(tables):
                raise EquilConfigError(f"Cannot initialise: {kind} table {index} not available.")
        elif rec.goc_depth != rec.datum_depth:
            raise EquilConfigError(
                f"Cannot initialise: when no explicit {kind} table is given, \n"
                f"datum depth must be at the gas-oil-contact. "
                f"In EQUIL region {i + 1}  (counting from 1), this does not hold.")

        if i >= region_mapping.num_regions or len(region_mapping.cells(i)) == 0:
            logger.warning("EQUIL region %d has no cells", i + 1)
            funcs.append(NoMixing())
            continue
        cell = int(region_mapping.cells(i)[0])
        if index > 0:
            table = tables[index - 1]
            funcs.append(vd(props, cell, table.depth, table.values))
        else:
            funcs.append(at_contact(props, cell, contact_pressure(rec), T_contact))
        logger.debug("EQUIL region %d: %s function %s", i + 1, kind[:2], type(funcs[-1]).__name__)
    return funcs


def select_rs_functions(props, records: Sequence, region_mapping, rsvd_tables: Sequence[DepthTable] = (),
                        disgas: bool = False, T_contact: float = T_STANDARD) -> List[RsFunction]:
    """ Returns one Rs function per equilibration record
        props: Property object
        records: EquilRecord per region
        region_mapping: RegionMapping of the grid cells
        rsvd_tables: Available RSVD tables, referenced 1-based by the records
        disgas: True if the model has dissolved gas. NoMixing is used for all regions otherwise
        T_contact: Temperature for Rs saturated at the contact (K). Defaults to 293.15
    """
    return _select('RSVD', props, records, region_mapping, rsvd_tables, disgas, T_contact)


def select_rv_functions(props, records: Sequence, region_mapping, rvvd_tables: Sequence[DepthTable] = (),
                        vapoil: bool = False, T_contact: float = T_STANDARD) -> List[RsFunction]:
    """ Returns one Rv function per equilibration record
        props: Property object
        records: EquilRecord per region
        region_mapping: RegionMapping of the grid cells
        rvvd_tables: Available RVVD tables, referenced 1-based by the records
        vapoil: True if the model has vaporised oil. NoMixing is used for all regions otherwise
        T_contact: Temperature for Rv saturated at the contact (K). Defaults to 293.15
    """
    return _select('RVVD', props, records, region_mapping, rvvd_tables, vapoil, T_contact)
