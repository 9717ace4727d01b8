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
from typing import List, Mapping, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd
from tabulate import tabulate

from pyresequil.classes import phase, EquilOptions, EquilConfigError
from pyresequil.constants import GRAVITY, BARSA
from pyresequil.density import DensityCalculator
from pyresequil.miscibility import RsFunction, select_rs_functions, select_rv_functions
from pyresequil.pressure import phase_pressures
from pyresequil.records import EquilRecord, DepthTable, deck_has, get_equil, get_rsvd, get_rvvd, get_swatinit
from pyresequil.regions import RegionMapping, equilnum, global_cell_lookup
from pyresequil.saturation import phase_saturations

logger = logging.getLogger(__name__)


class EquilReg:
    """ Everything needed to equilibrate one region.

        rec: EquilRecord of the region
        density_calculator: DensityCalculator bound to the region's representative cell
        rs: Rs function of the region (dissolved gas)
        rv: Rv function of the region (vaporised oil)
        phase_usage: PhaseUsage of the model
    """
    def __init__(self, rec: EquilRecord, density_calculator: DensityCalculator,
                 rs: RsFunction, rv: RsFunction, phase_usage):
        self.rec = rec
        self.density_calculator = density_calculator
        self.dissolution_function = rs
        self.evaporation_function = rv
        self.phase_usage = phase_usage

    @property
    def datum(self) -> float:
        """Datum depth (m)."""
        return self.rec.datum_depth

    @property
    def pressure(self) -> float:
        """Pressure at datum depth (Pa)."""
        return self.rec.datum_pressure

    @property
    def zwoc(self) -> float:
        return self.rec.woc_depth

    @property
    def pcow_woc(self) -> float:
        return self.rec.pcow_woc

    @property
    def zgoc(self) -> float:
        return self.rec.goc_depth

    @property
    def pcgo_goc(self) -> float:
        return self.rec.pcgo_goc

    @property
    def accuracy(self) -> int:
        return self.rec.accuracy


def temperature(depths: npt.ArrayLike, reg: EquilReg, cells: npt.ArrayLike,
                options: Optional[EquilOptions] = None) -> np.ndarray:
    """ Returns the initial temperature (K) of each cell in the region. Uniform standard temperature unless
        the options carry a per-cell temperature array """
    if options is None:
        options = EquilOptions()
    cells = np.asarray(cells, dtype=int)
    if np.ndim(options.temperature) == 0:
        return np.full(cells.size, float(options.temperature))
    t = np.asarray(options.temperature, dtype=float)
    if t.size != np.size(depths):
        raise EquilConfigError(f"Temperature has {t.size} values, expected one per cell ({np.size(depths)})")
    return t[cells]


def compute_rs(depths: npt.ArrayLike, cells: npt.ArrayLike, pressure: np.ndarray, temp: np.ndarray,
               rs_func: RsFunction, complementary_sat: np.ndarray) -> np.ndarray:
    """ Returns Rs (or Rv) of each cell in the region
        depths: Cell centre depth (m) of every grid cell
        cells: Cells of the region
        pressure: Oil pressure (for Rs) or gas pressure (for Rv) per region cell (Pa)
        temp: Temperature per region cell (K)
        rs_func: Rs or Rv function of the region
        complementary_sat: Gas saturation (for Rs) or oil saturation (for Rv) per region cell
    """
    cells = np.asarray(cells, dtype=int)
    z = np.asarray(depths, dtype=float)[cells]
    rs = np.zeros(cells.size)
    for i in range(cells.size):
        rs[i] = rs_func(z[i], pressure[i], temp[i], complementary_sat[i])
    return rs


def copy_from_region(source: np.ndarray, cells: np.ndarray, destination: np.ndarray) -> None:
    # Positional: the i'th region value belongs to the i'th cell of the region
    destination[cells] = source


def surface_volumes(props, pressure: np.ndarray, temp: np.ndarray, saturation: np.ndarray,
                    rs: np.ndarray, rv: np.ndarray) -> np.ndarray:
    """ Returns surface volumes (sm³ per rm³ of pore volume) of every active phase, shape (num_cells, num_phases).
        Dissolved gas is added to the gas surface volume and vaporised oil to the oil surface volume.

        props: Property object
        pressure: Reference pressure per cell (Pa)
        temp: Temperature per cell (K)
        saturation: Saturations, shape (num_cells, num_phases)
        rs: Dissolved gas-oil ratio per cell (sm³/sm³)
        rv: Vaporised oil-gas ratio per cell (sm³/sm³)
    """
    pu = props.phase_usage
    ncell, nph = saturation.shape
    surf = np.zeros((ncell, nph))
    o = pu.pos(phase.LIQUID)
    g = pu.pos(phase.VAPOUR)
    for cell in range(ncell):
        s = saturation[cell]
        b = props.fvf(pressure[cell], temp[cell], s, cell)
        surf[cell] = s / b
        if o >= 0 and g >= 0:
            free_oil = s[o] / b[o]
            free_gas = s[g] / b[g]
            surf[cell, o] += rv[cell] * free_gas
            surf[cell, g] += rs[cell] * free_oil
    return surf


class Grid:
    """ Minimal grid description used by the equilibration.

        depths: Cell centre depth (m) of every active cell
        global_cell: Optional map from active cell index to global (deck) cell index
    """
    def __init__(self, depths: npt.ArrayLike, global_cell: Optional[npt.ArrayLike] = None):
        self.depths = np.asarray(depths, dtype=float).ravel()
        self.global_cell = None if global_cell is None else np.asarray(global_cell, dtype=int).ravel()
        if self.global_cell is not None and self.global_cell.size != self.depths.size:
            raise EquilConfigError("global_cell must have one entry per active cell")

    @property
    def num_cells(self) -> int:
        return self.depths.size


class InitialStateComputer:
    """ Computes initial phase pressures, saturations, Rs and Rv of every cell by equilibration.

        props: Property object (BlackoilPropertiesInterface)
        records: EquilRecord per equilibration region
        region_mapping: RegionMapping of the grid cells
        depths: Cell centre depth (m) of every active cell
        grav: Acceleration of gravity (m/s²). Defaults to 9.80665
        rsvd_tables: RSVD tables referenced by the records. Defaults to none
        rvvd_tables: RVVD tables referenced by the records. Defaults to none
        disgas: True if the oil holds dissolved gas. Defaults to False
        vapoil: True if the gas holds vaporised oil. Defaults to False
        swat_init: Optional prescribed water saturation per active cell
        options: EquilOptions numerical controls. Defaults used if not provided
    """
    def __init__(self, props, records: Sequence[EquilRecord], region_mapping: RegionMapping,
                 depths: npt.ArrayLike, grav: float = GRAVITY,
                 rsvd_tables: Sequence[DepthTable] = (), rvvd_tables: Sequence[DepthTable] = (),
                 disgas: bool = False, vapoil: bool = False,
                 swat_init: Optional[npt.ArrayLike] = None, options: Optional[EquilOptions] = None):
        if options is None:
            options = EquilOptions()
        depths = np.asarray(depths, dtype=float).ravel()
        ncell = depths.size
        pu = props.phase_usage
        if region_mapping.num_cells != ncell:
            raise EquilConfigError(f"Region mapping covers {region_mapping.num_cells} cells, grid has {ncell}")
        if region_mapping.num_regions > len(records):
            raise EquilConfigError(
                f"EQLNUM refers to region {region_mapping.num_regions}, "
                f"but only {len(records)} EQUIL records are given")
        for rec in records:
            if rec.accuracy != 0:
                raise EquilConfigError("kw EQUIL, item 9: Only N=0 supported.")
        if swat_init is not None:
            swat_init = np.asarray(swat_init, dtype=float).ravel()
            if swat_init.size != ncell:
                raise EquilConfigError(f"SWATINIT has {swat_init.size} values, grid has {ncell}")
            if np.any((swat_init < 0.0) | (swat_init > 1.0)):
                bad = int(np.argmax((swat_init < 0.0) | (swat_init > 1.0)))
                raise EquilConfigError(f"SWATINIT value {swat_init[bad]} in cell {bad} is outside [0, 1]")
            if not pu.used(phase.AQUA):
                logger.warning("SWATINIT ignored, water is not an active phase")
                swat_init = None

        oil_gas = pu.used(phase.LIQUID) and pu.used(phase.VAPOUR)
        if (disgas or vapoil) and not oil_gas:
            logger.debug("Oil and gas not both active, Rs and Rv are not computed")
        T_contact = options.temperature if np.ndim(options.temperature) == 0 else None
        kwargs = {} if T_contact is None else {'T_contact': T_contact}
        self.rs_func = select_rs_functions(props, records, region_mapping, rsvd_tables,
                                           disgas and oil_gas, **kwargs)
        self.rv_func = select_rv_functions(props, records, region_mapping, rvvd_tables,
                                           vapoil and oil_gas, **kwargs)

        self.props = props
        self.records = list(records)
        self.region_mapping = region_mapping
        self.depths = depths
        self.grav = grav
        self.swat_init = swat_init
        self.options = options

        logger.info("Equilibrating %d cells in %d regions", ncell, region_mapping.num_regions)
        self._calc_press_sat_rs_rv()

    @classmethod
    def from_deck(cls, props, deck: Mapping, grid: Grid, grav: float = GRAVITY,
                  options: Optional[EquilOptions] = None) -> "InitialStateComputer":
        """ Creates the computer from deck keywords EQUIL, EQLNUM, RSVD, RVVD, SWATINIT, DISGAS and VAPOIL
            props: Property object
            deck: Mapping of keyword to parsed data (global cell order for per-cell keywords)
            grid: Grid
            grav: Acceleration of gravity (m/s²). Defaults to 9.80665
            options: EquilOptions numerical controls. Defaults used if not provided
        """
        records = get_equil(deck)
        lookup = global_cell_lookup(grid.global_cell)
        eqlnum = deck['EQLNUM'] if deck_has(deck, 'EQLNUM') else None
        region_mapping = RegionMapping(equilnum(grid.num_cells, eqlnum, lookup))
        return cls(props, records, region_mapping, grid.depths, grav,
                   rsvd_tables=get_rsvd(deck), rvvd_tables=get_rvvd(deck),
                   disgas=deck_has(deck, 'DISGAS'), vapoil=deck_has(deck, 'VAPOIL'),
                   swat_init=get_swatinit(deck, grid.num_cells, lookup), options=options)

    def _calc_press_sat_rs_rv(self):
        props = self.props
        pu = props.phase_usage
        nph = pu.num_phases
        ncell = self.depths.size
        pp = [np.zeros(ncell) for _ in range(nph)]
        sat = [np.zeros(ncell) for _ in range(nph)]
        rs = np.zeros(ncell)
        rv = np.zeros(ncell)
        props.reset_swatinit_scaling()

        for r, cells in self.region_mapping:
            if cells.size == 0:
                continue
            repcell = int(cells[0])
            calc = DensityCalculator(props, repcell)
            eqreg = EquilReg(self.records[r], calc, self.rs_func[r], self.rv_func[r], pu)
            logger.debug("Region %d: %d cells, representative cell %d", r, cells.size, repcell)

            press = phase_pressures(self.depths, eqreg, cells, self.grav, self.options)
            temp = temperature(self.depths, eqreg, cells, self.options)
            s = phase_saturations(eqreg, cells, props, self.swat_init, press, self.options)

            for p in range(nph):
                copy_from_region(press[p], cells, pp[p])
                copy_from_region(s[p], cells, sat[p])
            if pu.used(phase.LIQUID) and pu.used(phase.VAPOUR):
                oilpos = pu.pos(phase.LIQUID)
                gaspos = pu.pos(phase.VAPOUR)
                copy_from_region(compute_rs(self.depths, cells, press[oilpos], temp, self.rs_func[r], s[gaspos]),
                                 cells, rs)
                copy_from_region(compute_rs(self.depths, cells, press[gaspos], temp, self.rv_func[r], s[oilpos]),
                                 cells, rv)

        # Published only once every region has succeeded
        self._pp, self._sat, self._rs, self._rv = pp, sat, rs, rv

    def press(self) -> List[np.ndarray]:
        """Phase pressures (Pa), one array per active phase."""
        return self._pp

    def saturation(self) -> List[np.ndarray]:
        """Phase saturations, one array per active phase."""
        return self._sat

    def rs(self) -> np.ndarray:
        return self._rs

    def rv(self) -> np.ndarray:
        return self._rv


class InitialState:
    """ Initial reservoir state in cell order.

        pressure: Reference (oil, or water if oil is inactive) pressure per cell (Pa)
        saturation: Saturations, shape (num_cells, num_phases)
        gasoilratio: Dissolved gas-oil ratio per cell (sm³/sm³)
        rv: Vaporised oil-gas ratio per cell (sm³/sm³)
        phase_pressures: Phase pressures, shape (num_phases, num_cells) (Pa)
        phase_usage: PhaseUsage of the model
        surfacevol: Surface volumes per unit pore volume, shape (num_cells, num_phases) (sm³/rm³). Optional
    """
    def __init__(self, pressure, saturation, gasoilratio, rv, phase_pressures, phase_usage, surfacevol=None):
        self.pressure = pressure
        self.saturation = saturation
        self.gasoilratio = gasoilratio
        self.rv = rv
        self.phase_pressures = phase_pressures
        self.phase_usage = phase_usage
        self.surfacevol = surfacevol

    @property
    def num_cells(self) -> int:
        return self.pressure.size

    def summary(self, region_mapping: Optional[RegionMapping] = None) -> pd.DataFrame:
        """ Returns a DataFrame with one row per region: cell count, pressure range (bar) and mean saturations """
        if region_mapping is None:
            region_mapping = RegionMapping(np.zeros(self.num_cells, dtype=int))
        pu = self.phase_usage
        names = {phase.AQUA: 'Sw', phase.LIQUID: 'So', phase.VAPOUR: 'Sg'}
        rows = []
        for r, cells in region_mapping:
            row = {'Region': r + 1, 'Cells': cells.size}
            if cells.size:
                row['Pmin (bar)'] = self.pressure[cells].min() / BARSA
                row['Pmax (bar)'] = self.pressure[cells].max() / BARSA
                for p in phase:
                    if pu.used(p):
                        row[names[p]] = self.saturation[cells, pu.pos(p)].mean()
            rows.append(row)
        return pd.DataFrame(rows)

    def print_summary(self, region_mapping: Optional[RegionMapping] = None) -> str:
        df = self.summary(region_mapping)
        text = tabulate(df, headers='keys', showindex=False, floatfmt='.4f')
        print(text)
        return text


def init_state_equil(grid: Grid, props, deck: Mapping, grav: float = GRAVITY,
                     options: Optional[EquilOptions] = None) -> InitialState:
    """ Returns the initial state computed by equilibration.

        grid: Grid (cell depths and optional local-to-global map)
        props: Property object, PVT and capillary pressure properties are used
        deck: Mapping of keyword to parsed data. EQUIL is required; EQLNUM, RSVD, RVVD, SWATINIT, DISGAS and VAPOIL are used if present
        grav: Acceleration of gravity (m/s²), assumed to act in the direction of increasing depth. Defaults to 9.80665
        options: EquilOptions numerical controls. Defaults used if not provided
    """
    isc = InitialStateComputer.from_deck(props, deck, grid, grav, options)
    pu = props.phase_usage
    ref = pu.pos(phase.LIQUID) if pu.used(phase.LIQUID) else pu.pos(phase.AQUA)
    if ref < 0:
        ref = 0
    pp = np.array(isc.press())
    sat = np.array(isc.saturation()).T.copy()
    rs = isc.rs().copy()
    rv = isc.rv().copy()
    temp = temperature(grid.depths, None, np.arange(grid.num_cells), options)
    surf = surface_volumes(props, pp[ref], temp, sat, rs, rv)
    return InitialState(pp[ref].copy(), sat, rs, rv, pp, pu, surf)
