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
from typing import Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd

from pyresequil.classes import phase, EquilConfigError
from pyresequil.validate import validate_methods
from pyresequil.shared_fns import interp_table, is_non_decreasing

logger = logging.getLogger(__name__)

_PHASE_ALIASES = {'WATER': 'AQUA', 'OIL': 'LIQUID', 'GAS': 'VAPOUR', 'VAPOR': 'VAPOUR'}


class PhaseUsage:
    """ Which of the three black-oil phases are active, and their position among the active phases.

        phases: Active phases, as phase Enum members or names ('water', 'oil', 'gas', 'AQUA', 'LIQUID', 'VAPOUR')
    """
    def __init__(self, phases: Sequence = ('water', 'oil', 'gas')):
        used = [False] * len(phase)
        for p in phases:
            if isinstance(p, str):
                p = _PHASE_ALIASES.get(p.upper(), p)
            p = validate_methods(['phase'], [p])
            used[p.value] = True
        if not any(used):
            raise EquilConfigError("At least one phase must be active")
        self.phase_used = used
        self.phase_pos = [-1] * len(phase)
        pos = 0
        for p in phase:
            if used[p.value]:
                self.phase_pos[p.value] = pos
                pos += 1
        self.num_phases = pos

    def used(self, p: phase) -> bool:
        return self.phase_used[p.value]

    def pos(self, p: phase) -> int:
        return self.phase_pos[p.value]

    def __repr__(self):
        names = [p.name for p in phase if self.phase_used[p.value]]
        return f"PhaseUsage({names})"


class BlackoilPropertiesInterface(ABC):
    """ Fluid and saturation function properties required by the equilibration.

        Per-phase arrays are ordered by active phase position (see PhaseUsage).
        Capillary pressure convention: Pc(water) = po - pw, Pc(gas) = pg - po, Pc(oil) = 0
    """

    @property
    @abstractmethod
    def phase_usage(self) -> PhaseUsage:
        ...

    @property
    def num_phases(self) -> int:
        return self.phase_usage.num_phases

    @abstractmethod
    def density(self, pressure: float, temperature: float, surface_volume: np.ndarray, cell: int) -> np.ndarray:
        """ Phase densities (kg/m³) at reservoir conditions for a mixture of given surface volumes """

    @abstractmethod
    def rs_sat(self, pressure: float, temperature: float, cell: int) -> float:
        """ Saturated dissolved gas-oil ratio (sm³/sm³) """

    @abstractmethod
    def rv_sat(self, pressure: float, temperature: float, cell: int) -> float:
        """ Saturated vaporised oil-gas ratio (sm³/sm³) """

    @abstractmethod
    def cap_press(self, saturation: np.ndarray, cell: int) -> np.ndarray:
        """ Capillary pressures (Pa) for given phase saturations """

    @abstractmethod
    def sat_range(self, cell: int) -> Tuple[np.ndarray, np.ndarray]:
        """ Minimum and maximum saturation of each phase """

    @abstractmethod
    def fvf(self, pressure: float, temperature: float, surface_volume: np.ndarray, cell: int) -> np.ndarray:
        """ Formation volume factors (rm³/sm³) of every active phase for a mixture of given surface volumes """

    def swatinit_scaling(self, cell: int, pcow: float, sw: float) -> float:
        """ Hook to rescale the oil-water capillary pressure of a cell so that it honours a
            prescribed water saturation. Returns the water saturation to use """
        return sw

    def reset_swatinit_scaling(self) -> None:
        """ Hook to undo any capillary pressure scaling left by an earlier initialisation """


class BlackOilProps(BlackoilPropertiesInterface):
    """ Table based black-oil properties, identical in every cell.

        num_cells: Number of grid cells (used for per-cell capillary pressure scaling)
        phases: Active phases. Defaults to ('water', 'oil', 'gas')
        rho_sc: Dict of surface densities (kg/m³) keyed 'water', 'oil', 'gas'. Defaults to 1000, 800, 1 kg/m³
        pvtw: Optional dict with water reference pressure 'pref' (Pa), FVF 'bw' at pref, and compressibility 'cw' (1/Pa)
        pvdo: Optional DataFrame of oil FVF, columns ['P', 'Bo'] (Pa, rm³/sm³). Bo = 1 if not provided
        pvdg: Optional DataFrame of gas FVF, columns ['P', 'Bg'] (Pa, rm³/sm³). Bg = 1 if not provided
        rs_table: Optional DataFrame of saturated Rs, columns ['P', 'Rs']. Dead oil if not provided
        rv_table: Optional DataFrame of saturated Rv, columns ['P', 'Rv']. Dry gas if not provided
        swof: Optional water-oil saturation table with columns 'Sw' and 'Pcow' (Pa). Zero capillary pressure if not provided
        sgof: Optional gas-oil saturation table with columns 'Sg' and 'Pcgo' (Pa). Zero capillary pressure if not provided
    """
    def __init__(self, num_cells: int, phases: Sequence = ('water', 'oil', 'gas'),
                 rho_sc: Optional[dict] = None, pvtw: Optional[dict] = None,
                 pvdo: Optional[pd.DataFrame] = None, pvdg: Optional[pd.DataFrame] = None,
                 rs_table: Optional[pd.DataFrame] = None, rv_table: Optional[pd.DataFrame] = None,
                 swof: Optional[pd.DataFrame] = None, sgof: Optional[pd.DataFrame] = None):
        self._pu = PhaseUsage(phases)
        self.num_cells = num_cells
        rho = {'water': 1000.0, 'oil': 800.0, 'gas': 1.0}
        if rho_sc is not None:
            rho.update(rho_sc)
        self.rho_sc = rho
        self.pvtw = pvtw
        self._bo = self._column_pair(pvdo, 'P', 'Bo')
        self._bg = self._column_pair(pvdg, 'P', 'Bg')
        self._rs = self._column_pair(rs_table, 'P', 'Rs')
        self._rv = self._column_pair(rv_table, 'P', 'Rv')
        self._pcow = self._column_pair(swof, 'Sw', 'Pcow', zero_if_missing=True)
        self._pcgo = self._column_pair(sgof, 'Sg', 'Pcgo', zero_if_missing=True)
        self._pcow_scale = np.ones(num_cells)

    @staticmethod
    def _column_pair(df, xcol, ycol, zero_if_missing=False):
        if df is None:
            return None
        if xcol not in df.columns:
            raise EquilConfigError(f"Table is missing column '{xcol}'")
        x = df[xcol].values.astype(float)
        if ycol in df.columns:
            y = df[ycol].values.astype(float)
        elif zero_if_missing:
            y = np.zeros_like(x)
        else:
            raise EquilConfigError(f"Table is missing column '{ycol}'")
        if not is_non_decreasing(x):
            raise EquilConfigError(f"Table column '{xcol}' must be non-decreasing")
        return x, y

    @property
    def phase_usage(self) -> PhaseUsage:
        return self._pu

    # ------------------------------------------------------------------
    #  PVT
    # ------------------------------------------------------------------
    def bw(self, pressure: float) -> float:
        if self.pvtw is None:
            return 1.0
        x = self.pvtw.get('cw', 0.0) * (pressure - self.pvtw.get('pref', 0.0))
        return self.pvtw.get('bw', 1.0) * np.exp(-x)

    def bo(self, pressure: float) -> float:
        return 1.0 if self._bo is None else interp_table(pressure, *self._bo)

    def bg(self, pressure: float) -> float:
        return 1.0 if self._bg is None else interp_table(pressure, *self._bg)

    def rs_sat(self, pressure: float, temperature: float, cell: int) -> float:
        return 0.0 if self._rs is None else interp_table(pressure, *self._rs)

    def rv_sat(self, pressure: float, temperature: float, cell: int) -> float:
        return 0.0 if self._rv is None else interp_table(pressure, *self._rv)

    def density(self, pressure: float, temperature: float, surface_volume: np.ndarray, cell: int) -> np.ndarray:
        pu = self._pu
        z = np.asarray(surface_volume, dtype=float)
        rho = np.zeros(pu.num_phases)
        wat, oil, gas = (pu.used(p) for p in phase)
        if wat:
            rho[pu.pos(phase.AQUA)] = self.rho_sc['water'] / self.bw(pressure)
        if oil:
            o = pu.pos(phase.LIQUID)
            rs = 0.0
            if gas and z[o] > 0:
                rs = min(z[pu.pos(phase.VAPOUR)] / z[o], self.rs_sat(pressure, temperature, cell))
            rho[o] = (self.rho_sc['oil'] + rs * self.rho_sc['gas']) / self.bo(pressure)
        if gas:
            g = pu.pos(phase.VAPOUR)
            rv = 0.0
            if oil and z[g] > 0:
                rv = min(z[pu.pos(phase.LIQUID)] / z[g], self.rv_sat(pressure, temperature, cell))
            rho[g] = (self.rho_sc['gas'] + rv * self.rho_sc['oil']) / self.bg(pressure)
        return rho

    def fvf(self, pressure: float, temperature: float, surface_volume: np.ndarray, cell: int) -> np.ndarray:
        pu = self._pu
        b = np.ones(pu.num_phases)
        if pu.used(phase.AQUA):
            b[pu.pos(phase.AQUA)] = self.bw(pressure)
        if pu.used(phase.LIQUID):
            b[pu.pos(phase.LIQUID)] = self.bo(pressure)
        if pu.used(phase.VAPOUR):
            b[pu.pos(phase.VAPOUR)] = self.bg(pressure)
        return b

    # ------------------------------------------------------------------
    #  Saturation functions
    # ------------------------------------------------------------------
    def cap_press(self, saturation: np.ndarray, cell: int) -> np.ndarray:
        pu = self._pu
        s = np.asarray(saturation, dtype=float)
        pc = np.zeros(pu.num_phases)
        if pu.used(phase.AQUA) and self._pcow is not None and pu.num_phases > 1:
            pc[pu.pos(phase.AQUA)] = interp_table(s[pu.pos(phase.AQUA)], *self._pcow) * self._pcow_scale[cell]
        if pu.used(phase.VAPOUR) and self._pcgo is not None and pu.num_phases > 1:
            pc[pu.pos(phase.VAPOUR)] = interp_table(s[pu.pos(phase.VAPOUR)], *self._pcgo)
        return pc

    def sat_range(self, cell: int) -> Tuple[np.ndarray, np.ndarray]:
        pu = self._pu
        smin = np.zeros(pu.num_phases)
        smax = np.ones(pu.num_phases)
        if pu.used(phase.AQUA) and self._pcow is not None:
            smin[pu.pos(phase.AQUA)] = self._pcow[0][0]
            smax[pu.pos(phase.AQUA)] = self._pcow[0][-1]
        if pu.used(phase.VAPOUR) and self._pcgo is not None:
            smin[pu.pos(phase.VAPOUR)] = self._pcgo[0][0]
            smax[pu.pos(phase.VAPOUR)] = self._pcgo[0][-1]
        return smin, smax

    def swatinit_scaling(self, cell: int, pcow: float, sw: float) -> float:
        """ Scales the cell's oil-water capillary pressure curve so that Pcow(sw) equals pcow.
            Cells below the water-oil contact (pcow below threshold) are given maximum water saturation,
            and values at or below connate water are raised to connate water, both with the curve unscaled.
            Returns the water saturation to use
        """
        pc_low_threshold = 1.0e-8
        w = self._pu.pos(phase.AQUA)
        smin, smax = self.sat_range(cell)
        self._pcow_scale[cell] = 1.0
        if pcow < pc_low_threshold:
            return float(smax[w])
        if sw <= smin[w]:
            return float(smin[w])
        if self._pcow is None:
            return sw
        pc = interp_table(sw, *self._pcow)
        if pc > pc_low_threshold:
            self._pcow_scale[cell] = pcow / pc
        else:
            logger.debug("Cell %d: SWATINIT %.4f at zero capillary pressure, curve left unscaled", cell, sw)
        return sw

    def reset_swatinit_scaling(self) -> None:
        self._pcow_scale[:] = 1.0

    def pcow_scale(self, cell: int) -> float:
        return float(self._pcow_scale[cell])
