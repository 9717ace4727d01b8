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
from typing import List

import numpy as np
import numpy.typing as npt
from scipy.integrate import solve_ivp

from pyresequil.classes import phase, EquilOptions, EquilConfigError, EquilConvergenceError
from pyresequil.constants import GRAVITY, T_STANDARD
from pyresequil.shared_fns import convert_to_numpy

logger = logging.getLogger(__name__)


class PhasePressODE:
    """ Right hand side of the phase pressure ODE, dp/dz = rho(z, p) * g

        reg: Equilibration region (EquilReg)
        ph: Phase being integrated (phase Enum)
        temp: Temperature (K)
        grav: Acceleration of gravity (m/s²)
        max_evals: Maximum number of evaluations before the integration is abandoned
    """
    def __init__(self, reg, ph: phase, temp: float, grav: float, max_evals: int):
        pu = reg.phase_usage
        self.calc = reg.density_calculator
        self.ph = ph
        self.temp = temp
        self.grav = grav
        self.max_evals = max_evals
        self.nevals = 0
        self.np = pu.num_phases
        self.ix = pu.pos(ph)
        self.oix = pu.pos(phase.LIQUID)
        self.gix = pu.pos(phase.VAPOUR)
        self.wix = pu.pos(phase.AQUA)
        self.rs = reg.dissolution_function
        self.rv = reg.evaporation_function

    def density(self, depth: float, press: float) -> float:
        svol = np.zeros(self.np)
        if self.ph is phase.AQUA:
            svol[self.wix] = 1.0
        elif self.ph is phase.LIQUID:
            svol[self.oix] = 1.0
            if self.gix >= 0:
                svol[self.gix] = self.rs(depth, press, self.temp)
        else:
            svol[self.gix] = 1.0
            if self.oix >= 0:
                svol[self.oix] = self.rv(depth, press, self.temp)
        return self.calc(press, self.temp, svol)[self.ix]

    def __call__(self, depth, press):
        self.nevals += 1
        if self.nevals > self.max_evals:
            raise EquilConvergenceError(
                f"{self.ph.name} pressure integration exceeded {self.max_evals} density evaluations")
        return [self.density(depth, press[0]) * self.grav]


class PressureProfile:
    """ Phase pressure versus depth, integrated from an anchor point towards both ends of a depth span.

        rhs: ODE right hand side (PhasePressODE)
        z0: Anchor depth (m)
        p0: Phase pressure at anchor depth (Pa)
        span: (Shallowest, deepest) depth the profile must cover (m)
        options: EquilOptions
    """
    def __init__(self, rhs, z0: float, p0: float, span, options: EquilOptions):
        self.z0 = z0
        self.p0 = p0
        self.up = self._solve(rhs, z0, p0, min(span[0], z0), options)
        self.down = self._solve(rhs, z0, p0, max(span[1], z0), options)

    @staticmethod
    def _solve(rhs, z0, p0, z1, options):
        if z1 == z0:
            return None
        rhs.nevals = 0
        sol = solve_ivp(rhs, (z0, z1), [p0], method='RK45', dense_output=True,
                        rtol=options.rtol, atol=options.atol)
        if not sol.success:
            raise EquilConvergenceError(f"Pressure integration from {z0} m to {z1} m failed: {sol.message}")
        return sol.sol

    def __call__(self, z: npt.ArrayLike):
        scalar = np.ndim(z) == 0
        z = convert_to_numpy(z).astype(float)
        p = np.full(z.shape, self.p0)
        above = z < self.z0
        below = z > self.z0
        if above.any():
            p[above] = self.up(z[above])[0]
        if below.any():
            p[below] = self.down(z[below])[0]
        if scalar:
            return float(p[0])
        return p


def _profile(reg, ph, z0, p0, span, temp, grav, options):
    rhs = PhasePressODE(reg, ph, temp, grav, options.max_rhs_evals)
    logger.debug("%s pressure anchored at %.3f m, %.1f Pa", ph.name, z0, p0)
    return PressureProfile(rhs, z0, p0, span, options)


def phase_pressures(depths: npt.ArrayLike, reg, cells: npt.ArrayLike, grav: float = GRAVITY,
                    options: EquilOptions = None, temp: float = None) -> List[np.ndarray]:
    """ Returns initial phase pressures of the cells in an equilibration region, one array per active phase
        (ordered by phase position) holding one value per cell, in the order of cells.

        depths: Cell centre depth (m) of every grid cell
        reg: Equilibration region (EquilReg)
        cells: Cells of the region
        grav: Acceleration of gravity (m/s²). Defaults to 9.80665
        options: EquilOptions numerical controls. Defaults used if not provided
        temp: Temperature used in the density evaluations (K). Defaults to the options temperature
    """
    if options is None:
        options = EquilOptions()
    if reg.accuracy != 0:
        raise EquilConfigError("kw EQUIL, item 9: Only N=0 supported.")
    if temp is None:
        temp = options.temperature if np.ndim(options.temperature) == 0 else T_STANDARD

    pu = reg.phase_usage
    cells = np.asarray(cells, dtype=int)
    z = np.asarray(depths, dtype=float)[cells]
    press = [np.zeros(cells.size) for _ in range(pu.num_phases)]
    if cells.size == 0:
        return press

    wat, oil, gas = (pu.used(p) for p in phase)
    datum, zwoc, zgoc = reg.datum, reg.zwoc, reg.zgoc
    # Contacts are kept inside the span so contact pressures are interpolated, never extrapolated
    span = (min(z.min(), zwoc, zgoc), max(z.max(), zwoc, zgoc))
    if not (span[0] <= datum <= span[1]):
        logger.warning("Datum depth %.3f m lies outside region depth span [%.3f, %.3f] m", datum, *span)

    prof = {}
    args = (span, temp, grav, options)
    if wat and (datum > zwoc or not (oil or gas)):
        # Datum in water zone
        prof[phase.AQUA] = _profile(reg, phase.AQUA, datum, reg.pressure, *args)
        po_woc = prof[phase.AQUA](zwoc) + reg.pcow_woc
        if oil:
            prof[phase.LIQUID] = _profile(reg, phase.LIQUID, zwoc, po_woc, *args)
            if gas:
                po_goc = prof[phase.LIQUID](zgoc)
                prof[phase.VAPOUR] = _profile(reg, phase.VAPOUR, zgoc, po_goc + reg.pcgo_goc, *args)
        elif gas:
            # Water-gas system, the gas meets water at the water contact
            prof[phase.VAPOUR] = _profile(reg, phase.VAPOUR, zwoc, po_woc, *args)
    elif gas and (datum < zgoc or not oil):
        # Datum in gas zone
        prof[phase.VAPOUR] = _profile(reg, phase.VAPOUR, datum, reg.pressure, *args)
        if oil:
            po_goc = prof[phase.VAPOUR](zgoc) - reg.pcgo_goc
            prof[phase.LIQUID] = _profile(reg, phase.LIQUID, zgoc, po_goc, *args)
            if wat:
                po_woc = prof[phase.LIQUID](zwoc)
                prof[phase.AQUA] = _profile(reg, phase.AQUA, zwoc, po_woc - reg.pcow_woc, *args)
        elif wat:
            pg_woc = prof[phase.VAPOUR](zwoc)
            prof[phase.AQUA] = _profile(reg, phase.AQUA, zwoc, pg_woc - reg.pcow_woc, *args)
    else:
        # Datum in oil zone
        prof[phase.LIQUID] = _profile(reg, phase.LIQUID, datum, reg.pressure, *args)
        if wat:
            po_woc = prof[phase.LIQUID](zwoc)
            prof[phase.AQUA] = _profile(reg, phase.AQUA, zwoc, po_woc - reg.pcow_woc, *args)
        if gas:
            po_goc = prof[phase.LIQUID](zgoc)
            prof[phase.VAPOUR] = _profile(reg, phase.VAPOUR, zgoc, po_goc + reg.pcgo_goc, *args)

    for ph, f in prof.items():
        press[pu.pos(ph)] = f(z)
    return press
