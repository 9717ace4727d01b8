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
from typing import List, Optional

import numpy as np
import numpy.typing as npt
from scipy.optimize import brentq

from pyresequil.classes import phase, EquilOptions, EquilConvergenceError

logger = logging.getLogger(__name__)


def _root(f, smin: float, smax: float, options: EquilOptions, what: str) -> float:
    s, r = brentq(f, smin, smax, xtol=options.sat_tol, maxiter=options.sat_max_iter,
                  full_output=True, disp=False)
    if not r.converged:
        raise EquilConvergenceError(
            f"{what} inversion did not converge in {options.sat_max_iter} iterations ({r.flag})")
    return s


def sat_from_pc(props, pos: int, cell: int, target_pc: float, increasing: bool = False,
                options: Optional[EquilOptions] = None) -> float:
    """ Returns the saturation at which a phase's capillary pressure equals target_pc.
        Targets beyond the range of the curve give the corresponding end-point saturation.

        props: Property object
        pos: Active phase position of the phase
        cell: Cell whose saturation functions are used
        target_pc: Capillary pressure to match (Pa)
        increasing: True if capillary pressure increases with saturation (gas), False if it decreases (water)
        options: EquilOptions. Defaults used if not provided
    """
    if options is None:
        options = EquilOptions()
    smin, smax = props.sat_range(cell)
    s0 = smax[pos] if increasing else smin[pos]
    s1 = smin[pos] if increasing else smax[pos]
    s = np.zeros(props.num_phases)

    def f(x):
        s[pos] = x
        return props.cap_press(s, cell)[pos] - target_pc

    if f(s0) <= 0.0:
        return s0
    elif f(s1) > 0.0:
        return s1
    return _root(f, min(s0, s1), max(s0, s1), options, "Capillary pressure")


def sat_from_sum_of_pcs(props, wpos: int, gpos: int, cell: int, target_pc: float,
                        options: Optional[EquilOptions] = None) -> float:
    """ Returns the water saturation at which Pcow(sw) + Pcgo(1 - sw) equals the gas-water pressure
        difference target_pc, i.e. water and gas in contact with no mobile oil.

        props: Property object
        wpos: Active phase position of water
        gpos: Active phase position of gas
        cell: Cell whose saturation functions are used
        target_pc: Gas-water capillary pressure to match (Pa)
        options: EquilOptions. Defaults used if not provided
    """
    if options is None:
        options = EquilOptions()
    smin, smax = props.sat_range(cell)
    s0, s1 = smin[wpos], smax[wpos]
    s = np.zeros(props.num_phases)

    def f(x):
        s[wpos] = x
        s[gpos] = 1.0 - x
        pc = props.cap_press(s, cell)
        return pc[wpos] + pc[gpos] - target_pc

    if f(s0) <= 0.0:
        return s0
    elif f(s1) > 0.0:
        return s1
    return _root(f, s0, s1, options, "Gas-water capillary pressure")


def phase_saturations(reg, cells: npt.ArrayLike, props, swat_init: Optional[np.ndarray],
                      phase_pressures: List[np.ndarray],
                      options: Optional[EquilOptions] = None) -> List[np.ndarray]:
    """ Returns initial phase saturations of the cells in an equilibration region, one array per active phase
        holding one value per cell, in the order of cells.

        Saturations follow from inverting the capillary pressure curves against the phase pressure
        differences. A prescribed water saturation (SWATINIT) takes precedence over the inverted one.
        Phase pressures are adjusted in place where a cell sits at an end-point saturation, so that
        pressure differences match the capillary pressures at the returned saturations.

        reg: Equilibration region (EquilReg)
        cells: Cells of the region
        props: Property object
        swat_init: Optional water saturation per active grid cell
        phase_pressures: Phase pressures of the region (from phase_pressures())
        options: EquilOptions. Defaults used if not provided
    """
    if options is None:
        options = EquilOptions()
    pu = reg.phase_usage
    cells = np.asarray(cells, dtype=int)
    nph = pu.num_phases
    sat = [np.zeros(cells.size) for _ in range(nph)]
    if nph == 1:
        sat[0][:] = 1.0
        return sat

    wat, oil, gas = (pu.used(p) for p in phase)
    w, o, g = (pu.pos(p) for p in phase)
    pp = phase_pressures
    threshold = options.threshold_sat

    for local, cell in enumerate(cells):
        smin, smax = props.sat_range(cell)
        sw = 0.0
        sg = 0.0
        if not oil:
            # Water-gas system
            if swat_init is None:
                sw = sat_from_sum_of_pcs(props, w, g, cell, pp[g][local] - pp[w][local], options)
            else:
                sw = swat_init[cell]
            sg = 1.0 - sw
            sat[w][local] = sw
            sat[g][local] = sg
            continue

        if wat:
            pcov = pp[o][local] - pp[w][local]
            if swat_init is None:
                sw = sat_from_pc(props, w, cell, pcov, options=options)
            else:
                sw = props.swatinit_scaling(cell, pcov, swat_init[cell])
        if gas:
            pcog = pp[g][local] - pp[o][local]
            sg = sat_from_pc(props, g, cell, pcog, increasing=True, options=options)
        if gas and wat and sw + sg > 1.0:
            # Overlapping gas-oil and oil-water transition zones, re-solve with gas in contact with water
            if swat_init is None:
                pcgw = pp[g][local] - pp[w][local]
                sw = sat_from_sum_of_pcs(props, w, g, cell, pcgw, options)
            sg = 1.0 - sw
            s = np.zeros(nph)
            s[w] = sw
            s[g] = sg
            pc = props.cap_press(s, cell)
            pp[o][local] = pp[g][local] - pc[g]
        if wat:
            sat[w][local] = sw
        if gas:
            sat[g][local] = sg
        sat[o][local] = 1.0 - sw - sg

        # Adjust phase pressures at end-point saturations
        s = np.zeros(nph)
        s[o] = 1.0
        if wat:
            s[w] = smax[w]
            s[o] -= s[w]
        if gas:
            s[g] = smin[g]
            s[o] -= s[g]
        if wat and sw > smax[w] - threshold:
            s[w] = smax[w]
            pc = props.cap_press(s, cell)
            pp[o][local] = pp[w][local] + pc[w]
        elif gas and sg > smax[g] - threshold:
            s[g] = smax[g]
            pc = props.cap_press(s, cell)
            pp[o][local] = pp[g][local] - pc[g]
        if gas and sg < smin[g] + threshold:
            s[g] = smin[g]
            pc = props.cap_press(s, cell)
            pp[g][local] = pp[o][local] + pc[g]
        if wat and sw < smin[w] + threshold:
            s[w] = smin[w]
            pc = props.cap_press(s, cell)
            pp[w][local] = pp[o][local] - pc[w]

    return sat
