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

from enum import Enum

from pyresequil.constants import ODE_RTOL, ODE_ATOL, ODE_MAX_EVALS, SAT_TOL, SAT_MAX_ITER, THRESHOLD_SAT, T_STANDARD

class phase(Enum):  # Canonical black-oil phase slots
    AQUA = 0
    LIQUID = 1
    VAPOUR = 2

class misc_method(Enum):  # Rs / Rv initialisation method
    NOMIX = 0
    VD = 1
    SATCONTACT = 2

class sat_table_type(Enum):  # Saturation function table type
    SWOF = 0
    SGOF = 1

class kr_family(Enum):  # Relative permeability family type
    COR = 0
    LET = 1

class_dic = {
    "phase": phase,
    "miscmethod": misc_method,
    "sattable": sat_table_type,
    "krfamily": kr_family,
}

# ============================================================================
#  Exceptions
# ============================================================================

class EquilError(Exception):
    """ Base class for all equilibration failures """

class EquilConfigError(EquilError, ValueError):
    """ Malformed or unsupported equilibration input """

class EquilConvergenceError(EquilError, RuntimeError):
    """ Pressure integration or saturation inversion failed to converge """

# ============================================================================
#  Numerical controls
# ============================================================================

class EquilOptions:
    """ Numerical controls for the equilibration solvers.

        rtol: Relative tolerance of the hydrostatic pressure integration. Defaults to 1e-8
        atol: Absolute tolerance of the hydrostatic pressure integration (Pa). Defaults to 1e-3
        max_rhs_evals: Maximum density evaluations per integration branch before giving up. Defaults to 200000
        sat_tol: Saturation tolerance for capillary pressure inversion. Defaults to 1e-10
        sat_max_iter: Maximum root-finding iterations per inversion. Defaults to 100
        threshold_sat: Distance from an end-point saturation treated as at the end-point. Defaults to 1e-6
        temperature: Initial temperature (K), scalar or one value per grid cell. Defaults to 293.15
    """
    def __init__(self, rtol=ODE_RTOL, atol=ODE_ATOL, max_rhs_evals=ODE_MAX_EVALS,
                 sat_tol=SAT_TOL, sat_max_iter=SAT_MAX_ITER,
                 threshold_sat=THRESHOLD_SAT, temperature=T_STANDARD):
        if rtol <= 0 or atol <= 0:
            raise EquilConfigError("Integration tolerances must be positive")
        if max_rhs_evals < 1 or sat_max_iter < 1:
            raise EquilConfigError("Iteration caps must be at least 1")
        if sat_tol <= 0:
            raise EquilConfigError("Saturation tolerance must be positive")
        self.rtol = rtol
        self.atol = atol
        self.max_rhs_evals = int(max_rhs_evals)
        self.sat_tol = sat_tol
        self.sat_max_iter = int(sat_max_iter)
        self.threshold_sat = threshold_sat
        self.temperature = temperature

    def __repr__(self):
        return (f"EquilOptions(rtol={self.rtol}, atol={self.atol}, max_rhs_evals={self.max_rhs_evals}, "
                f"sat_tol={self.sat_tol}, sat_max_iter={self.sat_max_iter}, "
                f"threshold_sat={self.threshold_sat}, temperature={self.temperature})")
