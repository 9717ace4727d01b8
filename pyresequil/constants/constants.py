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


# Constants (SI units throughout)
GRAVITY = 9.80665  # Standard acceleration of gravity, m/s²
T_STANDARD = 273.15 + 20  # Standard temperature used for equilibration (K)
BARSA = 1e5  # Pa per bar

# Numerical controls for the equilibration solvers
ODE_RTOL = 1e-8  # Relative tolerance for the hydrostatic pressure integration
ODE_ATOL = 1e-3  # Absolute tolerance for the hydrostatic pressure integration (Pa)
ODE_MAX_EVALS = 200000  # Hard cap on density evaluations per integration branch
SAT_TOL = 1e-10  # Saturation tolerance for capillary pressure inversion
SAT_MAX_ITER = 100  # Hard cap on root-finding iterations per inversion
THRESHOLD_SAT = 1e-6  # Distance from an end-point saturation treated as at the end-point
RATIO_DP = 1e2  # Pressure perturbation for Rs/Rv pressure derivatives (Pa)
