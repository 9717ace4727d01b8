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

import numpy as np
import numpy.typing as npt

def convert_to_numpy(input_data):
    # Convert input data to a numpy array ensuring it is always sizeable
    if isinstance(input_data, np.ndarray):
        # Input is already a numpy array, just return it
        return input_data
    else:
        # Convert list, tuple, scalar, or other types to numpy array
        # Ensuring even scalars become arrays with one element
        return np.atleast_1d(input_data)

def interp_table(x: npt.ArrayLike, xs: np.ndarray, ys: np.ndarray):
    """ Linear interpolation in a tabulated function, held constant beyond the table end-points
        x: Value(s) to evaluate at
        xs: Non-decreasing abscissa column
        ys: Ordinate column, same length as xs
    """
    if len(xs) == 1:
        return np.full_like(np.asarray(x, dtype=float), ys[0]) if np.ndim(x) else float(ys[0])
    y = np.interp(x, xs, ys)
    if np.ndim(x) == 0:
        return float(y)
    return y

def is_non_decreasing(x: npt.ArrayLike) -> bool:
    x = np.asarray(x, dtype=float)
    return bool(np.all(np.diff(x) >= 0))
