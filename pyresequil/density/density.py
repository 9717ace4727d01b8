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

from pyresequil.classes import EquilConfigError


class DensityCalculator:
    """ Phase densities at the representative cell of an equilibration region.

        props: Property object (BlackoilPropertiesInterface)
        cell: Representative cell whose PVT behaviour is used for the whole region
    """
    def __init__(self, props, cell: int):
        self.props = props
        self.cell = int(cell)

    def __call__(self, pressure: float, temperature: float, surface_volume) -> np.ndarray:
        """ Returns density (kg/m³) of every active phase
            pressure: Phase pressure (Pa)
            temperature: Temperature (K)
            surface_volume: Surface volumes of each active phase in the mixture (sm³)
        """
        z = np.asarray(surface_volume, dtype=float)
        if z.size != self.props.num_phases:
            raise EquilConfigError(f"Expected {self.props.num_phases} surface volumes, got {z.size}")
        return np.asarray(self.props.density(pressure, temperature, z, self.cell), dtype=float)
