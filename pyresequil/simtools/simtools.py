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
import pandas as pd
from tabulate import tabulate

from pyresequil.classes import sat_table_type, kr_family, EquilConfigError
from pyresequil.validate import validate_methods


def LET(s: np.ndarray, L: float, E: float, T: float) -> np.ndarray:
    """
    Returns LET Relative Permeability curve - Lomeland, F.; Ebeltoft, E.; Thomas, W.H. (2005).

    Input:
    s: Normalized saturation of the phase (np.array)
    L, E, T: Three correlation parameters 'L', 'E', and 'T'.

    Output:
    Relative permeability of the phase (np.array)
    """
    return s ** L / (s ** L + E * (1 - s) ** T)

def corey(s: np.ndarray, n: float) -> np.ndarray:
    """
    Returns Corey Relative Permeability curve.

    Input:
    s: Normalized saturation of the phase (np.array)
    n: Corey curve exponent.

    Output:
    Relative permeability of the phase (np.array)
    """
    return s ** n

def pc_power(s: np.ndarray, pc_max: float, npc: float) -> np.ndarray:
    """
    Returns power law capillary pressure, pc_max * s ** npc

    Input:
    s: Normalized saturation measured from the end where Pc vanishes (np.array)
    pc_max: Capillary pressure at s = 1 (Pa)
    npc: Curve exponent

    Output:
    Capillary pressure (np.array)
    """
    return pc_max * s ** npc

def sat_table(
    rows: int,
    table: sat_table_type = sat_table_type.SWOF,
    krfamily: kr_family = kr_family.COR,
    kromax: float = 1,
    krgmax: float = 1,
    krwmax: float = 1,
    swc: float = 0,
    sorw: float = 0,
    sorg: float = 0,
    no: float = 2,
    nw: float = 2,
    ng: float = 2,
    L: float = 1,
    E: float = 1,
    T: float = 1,
    pc_max: float = 0,
    npc: float = 1,
    export: bool = False,
) -> pd.DataFrame:
    """ Returns ECLIPSE styled saturation function tables with a capillary pressure column
        rows: Integer value specifying the number of table rows desired
        table: A string or sat_table_type Enum class that specifies one of two table type choices;
                   SWOF: Water / Oil table, columns Sw, Krwo, Krow, Pcow
                   SGOF: Gas / Oil table, columns Sg, Krgo, Krog, Pcgo
        krfamily: A string or kr_family Enum class, COR (Corey) or LET. Defaults to COR
        kromax, krgmax, krwmax: Maximum Kr of oil, gas and water. Default values = 1
        swc: Connate water saturation. Default value = 0
        sorw: Residual oil saturation to water. Default value = 0
        sorg: Residual oil saturation to gas. Default value = 0
        no, nw, ng: Corey exponents to oil, water and gas respectively. Default values = 2
        L, E, T: LET parameters, applied to every phase when krfamily is LET. Default values = 1
        pc_max: Capillary pressure (Pa) at connate water (SWOF), or at maximum gas saturation (SGOF). Default value = 0
        npc: Capillary pressure curve exponent. Default value = 1
        export: Boolean value that controls whether an include file with same name as table is created. Default: False
    """
    table, krfamily = validate_methods(['sattable', 'krfamily'], [table, krfamily])

    if rows < 2:
        raise EquilConfigError("Saturation tables need at least two rows")
    if swc + sorw >= 1 or swc + sorg >= 1:
        raise EquilConfigError("Saturation consistency check failure: swc + residual oil must be less than 1")
    if pc_max < 0:
        raise EquilConfigError("pc_max must not be negative")

    def kr(s, n, krmax):
        if krfamily is kr_family.LET:
            return krmax * LET(s, L, E, T)
        return krmax * corey(s, n)

    df = pd.DataFrame()
    if table is sat_table_type.SWOF:
        sw = np.linspace(swc, 1 - sorw, rows - 1 if sorw > 0 else rows)
        if sorw > 0:
            sw = np.append(sw, 1.0)
        swn = np.clip((sw - swc) / (1 - swc - sorw), 0, 1)
        krw = kr(swn, nw, krwmax)
        if sorw > 0:
            krw[-1] = 1
        df["Sw"] = sw
        df["Krwo"] = krw
        df["Krow"] = kr(1 - swn, no, kromax)
        df["Pcow"] = pc_power(1 - swn, pc_max, npc)
        headings = ["-- Sw", "Krwo", "Krow", "Pcow"]
    else:
        sg = np.linspace(0, 1 - swc - sorg, rows)
        sgn = np.clip(sg / (1 - swc - sorg), 0, 1)
        df["Sg"] = sg
        df["Krgo"] = kr(sgn, ng, krgmax)
        df["Krog"] = kr(1 - sgn, no, kromax)
        df["Pcgo"] = pc_power(sgn, pc_max, npc)
        headings = ["-- Sg", "Krgo", "Krog", "Pcgo"]

    if export:
        fileout = table.name + "\n" + tabulate(df.set_index(df.columns[0]), headings) + "\n/"
        with open(table.name + ".INC", "w") as text_file:
            text_file.write(fileout)
    return df
