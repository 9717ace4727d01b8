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

from pyresequil.classes import class_dic, EquilConfigError

def validate_methods(names, variables):
    """ Converts method names supplied as strings into their Enum members
        names: List of class_dic keys, one per variable
        variables: List of values, each either an Enum member or its name as a string
    """
    variables = list(variables)
    for m, method in enumerate(names):
        if isinstance(variables[m], str):
            try:
                variables[m] = class_dic[method][variables[m].upper()]
            except KeyError:
                raise EquilConfigError(f"An incorrect {method} was specified: {variables[m]}")
    if len(variables) == 1:
        return variables[0]
    else:
        return variables
