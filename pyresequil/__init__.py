"""
pyresequil
===================================

------------------------------------------------------------------
Equilibration initialisation of black-oil reservoir simulation models
------------------------------------------------------------------

Computes the initial state of a reservoir model before time-stepping begins, assuming hydrostatic
and capillary equilibrium. Given, per equilibration region, a datum depth and pressure and the
depths of the water-oil and gas-oil contacts (ECLIPSE keyword EQUIL), it derives for every grid cell;

- Phase pressures, by integrating dp/dz = rho(p, z) * g from the datum and the contacts
- Phase saturations, by inverting capillary pressure curves against the phase pressure differences
- Dissolved gas-oil ratio (Rs) and vaporised oil-gas ratio (Rv), from RSVD / RVVD tables or saturated at the contact

Supporting modules provide region mapping (EQLNUM), equilibration records, a table based black-oil
property object and generation of SWOF / SGOF saturation function tables with capillary pressure.

Note: Modules are imported on first use, e.g. `import pyresequil.equil as equil`
"""

submodules = [
    'classes',
    'constants',
    'density',
    'equil',
    'miscibility',
    'pressure',
    'props',
    'records',
    'regions',
    'saturation',
    'shared_fns',
    'simtools',
    'validate'
]

__all__ = submodules

import importlib

def __dir__():
    return __all__


def __getattr__(name):
    if name in submodules:
        return importlib.import_module(f'pyresequil.{name}')
    else:
        try:
            return globals()[name]
        except KeyError:
            raise AttributeError(
                f"Module 'pyresequil' has no attribute '{name}'"
            )
