#!/usr/bin/env python3
"""
Validation tests for props and density modules.
"""

import sys
import os
import numpy as np
import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
import pyresequil.props as props
from pyresequil.classes import phase, EquilConfigError
from pyresequil.density import DensityCalculator
from pyresequil.simtools import sat_table

RTOL = 1e-10

# =============================================================================
# Phase usage
# =============================================================================

def test_phase_usage_positions():
    pu = props.PhaseUsage(['water', 'gas'])
    assert pu.num_phases == 2
    assert pu.pos(phase.AQUA) == 0
    assert pu.pos(phase.LIQUID) == -1
    assert pu.pos(phase.VAPOUR) == 1
    assert not pu.used(phase.LIQUID)

def test_phase_usage_enum_and_names():
    pu = props.PhaseUsage([phase.LIQUID, 'VAPOUR'])
    assert pu.phase_pos == [-1, 0, 1]

def test_phase_usage_bad_name():
    try:
        props.PhaseUsage(['brine'])
        assert False, "Unknown phase should raise"
    except EquilConfigError:
        pass

# =============================================================================
# Black oil properties
# =============================================================================

def test_live_oil_density():
    """Oil density includes the dissolved gas mass, capped at saturated Rs"""
    rs = pd.DataFrame({'P': [0, 500e5], 'Rs': [0, 100]})
    pvdo = pd.DataFrame({'P': [0, 500e5], 'Bo': [1.2, 1.2]})
    bo = props.BlackOilProps(1, ('oil', 'gas'), rho_sc={'oil': 800, 'gas': 1}, pvdo=pvdo, rs_table=rs)
    rho = bo.density(250e5, 293.15, [1.0, 20.0], 0)
    assert abs(rho[0] - (800 + 20) / 1.2) < RTOL
    # Rs saturated at 50 at this pressure
    rho = bo.density(250e5, 293.15, [1.0, 80.0], 0)
    assert abs(rho[0] - (800 + 50) / 1.2) < RTOL
    assert abs(rho[1] - 1.0) < RTOL

def test_compressible_water_density():
    pvtw = {'pref': 100e5, 'bw': 1.0, 'cw': 4.5e-10}
    w = props.BlackOilProps(1, ('water',), pvtw=pvtw)
    rho = w.density(200e5, 293.15, [1.0], 0)
    assert abs(rho[0] - 1000 * np.exp(4.5e-10 * 100e5)) < 1e-9

def test_sat_range_from_tables():
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    sgof = sat_table(rows=11, table='SGOF', swc=0.2, pc_max=1e5)
    bo = props.BlackOilProps(1, swof=swof, sgof=sgof)
    smin, smax = bo.sat_range(0)
    np.testing.assert_allclose(smin, [0.2, 0, 0])
    np.testing.assert_allclose(smax, [1.0, 1, 0.8])

def test_single_phase_has_no_capillary_pressure():
    swof = sat_table(rows=5, table='SWOF', pc_max=2e5)
    w = props.BlackOilProps(1, ('water',), swof=swof)
    assert w.cap_press([0.5], 0)[0] == 0

def test_swatinit_scaling():
    """Oil-water capillary pressure curve of a cell is rescaled to honour SWATINIT"""
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    bo = props.BlackOilProps(2, ('water', 'oil'), swof=swof)
    sw = bo.swatinit_scaling(1, 1e5, 0.4)
    assert sw == 0.4
    assert abs(bo.pcow_scale(1) - 1e5 / 1.5e5) < RTOL
    assert bo.pcow_scale(0) == 1.0
    assert abs(bo.cap_press([0.4, 0.6], 1)[0] - 1e5) < 1e-6
    # Zero target leaves the curve untouched
    bo.swatinit_scaling(0, 0.0, 0.4)
    assert bo.pcow_scale(0) == 1.0

def test_missing_table_column():
    try:
        props.BlackOilProps(1, pvdo=pd.DataFrame({'P': [0, 1]}))
        assert False, "Missing Bo column should raise"
    except EquilConfigError as e:
        assert "Bo" in str(e)

# =============================================================================
# Density calculator
# =============================================================================

def test_density_calculator():
    bo = props.BlackOilProps(3, rho_sc={'water': 1020, 'oil': 850, 'gas': 0.9})
    calc = DensityCalculator(bo, 2)
    np.testing.assert_allclose(calc(100e5, 300, [1, 1, 1]), [1020, 850, 0.9])

def test_density_calculator_wrong_size():
    bo = props.BlackOilProps(1, ('water', 'oil'))
    calc = DensityCalculator(bo, 0)
    try:
        calc(100e5, 300, [1, 0, 0])
        assert False, "Surface volume size mismatch should raise"
    except EquilConfigError:
        pass


def test_swatinit_below_contact():
    """Below the water-oil contact the cell is fully water saturated and the curve is left unscaled"""
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    bo = props.BlackOilProps(1, ('water', 'oil'), swof=swof)
    bo.swatinit_scaling(0, 1e5, 0.4)
    assert bo.pcow_scale(0) != 1.0
    assert bo.swatinit_scaling(0, -19620.0, 0.3) == 1.0
    assert bo.pcow_scale(0) == 1.0

def test_swatinit_below_connate_water():
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    bo = props.BlackOilProps(1, ('water', 'oil'), swof=swof)
    assert bo.swatinit_scaling(0, 1e5, 0.1) == 0.2
    assert bo.swatinit_scaling(0, 1e5, 0.2) == 0.2
    assert bo.pcow_scale(0) == 1.0

def test_reset_swatinit_scaling():
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    bo = props.BlackOilProps(2, ('water', 'oil'), swof=swof)
    bo.swatinit_scaling(0, 1e5, 0.4)
    bo.swatinit_scaling(1, 0.5e5, 0.6)
    bo.reset_swatinit_scaling()
    assert bo.pcow_scale(0) == 1.0
    assert bo.pcow_scale(1) == 1.0

def test_formation_volume_factors():
    pvdo = pd.DataFrame({'P': [0, 500e5], 'Bo': [1.3, 1.1]})
    pvdg = pd.DataFrame({'P': [0, 500e5], 'Bg': [0.01, 0.002]})
    bo = props.BlackOilProps(1, pvtw={'pref': 0, 'bw': 1.02, 'cw': 0}, pvdo=pvdo, pvdg=pvdg)
    np.testing.assert_allclose(bo.fvf(250e5, 293.15, [0.2, 0.5, 0.3], 0), [1.02, 1.2, 0.006])
    # Inactive water is skipped
    og = props.BlackOilProps(1, ('oil', 'gas'), pvdo=pvdo)
    np.testing.assert_allclose(og.fvf(0.0, 293.15, [1, 0], 0), [1.3, 1.0])


if __name__ == '__main__':
    print("=" * 70)
    print("PROPS MODULE VALIDATION TESTS")
    print("=" * 70)

    tests = [v for k, v in globals().items() if k.startswith('test_')]
    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
            print(f"  PASS: {test.__name__}")
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test.__name__}: {e}")

    print(f"\n{'=' * 70}")
    print(f"Results: {passed} passed, {failed} failed out of {passed + failed}")
    print("=" * 70)
    sys.exit(1 if failed > 0 else 0)
