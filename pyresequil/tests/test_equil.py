#!/usr/bin/env python3
"""
Validation tests for equil module (region orchestration and deck driven initial state).
"""

import sys
import os
import numpy as np
import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
import pyresequil.equil as equil
from pyresequil.classes import EquilOptions, EquilConfigError
from pyresequil.props import BlackOilProps
from pyresequil.records import EquilRecord
from pyresequil.regions import RegionMapping
from pyresequil.simtools import sat_table

G = 9.81
PTOL = 1.0  # Pa
RS_TABLE = pd.DataFrame({'P': [0, 500e5], 'Rs': [0, 1000]})
RV_TABLE = pd.DataFrame({'P': [0, 500e5], 'Rv': [0, 1e-4]})


class CountingProps(BlackOilProps):
    """Black oil properties that count density evaluations"""
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ncalls = 0

    def density(self, pressure, temperature, surface_volume, cell):
        self.ncalls += 1
        return super().density(pressure, temperature, surface_volume, cell)

# =============================================================================
# Deck driven initial state
# =============================================================================

def _water_oil_state():
    grid = equil.Grid([90.0, 100.0, 110.0])
    props = BlackOilProps(3, ('water', 'oil'), rho_sc={'water': 1000, 'oil': 800})
    deck = {'EQUIL': [[100, 300e5, 100, 0, 100, 0]]}
    return equil.init_state_equil(grid, props, deck, G)

def test_water_oil_datum_at_contact():
    """Water pressure below the contact and oil pressure above it follow their own gradients"""
    state = _water_oil_state()
    pw = state.phase_pressures[0]
    po = state.phase_pressures[1]
    assert abs(pw[2] - (300e5 + 1000 * G * 10)) < PTOL
    assert abs(po[0] - (300e5 - 800 * G * 10)) < PTOL
    np.testing.assert_allclose(state.saturation[:, 0], [0, 0, 1])
    np.testing.assert_allclose(state.saturation.sum(axis=1), 1.0)
    # Reference pressure is the oil pressure
    np.testing.assert_allclose(state.pressure, po)
    assert state.saturation.shape == (3, 2)

def test_summary():
    state = _water_oil_state()
    df = state.summary()
    assert len(df) == 1
    assert df['Cells'][0] == 3
    assert abs(df['Sw'][0] - 1 / 3) < 1e-12
    assert abs(df['Pmin (bar)'][0] - (300e5 - 800 * G * 10) / 1e5) < 1e-4
    text = state.print_summary()
    assert 'Region' in text

def test_interleaved_regions():
    """Region results land on the right cells when region cells are not contiguous"""
    grid = equil.Grid([90.0, 95.0, 110.0, 120.0])
    props = BlackOilProps(4, ('water',))
    deck = {'EQUIL': [[100, 100e5], [100, 200e5]], 'EQLNUM': [1, 2, 1, 2]}
    state = equil.init_state_equil(grid, props, deck, G)
    expected = np.array([100e5, 200e5, 100e5, 200e5]) + 1000 * G * (grid.depths - 100)
    np.testing.assert_allclose(state.pressure, expected, atol=PTOL)
    np.testing.assert_array_equal(state.saturation[:, 0], 1.0)

def test_global_cell_lookup():
    """Per-cell deck keywords are read through the local-to-global cell map"""
    grid = equil.Grid([110.0, 90.0], global_cell=[2, 0])
    props = BlackOilProps(2, ('water',))
    deck = {'EQUIL': [[100, 100e5], [100, 200e5]], 'EQLNUM': [1, 9, 2]}
    state = equil.init_state_equil(grid, props, deck, G)
    np.testing.assert_allclose(state.pressure, [200e5 + 1000 * G * 10, 100e5 - 1000 * G * 10], atol=PTOL)

def test_dissolved_gas_saturated_at_contact():
    grid = equil.Grid([50.0, 150.0])
    props = BlackOilProps(2, ('oil', 'gas'), rs_table=RS_TABLE)
    deck = {'EQUIL': [[100, 100e5, 100, 0, 100, 0]], 'DISGAS': True}
    state = equil.init_state_equil(grid, props, deck, G)
    po, pg = state.phase_pressures
    # Oil zone: Rs held at its saturated value at the contact
    assert abs(state.gasoilratio[1] - 200) < 1e-9
    # Gas cap: oil in contact with free gas is saturated at the local pressure
    assert state.saturation[0, 1] == 1.0
    assert abs(state.gasoilratio[0] - 2e-5 * po[0]) < 1e-9
    assert abs(pg[0] - (100e5 - G * 50)) < PTOL
    np.testing.assert_array_equal(state.rv, 0)

def test_dissolved_gas_table():
    """RSVD values are reproduced at table depths and interpolated between them"""
    grid = equil.Grid([200.0, 250.0])
    props = BlackOilProps(2, ('oil', 'gas'), rs_table=RS_TABLE)
    deck = {'EQUIL': [[150, 150e5, 150, 0, 50, 0, 1, 0]], 'DISGAS': True,
            'RSVD': [np.array([[100, 50], [200, 100], [300, 80]])]}
    state = equil.init_state_equil(grid, props, deck, G)
    assert state.gasoilratio[0] == 100
    assert abs(state.gasoilratio[1] - 90) < 1e-12

def test_vaporised_oil_table():
    grid = equil.Grid([20.0, 50.0, 120.0])
    props = BlackOilProps(3, ('oil', 'gas'), rv_table=RV_TABLE)
    deck = {'EQUIL': [[80, 100e5, 80, 0, 80, 0, 0, 1]], 'VAPOIL': True,
            'RVVD': [pd.DataFrame({'Depth': [0, 100], 'Rv': [1e-6, 3e-6]})]}
    state = equil.init_state_equil(grid, props, deck, G)
    np.testing.assert_allclose(state.rv[:2], [1.4e-6, 2e-6], rtol=1e-12)
    # Rs not requested
    np.testing.assert_array_equal(state.gasoilratio, 0)

def test_no_mixing():
    grid = equil.Grid([50.0, 150.0])
    props = BlackOilProps(2, ('oil', 'gas'), rs_table=RS_TABLE, rv_table=RV_TABLE)
    deck = {'EQUIL': [[100, 100e5, 100, 0, 120, 0]]}
    state = equil.init_state_equil(grid, props, deck, G)
    np.testing.assert_array_equal(state.gasoilratio, 0)
    np.testing.assert_array_equal(state.rv, 0)

def test_swatinit():
    """SWATINIT saturations are honoured by rescaling each cell's capillary pressure curve"""
    grid = equil.Grid([190.0, 195.0])
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    props = BlackOilProps(2, ('water', 'oil'), swof=swof)
    deck = {'EQUIL': [[200, 200e5, 200, 0, 200, 0]], 'SWATINIT': [0.3, 0.5]}
    state = equil.init_state_equil(grid, props, deck, G)
    np.testing.assert_allclose(state.saturation[:, 0], [0.3, 0.5])
    # Pcow(0.3) = 1.75e5 before scaling
    assert abs(props.pcow_scale(0) - 200 * G * 10 / 1.75e5) < 1e-4 * props.pcow_scale(0)

# =============================================================================
# Configuration errors
# =============================================================================

def test_misconfigured_region_fails_before_integration():
    grid = equil.Grid([50.0, 150.0])
    props = CountingProps(2, ('oil', 'gas'), rs_table=RS_TABLE)
    deck = {'EQUIL': [[100, 100e5, 100, 0, 120, 0]], 'DISGAS': True}
    try:
        equil.init_state_equil(grid, props, deck, G)
        assert False, "Datum away from gas-oil contact without RSVD should raise"
    except EquilConfigError:
        pass
    assert props.ncalls == 0

def test_more_regions_than_records():
    grid = equil.Grid([50.0, 150.0])
    props = BlackOilProps(2, ('water',))
    try:
        equil.init_state_equil(grid, props, {'EQUIL': [[100, 100e5]], 'EQLNUM': [1, 2]}, G)
        assert False, "Missing EQUIL record should raise"
    except EquilConfigError as e:
        assert "EQLNUM" in str(e)

def test_missing_equil():
    try:
        equil.init_state_equil(equil.Grid([1.0]), BlackOilProps(1, ('water',)), {}, G)
        assert False, "Missing EQUIL should raise"
    except EquilConfigError:
        pass

def test_region_mapping_size_mismatch():
    props = BlackOilProps(2, ('water',))
    try:
        equil.InitialStateComputer(props, [EquilRecord(100, 1e7, 100, 0, 100, 0)],
                                   RegionMapping([0, 0, 0]), [50.0, 150.0])
        assert False, "Region mapping size mismatch should raise"
    except EquilConfigError:
        pass

# =============================================================================
# Computer and helpers
# =============================================================================

def test_computer_accessors():
    props = BlackOilProps(3, ('water', 'oil'))
    recs = [EquilRecord(100, 300e5, 100, 0, 100, 0)]
    isc = equil.InitialStateComputer(props, recs, RegionMapping([0, 0, 0]), [90.0, 100.0, 110.0], G)
    assert len(isc.press()) == 2
    assert len(isc.saturation()) == 2
    assert isc.rs().shape == (3,)
    assert isc.rv().shape == (3,)

def test_temperature():
    rec = EquilRecord(100, 300e5, 100, 0, 100, 0)
    reg = equil.EquilReg(rec, None, None, None, None)
    np.testing.assert_array_equal(equil.temperature([1.0, 2.0], reg, [1]), [293.15])
    opts = EquilOptions(temperature=[300.0, 310.0])
    np.testing.assert_array_equal(equil.temperature([1.0, 2.0], reg, [1, 0], opts), [310.0, 300.0])

def test_copy_from_region():
    dest = np.zeros(5)
    equil.copy_from_region(np.array([1.0, 2.0]), np.array([3, 1]), dest)
    np.testing.assert_array_equal(dest, [0, 2, 0, 1, 0])

def test_bad_options():
    try:
        EquilOptions(rtol=0)
        assert False, "Zero tolerance should raise"
    except EquilConfigError:
        pass


def test_swatinit_below_contact():
    """Below the water-oil contact SWATINIT gives way to full water saturation"""
    grid = equil.Grid([190.0, 210.0])
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    props = BlackOilProps(2, ('water', 'oil'), swof=swof)
    deck = {'EQUIL': [[200, 200e5, 200, 0, 200, 0]], 'SWATINIT': [0.3, 0.3]}
    state = equil.init_state_equil(grid, props, deck, G)
    pw, po = state.phase_pressures
    assert state.saturation[0, 0] == 0.3
    assert state.saturation[1, 0] == 1.0
    # Capillary pressure matches the phase pressure difference in both cells
    for cell in range(2):
        pc = props.cap_press(state.saturation[cell], cell)
        assert abs(pc[0] - (po[cell] - pw[cell])) < 1e-6 * max(1.0, abs(pc[0]))

def test_swatinit_out_of_range():
    grid = equil.Grid([190.0])
    props = BlackOilProps(1, ('water', 'oil'))
    deck = {'EQUIL': [[200, 200e5, 200, 0, 200, 0]], 'SWATINIT': [1.3]}
    try:
        equil.init_state_equil(grid, props, deck, G)
        assert False, "SWATINIT above 1 should raise"
    except EquilConfigError as e:
        assert "outside [0, 1]" in str(e)

def test_swatinit_scaling_not_carried_over():
    """A later initialisation without SWATINIT uses the unscaled capillary pressure curves"""
    grid = equil.Grid([190.0, 195.0])
    swof = sat_table(rows=11, table='SWOF', swc=0.2, pc_max=2e5)
    deck = {'EQUIL': [[200, 200e5, 200, 0, 200, 0]]}
    props = BlackOilProps(2, ('water', 'oil'), swof=swof)
    equil.init_state_equil(grid, props, dict(deck, SWATINIT=[0.3, 0.5]), G)
    reused = equil.init_state_equil(grid, props, deck, G)
    fresh = equil.init_state_equil(grid, BlackOilProps(2, ('water', 'oil'), swof=swof), deck, G)
    np.testing.assert_allclose(reused.saturation, fresh.saturation)
    assert abs(fresh.saturation[0, 0] - (1 - 200 * G * 10 / 2.5e5)) < 1e-6

def test_surface_volumes():
    pvdo = pd.DataFrame({'P': [0, 500e5], 'Bo': [1.2, 1.2]})
    pvdg = pd.DataFrame({'P': [0, 500e5], 'Bg': [0.005, 0.005]})
    props = BlackOilProps(1, pvtw={'pref': 0, 'bw': 1.02, 'cw': 0}, pvdo=pvdo, pvdg=pvdg)
    surf = equil.surface_volumes(props, np.array([200e5]), np.array([293.15]),
                                 np.array([[0.2, 0.5, 0.3]]), np.array([100.0]), np.array([1e-4]))
    expected = [0.2 / 1.02, 0.5 / 1.2 + 1e-4 * 0.3 / 0.005, 0.3 / 0.005 + 100 * 0.5 / 1.2]
    np.testing.assert_allclose(surf[0], expected)

def test_initial_state_surface_volumes():
    """Unit formation volume factors and no dissolution give surface volumes equal to saturations"""
    state = _water_oil_state()
    assert state.surfacevol.shape == (3, 2)
    np.testing.assert_allclose(state.surfacevol, state.saturation)


if __name__ == '__main__':
    print("=" * 70)
    print("EQUIL MODULE VALIDATION TESTS")
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
