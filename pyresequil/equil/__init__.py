from .equil import EquilReg, Grid, InitialState, InitialStateComputer, compute_rs, copy_from_region, init_state_equil, surface_volumes, temperature
