from .saturation import sat_from_pc, sat_from_sum_of_pcs, phase_saturations
