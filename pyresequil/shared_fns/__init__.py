from .shared_fns import convert_to_numpy, interp_table, is_non_decreasing
