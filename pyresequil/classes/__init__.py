from .classes import phase, misc_method, sat_table_type, kr_family, class_dic, EquilError, EquilConfigError, EquilConvergenceError, EquilOptions
