from .constants import GRAVITY, T_STANDARD, BARSA, ODE_RTOL, ODE_ATOL, ODE_MAX_EVALS, SAT_TOL, SAT_MAX_ITER, THRESHOLD_SAT, RATIO_DP
