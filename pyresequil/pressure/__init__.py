from .pressure import PhasePressODE, PressureProfile, phase_pressures
