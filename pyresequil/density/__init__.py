from .density import DensityCalculator
