from .props import PhaseUsage, BlackoilPropertiesInterface, BlackOilProps
