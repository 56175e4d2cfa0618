from .calibration import calibrate, line_length
from .coefficients import Coefficients, coefficients
from .curves import SIZE_FLOOR, from_diameters, from_sieve_entries
from .extraction import regions_to_diameters, to_diameter
from .histogram import histogram
from .interpolation import characteristic_diameters, diameter_at_percentile

__all__ = [
    "SIZE_FLOOR",
    "Coefficients",
    "calibrate",
    "characteristic_diameters",
    "coefficients",
    "diameter_at_percentile",
    "from_diameters",
    "from_sieve_entries",
    "histogram",
    "line_length",
    "regions_to_diameters",
    "to_diameter",
]
