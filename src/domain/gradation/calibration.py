"""
Calibración de escala: relación píxeles por unidad de longitud real a partir
de una línea medida sobre un objeto de referencia.
"""
import numbers

import numpy as np

from src.domain.errors import InvalidCalibrationInput
from src.domain.schemas.particles import PixelPoint


def is_positive_real(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return bool(np.isfinite(value)) and value > 0


def line_length(start: PixelPoint, end: PixelPoint) -> float:
    """Distancia euclidiana entre dos puntos en el espacio de píxeles."""
    return float(np.hypot(end[0] - start[0], end[1] - start[1]))


def calibrate(pixel_distance: float, reference_length: float) -> float:
    """
    Calcula el factor de escala (píxeles por unidad real, e.g. px/mm).

    Args:
        pixel_distance (float): Longitud en píxeles de la línea medida.
        reference_length (float): Longitud real conocida del objeto de
            referencia.

    Returns:
        float: `pixel_distance / reference_length`.

    Raises:
        InvalidCalibrationInput: Si algún argumento no es numérico, no es
            finito o no es estrictamente positivo.
    """
    if not is_positive_real(pixel_distance):
        raise InvalidCalibrationInput(f"Distancia en píxeles inválida: {pixel_distance!r}")
    if not is_positive_real(reference_length):
        raise InvalidCalibrationInput(f"Longitud de referencia inválida: {reference_length!r}")
    return float(pixel_distance) / float(reference_length)
