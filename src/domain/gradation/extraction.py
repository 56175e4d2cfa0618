"""
Conversión de áreas en píxeles a diámetros equivalentes en unidades reales.
"""
from typing import Iterable, List, Optional

import numpy as np

from src.domain.errors import InvalidCalibrationInput
from src.domain.schemas.particles import DetectedRegion

from .calibration import is_positive_real

# Diámetro del círculo de área A: 2 * sqrt(A / pi) == sqrt(4A / pi)
_DIAM_CONST = 2.0 / np.sqrt(np.pi)


def to_diameter(pixel_area: float, scale_factor: Optional[float]) -> float:
    """
    Convierte el área en píxeles de una región a su diámetro circular
    equivalente en unidades reales.

    Raises:
        InvalidCalibrationInput: Si no hay un factor de escala positivo.
        ValueError: Si el área es negativa.
    """
    if not is_positive_real(scale_factor):
        raise InvalidCalibrationInput(
            f"Factor de escala inválido ({scale_factor!r}); calibre antes de extraer tamaños."
        )
    if pixel_area < 0:
        raise ValueError(f"El área de una región no puede ser negativa: {pixel_area!r}")

    real_area = pixel_area / (scale_factor * scale_factor)
    return float(_DIAM_CONST * np.sqrt(real_area))


def regions_to_diameters(regions: Iterable[DetectedRegion], scale_factor: Optional[float]) -> List[float]:
    """
    Convierte todas las regiones detectadas a diámetros.

    Una lista vacía es una entrada válida (cero partículas), pero igual
    exige una calibración vigente.
    """
    if not is_positive_real(scale_factor):
        raise InvalidCalibrationInput(
            f"Factor de escala inválido ({scale_factor!r}); calibre antes de extraer tamaños."
        )
    return [to_diameter(region.area, scale_factor) for region in regions]
