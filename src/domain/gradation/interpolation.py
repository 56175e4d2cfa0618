"""
Extracción de diámetros característicos (D10, D30, D50, D60) desde una curva
granulométrica mediante interpolación log-lineal.
"""
import numpy as np

from src.domain.schemas.gradation import CharacteristicDiameters, GradationCurve

from .coefficients import coefficients
from .curves import SIZE_FLOOR

# Valor devuelto cuando el percentil no puede resolverse en la curva.
UNRESOLVED = 0.0


def diameter_at_percentile(curve: GradationCurve, target_passing: float) -> float:
    """
    Diámetro para el cual el % pasante acumulado vale `target_passing`.

    Se busca el primer par de puntos consecutivos que encierre el objetivo
    y se interpola linealmente sobre log10(tamaño), como en los gráficos
    granulométricos con eje x logarítmico.

    Fuera del rango de la curva el resultado se satura en el primer o el
    último tamaño. Si el par encontrado es plano (mismo % pasante) y no
    aplica la saturación, se devuelve el centinela 0.

    Args:
        curve (GradationCurve): Curva ordenada por tamaño ascendente.
        target_passing (float): Percentil objetivo, en (0, 100).

    Returns:
        float: El diámetro interpolado, o 0 si no es resoluble (curva vacía
        o tramo plano).
    """
    points = curve.points
    if not points:
        return UNRESOLVED

    lower = upper = None
    for p1, p2 in zip(points, points[1:]):
        if p1.passing <= target_passing <= p2.passing:
            lower, upper = p1, p2
            break

    if lower is None or lower.passing == upper.passing:
        if target_passing <= points[0].passing:
            return points[0].size
        if target_passing >= points[-1].passing:
            return points[-1].size
        return UNRESOLVED

    log_d1 = np.log10(lower.size if lower.size > 0 else SIZE_FLOOR)
    log_d2 = np.log10(upper.size if upper.size > 0 else SIZE_FLOOR)
    fraction = (target_passing - lower.passing) / (upper.passing - lower.passing)

    return float(10 ** (log_d1 + (log_d2 - log_d1) * fraction))


def characteristic_diameters(curve: GradationCurve) -> CharacteristicDiameters:
    """Calcula D10, D30, D50, D60 y los coeficientes Cu y Cc de una curva."""
    d10, d30, d50, d60 = (diameter_at_percentile(curve, p) for p in (10, 30, 50, 60))
    cu, cc = coefficients(d10, d30, d60)
    return CharacteristicDiameters(d10=d10, d30=d30, d50=d50, d60=d60, cu=cu, cc=cc)
