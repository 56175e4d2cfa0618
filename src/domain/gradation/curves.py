"""
Construcción de la curva granulométrica (% pasante acumulado vs. tamaño) a
partir de diámetros de partículas o de un ensayo de tamizado.
"""
from typing import Iterable, Sequence

import numpy as np

from src.domain.errors import EmptyOrZeroWeightInput
from src.domain.schemas.gradation import GradationCurve, GradationPoint
from src.domain.schemas.particles import SieveEntry

# Tamaño mínimo usado en los puntos sintéticos y como piso para log10.
SIZE_FLOOR = 0.001

# Factor sobre el tamiz más grueso para el punto sintético de 100% pasante.
COARSE_ANCHOR_FACTOR = 1.2


def from_diameters(sizes: Iterable[float]) -> GradationCurve:
    """
    Construye la curva a partir de diámetros individuales.

    La i-ésima partícula más pequeña (base 0) de n se ubica en el percentil
    `i / n * 100` por conteo, no por masa: con imágenes 2-D no hay forma de
    estimar el volumen de cada partícula.

    Se agregan dos puntos sintéticos para que la curva vaya de 0 a 100: un
    ancla en `SIZE_FLOOR` con 0% y el diámetro máximo con 100%.

    Returns:
        GradationCurve: Curva ordenada por tamaño, o una curva vacía si no
        hay diámetros (esto no es un error).
    """
    sorted_sizes = np.sort(np.asarray(list(sizes), dtype=float))
    n = sorted_sizes.size
    if n == 0:
        return GradationCurve()

    passing = np.arange(n) / n * 100.0
    points = [GradationPoint(size=float(s), passing=float(p)) for s, p in zip(sorted_sizes, passing)]

    # Ancla inferior; nunca por encima de la partícula más pequeña.
    anchor = min(SIZE_FLOOR, float(sorted_sizes[0]))
    points.insert(0, GradationPoint(size=anchor, passing=0.0))
    points.append(GradationPoint(size=float(sorted_sizes[-1]), passing=100.0))

    return GradationCurve.from_points(points)


def from_sieve_entries(entries: Sequence[SieveEntry]) -> GradationCurve:
    """
    Construye la curva a partir de un ensayo de tamizado.

    Los tamices se apilan del más grueso al más fino; el peso retenido se
    acumula de arriba hacia abajo y el % pasante de cada tamiz es
    `100 - retenido_acumulado / total * 100`.

    Raises:
        EmptyOrZeroWeightInput: Si no hay filas o el peso total es cero.
    """
    if not entries:
        raise EmptyOrZeroWeightInput("El ensayo de tamizado no contiene filas.")

    stack = sorted(entries, key=lambda e: e.opening_size, reverse=True)
    weights = np.array([e.retained_weight for e in stack], dtype=float)
    # El total sale de la misma suma acumulada: el tamiz más fino queda en 0 exacto.
    cumulative = np.cumsum(weights)
    total_weight = float(cumulative[-1])
    if total_weight == 0:
        raise EmptyOrZeroWeightInput("El peso total retenido del ensayo es cero.")

    passing = 100.0 - cumulative / total_weight * 100.0
    points = [
        GradationPoint(size=float(e.opening_size), passing=float(p))
        for e, p in zip(stack, passing)
    ]

    # Nada queda retenido por encima del tamiz más grueso.
    points.insert(0, GradationPoint(size=stack[0].opening_size * COARSE_ANCHOR_FACTOR, passing=100.0))
    points.append(GradationPoint(size=min(SIZE_FLOOR, stack[-1].opening_size), passing=0.0))

    # Del fino al grueso, para que tamices repetidos queden con % pasante creciente.
    return GradationCurve.from_points(reversed(points))
