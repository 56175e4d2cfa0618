"""
Histograma de diámetros en bins de igual ancho, sólo para visualización.
"""
from typing import List, Sequence, Tuple

import numpy as np


def histogram(sizes: Sequence[float], bin_count: int) -> Tuple[List[str], List[int]]:
    """
    Agrupa los diámetros en `bin_count` bins lineales de igual ancho.

    Si todos los valores son iguales se devuelve un único bin
    `[min - 1, max + 1]` con todos ellos. El valor máximo cae en el último
    bin (su índice calculado sería `bin_count`).

    Returns:
        Tuple[List[str], List[int]]: Etiquetas 'inicio-fin' y conteos.
    """
    if bin_count < 1:
        raise ValueError(f"bin_count debe ser un entero positivo: {bin_count!r}")

    values = np.asarray(sizes, dtype=float)
    if values.size == 0:
        return [], []

    min_size, max_size = float(values.min()), float(values.max())
    bin_width = (max_size - min_size) / bin_count

    if bin_width <= 0:
        return [f"{min_size - 1:.2f}-{max_size + 1:.2f}"], [int(values.size)]

    indices = np.floor((values - min_size) / bin_width).astype(int)
    indices = np.clip(indices, 0, bin_count - 1)
    counts = np.bincount(indices, minlength=bin_count)

    labels = [
        f"{min_size + i * bin_width:.2f}-{min_size + (i + 1) * bin_width:.2f}"
        for i in range(bin_count)
    ]
    return labels, [int(c) for c in counts]
