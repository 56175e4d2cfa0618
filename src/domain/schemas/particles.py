"""
Define los esquemas de datos de entrada del análisis: regiones detectadas por
el colaborador de visión y filas de un ensayo de tamizado.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

PixelPoint = Tuple[float, float]
BoundingBox = Tuple[int, int, int, int]


@dataclass(frozen=True)
class DetectedRegion:
    """
    Representa una región (partícula) detectada en la imagen por el
    colaborador de visión.

    El núcleo sólo necesita el área en píxeles; la caja envolvente se
    conserva para que la capa de presentación pueda anotar la imagen.

    Attributes:
        area (float): Área de la región en píxeles cuadrados.
        bbox (Optional[BoundingBox]): Caja envolvente (x, y, ancho, alto).
    """
    __slots__ = ['area', 'bbox']
    area: float
    bbox: Optional[BoundingBox]


@dataclass(frozen=True)
class SieveEntry:
    """
    Una fila de un ensayo de tamizado: abertura del tamiz y peso retenido.

    Attributes:
        opening_size (float): Abertura del tamiz en unidades reales (mm).
        retained_weight (float): Peso retenido sobre el tamiz, en cualquier
            unidad consistente.
        label (str): Etiqueta libre del tamiz (e.g. '#4'). Sólo se usa para
            mostrar, nunca en el cálculo.
    """
    opening_size: float
    retained_weight: float
    label: str = ""

    def __post_init__(self):
        if not self.opening_size > 0:
            raise ValueError(f"La abertura del tamiz debe ser positiva: {self.opening_size!r}")
        if not self.retained_weight >= 0:
            raise ValueError(f"El peso retenido no puede ser negativo: {self.retained_weight!r}")
