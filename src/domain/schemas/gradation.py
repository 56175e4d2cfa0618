"""
Define los esquemas de datos para encapsular la curva granulométrica y los
resultados de un análisis.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class GradationPoint:
    """
    Un punto de la curva granulométrica.

    Attributes:
        size (float): Tamaño de partícula o abertura de tamiz (>= 0).
        passing (float): Porcentaje pasante acumulado, en el rango [0, 100].
    """
    size: float
    passing: float


@dataclass(frozen=True)
class GradationCurve:
    """
    Curva granulométrica: secuencia de puntos ordenada de forma ascendente
    por tamaño.

    La curva es inmutable. Si cambian los datos de entrada se reconstruye
    completa con `GradationCurve.from_points`.

    Attributes:
        points (Tuple[GradationPoint, ...]): Puntos ordenados por tamaño.
    """
    points: Tuple[GradationPoint, ...] = ()

    @classmethod
    def from_points(cls, points: Iterable[GradationPoint]) -> "GradationCurve":
        """Construye la curva ordenando los puntos por tamaño (orden estable)."""
        return cls(points=tuple(sorted(points, key=lambda p: p.size)))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[GradationPoint]:
        return iter(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def sizes(self) -> List[float]:
        return [p.size for p in self.points]

    @property
    def passing(self) -> List[float]:
        return [p.passing for p in self.points]

    @property
    def is_monotonic(self) -> bool:
        """True si el % pasante no decrece al aumentar el tamaño."""
        return all(a.passing <= b.passing for a, b in zip(self.points, self.points[1:]))

    def as_pairs(self) -> List[Tuple[float, float]]:
        """Pares (tamaño, % pasante) para graficar en eje x logarítmico."""
        return [(p.size, p.passing) for p in self.points]


@dataclass(frozen=True)
class CharacteristicDiameters:
    """
    Diámetros característicos y coeficientes derivados de una curva.

    Un valor 0 en `cu` o `cc` es un centinela: el coeficiente no es
    calculable a partir de la curva.

    Attributes:
        d10 (float): Diámetro bajo el cual pasa el 10% de la muestra.
        d30 (float): Diámetro bajo el cual pasa el 30% de la muestra.
        d50 (float): Diámetro bajo el cual pasa el 50% de la muestra.
        d60 (float): Diámetro bajo el cual pasa el 60% de la muestra.
        cu (float): Coeficiente de uniformidad, D60 / D10.
        cc (float): Coeficiente de curvatura, D30² / (D10 · D60).
    """
    d10: float = 0.0
    d30: float = 0.0
    d50: float = 0.0
    d60: float = 0.0
    cu: float = 0.0
    cc: float = 0.0

    def formatted(self, precision: int = 2) -> Dict[str, str]:
        """Valores con precisión decimal fija, listos para mostrar."""
        return {
            "D10": f"{self.d10:.{precision}f}",
            "D30": f"{self.d30:.{precision}f}",
            "D50": f"{self.d50:.{precision}f}",
            "D60": f"{self.d60:.{precision}f}",
            "Cu": f"{self.cu:.{precision}f}",
            "Cc": f"{self.cc:.{precision}f}",
        }


@dataclass(frozen=True)
class HistogramData:
    """
    Histograma de diámetros para visualización.

    Attributes:
        labels (List[str]): Rango de cada bin, e.g. '1.00-2.00'.
        counts (List[int]): Número de partículas en cada bin.
    """
    labels: List[str]
    counts: List[int]


@dataclass
class GradationResult:
    """
    Contenedor final con todos los resultados de un análisis granulométrico.

    Es un objeto de transferencia de datos (DTO) agnóstico a la capa de
    presentación; se serializa con `dataclasses.asdict`.

    Attributes:
        source (str): Origen de los datos, 'image' o 'sieve'.
        total_particles (int): Número de partículas medidas (0 en tamizado).
        curve (List[Tuple[float, float]]): Pares (tamaño, % pasante).
        diameters (CharacteristicDiameters): D10/D30/D50/D60, Cu y Cc.
        display (Dict[str, str]): Valores formateados para la presentación.
        histogram (Optional[HistogramData]): Histograma de diámetros, sólo
            para análisis de imagen.
        sieve_labels (List[str]): Etiquetas de los tamices, sólo para mostrar.
    """
    source: str
    total_particles: int
    curve: List[Tuple[float, float]]
    diameters: CharacteristicDiameters
    display: Dict[str, str] = field(default_factory=dict)
    histogram: Optional[HistogramData] = None
    sieve_labels: List[str] = field(default_factory=list)
