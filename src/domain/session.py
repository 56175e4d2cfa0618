"""
Estado de una sesión de análisis de imagen: imagen vigente, factor de escala
y partículas medidas.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from src.domain.errors import InvalidCalibrationInput
from src.domain.gradation.calibration import calibrate, line_length
from src.domain.schemas.particles import PixelPoint


def _as_point(point) -> PixelPoint:
    try:
        return (float(point[0]), float(point[1]))
    except (TypeError, ValueError, IndexError) as e:
        raise InvalidCalibrationInput(f"Punto de calibración inválido: {point!r}") from e


@dataclass
class AnalysisSession:
    """
    Contexto explícito de una sesión de análisis.

    El factor de escala sólo cambia con una calibración exitosa y se
    invalida al cargar una nueva imagen; sin él la extracción de tamaños
    queda bloqueada.

    Attributes:
        image_id (Optional[str]): Identificador de la imagen cargada.
        scale_factor (Optional[float]): Píxeles por unidad real; `None` si
            la sesión no está calibrada.
        particle_sizes (List[float]): Diámetros medidos en la última pasada.
    """
    image_id: Optional[str] = None
    scale_factor: Optional[float] = None
    particle_sizes: List[float] = field(default_factory=list)
    _measurement_start: Optional[PixelPoint] = field(default=None, repr=False)

    @property
    def is_calibrated(self) -> bool:
        return self.scale_factor is not None

    def load_image(self, image_id: str) -> None:
        """Cambia la imagen vigente e invalida calibración y partículas."""
        self.image_id = image_id
        self.scale_factor = None
        self.particle_sizes = []
        self._measurement_start = None

    def begin_calibration(self, point: PixelPoint) -> None:
        """Registra el primer extremo de la línea de calibración."""
        self._measurement_start = _as_point(point)

    def end_calibration(self, point: PixelPoint, reference_length: float) -> float:
        """
        Cierra la línea de calibración y calcula el factor de escala.

        Raises:
            InvalidCalibrationInput: Si no se inició la medición o si la
                línea o la longitud de referencia no son válidas. En ese caso
                la sesión queda sin calibrar.
        """
        start, self._measurement_start = self._measurement_start, None
        self.scale_factor = None
        if start is None:
            raise InvalidCalibrationInput("La medición de calibración no fue iniciada.")

        self.scale_factor = calibrate(line_length(start, _as_point(point)), reference_length)
        return self.scale_factor

    def require_scale_factor(self) -> float:
        if self.scale_factor is None:
            raise InvalidCalibrationInput("La sesión no está calibrada.")
        return self.scale_factor
