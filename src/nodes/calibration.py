"""
Nodo del pipeline que calibra la escala de la imagen a partir de una línea
medida sobre un objeto de referencia.
"""
import logging
from typing import Any, Dict

from src.domain import AnalysisSession, InvalidCalibrationInput

from .base import PipelineNode


class CalibrationNode(PipelineNode):
    """
    Calcula el factor de escala (px por unidad real) de la sesión.

    Si el contexto trae una medición de calibración, se recalibra la sesión;
    si no, se exige que la sesión ya esté calibrada.
    """
    def __init__(self, name: str = "calibration"):
        super().__init__(name)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `session` (AnalysisSession): Sesión de la imagen en análisis.
            - `calibration` (dict, opcional): Medición con las claves `start`
              y `end` (puntos [x, y] en píxeles) y `reference_length` (número;
              no se convierten textos ni booleanos).

        Context Outputs:
            - `scale_factor` (float): Píxeles por unidad real.
        """
        session: AnalysisSession = self._require(context, 'session')
        calibration = context.get('calibration')

        if calibration:
            try:
                start, end = calibration['start'], calibration['end']
                reference_length = calibration['reference_length']
            except (KeyError, TypeError) as e:
                raise InvalidCalibrationInput(f"[{self.name}] Medición de calibración incompleta: {calibration!r}") from e

            session.begin_calibration(start)
            session.end_calibration(end, reference_length)
            logging.info("[%s] Escala calculada: %.4f px por unidad.", self.name, session.scale_factor)
        else:
            logging.info("[%s] Sin medición nueva; se usa la calibración de la sesión.", self.name)

        context['scale_factor'] = session.require_scale_factor()
        return context
