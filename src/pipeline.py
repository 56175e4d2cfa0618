"""
Define el pipeline granulométrico, que orquesta la secuencia de pasos de
procesamiento para un análisis de imagen o un ensayo de tamizado.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from config.settings import HISTOGRAM_BINS, RESULT_PRECISION, SIEVE_SIZE_DIVISOR

from src.nodes.base import PipelineNode
from src.nodes.calibration import CalibrationNode
from src.nodes.granulometry import (CharacteristicDiametersNode,
                                    GradationCurveNode, GradationSummaryNode,
                                    HistogramNode, SieveTableNode,
                                    SizeExtractionNode)
from src.nodes.vision import RegionDetectionNode, RegionDetector


class GradationPipeline:
    """
    Orquesta la ejecución de la secuencia de análisis granulométrico.

    Hay una cadena de nodos por origen de datos:

    - 'image': (detección) -> calibración -> diámetros -> curva ->
      diámetros característicos -> histograma -> resumen.
    - 'sieve': tabla de tamizado -> curva -> diámetros característicos ->
      resumen.

    Los nodos opcionales (detector de regiones, envío de resultados) se
    inyectan desde fuera para que el pipeline no dependa de un backend de
    visión ni de la mensajería.
    """
    def __init__(self,
                 source: str,
                 detector: Optional[RegionDetector] = None,
                 result_sender: Optional[PipelineNode] = None,
                 nbins: int = HISTOGRAM_BINS,
                 precision: int = RESULT_PRECISION,
                 sieve_size_divisor: float = SIEVE_SIZE_DIVISOR):
        """
        Args:
            source (str): 'image' o 'sieve'.
            detector (Optional[RegionDetector]): Backend de segmentación. Si
                se omite, las regiones deben venir ya en el contexto.
            result_sender (Optional[PipelineNode]): Nodo final que publica
                el resultado (e.g. `ServiceBusSenderNode`).
        """
        self.source = source
        self.detector = detector
        self.result_sender = result_sender
        self.nbins = nbins
        self.precision = precision
        self.sieve_size_divisor = sieve_size_divisor

        self.nodes: List[PipelineNode] = self._build_pipeline()
        logging.info("Pipeline granulométrico '%s' construido con %d nodos.", source, len(self.nodes))

    def _build_pipeline(self) -> List[PipelineNode]:
        """
        Define la secuencia de nodos según el origen de los datos. El orden
        de la lista es el orden de ejecución.
        """
        if self.source == "image":
            nodes: List[PipelineNode] = []
            if self.detector is not None:
                nodes.append(RegionDetectionNode(detector=self.detector, name="Region_Detection"))
            nodes += [
                CalibrationNode(name="Calibration"),
                SizeExtractionNode(name="Size_Extraction"),
                GradationCurveNode(source="image", name="Gradation_Curve"),
                CharacteristicDiametersNode(name="Characteristic_Diameters"),
                HistogramNode(nbins=self.nbins, name="Histogram"),
                GradationSummaryNode(source="image", precision=self.precision, name="Summary"),
            ]
        elif self.source == "sieve":
            nodes = [
                SieveTableNode(size_divisor=self.sieve_size_divisor, name="Sieve_Table"),
                GradationCurveNode(source="sieve", name="Gradation_Curve"),
                CharacteristicDiametersNode(name="Characteristic_Diameters"),
                GradationSummaryNode(source="sieve", precision=self.precision, name="Summary"),
            ]
        else:
            raise ValueError(f"Origen de pipeline desconocido: '{self.source}'")

        if self.result_sender is not None:
            nodes.append(self.result_sender)
        return nodes

    def run(self, initial_context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Ejecuta la secuencia completa de nodos sobre un contexto dado.

        Returns:
            Dict[str, Any]: El contexto final, con los resultados de todos
            los nodos y sus tiempos de ejecución.

        Raises:
            Exception: Si cualquier nodo falla, la excepción se propaga
                para ser gestionada por el Worker.
        """
        context = initial_context.copy()
        context['execution_times'] = {}

        job_id = context.get('job_id', f"job_{int(time.time())}")
        logging.info(">>> Iniciando JOB: %s (%s)", job_id, self.source)

        total_start_time = time.perf_counter()

        for node in self.nodes:
            node_start_time = time.perf_counter()
            try:
                context = node.run(context)
                context['execution_times'][node.name] = time.perf_counter() - node_start_time
            except Exception as e:
                logging.error(
                    "!!! Error en nodo '%s' (Job: %s): %s",
                    node.name, job_id, e, exc_info=True
                )
                raise

        total_duration = time.perf_counter() - total_start_time
        context['execution_times']['total_pipeline'] = total_duration

        logging.info("<<< JOB %s finalizado en %.4f segundos.", job_id, total_duration)

        return context
