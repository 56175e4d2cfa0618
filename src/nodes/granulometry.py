"""
Nodos del pipeline para el análisis granulométrico.

Este módulo contiene los nodos que convierten regiones en píxeles a
diámetros reales, leen la tabla de tamizado, construyen la curva
granulométrica y derivan los diámetros característicos, el histograma y el
resultado final.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping

import numpy as np

from src.domain import (AnalysisSession, CharacteristicDiameters, GradationCurve,
                        GradationResult, HistogramData, SieveEntry)
from src.domain.gradation import (characteristic_diameters, from_diameters,
                                  from_sieve_entries, histogram,
                                  regions_to_diameters)

from .base import PipelineNode


def parse_sieve_rows(rows: Iterable[Mapping[str, Any]], size_divisor: float = 1000.0) -> List[SieveEntry]:
    """
    Convierte las filas de la tabla de tamizado en `SieveEntry`.

    La abertura se ingresa en micrómetros y se divide por `size_divisor`
    para llevarla a milímetros. Las filas cuyo tamaño o peso no son números
    válidos se omiten.
    """
    entries = []
    for row in rows:
        try:
            size = float(row.get('size'))
            weight = float(row.get('weight'))
        except (TypeError, ValueError):
            logging.warning("Fila de tamizado ignorada (valores no numéricos): %r", row)
            continue

        if np.isnan(size) or np.isnan(weight) or size <= 0 or weight < 0:
            logging.warning("Fila de tamizado ignorada (valores fuera de rango): %r", row)
            continue

        entries.append(SieveEntry(
            opening_size=size / size_divisor,
            retained_weight=weight,
            label=str(row.get('label') or ""),
        ))
    return entries


class SizeExtractionNode(PipelineNode):
    """
    Convierte las regiones detectadas (área en píxeles) en diámetros
    equivalentes en unidades reales.
    """
    def __init__(self, name: str = "size_extraction"):
        super().__init__(name)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `session` (AnalysisSession): Sesión calibrada.
            - `regions` (List[DetectedRegion]): Regiones ya filtradas por ruido.

        Context Outputs:
            - `particle_sizes` (List[float]): Diámetros, también guardados en
              la sesión.
        """
        session: AnalysisSession = self._require(context, 'session')
        regions = context.get('regions') or []
        scale_factor = session.require_scale_factor()

        if not regions:
            logging.warning("[%s] No se encontraron regiones en el contexto. El resultado será una lista vacía.", self.name)

        sizes = regions_to_diameters(regions, scale_factor)
        session.particle_sizes = sizes

        context['particle_sizes'] = sizes
        logging.info("[%s] Extracción completada. %d partículas medidas.", self.name, len(sizes))
        return context


class SieveTableNode(PipelineNode):
    """
    Lee las filas de un ensayo de tamizado y las normaliza a `SieveEntry`.
    """
    def __init__(self, size_divisor: float = 1000.0, name: str = "sieve_table"):
        super().__init__(name)
        self.size_divisor = size_divisor

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `sieve_rows` (List[dict]): Filas con `label`, `size` y `weight`.

        Context Outputs:
            - `sieve_entries` (List[SieveEntry]): Entradas utilizables.
        """
        rows = context.get('sieve_rows') or []
        entries = parse_sieve_rows(rows, self.size_divisor)

        context['sieve_entries'] = entries
        logging.info("[%s] %d de %d filas de tamizado utilizables.", self.name, len(entries), len(rows))
        return context


class GradationCurveNode(PipelineNode):
    """
    Construye la curva granulométrica desde diámetros ('image') o desde un
    ensayo de tamizado ('sieve').
    """
    SOURCES = ("image", "sieve")

    def __init__(self, source: str, name: str = "gradation_curve"):
        super().__init__(name)
        if source not in self.SOURCES:
            raise ValueError(f"[{name}] Origen desconocido '{source}'. Opciones: {self.SOURCES}")
        self.source = source

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `particle_sizes` (List[float]) si el origen es 'image'.
            - `sieve_entries` (List[SieveEntry]) si el origen es 'sieve'.

        Context Outputs:
            - `gradation_curve` (GradationCurve): Curva ordenada por tamaño.
        """
        if self.source == "image":
            curve = from_diameters(context.get('particle_sizes') or [])
        else:
            curve = from_sieve_entries(context.get('sieve_entries') or [])

        if curve.is_empty:
            logging.warning("[%s] Curva vacía: no hay partículas para analizar.", self.name)

        context['gradation_curve'] = curve
        logging.info("[%s] Curva construida con %d puntos.", self.name, len(curve))
        return context


class CharacteristicDiametersNode(PipelineNode):
    """
    Interpola D10, D30, D50 y D60 sobre la curva y calcula Cu y Cc.
    """
    def __init__(self, name: str = "characteristic_diameters"):
        super().__init__(name)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `gradation_curve` (GradationCurve)

        Context Outputs:
            - `characteristic_diameters` (CharacteristicDiameters)
        """
        curve: GradationCurve = self._require(context, 'gradation_curve')

        result = characteristic_diameters(curve)
        context['characteristic_diameters'] = result
        logging.info(
            "[%s] D10=%.4f D30=%.4f D50=%.4f D60=%.4f Cu=%.4f Cc=%.4f",
            self.name, result.d10, result.d30, result.d50, result.d60, result.cu, result.cc
        )
        return context


class HistogramNode(PipelineNode):
    """
    Agrupa los diámetros medidos en bins de igual ancho para visualización.
    """
    def __init__(self, nbins: int = 10, name: str = "histogram"):
        super().__init__(name)
        self.nbins = nbins

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `particle_sizes` (List[float])

        Context Outputs:
            - `histogram` (HistogramData)
        """
        labels, counts = histogram(context.get('particle_sizes') or [], self.nbins)
        context['histogram'] = HistogramData(labels=labels, counts=counts)
        logging.info("[%s] Histograma de %d bins generado.", self.name, len(labels))
        return context


class GradationSummaryNode(PipelineNode):
    """
    Reúne curva, diámetros e histograma en un `GradationResult`.
    """
    def __init__(self, source: str, precision: int = 2, name: str = "summary"):
        super().__init__(name)
        self.source = source
        self.precision = precision

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `gradation_curve` (GradationCurve)
            - `characteristic_diameters` (CharacteristicDiameters)
            - `particle_sizes`, `histogram`, `sieve_entries` (opcionales)

        Context Outputs:
            - `gradation_result` (GradationResult)
        """
        curve: GradationCurve = self._require(context, 'gradation_curve')
        diameters: CharacteristicDiameters = self._require(context, 'characteristic_diameters')

        context['gradation_result'] = GradationResult(
            source=self.source,
            total_particles=len(context.get('particle_sizes') or []),
            curve=curve.as_pairs(),
            diameters=diameters,
            display=diameters.formatted(self.precision),
            histogram=context.get('histogram'),
            sieve_labels=[e.label for e in context.get('sieve_entries') or []],
        )
        return context
