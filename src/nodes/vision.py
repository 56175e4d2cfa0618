"""
Frontera con el colaborador de visión: detección de regiones (partículas) en
una imagen.

El núcleo granulométrico sólo consume `DetectedRegion`; cualquier backend que
implemente `RegionDetector` es intercambiable.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import cv2
import numpy as np
from shapely.geometry import Polygon

from src.domain import DetectedRegion

from .base import PipelineNode


class RegionDetector(ABC):
    """Contrato de un backend de segmentación."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[DetectedRegion]:
        """Devuelve las regiones detectadas, ya filtradas por ruido."""


class OtsuContourDetector(RegionDetector):
    """
    Segmenta partículas oscuras sobre fondo claro con umbral de Otsu.

    Pasos: escala de grises, desenfoque gaussiano 5x5, umbral binario
    invertido + Otsu y contornos externos. Las regiones con área menor o
    igual a `min_pixel_area` se descartan como ruido.
    """
    def __init__(self, min_pixel_area: float = 50.0, blur_kernel: int = 5):
        self.min_pixel_area = min_pixel_area
        self.blur_kernel = blur_kernel

    def detect(self, image: np.ndarray) -> List[DetectedRegion]:
        gray = self.__to_gray(image)
        blurred = cv2.GaussianBlur(gray, (self.blur_kernel, self.blur_kernel), 0)
        _, thresh = cv2.threshold(blurred, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
        contours, _ = cv2.findContours(thresh, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        regions = []
        for cnt in contours:
            if len(cnt) < 3: continue

            poly = Polygon(cnt.reshape(-1, 2))
            if not poly.is_valid: poly = poly.buffer(0)
            if poly.is_empty or poly.area <= self.min_pixel_area: continue

            x, y, w, h = cv2.boundingRect(cnt)
            regions.append(DetectedRegion(area=float(poly.area), bbox=(int(x), int(y), int(w), int(h))))
        return regions

    def __to_gray(self, image: np.ndarray) -> np.ndarray:
        """Convierte BGR/BGRA a escala de grises de 8 bits."""
        if image.ndim == 3:
            code = cv2.COLOR_BGRA2GRAY if image.shape[2] == 4 else cv2.COLOR_BGR2GRAY
            image = cv2.cvtColor(image, code)
        return image.astype(np.uint8)


class RegionDetectionNode(PipelineNode):
    """
    Ejecuta un `RegionDetector` sobre la imagen del contexto.
    """
    def __init__(self, detector: RegionDetector, name: str = "region_detection"):
        super().__init__(name)
        self.detector = detector

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Inputs:
            - `image` (np.ndarray): Imagen en formato OpenCV (BGR) o grises.

        Context Outputs:
            - `regions` (List[DetectedRegion]): Regiones detectadas.
        """
        image = self._require(context, 'image')

        logging.info("[%s] Detectando regiones (%dx%d)...", self.name, image.shape[1], image.shape[0])
        regions = self.detector.detect(image)

        context['regions'] = regions
        logging.info("[%s] Detección finalizada. Se encontraron %d regiones.", self.name, len(regions))
        return context
