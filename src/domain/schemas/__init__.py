from .gradation import (CharacteristicDiameters, GradationCurve, GradationPoint,
                        GradationResult, HistogramData)
from .particles import BoundingBox, DetectedRegion, PixelPoint, SieveEntry
