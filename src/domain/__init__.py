from .errors import EmptyOrZeroWeightInput, GradationError, InvalidCalibrationInput
from .schemas import (CharacteristicDiameters, DetectedRegion, GradationCurve,
                      GradationPoint, GradationResult, HistogramData, SieveEntry)
from .session import AnalysisSession
