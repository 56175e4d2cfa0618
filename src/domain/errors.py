"""
Define la taxonomía de errores del motor de granulometría.

Todas las condiciones son recuperables por quien invoca el cálculo:
basta con volver a enviar datos de entrada corregidos.
"""


class GradationError(ValueError):
    """Clase base para los errores de entrada del análisis granulométrico."""


class InvalidCalibrationInput(GradationError):
    """
    La medición de calibración no es válida (no numérica o no positiva), o se
    intentó extraer tamaños sin una calibración vigente.
    """


class EmptyOrZeroWeightInput(GradationError):
    """El ensayo de tamizado no tiene filas utilizables o su peso total es cero."""
