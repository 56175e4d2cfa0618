from typing import NamedTuple


class Coefficients(NamedTuple):
    cu: float
    cc: float


def coefficients(d10: float, d30: float, d60: float) -> Coefficients:
    """
    Coeficientes de uniformidad (Cu) y curvatura (Cc).

    Cuando un coeficiente no es calculable (D10 o D60 nulos) se reporta 0
    como centinela en lugar de lanzar una excepción.
    """
    cu = d60 / d10 if d10 > 0 else 0.0
    cc = (d30 * d30) / (d10 * d60) if d10 > 0 and d60 > 0 else 0.0
    return Coefficients(cu=cu, cc=cc)
