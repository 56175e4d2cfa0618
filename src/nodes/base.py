"""
Define la interfaz base para todos los nodos del pipeline granulométrico.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class PipelineNode(ABC):
    """
    Clase base abstracta para un nodo de procesamiento en el pipeline.

    Cada nodo es un paso atómico del análisis (calibrar, extraer tamaños,
    construir la curva, interpolar diámetros...). Todos reciben y devuelven
    el mismo diccionario de contexto, por lo que pueden encadenarse y
    ejecutarse de manera uniforme desde `GradationPipeline`.

    Attributes:
        name (str): El nombre del nodo, utilizado para logging y seguimiento.
    """
    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Ejecuta la lógica de procesamiento del nodo.

        El nodo lee del contexto lo que necesita, realiza su cálculo y
        escribe sus resultados de vuelta en el mismo diccionario.

        Args:
            context (Dict[str, Any]): Estado compartido entre los nodos de
                una misma ejecución.

        Returns:
            Dict[str, Any]: El contexto, con los resultados de este nodo.
        """
        pass

    def _require(self, context: Dict[str, Any], key: str) -> Any:
        """Obtiene una clave obligatoria del contexto o falla con el nombre del nodo."""
        value = context.get(key)
        if value is None:
            raise ValueError(f"[{self.name}] '{key}' no encontrada en el contexto.")
        return value
