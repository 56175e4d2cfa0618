import dataclasses
import json
import logging
from datetime import datetime
from typing import Any, Dict

import numpy as np
from azure.servicebus import ServiceBusClient, ServiceBusMessage

from src.nodes.base import PipelineNode


def json_serializer_helper(obj):
    """
    Ayudante para que json.dumps pueda manejar tipos que no son estándar,
    como números de NumPy o Dataclasses anidados.
    """
    if isinstance(obj, np.integer):
        return int(obj)

    if isinstance(obj, np.floating):
        # NaN e infinitos rompen el JSON estándar
        if np.isnan(obj) or np.isinf(obj):
            return None
        return float(obj)

    if isinstance(obj, np.ndarray):
        return obj.tolist()

    if dataclasses.is_dataclass(obj):
        return dataclasses.asdict(obj)

    return str(obj)


def build_payload(context: Dict[str, Any], input_key: str = "gradation_result") -> Dict[str, Any]:
    """Arma el mensaje de salida a partir del contexto de un trabajo."""
    raw_result = context.get(input_key)
    if dataclasses.is_dataclass(raw_result):
        result_dict = dataclasses.asdict(raw_result)
    else:
        result_dict = raw_result

    return {
        "id": context.get("job_id"),
        "type": context.get("job_type"),
        "timestamp": str(datetime.now()),
        "gradation": result_dict,
    }


class ServiceBusSenderNode(PipelineNode):
    """
    Nodo que toma el resultado granulométrico (Dataclass), lo convierte a
    Dict y lo envía a una cola de Azure Service Bus.
    """

    def __init__(self,
                 connection_string: str,
                 queue_name: str,
                 input_key: str = "gradation_result",
                 name: str = "Sender_Queue"):
        super().__init__(name)
        self.connection_string = connection_string
        self.queue_name = queue_name
        self.input_key = input_key
        self.logger = logging.getLogger(name)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        if context.get(self.input_key) is None:
            self.logger.warning(f"⚠️ No hay datos en '{self.input_key}'. Se omite envío.")
            return context

        payload = build_payload(context, self.input_key)

        try:
            message_body = json.dumps(payload, default=json_serializer_helper)

            client = ServiceBusClient.from_connection_string(self.connection_string)
            with client:
                sender = client.get_queue_sender(self.queue_name)
                with sender:
                    message = ServiceBusMessage(message_body)
                    message.content_type = "application/json"
                    sender.send_messages(message)

                    self.logger.info(f"✅ Resultados enviados a cola '{self.queue_name}'. Job ID: {payload['id']}")

        except TypeError as e:
            self.logger.error(f"❌ Error de tipos al serializar JSON: {e}")
            raise
        except Exception as e:
            self.logger.error(f"❌ Error de comunicación con Service Bus: {e}", exc_info=True)
            raise

        context['sent_payload'] = payload
        return context
