import gc
import json
import logging
from typing import Any, Dict, Optional

from azure.servicebus import ServiceBusClient, ServiceBusReceiver

from src.domain import AnalysisSession, DetectedRegion, GradationError
from src.nodes.results import ServiceBusSenderNode
from src.pipeline import GradationPipeline


class InvalidJob(ValueError):
    """El mensaje no describe un trabajo procesable."""


class Worker:
    def __init__(self,
                 sb_conn_str: str,
                 queue_name: str,
                 output_queue_name: Optional[str] = None):

        self.logger = logging.getLogger(__name__)

        if not self.logger.hasHandlers() and not logging.getLogger().hasHandlers():
            logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

        sender = None
        if output_queue_name:
            sender = ServiceBusSenderNode(
                connection_string=sb_conn_str,
                queue_name=output_queue_name,
                name="Sender_Queue"
            )

        self.pipelines = {
            "image": GradationPipeline(source="image", result_sender=sender),
            "sieve": GradationPipeline(source="sieve", result_sender=sender),
        }

        self.queue_name = queue_name
        self.sb_conn_str = sb_conn_str
        self.is_running = False

    def start(self):
        """
        Inicia el proceso de escucha.
        """
        self.is_running = True
        self.logger.info(f"🚀 Worker iniciado. Conectando a cola: '{self.queue_name}'")

        servicebus_client = None

        try:
            servicebus_client = ServiceBusClient.from_connection_string(conn_str=self.sb_conn_str)

            receiver = servicebus_client.get_queue_receiver(queue_name=self.queue_name)

            with receiver:
                self.logger.info("👂 Conexión establecida. Esperando mensajes...")

                while self.is_running:
                    msgs = receiver.receive_messages(max_message_count=1, max_wait_time=5)

                    for msg in msgs:
                        self.logger.info(f"📩 Mensaje recibido (Seq: {msg.sequence_number})")
                        self._process_message(receiver, msg)
                        gc.collect()

        except Exception as e:
            self.logger.critical(f"🔥 Error crítico en el Worker: {e}", exc_info=True)
            raise

        finally:
            self.logger.info("🛑 Cerrando recursos del Worker...")
            if servicebus_client:
                servicebus_client.close()
            self.logger.info("Worker finalizado.")

    def _process_message(self, receiver: ServiceBusReceiver, msg) -> Optional[Dict[str, Any]]:
        """
        Procesa un trabajo. Los errores de entrada van a DeadLetter (reintentar
        no los corrige); cualquier otro error abandona el mensaje para que
        Azure lo reintente.
        """
        context = {}
        try:
            job_data = json.loads(str(msg))
            context = self._build_context(job_data)

            self.logger.info(f"⚙️  Procesando Job ID: {context['job_id']} ({context['job_type']})...")
            result = self.pipelines[context['job_type']].run(context)

            self._log_execution_times(context['job_id'], result.get('execution_times', {}))

            receiver.complete_message(msg)
            self.logger.info(f"✅ Job {context['job_id']} completado exitosamente.")
            return result

        except json.JSONDecodeError:
            self.logger.error("❌ JSON inválido. Enviando a DeadLetter.")
            receiver.dead_letter_message(msg, reason="InvalidJSON", error_description="Parsing Failed")

        except (InvalidJob, GradationError) as e:
            job_id = context.get('job_id', 'Unknown')
            self.logger.error(f"❌ Datos inválidos en Job {job_id}: {e}. Enviando a DeadLetter.")
            receiver.dead_letter_message(msg, reason=type(e).__name__, error_description=str(e))

        except Exception as e:
            job_id = context.get('job_id', 'Unknown')
            self.logger.error(f"❌ Error procesando Job {job_id}: {e}", exc_info=True)

            # Abandonamos el mensaje para que Azure lo reintente
            receiver.abandon_message(msg)

        return None

    def _build_context(self, job_data: dict) -> Dict[str, Any]:
        """Traduce el JSON del trabajo al contexto inicial del pipeline."""
        if not isinstance(job_data, dict):
            raise InvalidJob(f"Se esperaba un objeto JSON, llegó: {type(job_data).__name__}")

        job_type = job_data.get("type")
        job_id = str(job_data.get("id", "unknown"))

        if job_type == "sieve":
            rows = job_data.get("rows")
            if not isinstance(rows, list):
                raise InvalidJob(f"Job de tamizado sin 'rows'. Keys: {list(job_data.keys())}")
            return {"job_id": job_id, "job_type": job_type, "sieve_rows": rows}

        if job_type == "image":
            session = AnalysisSession()
            session.load_image(str(job_data.get("image_id", job_id)))
            return {
                "job_id": job_id,
                "job_type": job_type,
                "session": session,
                "calibration": job_data.get("calibration"),
                "regions": self._parse_regions(job_data.get("regions", [])),
            }

        raise InvalidJob(f"Tipo de job desconocido: {job_type!r}")

    @staticmethod
    def _parse_regions(raw_regions) -> list:
        if not isinstance(raw_regions, list):
            raise InvalidJob("'regions' debe ser una lista.")
        try:
            return [
                DetectedRegion(
                    area=float(r["area"]),
                    bbox=tuple(int(v) for v in r["bbox"]) if r.get("bbox") else None,
                )
                for r in raw_regions
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidJob(f"Región mal formada: {e}") from e

    def _log_execution_times(self, job_id: str, times: dict):
        if not times: return
        total = times.get('total_pipeline', 0)

        log_msg = [f"📊 TIEMPOS - JOB {job_id} (Total: {total:.4f}s)"]
        nodes = {k: v for k, v in times.items() if k != 'total_pipeline'}
        for node, dur in nodes.items():
            pct = (dur / total * 100) if total > 0 else 0
            log_msg.append(f"   • {node:<25}: {dur:.4f}s ({pct:.1f}%)")

        self.logger.info("\n".join(log_msg))

    def stop(self):
        self.logger.info("🛑 Solicitud de parada recibida.")
        self.is_running = False
