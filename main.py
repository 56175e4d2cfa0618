import logging
import sys

from config.settings import QUEUE_CONN_STR, QUEUE_INPUT_NAME, QUEUE_OUTPUT_NAME
from src.worker import Worker

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logging.getLogger("azure").setLevel(logging.WARNING)
logging.getLogger("uamqp").setLevel(logging.WARNING)


if __name__ == "__main__":
    logging.info(">>> Iniciando servicio de Granulometría...")

    # Verificación crítica de configuración antes de arrancar.
    if not QUEUE_CONN_STR:
        logging.error("La variable de entorno 'service_bus_conn_str' (QUEUE_CONN_STR) no está definida. El servicio no puede iniciar.")
        sys.exit(1)

    if not QUEUE_INPUT_NAME:
        logging.error("La variable de entorno 'queue_input_name' (QUEUE_INPUT_NAME) no está definida. El servicio no puede iniciar.")
        sys.exit(1)

    if not QUEUE_OUTPUT_NAME:
        logging.warning("'queue_output_name' no está definida: los resultados sólo quedarán en el log.")

    worker = None
    try:
        worker = Worker(
            sb_conn_str=QUEUE_CONN_STR,
            queue_name=QUEUE_INPUT_NAME,
            output_queue_name=QUEUE_OUTPUT_NAME
        )

        worker.start()

    except KeyboardInterrupt:
        logging.warning("\nInterrupción manual detectada. Finalizando servicio...")
        if worker:
            worker.stop()
        logging.info("Servicio detenido limpiamente. ¡Adiós!")

    except Exception as e:
        logging.critical(f"Error fatal en el ciclo principal: {e}", exc_info=True)
        if worker:
            worker.stop()
        sys.exit(1)
