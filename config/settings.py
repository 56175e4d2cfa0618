import os
from dotenv import load_dotenv

load_dotenv()

QUEUE_CONN_STR = os.getenv("service_bus_conn_str")
QUEUE_INPUT_NAME = os.getenv("queue_input_name")
QUEUE_OUTPUT_NAME = os.getenv("queue_output_name")

# Regiones con área (px²) menor o igual a este umbral se descartan como ruido.
MIN_PIXEL_AREA = float(os.getenv("min_pixel_area", "50"))

HISTOGRAM_BINS = int(os.getenv("histogram_bins", "10"))

# La tabla de tamizado se ingresa en micrómetros; el núcleo trabaja en mm.
SIEVE_SIZE_DIVISOR = float(os.getenv("sieve_size_divisor", "1000"))

RESULT_PRECISION = int(os.getenv("result_precision", "2"))
