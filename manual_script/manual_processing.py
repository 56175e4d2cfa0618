"""
Script de procesamiento manual local.
Ejecuta el pipeline granulométrico de imagen sobre las fotografías de una
carpeta local, usando una calibración fija para todas ellas.
"""
import logging
import sys
from pathlib import Path

import cv2

# Aseguramos que el directorio raíz esté en el path para los imports
sys.path.append(str(Path(__file__).parent.parent))

from config.settings import MIN_PIXEL_AREA
from src.domain import AnalysisSession
from src.nodes.vision import OtsuContourDetector
from src.pipeline import GradationPipeline

# Configuración de carpetas
INPUT_DIR = Path(__file__).parent.parent / "manual_script" / "images"

# Línea de calibración (px) sobre el objeto de referencia y su largo real (mm).
# Valores por defecto para pruebas locales.
CALIBRATION = {
    "start": (100.0, 100.0),
    "end": (300.0, 100.0),
    "reference_length": 20.0,
}


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.info(">>> Iniciando script de procesamiento manual...")

    if not INPUT_DIR.exists():
        logging.error(f"No se encontró la carpeta de entrada: {INPUT_DIR.absolute()}")
        logging.info("Por favor crea la carpeta 'images' y coloca las fotografías ahí.")
        return

    pipeline = GradationPipeline(
        source="image",
        detector=OtsuContourDetector(min_pixel_area=MIN_PIXEL_AREA)
    )

    supported_extensions = ['*.jpg', '*.jpeg', '*.png', '*.bmp', '*.tif']
    image_files = []
    for ext in supported_extensions:
        image_files.extend(INPUT_DIR.glob(ext))
        image_files.extend(INPUT_DIR.glob(ext.upper()))

    image_files = sorted(set(image_files))

    if not image_files:
        logging.warning(f"No se encontraron imágenes en {INPUT_DIR}")
        return

    logging.info(f"Se encontraron {len(image_files)} imágenes para procesar.")

    session = AnalysisSession()
    for img_path in image_files:
        logging.info(f"--- Procesando: {img_path.name} ---")

        image = cv2.imread(str(img_path))
        if image is None:
            logging.error(f"Error al leer la imagen: {img_path}")
            continue

        session.load_image(img_path.name)
        context = {
            "job_id": img_path.stem,
            "image": image,
            "session": session,
            "calibration": CALIBRATION,
        }

        try:
            context = pipeline.run(context)
            result = context['gradation_result']
            values = "  ".join(f"{k}={v}" for k, v in result.display.items())
            logging.info(f"✅ {img_path.name}: {result.total_particles} partículas | {values}")

        except Exception as e:
            logging.error(f"❌ Fallo al procesar {img_path.name}: {e}", exc_info=True)

    logging.info(">>> Procesamiento finalizado.")


if __name__ == "__main__":
    main()
