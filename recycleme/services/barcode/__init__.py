import logging

logger = logging.getLogger(__name__)

# pyzbar raises ImportError when the zbar shared library is missing
try:
    from pyzbar import pyzbar  # noqa: F401
    BARCODE_AVAILABLE = True
except ImportError as e:
    logger.warning(f"Barcode decoding disabled: {e}")
    BARCODE_AVAILABLE = False
