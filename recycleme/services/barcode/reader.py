import io
import inspect
import logging
from typing import Callable, List, Optional

from PIL import Image

from recycleme.core.errors import BarcodeUnavailableError
from recycleme.core.models import DecodedBarcode
from recycleme.core.utils import io_bound
from recycleme.services.barcode import BARCODE_AVAILABLE

if BARCODE_AVAILABLE:
    from pyzbar.pyzbar import decode as zbar_decode
else:
    zbar_decode = None

logger = logging.getLogger(__name__)

ResultCallback = Callable[[List[DecodedBarcode]], object]


class BarcodeReader:
    """
    Decodes barcode pictures. Results are not returned to the caller but
    delivered to the single callback registered with set_result_callback().
    """

    def __init__(self):
        self.available = False
        self._callback: Optional[ResultCallback] = None

    def initialize(self) -> bool:
        self.available = BARCODE_AVAILABLE and zbar_decode is not None
        if self.available:
            logger.info("Barcode reader ready (pyzbar)")
        else:
            logger.error("Barcode dependencies missing. Image scanning disabled.")
        return self.available

    def set_result_callback(self, callback: ResultCallback):
        if self._callback is not None and self._callback != callback:
            logger.warning("Replacing existing barcode result callback")
        self._callback = callback

    async def decode_image(self, image: bytes):
        if not self.available:
            raise BarcodeUnavailableError("Barcode scanning is not available on this kiosk")

        results = await io_bound(self._decode, image)
        logger.info(f"Decoded {len(results)} barcode(s)")
        await self._deliver(results)

    def _decode(self, image: bytes) -> List[DecodedBarcode]:
        try:
            picture = Image.open(io.BytesIO(image))
            picture.load()
        except OSError as e:
            # Unreadable pictures count as "nothing found"
            logger.warning(f"Cannot read image: {e}")
            return []

        symbols = zbar_decode(picture.convert("L"))
        return [
            DecodedBarcode(value=s.data.decode("utf-8", errors="replace"), symbology=str(s.type))
            for s in symbols
        ]

    async def _deliver(self, results: List[DecodedBarcode]):
        if self._callback is None:
            logger.warning("No result callback registered, dropping decode result")
            return
        outcome = self._callback(results)
        if inspect.isawaitable(outcome):
            await outcome
