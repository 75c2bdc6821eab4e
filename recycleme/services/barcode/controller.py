import logging
from typing import Awaitable, Callable, List, Optional

from recycleme.core.errors import DecodeAmbiguityError, RecycleError
from recycleme.core.models import DecodedBarcode
from recycleme.services.barcode.reader import BarcodeReader

logger = logging.getLogger(__name__)

BarcodeHandler = Callable[[str], Awaitable[None]]
RejectHandler = Callable[[RecycleError], Awaitable[None]]

NO_BARCODE_MESSAGE = "No barcode found"
MULTIPLE_BARCODES_MESSAGE = "Multiple barcodes found"


class ScanController:
    """Owns the in-flight decode and turns reader results into a single verdict."""

    def __init__(self, reader: BarcodeReader):
        self.reader = reader
        self._pending = False
        self._on_barcode: Optional[BarcodeHandler] = None
        self._on_rejected: Optional[RejectHandler] = None

        # Registered once for the lifetime of the controller
        reader.set_result_callback(self._handle_result)

    def bind(self, on_barcode: BarcodeHandler, on_rejected: RejectHandler):
        self._on_barcode = on_barcode
        self._on_rejected = on_rejected

    @property
    def busy(self) -> bool:
        return self._pending

    async def decode(self, image: bytes):
        if self._pending:
            logger.warning("Decode already in progress, ignoring new image")
            return

        self._pending = True
        try:
            await self.reader.decode_image(image)
        except RecycleError as e:
            if self._pending:
                self._pending = False
                await self._reject(e)
        finally:
            self._pending = False

    async def _handle_result(self, results: List[DecodedBarcode]):
        if not self._pending:
            logger.warning(f"Dropping unsolicited decode result ({len(results)} barcode(s))")
            return
        self._pending = False

        if len(results) == 1:
            value = results[0].value
            logger.info(f"Barcode confirmed: {value}")
            if self._on_barcode:
                await self._on_barcode(value)
            return

        if not results:
            error = DecodeAmbiguityError(NO_BARCODE_MESSAGE, count=0)
        else:
            error = DecodeAmbiguityError(MULTIPLE_BARCODES_MESSAGE, count=len(results),
                                         first_value=results[0].value)
        logger.warning(f"Scan rejected: {error.message} ({error.count})")
        await self._reject(error)

    async def _reject(self, error: RecycleError):
        if self._on_rejected:
            await self._on_rejected(error)
