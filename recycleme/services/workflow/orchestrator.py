import logging
from typing import Callable, List, Optional

from recycleme.core.errors import BarcodeValidationError, FetchError, RecycleError
from recycleme.core.models import Product, RenderInstruction, RenderKind, WorkflowState
from recycleme.services.barcode.controller import ScanController
from recycleme.services.bins import column_width, group_by_bin
from recycleme.services.recycle_api import EMPTY_BARCODE_MESSAGE, RecycleApiClient
from recycleme.services.workflow.guard import SubmissionGuard

logger = logging.getLogger(__name__)

RenderListener = Callable[[RenderInstruction], None]


class WorkflowOrchestrator:
    """
    Drives one kiosk session: picture -> barcode -> lookup -> bins.

    States: Idle -> Loading -> Idle | ErrorDisplayed. The guard is held for
    the whole of a picture decode and the lookup it triggers, and is released
    on every way out of Loading.
    """

    def __init__(self, scan_controller: ScanController, fetcher: RecycleApiClient,
                 guard: Optional[SubmissionGuard] = None):
        self.scan_controller = scan_controller
        self.fetcher = fetcher
        self.guard = guard or SubmissionGuard()

        self.state = WorkflowState.IDLE
        self.product: Optional[Product] = None
        self.barcode = ""
        self.last_error: Optional[RecycleError] = None
        self._listeners: List[RenderListener] = []

        scan_controller.bind(on_barcode=self._on_barcode, on_rejected=self._on_rejected)

    def add_listener(self, listener: RenderListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: RenderListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def is_loading(self) -> bool:
        return self.state == WorkflowState.LOADING

    async def select_image(self, image: bytes):
        """Decodes a barcode picture and, if it holds exactly one barcode, looks it up."""
        if not self.guard.try_acquire():
            logger.warning("Image selected while a lookup is in flight, ignoring")
            return

        self.barcode = ""
        self._enter_loading()
        try:
            await self.scan_controller.decode(image)
        except Exception as e:
            logger.error(f"Error while scanning image: {e}")
            self._show_error(RecycleError(f"Cannot read image: {e}"))
        finally:
            self.guard.release()

    async def submit(self, ean: str):
        """Manual lookup. A no-op while another lookup is in flight."""
        if self.guard.held:
            logger.info("Submit ignored, lookup already in flight")
            return

        ean = (ean or "").strip()
        self.barcode = ean
        if not ean:
            self._show_error(BarcodeValidationError(EMPTY_BARCODE_MESSAGE))
            return

        if not self.guard.try_acquire():
            return

        self._enter_loading()
        try:
            await self._lookup(ean)
        finally:
            self.guard.release()

    async def _on_barcode(self, value: str):
        # Guard is still held from select_image()
        self.barcode = value
        self._emit(RenderInstruction(kind=RenderKind.FILL_BARCODE, barcode=value))
        if not value.strip():
            self._show_error(BarcodeValidationError(EMPTY_BARCODE_MESSAGE))
            return
        await self._lookup(value.strip())

    async def _on_rejected(self, error: RecycleError):
        self._show_error(error)

    async def _lookup(self, ean: str):
        self.product = None
        try:
            payload = await self.fetcher.fetch(ean)
        except RecycleError as e:
            self._show_error(e)
            return
        except Exception as e:
            logger.error(f"Unexpected error while fetching {ean}: {e}")
            self._show_error(FetchError(str(e)))
            return

        self.guard.release()
        self.product = payload.product
        self.state = WorkflowState.IDLE
        self.last_error = None

        if not payload.throw_away:
            logger.info(f"No disposal data for {ean}")
            self._emit(RenderInstruction(kind=RenderKind.SHOW_NO_DATA, product=self.product))
            return

        bins = group_by_bin(payload.throw_away)
        self._emit(RenderInstruction(
            kind=RenderKind.SHOW_BINS,
            product=self.product,
            bins=bins,
            column_width=column_width(len(bins)),
        ))

    def _enter_loading(self):
        self.state = WorkflowState.LOADING
        self.last_error = None
        self._emit(RenderInstruction(kind=RenderKind.CLEAR))

    def _show_error(self, error: RecycleError):
        self.guard.release()
        self.state = WorkflowState.ERROR_DISPLAYED
        self.last_error = error
        logger.info(f"Workflow error ({type(error).__name__}): {error.message}")
        self._emit(RenderInstruction(kind=RenderKind.SHOW_ERROR, message=error.message))

    def _emit(self, instruction: RenderInstruction):
        for listener in list(self._listeners):
            try:
                listener(instruction)
            except Exception as e:
                logger.error(f"Render listener failed on {instruction.kind.value}: {e}")
