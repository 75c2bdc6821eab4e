from nicegui import ui, events
import inspect
import logging
from typing import Any, Dict, Optional

from recycleme.core.errors import RecycleError
from recycleme.core.models import Material, Product, RenderInstruction, RenderKind
from recycleme.services.barcode.controller import ScanController
from recycleme.services.barcode.reader import BarcodeReader
from recycleme.services.contributions import Blacklister, MaterialSuggester
from recycleme.services.recycle_api import RecycleApiClient
from recycleme.services.workflow import WorkflowOrchestrator

logger = logging.getLogger(__name__)


class SortPage:
    def __init__(self, orchestrator: WorkflowOrchestrator, suggester: MaterialSuggester,
                 blacklister: Blacklister, title: str = "RecycleMe"):
        self.orchestrator = orchestrator
        self.suggester = suggester
        self.blacklister = blacklister
        self.title = title

        self.barcode_input = None
        self.spinner = None
        self.error_column = None
        self.product_card = None
        self.bins_card = None
        self.bins_grid = None
        self.no_data_card = None

        # Suggest dialog state
        self.suggest_dialog = None
        self.suggest_list = None
        self.suggest_help = None
        self.material_checks: Dict[int, Any] = {}
        self.materials_by_id: Dict[int, Material] = {}

        # Blacklist dialog state
        self.blacklist_dialog = None
        self.blacklist_name = None
        self.blacklist_help = None

    def build(self):
        with ui.column().classes('w-full max-w-4xl mx-auto p-4 gap-4'):
            ui.label(self.title).classes('text-3xl font-bold')

            with ui.row().classes('w-full items-center gap-2'):
                self.barcode_input = ui.input(label='Barcode').props('clearable').classes('flex-grow')
                self.barcode_input.on('keydown.enter', self.on_submit)
                ui.button('SORT', on_click=self.on_submit).props('icon=search')
                self.spinner = ui.spinner(size='lg')
                self.spinner.visible = False

            ui.upload(label='Scan a picture of the barcode', on_upload=self.handle_upload,
                      auto_upload=True).props('accept=image/*').classes('w-full')

            self.error_column = ui.column().classes('w-full gap-0 text-red-500')

            self.product_card = ui.card().classes('w-full')
            self.product_card.visible = False

            self.no_data_card = ui.card().classes('w-full bg-yellow-50')
            with self.no_data_card:
                ui.label('No disposal data for this product yet.').classes('text-lg')
                ui.button('SUGGEST PACKAGING', on_click=self.open_suggest_dialog).props('flat icon=add')
            self.no_data_card.visible = False

            self.bins_card = ui.card().classes('w-full')
            with self.bins_card:
                ui.label('Throw away in').classes('text-xl font-bold')
                self.bins_grid = ui.grid(columns=12).classes('w-full gap-4')
            self.bins_card.visible = False

        self._build_suggest_dialog()
        self._build_blacklist_dialog()

    def _build_suggest_dialog(self):
        self.suggest_dialog = ui.dialog()
        with self.suggest_dialog, ui.card().classes('w-[600px]'):
            ui.label('Which packaging does this product have?').classes('text-lg font-bold')
            self.suggest_list = ui.grid(columns=3).classes('w-full')
            self.suggest_help = ui.label().classes('text-red-500')
            with ui.row().classes('w-full justify-end gap-2'):
                ui.button('Cancel', on_click=self.suggest_dialog.close, color='secondary')
                ui.button('Send', on_click=self.send_suggestion, color='primary')

    def _build_blacklist_dialog(self):
        self.blacklist_dialog = ui.dialog()
        with self.blacklist_dialog, ui.card().classes('w-[500px]'):
            ui.label('Wrong product?').classes('text-lg font-bold')
            self.blacklist_name = ui.input(label='Real product name').classes('w-full')
            self.blacklist_help = ui.label().classes('text-red-500')
            with ui.row().classes('w-full justify-end gap-2'):
                ui.button('Cancel', on_click=self.blacklist_dialog.close, color='secondary')
                ui.button('Report', on_click=self.send_blacklist, color='primary')

    # --- Workflow events ---

    async def on_submit(self):
        await self.orchestrator.submit(self.barcode_input.value or "")

    async def handle_upload(self, e: events.UploadEventArguments):
        # Handle NiceGUI version differences
        file_obj = getattr(e, 'content', getattr(e, 'file', None))
        if not file_obj:
            ui.notify("Upload failed: no file content", type='negative')
            return

        content = file_obj.read()
        if inspect.isawaitable(content):
            content = await content

        await self.orchestrator.select_image(content)

    # --- Rendering ---

    def render(self, instruction: RenderInstruction):
        self.spinner.visible = self.orchestrator.is_loading
        kind = instruction.kind

        if kind == RenderKind.CLEAR:
            self.reset()
        elif kind == RenderKind.FILL_BARCODE:
            self.barcode_input.value = instruction.barcode
        elif kind == RenderKind.SHOW_ERROR:
            self.reset()
            self.show_error(instruction.message)
        elif kind == RenderKind.SHOW_NO_DATA:
            self.reset()
            self.show_product(instruction.product)
            self.no_data_card.visible = True
        elif kind == RenderKind.SHOW_BINS:
            self.reset()
            self.show_product(instruction.product)
            self.show_bins(instruction.bins, instruction.column_width or 1)

    def reset(self):
        self.error_column.clear()
        self.product_card.clear()
        self.product_card.visible = False
        self.no_data_card.visible = False
        self.bins_grid.clear()
        self.bins_card.visible = False

    def show_error(self, message: str):
        with self.error_column:
            for line in message.splitlines() or [message]:
                ui.label(line)

    def show_product(self, product: Optional[Product]):
        if product is None:
            return
        with self.product_card:
            with ui.row().classes('w-full items-center gap-4 no-wrap'):
                if product.image_url:
                    ui.image(product.image_url).classes('w-32 h-32 object-contain')
                with ui.column().classes('gap-1'):
                    ui.label(product.name).classes('text-xl font-bold')
                    ui.label(product.ean).classes('text-sm text-gray-500')
                    with ui.row().classes('items-center gap-1 text-sm'):
                        ui.label('Source:')
                        if product.website_url:
                            ui.link(product.website_name, product.website_url, new_tab=True)
                        else:
                            ui.label(product.website_name)
            with ui.row().classes('w-full justify-end gap-2'):
                ui.button('SUGGEST PACKAGING', on_click=self.open_suggest_dialog).props('flat icon=recycling')
                ui.button('WRONG PRODUCT?', on_click=self.open_blacklist_dialog).props('flat icon=report color=negative')
        self.product_card.visible = True

    def show_bins(self, bins: Dict[str, list], width: int):
        span = max(1, min(width, 12))
        with self.bins_grid:
            for bin_label, materials in bins.items():
                with ui.column().classes(f'col-span-{span} items-center text-center gap-1'):
                    ui.label(bin_label).classes('text-lg font-bold')
                    for material in materials:
                        ui.label(material)
        self.bins_card.visible = True

    # --- Contributions ---

    async def open_suggest_dialog(self):
        self.suggest_help.text = ''
        self.suggest_list.clear()
        self.material_checks = {}
        self.suggest_dialog.open()

        try:
            options = await self.suggester.load_options()
        except RecycleError as e:
            self.suggest_help.text = e.message
            return

        if not options.materials:
            self.suggest_help.text = 'No packaging available'
            return

        self.materials_by_id = {m.id: m for m in options.materials}
        with self.suggest_list:
            for material in options.materials:
                self.material_checks[material.id] = ui.checkbox(
                    material.name, value=material.id in options.selected_ids)

    async def send_suggestion(self):
        selected = [self.materials_by_id[mid] for mid, box in self.material_checks.items() if box.value]
        try:
            self.suggest_dialog.close()
            await self.suggester.suggest(selected)
            ui.notify('Thanks! Packaging suggestion sent.', type='positive')
        except RecycleError as e:
            logger.warning(f"Suggestion rejected: {e.message}")
            self.suggest_dialog.open()
            self.suggest_help.text = e.message

    def open_blacklist_dialog(self):
        self.blacklist_help.text = ''
        self.blacklist_name.value = ''
        self.blacklist_dialog.open()

    async def send_blacklist(self):
        try:
            self.blacklist_dialog.close()
            await self.blacklister.report(self.blacklist_name.value or "")
            ui.notify('Thanks! Report sent.', type='positive')
        except RecycleError as e:
            logger.warning(f"Report rejected: {e.message}")
            self.blacklist_dialog.open()
            self.blacklist_help.text = e.message


def build_orchestrator(config: Dict[str, Any]):
    """Wires the workflow components for one kiosk session."""
    client = RecycleApiClient(config['server_url'], timeout=config.get('request_timeout'))
    reader = BarcodeReader()
    reader.initialize()
    orchestrator = WorkflowOrchestrator(ScanController(reader), client)
    return orchestrator, client


def sort_page(config: Dict[str, Any]):
    orchestrator, client = build_orchestrator(config)
    page = SortPage(orchestrator, MaterialSuggester(client, orchestrator),
                    Blacklister(client, orchestrator), title=config.get('title', 'RecycleMe'))
    page.build()
    orchestrator.add_listener(page.render)
