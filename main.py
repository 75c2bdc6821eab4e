import logging

from nicegui import ui

from recycleme.core import config_manager
from recycleme.ui.sort_page import sort_page

config = config_manager.load_config()

logging.basicConfig(level=config.get('log_level', 'INFO'),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@ui.page('/')
def index():
    sort_page(config)


if __name__ in {"__main__", "__mp_main__"}:
    logger.info(f"Starting kiosk against {config['server_url']}")
    ui.run(title=config.get('title', 'RecycleMe'), port=config['ui_port'], reload=False)
