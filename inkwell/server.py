import logging

from aiohttp import web

from . import VERSION
from .api import create_app
from .config import load_config
from .constants import APP_NAME, SCHEMA_VERSION
from .db import QuoteStore

logger = logging.getLogger("Inkwell")


def main():
    config = load_config()
    logging.basicConfig(
        level=config["log_level"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    _banner = f" {APP_NAME} Startup "
    logger.info("=" * 40 + _banner + "=" * 40)
    logger.info(f"Version: {VERSION}")
    logger.info(f"Schema version: {SCHEMA_VERSION}")

    store = QuoteStore(seed_presets=config["seed_presets"])
    logger.info(f"Quotes: {store.count_quotes()}")
    logger.info("=" * (80 + len(_banner)))

    app = create_app(store, config=config)

    async def _close_store(_app):
        store.close()

    app.on_cleanup.append(_close_store)
    web.run_app(app, host=config["host"], port=config["port"])


if __name__ == "__main__":
    main()
