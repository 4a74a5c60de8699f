"""Run the hecomlink server: ``python -m hecomlink``."""

import logging

import uvicorn

from hecomlink.config import load_config
from hecomlink.server import create_app


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
