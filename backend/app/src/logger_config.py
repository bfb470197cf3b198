from __future__ import annotations

import logging

import uvicorn

FORMAT = "%(levelprefix)s %(asctime)s [%(threadName)s] [%(name)s] %(message)s"


def get_logger(name: str = __name__, level: str | int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = uvicorn.logging.DefaultFormatter(
            FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach the uvicorn styled handler to the price search logger tree."""
    for name in ("price_search", "price_api"):
        get_logger(name, level)
