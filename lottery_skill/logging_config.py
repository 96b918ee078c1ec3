"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask


_NOISY_LOGGERS = ("sqlalchemy.engine", "pymongo", "botocore", "boto3", "urllib3")


def configure_logging(app: Flask) -> None:
    """Configure plain line-oriented logs on the root logger."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
