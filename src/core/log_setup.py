"""Logging configuration. Modules only ever call `logging.getLogger(__name__)`; this is the one place handlers get set up."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a stream handler on the root logger (no-op if the application already configured one)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # sqlalchemy is very chatty on INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
