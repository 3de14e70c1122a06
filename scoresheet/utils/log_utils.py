"""Logging setup for the Futsal Scoresheet application."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the running process.

    Args:
        level: Logging level name, e.g. ``"DEBUG"`` or ``"INFO"``.
    """
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("scoresheet").setLevel(numeric)
