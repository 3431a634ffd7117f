import logging

from dprforge.config import log_level


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger configured with basicConfig."""
    logging.basicConfig(level=log_level(), format="%(levelname)s:%(name)s:%(message)s")
    return logging.getLogger(name)
