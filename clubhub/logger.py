import logging

from .config import LOG_FORMAT, LOG_LEVEL

ROOT_LOGGER = "clubhub"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL)
    # uvicorn configures the stdlib root logger; keep our lines out of it
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Module logger under the ``clubhub`` namespace.

    The stream handler lives on the namespace logger only, so module loggers
    share it through propagation. Names outside the package (``main``) are
    nested under the namespace.
    """
    _configure_root()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
