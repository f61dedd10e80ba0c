import logging

LOGGER_NAME = "sketchpad"

logger = logging.getLogger(LOGGER_NAME)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. ``get_logger(__name__)``.

    Children carry no handler or level of their own, so ``set_debug`` on the
    package logger governs them too.
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logger.getChild(name)


def set_debug(enabled: bool) -> None:
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)
