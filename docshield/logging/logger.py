import logging
import sys
from typing import TextIO

# Request-level chatter from the AI client stack; kept quiet unless debugging.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class Log:
    """Application log facade.

    Records go to stderr so command output on stdout stays clean. Document
    text and PII values are only ever passed to ``debug``.
    """

    _logger: logging.Logger = logging.getLogger("docshield")
    _handler: logging.StreamHandler | None = None  # type: ignore[type-arg]

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and (re)attach the single stream handler.

        Safe to call more than once; later calls retarget the existing handler.
        """
        level = log_level.upper()
        cls._logger.setLevel(level)
        cls._logger.propagate = False
        target = stream if stream is not None else sys.stderr
        if cls._handler is None:
            cls._handler = logging.StreamHandler(target)
            cls._handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(cls._handler)
        else:
            cls._handler.setStream(target)

        third_party_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(third_party_level)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
