import logging
import sys


class _LibraryNoiseFilter(logging.Filter):
    """
    Keep application logs, but only let third-party loggers through at WARNING+.
    SQL statements are let through when echo is enabled.
    """

    def __init__(self, sql_echo: bool = False) -> None:
        super().__init__()
        self.sql_echo = sql_echo

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("todo_app") or name.startswith("uvicorn"):
            return True
        if name.startswith("sqlalchemy.engine") and self.sql_echo:
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", *, sql_echo: bool = False) -> None:
    """
    Configure the root logger with a single stderr handler.

    Call once at startup. Pre-existing root handlers are removed so repeated
    calls (tests, reloads) do not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    handler.addFilter(_LibraryNoiseFilter(sql_echo=sql_echo))
    root.addHandler(handler)

    logging.captureWarnings(True)
