import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from tqdm.contrib.logging import logging_redirect_tqdm


CONSOLE_FORMAT = "%(levelname)s %(name)s - %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Playwright's driver and the event loop it runs on log every protocol hop at DEBUG.
_NOISY_LOGGERS = ("playwright", "asyncio")


def configure_logging(level: str = "INFO", file_path: Optional[str] = None) -> None:
    """
    Console logging shares the terminal with the prompts and the progress bar, so it stays terse;
    the optional log file gets timestamps.
    """
    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    # force=True: main() configures once from env, then again from the loaded config.
    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(os.getenv("NOISY_LOG_LEVEL", "WARNING"))


@contextmanager
def progress_safe_logging() -> Iterator[None]:
    """
    While a tqdm bar is on screen, route console log records through `tqdm.write` so they print
    above the bar instead of through it. File handlers are left alone.
    """
    with logging_redirect_tqdm():
        yield
