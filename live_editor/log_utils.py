import logging
import os
from datetime import datetime


class TokenTracker:
    """Global tracker for token usage across all completion calls."""

    def __init__(self):
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        self.call_count = 0

    def record(self, prompt_tokens: int, completion_tokens: int):
        self.total_prompt_tokens += prompt_tokens
        self.total_completion_tokens += completion_tokens
        self.call_count += 1

    @property
    def total_tokens(self):
        return self.total_prompt_tokens + self.total_completion_tokens

    def as_dict(self) -> dict:
        return {
            "calls": self.call_count,
            "prompt": self.total_prompt_tokens,
            "completion": self.total_completion_tokens,
            "total": self.total_tokens,
        }


# Global singleton
token_tracker = TokenTracker()

_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(log_dir: str | None = ".live_editor/logs",
                 console: bool = True) -> logging.Logger:
    """Attach handlers to the package logger.

    A timestamped file in *log_dir* captures everything at DEBUG level;
    the console only shows INFO and above.  Pass ``log_dir=None`` to skip
    the file handler.  Safe to call more than once.
    """
    logger = logging.getLogger("live_editor")
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"edit_{timestamp}.log")
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(fh)

    if console:
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(ch)

    return logger


# Package logger; handlers are attached by the CLI via setup_logger()
log = logging.getLogger("live_editor")
