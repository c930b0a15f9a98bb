"""
Logging setup and pipeline phase timing
"""

import logging
import os
import sys
import time
from collections import OrderedDict
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Retry/backoff chatter and Streamlit file watching are noise at INFO
NOISY_LOGGERS = ('urllib3', 'requests', 'streamlit', 'watchdog')


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    verbose: bool = False
):
    """Configure the root logger for the CLI and the dashboard

    level and log_file fall back to LOG_LEVEL / LOG_FILE from the
    environment; verbose forces DEBUG.
    """
    level = "DEBUG" if verbose else (level or os.getenv("LOG_LEVEL", "INFO"))
    log_file = log_file or os.getenv("LOG_FILE") or None
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class PhaseTimer:
    """Wall-clock durations of named pipeline phases

    Each mark() closes the phase running since the previous mark, so
    summary() reads like "Fetch=2.1s, Flatten=0.0s, Build=0.1s, Total=2.2s".
    """

    def __init__(self):
        self._start = time.perf_counter()
        self._last = self._start
        self.phases = OrderedDict()

    def mark(self, phase: str) -> float:
        """Close the current phase under the given name and return its duration"""
        now = time.perf_counter()
        elapsed = now - self._last
        self.phases[phase] = self.phases.get(phase, 0.0) + elapsed
        self._last = now
        return elapsed

    @property
    def total(self) -> float:
        return self._last - self._start

    def summary(self) -> str:
        parts = [f"{name.capitalize()}={seconds:.1f}s" for name, seconds in self.phases.items()]
        parts.append(f"Total={self.total:.1f}s")
        return ", ".join(parts)
