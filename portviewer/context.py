"""
Application Context Module - Logger and theme with an explicit lifecycle

Handles:
- File logging setup and teardown
- Frontend-style log bridge (log_message)
- Theme mode resolution and cycling
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .config import Settings


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

THEME_MODES = ('light', 'dark', 'system')


class AppContext:
    """
    Shared state handed to components that need logging or theming.

    Call ``init()`` before use and ``teardown()`` on shutdown; nothing is
    configured at import time.
    """

    def __init__(self, settings: Optional[Settings] = None, logger_name: str = 'portviewer'):
        self.settings = settings or Settings()
        self.logger = logging.getLogger(logger_name)
        self.theme_mode = self.settings.theme
        self._file_handler: Optional[logging.FileHandler] = None

    @property
    def log_file(self) -> Path:
        return Path(self.settings.log_dir) / "portviewer.log"

    @property
    def initialized(self) -> bool:
        return self._file_handler is not None

    def init(self) -> 'AppContext':
        """Create the log directory and attach the file handler"""
        if self._file_handler is not None:
            return self

        log_file = self.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))

        self.logger.setLevel(self.settings.log_level)
        self.logger.addHandler(file_handler)
        self._file_handler = file_handler

        self.logger.info(f"PortViewer context initialized (backend={self.settings.backend})")
        return self

    def teardown(self) -> None:
        """Detach and close the file handler; safe to call twice"""
        if self._file_handler is None:
            return
        self.logger.info("PortViewer context torn down")
        self.logger.removeHandler(self._file_handler)
        self._file_handler.close()
        self._file_handler = None

    def __enter__(self) -> 'AppContext':
        return self.init()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()

    def get_logger(self, name: str) -> logging.Logger:
        """Child logger sharing the context's handlers"""
        return self.logger.getChild(name)

    def log_message(self, level: str, message: str, data: Any = None) -> None:
        """Log a presentation-layer message with an optional JSON payload"""
        if level == 'error':
            self.logger.error(message)
        elif level == 'debug':
            self.logger.debug(message)
        else:
            self.logger.info(message)

        if data is not None:
            self.logger.info(f"data: {json.dumps(data, default=str)}")

    @property
    def resolved_theme(self) -> str:
        """'light' or 'dark'; 'system' follows the terminal background"""
        if self.theme_mode != 'system':
            return self.theme_mode

        # COLORFGBG is "fg;bg"; backgrounds 7 and 15 are light
        colorfgbg = os.environ.get('COLORFGBG', '')
        background = colorfgbg.split(';')[-1] if colorfgbg else ''
        return 'light' if background in ('7', '15') else 'dark'

    def cycle_theme(self) -> str:
        """Advance light -> dark -> system -> light and return the new mode"""
        index = THEME_MODES.index(self.theme_mode)
        self.theme_mode = THEME_MODES[(index + 1) % len(THEME_MODES)]
        self.logger.debug(f"Theme mode changed to {self.theme_mode}")
        return self.theme_mode
