# File: src/chaindesk/monitoring/logging_config.py

import logging
import logging.handlers
import os
from datetime import datetime
from typing import Optional

from ..utils.logger import LOG_FORMAT

class LogConfig:
    def __init__(
        self,
        log_dir: Optional[str] = "logs",
        level: str = "INFO",
        max_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        self.log_dir = log_dir
        self.level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        if not isinstance(self.level, int):
            self.level = logging.INFO
        self.max_size = max_size
        self.backup_count = backup_count

        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

    def setup_logging(self) -> logging.Logger:
        # Create formatters
        file_formatter = logging.Formatter(LOG_FORMAT)
        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

        package_logger = logging.getLogger("chaindesk")
        package_logger.setLevel(logging.DEBUG if self.log_dir else self.level)

        # Set up console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(self.level)
        package_logger.addHandler(console_handler)

        # Set up file handler
        if self.log_dir:
            log_file = os.path.join(
                self.log_dir,
                f'chaindesk_{datetime.now().strftime("%Y%m%d")}.log'
            )
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self.max_size,
                backupCount=self.backup_count
            )
            file_handler.setFormatter(file_formatter)
            file_handler.setLevel(logging.DEBUG)
            package_logger.addHandler(file_handler)

        return package_logger
