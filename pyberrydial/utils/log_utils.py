import logging
from logging.handlers import TimedRotatingFileHandler
import os
import sys
from datetime import datetime


class MicrosecondFormatter(logging.Formatter):

    def formatTime(self, record, datefmt=None):
        ct = datetime.fromtimestamp(record.created)
        if datefmt:
            return ct.strftime(datefmt)
        return super().formatTime(record, datefmt)


def init_logger(
    name: str = "pyberrydial",
    log_file: str | None = "logs/pyberrydial.log",
    level: int | str = logging.INFO,
    console: bool = True,
    backup_count: int = 7
) -> logging.Logger:
    """
    Initialize a logger that logs to a daily rotating file and/or the console.

    Parameters
    ----------
    name : str
        Name of the logger. The default is the package logger, the parent of
        the loggers used by the stepper devices and the world scheduler.
    log_file : str | None
        Path to the log file. Parent directories will be created if needed.
        If None, no file handler is attached.
    level : int | str
        Logging level (e.g., logging.INFO, logging.DEBUG or "DEBUG").
    console : bool
        If True, log to sys.stdout.
    backup_count : int
        Number of daily log files kept next to the current one.

    Records carry the name of the thread that logged them: device ticks run
    on the `DeviceWorker-<name>` threads of the world scheduler, the timer on
    `WorldTimer`.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # prevents duplicate log lines if already propagated

    if not logger.handlers:
        formatter = MicrosecondFormatter(
            fmt="%(asctime)s [%(name)s] [%(threadName)s] [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S.%f"
        )

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                log_file, when="midnight", backupCount=backup_count, encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger
