"""
Configures loggers for edid_tools scripts: stdout / stderr stream handlers with optional ANSI colors, and an optional
log file.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from logging import LogRecord, Logger, Filter, Formatter
from pathlib import Path
from typing import Optional, Union, Collection, Iterable, Callable, Mapping

from tzlocal import get_localzone

from .output.color import colored

__all__ = ['init_logging', 'create_filter', 'ENTRY_FMT_DETAILED', 'DatetimeFormatter', 'ColorLogFormatter']
log = logging.getLogger(__name__)

ENTRY_FMT_DETAILED = '%(asctime)s %(levelname)s %(threadName)s %(name)s %(lineno)d %(message)s'

_NotSet = object()

PathLike = Union[Path, str]
Verbosity = Union[int, bool, None]
OptStrs = Optional[Collection[str]]


def init_logging(
    verbosity: Verbosity = 0,
    *,
    log_path: PathLike | None = None,
    names: OptStrs = _NotSet,
    date_fmt: str = None,
    millis: bool = False,
    entry_fmt: str = None,
    file_fmt: str = None,
    file_lvl: int = logging.DEBUG,
    fix_sigpipe: bool = True,
    replace_handlers: bool = True,
    set_levels: Mapping[str, int] = None,
    streams: bool = True,
    capture_warnings: bool = True,
) -> Optional[Path]:
    """
    Configures stream handlers for stdout and stderr so that logs with level logging.INFO and below are sent to stdout
    and logs with level logging.WARNING and above are sent to stderr.  If a log_path is provided, then a file handler
    will be added as well.

    The verbosity argument affects the log level that is set for stdout:
    - 0: 20 = logging.INFO (default)
    - 1: 19 = custom 'verbose' log level
    - 2: 10 = logging.DEBUG
    - 3: 9, with the detailed entry format

    :param verbosity: Higher values increase stdout output verbosity
    :param log_path: The path where logs should be written, or None (default) to prevent logging to file
    :param names: The names of the loggers for which handlers should be configured.  If set to None, then the root
      logger will be configured.  If not specified, then the ``edid_tools`` and ``__main__`` loggers are configured.
    :param date_fmt: The datetime format code to use for timestamps
    :param millis: Include milliseconds in the datetime format (ignored if ``date_fmt`` is specified)
    :param entry_fmt: The stream handler log message format.  If not specified, ``'%(message)s'`` is used when
      verbosity < 3, otherwise :data:`ENTRY_FMT_DETAILED` is used.
    :param file_fmt: The file handler log message format (default: :data:`ENTRY_FMT_DETAILED`)
    :param file_lvl: The minimum log level that should be written to the log file, if configured.
    :param fix_sigpipe: Restores the default handler for SIGPIPE so that a closed pipe (such as when piping
      output to ``| head``) will not cause an exception.
    :param replace_handlers: Remove any existing handlers on loggers before adding handlers to them
    :param set_levels: Mapping of {str(logger name): int(level)} to set the log level for the given loggers
    :param streams: Log to stdout and stderr (default: True).
    :param capture_warnings: Have the logging framework capture warnings instead of emitting them as warnings
    :return: The path to which logs are being written, or None if no file handler was configured.
    """
    if fix_sigpipe:
        import signal
        try:
            signal.signal(signal.SIGPIPE, signal.SIG_DFL)   # Prevent error when piping output
        except AttributeError:
            pass                                            # Does not work in Windows

    _configure_level_names()
    loggers = _get_loggers(names, replace_handlers)
    root_logger = logging.getLogger()
    if root_logger in loggers:
        root_logger.addHandler(logging.NullHandler())       # Hide logs written directly to the root logger
    root_logger.setLevel(logging.NOTSET)                    # Default is 30 / WARNING

    date_fmt = date_fmt or ('%Y-%m-%d %H:%M:%S.%f %Z' if millis else '%Y-%m-%d %H:%M:%S %Z')
    if streams:
        _add_stream_handlers(loggers, verbosity, date_fmt, entry_fmt)

    if set_levels:
        if not isinstance(set_levels, dict):
            raise TypeError('levels must be a dict of logger_name=level pairs')
        for name, lvl in set_levels.items():
            logging.getLogger(name).setLevel(lvl)

    if log_path is not None:
        log_path = Path(log_path).expanduser()
        _add_file_handler(loggers, log_path, date_fmt, file_fmt, file_lvl)

    if capture_warnings:
        logging.captureWarnings(True)

    return log_path


def _add_stream_handlers(loggers: Iterable[Logger], verbosity: Verbosity, date_fmt: str, entry_fmt: str = None):
    entry_fmt = entry_fmt or (ENTRY_FMT_DETAILED if verbosity and verbosity > 2 else '%(message)s')

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG + 2 - verbosity if verbosity else logging.INFO)
    stdout_handler.addFilter(create_filter(lambda r: r.levelno < logging.WARNING))
    stdout_handler.name = 'stdout'

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.addFilter(create_filter(lambda r: r.levelno >= logging.WARNING))
    stderr_handler.name = 'stderr'

    stream_formatter = ColorLogFormatter(entry_fmt, date_fmt)
    for handler in (stdout_handler, stderr_handler):
        handler.setFormatter(stream_formatter)
        for logger in loggers:
            logger.addHandler(handler)


def _add_file_handler(
    loggers: Iterable[Logger], log_path: Path, date_fmt: str, file_fmt: str | None, file_lvl: int
):
    from logging.handlers import TimedRotatingFileHandler

    prep_log_dir(log_path)
    file_handler = TimedRotatingFileHandler(log_path.as_posix(), when='midnight', backupCount=7, encoding='utf-8')
    file_handler.setLevel(file_lvl)
    file_handler.setFormatter(DatetimeFormatter(file_fmt or ENTRY_FMT_DETAILED, date_fmt))
    file_handler.name = log_path.as_posix()
    for logger in loggers:
        logger.addHandler(file_handler)
    log.log(19, f'Logging to {log_path}')


def _get_logger_names(names: OptStrs = _NotSet) -> set[Optional[str]]:
    if names is _NotSet:
        names = {__name__.split('.')[0], '__main__', 'py.warnings'}
    elif names is None or isinstance(names, str):
        names = {names}
    else:
        names = set(names)

    if None in names:
        names = {None}
    return names


def _get_loggers(names: OptStrs, replace_handlers: bool) -> list[Logger]:
    loggers = list(map(logging.getLogger, _get_logger_names(names)))
    for logger in loggers:
        logger.setLevel(logging.NOTSET)  # Let handlers deal with log levels
        if replace_handlers:
            logger.handlers = []
    return loggers


def _configure_level_names():
    lvl_names = {lvl: f'DBG_{lvl}' for lvl in range(1, 10)}
    lvl_names[19] = 'VERBOSE'
    for lvl, name in lvl_names.items():
        if logging.getLevelName(lvl).startswith('Level '):
            logging.addLevelName(lvl, name)


def create_filter(filter_fn: Callable[[LogRecord], bool]) -> Filter:
    """
    :param filter_fn: A function that takes 1 parameter (record) and returns True if the record should be logged, or
      False to ignore it
    :return: A custom, initialized subclass of logging.Filter using the given filter function
    """
    class CustomLogFilter(Filter):
        def filter(self, record: LogRecord) -> bool:
            return filter_fn(record)

    return CustomLogFilter()


class DatetimeFormatter(Formatter):
    """Enables use of ``%f`` (micro/milliseconds) in datetime formats."""
    _local_tz = get_localzone()

    def formatTime(self, record: LogRecord, datefmt: str = None) -> str:
        dt = datetime.fromtimestamp(record.created, self._local_tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            return self.default_msec_format % (dt.strftime(self.default_time_format), record.msecs)


class ColorLogFormatter(DatetimeFormatter):
    """
    Uses ANSI escape codes to colorize stdout/stderr logging output.  Colors may be specified by using the ``extra``
    parameter when logging, for example::\n
        log.error('An error occurred', extra={'color': 'red'})
    """

    def format(self, record: LogRecord) -> str:
        formatted = super().format(record)
        color = getattr(record, 'color', None)
        if color:
            if isinstance(color, (str, int)):
                formatted = colored(formatted, color)
            elif isinstance(color, dict):
                formatted = colored(formatted, **color)
            else:
                formatted = colored(formatted, *color)  # noqa
        return formatted


def prep_log_dir(log_path: PathLike):
    """Creates any necessary intermediate directories in order for the given log path to be valid."""
    log_dir = log_path.parent if isinstance(log_path, Path) else Path(log_path).parent
    if log_dir.exists():
        if not log_dir.is_dir():
            raise ValueError(f'Invalid log path - {log_dir} is not a directory')
    else:
        log_dir.mkdir(parents=True, exist_ok=True)
