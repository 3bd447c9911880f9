'''
Console and file logging with indentation levels and optional colors.

Every solver in the package reports through a `Logger`. It wraps a standard
`logging.Logger`, prefixes messages with tabulators according to a nesting
level, and can colorize console output.

@note File logging is enabled by setting the environment variable PYLOGFILE to a non-zero value.
@note Colored output is disabled by setting the environment variable PYLOGCOLORS to '0'.

-------------------------------------------------------
file        :   sparse_lanczos/common/flog.py
description :   Logger used by the Lanczos engine and tridiagonal solvers.
-------------------------------------------------------
'''

__all__ = [
    "Logger",
    "Colors",
    "get_global_logger",
]

import os
import re
import sys
import logging
import threading
from datetime import datetime
from typing import Optional

######################################################
#! COLORS
######################################################

class Colors:
    """
    ANSI escape codes for console colors.

    Attributes:
        red, green, yellow, blue (str):
            Escape codes for the respective colors.
        white (str):
            Reset to the default terminal color.
    """

    red     = "\033[31m"
    green   = "\033[32m"
    yellow  = "\033[33m"
    blue    = "\033[34m"
    white   = "\033[0m"

    _MAPPING = {
        "red"   : red,
        "green" : green,
        "yellow": yellow,
        "blue"  : blue,
        "white" : white,
    }

    def __init__(self, color: str):
        self.color = color

    def __str__(self) -> str:
        return Colors._MAPPING.get(self.color, Colors.white)

# Matches ANSI CSI color sequences
_ansi_escape = re.compile(r'\x1b\[[0-9;]*m')

class StripAnsiFormatter(logging.Formatter):
    ''' Formatter for log files: colors make no sense there. '''

    def format(self, record):
        msg = super().format(record)
        return _ansi_escape.sub('', msg)

######################################################
#! LOGGER
######################################################

ENV_LOGGER_FILE     = 'PYLOGFILE'
ENV_LOGGER_COLORS   = 'PYLOGCOLORS'
_DATE_FMT           = "%d_%m_%Y_%H-%M_%S"

class Logger:
    """
    Logger class for handling console and file logging with verbosity control.
    """

    LEVELS = {
        logging.DEBUG   : 'debug',
        logging.INFO    : 'info',
        logging.WARNING : 'warning',
        logging.ERROR   : 'error'
    }

    LEVELS_R = {v: k for k, v in LEVELS.items()}

    def __init__(self,
                name            : str           = "Global",
                logfile         : Optional[str] = None,
                lvl             : int           = logging.INFO,
                use_ts_in_cmd   : bool          = False):
        """
        Initialize the logger instance.

        Args:
            name (str):
                Name of the underlying `logging` logger.
            logfile (str):
                Name of the log file (without extension). Only used when PYLOGFILE is set.
                An empty string means a timestamp is used as the name.
            lvl (int or str):
                Logging level (default: logging.INFO).
            use_ts_in_cmd (bool):
                Whether to show a timestamp in console output.
        """
        self.now_str            = datetime.now().strftime(_DATE_FMT)
        self.lvl                = Logger.LEVELS_R.get(lvl, logging.INFO) if isinstance(lvl, str) else lvl
        self.has_colors         = sys.stdout.isatty() and os.environ.get(ENV_LOGGER_COLORS, '1') != '0'

        self.logger             = logging.getLogger(name or __name__)
        self.logger.setLevel(self.lvl)
        self.logger.propagate   = False

        # a logger with the same name may have been configured before
        for h in list(self.logger.handlers):
            self.logger.removeHandler(h)
            h.close()

        console_fmt = '%(asctime)s [%(levelname)s] %(message)s' if use_ts_in_cmd else '[%(levelname)s] %(message)s'
        ch          = logging.StreamHandler(sys.stdout)
        ch.setLevel(self.lvl)
        ch.setFormatter(logging.Formatter(console_fmt, datefmt=_DATE_FMT))
        self.logger.addHandler(ch)

        self.logfile = None
        if logfile is not None and os.environ.get(ENV_LOGGER_FILE, '0') != '0':
            self.configure("./log", logfile)

    # --------------------------------------------------------------

    @staticmethod
    def colorize(txt: str, color: str):
        """
        Apply color to the given text (for console output).
        """
        if not color or color.lower() == 'white':
            return str(txt)
        return str(Colors(color)) + str(txt) + Colors.white

    # --------------------------------------------------------------

    def configure(self, directory: str, logfile: str = ''):
        """
        Attach a file handler writing to `directory/logfile.log`.

        Args:
            directory (str): Path to the directory where log files will be stored.
            logfile (str): Base name of the file, timestamp if empty.
        """
        base_name       = logfile[:-4] if logfile.endswith('.log') else logfile
        base_name       = base_name if len(base_name) > 0 else self.now_str
        os.makedirs(directory, exist_ok=True)
        self.logfile    = os.path.join(directory, f'{base_name}.log')

        fh              = logging.FileHandler(self.logfile, encoding='utf-8')
        fh.setLevel(self.lvl)
        fh.setFormatter(StripAnsiFormatter('%(asctime)s [%(levelname)s] %(message)s', datefmt=_DATE_FMT))
        self.logger.addHandler(fh)
        self.info(f"Log file created: {self.logfile}")

    # --------------------------------------------------------------

    @staticmethod
    def print_tab(lvl=0):
        """
        Indentation prefix for a given nesting level.
        """
        return '\t' * lvl + ('->' if lvl > 0 else '')

    @staticmethod
    def print(msg: str, lvl=0):
        return f"{Logger.print_tab(lvl)}{msg}"

    # --------------------------------------------------------------

    def _emit(self, log_level: int, msg: str, lvl: int, verbose: bool, color: Optional[str]):
        if not verbose:
            return
        if color is not None and self.has_colors:
            msg = self.colorize(msg, color)
        getattr(self.logger, self.LEVELS.get(log_level, 'info'))(Logger.print(msg, lvl))

    def info(self, msg: str, lvl=0, verbose=True, color=None):
        """
        Log an informational message if verbosity is enabled.

        Args:
            msg (str)       : Message to log.
            lvl (int)       : Indentation level.
            verbose (bool)  : Log if True (default: True).
            color (str)     : Optional color for the message.
        """
        self._emit(logging.INFO, msg, lvl, verbose, color)

    def debug(self, msg: str, lvl=0, verbose=True, color=None):
        self._emit(logging.DEBUG, msg, lvl, verbose, color)

    def warning(self, msg: str, lvl=0, verbose=True, color='yellow'):
        self._emit(logging.WARNING, msg, lvl, verbose, color)

    def error(self, msg: str, lvl=0, verbose=True, color='red'):
        self._emit(logging.ERROR, msg, lvl, verbose, color)

    # --------------------------------------------------------------

    def title(self, tail: str, desired_size: int = 50, fill: str = '=', lvl=0, verbose=True, color=None):
        """
        Log a title line padded with filler characters, e.g. `====tail====`.
        """
        if not verbose:
            return
        if len(tail) + 2 + lvl * 6 > desired_size:
            self.info(tail, lvl, verbose)
            return

        fill_size   = (desired_size - len(tail)) // (2 * len(fill))
        out         = (fill * fill_size) + tail + (fill * fill_size)
        if len(out) < desired_size:
            out += fill[0] * (desired_size - len(out))
        self.info(out[:desired_size], lvl, verbose, color)

######################################################
#! GLOBAL LOGGER
######################################################

_G_LOGGER     = None
_G_LOGGER_PID = None
_G_LOCK       = threading.Lock()

def get_global_logger(**kwargs) -> Logger:
    """
    One Logger per process (PID), safe across threads and forks.

    Args:
        **kwargs: Arguments passed to the Logger constructor on first use.
        - name (str): Name of the logger (default: "Global").
        - lvl (int): Logging level (default: logging.INFO).
        - use_ts_in_cmd (bool): Timestamps in console output (default: True).
        - logfile (str or None): Log file name (default: None).

    Example
    -------
        >>> logger = get_global_logger()
        >>> logger.info("Lanczos started", lvl=1)
    """
    global  _G_LOGGER, _G_LOGGER_PID
    pid     = os.getpid()

    if _G_LOGGER is not None and _G_LOGGER_PID == pid:
        return _G_LOGGER

    with _G_LOCK:
        if _G_LOGGER is not None and _G_LOGGER_PID == pid:
            return _G_LOGGER

        _G_LOGGER       = Logger(
                            name            = kwargs.get("name",            "Global"),
                            lvl             = kwargs.get("lvl",             logging.INFO),
                            use_ts_in_cmd   = kwargs.get("use_ts_in_cmd",   True),
                            logfile         = kwargs.get("logfile",         None),
                        )
        _G_LOGGER_PID   = pid
        return _G_LOGGER

######################################################
#! EOF
######################################################
