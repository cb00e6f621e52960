"""Custom logger for general modulechain functionality."""
import logging
import os
import re

LOG_SPACER = '=' * 70


class CustomFormatter(logging.Formatter):
    """A colorizing formatter, one line format per log level."""
    green = '\u001b[32m'
    bold_green = '\u001b[32;1m'
    magenta = '\u001b[35m'
    bold_yellow = '\u001b[33;1m'
    bold_red = '\u001b[31;1m'
    blue = '\u001b[34m'
    cyan = '\u001b[0;36m'
    div = '┃'
    reset = '\u001b[0m'

    @classmethod
    def _line_format(cls, level_color: str, show_line_number: bool) -> str:
        line_number = cls.blue + '%(lineno)3d' + cls.reset + ' ' if show_line_number else ''
        return ''.join([
            cls.blue, '%(asctime)s ', cls.reset,
            cls.magenta, '[ ', cls.reset, level_color, '%(levelname)-8s', cls.reset,
            cls.magenta, ' ] ', cls.reset,
            line_number,
            cls.magenta, '%(name)-40s', cls.reset,
            cls.cyan, cls.div, cls.reset, ' %(message)s',
        ])

    def __init__(self):
        super().__init__()
        self.formats = {
            logging.DEBUG: self._line_format('', True),
            logging.INFO: self._line_format(self.bold_green, False),
            logging.WARNING: self._line_format(self.bold_yellow, True),
            logging.ERROR: self._line_format(self.bold_red, True),
            logging.CRITICAL: self._line_format(self.bold_red, True),
        }

    def format(self, record):
        log_fmt = self.formats.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt='%m-%d %H:%M:%S')
        return formatter.format(record)


def colorized_logger(name):
    """A lightweight customization of the Python standard library's ``logging`` module
    loggers, to provide colorized log messages. Set ``DEBUG`` in the environment to see
    debug-level messages.

    Args:
        name (str):
            The name of the logger to requisition. Typically a module's
            ``__name__`` attribute.

    Returns:
        The logger.
    """
    logger = logging.getLogger(re.sub(r'^modulechain\.', '', name))
    level = logging.DEBUG if 'DEBUG' in os.environ else logging.INFO
    logger.setLevel(level)
    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(CustomFormatter())
        logger.addHandler(stream_handler)
    return logger
