import logging
import re
import sys

import colorlog

from silencefinder.config.constants import APP_NAME


class CenteredLevelFormatter(colorlog.ColoredFormatter):
    def format(self, record):
        # Let the parent class handle the initial formatting and coloring
        s = super().format(record)

        # Center the level name found between " - " separators
        match = re.search(r'(- )(\w+)( -)', s)
        if match:
            level_text = match.group(2)
            centered_level = level_text.center(8)
            s = s[:match.start(2)] + centered_level + s[match.end(2):]
        return s


def setup_logging(level="INFO"):
    """Configure application-wide logging with colors. Logs go to stderr, keeping stdout for results."""

    custom_log_colors = {
        'DEBUG': 'cyan',
        'INFO': 'green',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'bold_red',
    }

    log_format = (
        f'%(log_color)s[{APP_NAME}] %(asctime)s - %(levelname)s - %(module)-16s%(reset)s >> '
        '%(log_color)s%(message)s'
    )

    app_formatter = CenteredLevelFormatter(
        log_format,
        datefmt='%Y-%m-%d %H:%M:%S',
        log_colors=custom_log_colors
    )

    handler = colorlog.StreamHandler(sys.stderr)
    handler.setFormatter(app_formatter)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True
    )
