"""
Logging for the command line tool.

The package modules only log at DEBUG through logging.getLogger(__name__);
`python -m tiled_json -v` turns that output on, on stderr so it never mixes
with the printed summary.
"""
import logging
import sys


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """Attach a single stderr handler to the 'tiled_json' logger."""
    logger = logging.getLogger("tiled_json")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
    logger.addHandler(handler)
    return logger
