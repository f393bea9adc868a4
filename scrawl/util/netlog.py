"""
Logging setup for the Scrawl library.
"""
import logging
import sys


DEBUG_FORMAT = "%(asctime)s %(levelname)8s [%(process)6d %(module)12s.%(funcName)-12s:%(lineno)4d] %(message)s"
SCREEN_FORMAT = "%(asctime)s | %(message)s"


def setup_logging(name="scrawl", level="INFO"):
    log = logging.getLogger(name=name)
    log.handlers = []

    # Print messages at `level` and above to the screen.
    handler_screen = logging.StreamHandler(sys.stdout)
    handler_screen.setFormatter(logging.Formatter(DEBUG_FORMAT if level == "DEBUG" else SCREEN_FORMAT,
                                                  datefmt="%H:%M:%S"))
    handler_screen.setLevel(level)
    log.addHandler(handler_screen)

    log.setLevel(level)
    log.propagate = False

    return log


default_log = setup_logging(name="scrawl", level="INFO")
