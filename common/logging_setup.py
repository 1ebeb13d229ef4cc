"""
common.logging_setup

Set up standard logging for the project.
"""
import logging

def setup_logging(level: int = logging.INFO, verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
