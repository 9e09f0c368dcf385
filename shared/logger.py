import logging
import sys
from typing import TextIO


logger = logging.getLogger("dadjoke")


def setup_logger(level: int | str = logging.INFO, stream: TextIO = sys.stdout):
    logger.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s]: %(message)s", "%Y-%m-%d %H:%M:%S %Z")
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
