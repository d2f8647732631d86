import logging
import sys

# Console handler on the root logger; module loggers created with
# logging.getLogger(__name__) propagate here.
_handler = logging.StreamHandler(sys.stdout)
_handler.setLevel(logging.DEBUG)
_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
)

_root_logger = logging.getLogger()
_root_logger.setLevel(logging.DEBUG)
_root_logger.addHandler(_handler)

# numba logs every compilation pass at DEBUG
logging.getLogger("numba").setLevel(logging.WARNING)
