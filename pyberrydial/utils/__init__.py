from .log_utils import init_logger, MicrosecondFormatter
from .timing import precise_sleep

__all__ = [
    "init_logger",
    "MicrosecondFormatter",
    "precise_sleep"
]
