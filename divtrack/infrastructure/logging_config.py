"""
Logging setup shared by the HTTP app and the batch refresh job.
Modules log through ``logging.getLogger(__name__)``; entrypoints call
configure_logging() once.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # httpx logs every request at INFO, which includes the FMP apikey query string
    logging.getLogger("httpx").setLevel(logging.WARNING)
