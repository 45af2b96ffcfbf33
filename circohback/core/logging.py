"""
Logging setup.

Everything goes to stdout; gunicorn's access/error logs share the stream.
"""
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # uvicorn's access log duplicates gunicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
