# app/utils.py
"""Shared utilities: logging, the retry decorator and the response envelope."""
import logging
import time
from functools import wraps
from typing import Any, Optional

from .config import get_settings


def get_logger(name=__name__):
    level = get_settings().log_level
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("listings-api")

def retry(exceptions, tries=3, delay=1, backoff=2, logger=logger):
    def deco_retry(f):
        @wraps(f)
        def f_retry(*args, **kwargs):
            mtries, mdelay = tries, delay
            while mtries > 1:
                try:
                    return f(*args, **kwargs)
                except exceptions as e:
                    logger.warning("Retryable error: %s, retrying in %s sec", e, mdelay)
                    time.sleep(mdelay)
                    mtries -= 1
                    mdelay *= backoff
            return f(*args, **kwargs)
        return f_retry
    return deco_retry


def envelope(status: int, message: str, result: Any = None, errors: Optional[list] = None) -> dict:
    """Uniform `{status, message, result|errors}` body returned by every endpoint."""
    body = {"status": status, "message": message}
    if result is not None:
        body["result"] = result
    if errors is not None:
        body["errors"] = errors
    return body
