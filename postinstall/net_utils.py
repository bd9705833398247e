# fedora-postinstall/postinstall/net_utils.py
"""
HTTP helpers with the fixed retry policy used for every download.

Each fetch is attempted up to FETCH_ATTEMPTS times. After a failed attempt the
caller sleeps FETCH_BACKOFF_SECONDS * attempt (2s, then 4s) before trying again.
When every attempt fails a DownloadError is raised, which aborts the run.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from postinstall.config import FETCH_ATTEMPTS, FETCH_BACKOFF_SECONDS, HTTP_TIMEOUT, USER_AGENT
from postinstall.errors import DownloadError
from postinstall.logger_utils import app_logger

T = TypeVar("T")


def new_session() -> requests.Session:
    """Returns a requests session with the project's User-Agent."""
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def _with_retries(
    action: Callable[[], T],
    url: str,
    attempts: int,
    backoff_seconds: float,
    logger: logging.Logger
) -> T:
    last_error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            return action()
        except requests.exceptions.RequestException as e:
            last_error = e
            logger.warning(f"Attempt {attempt}/{attempts} for {url} failed: {e}")
            if attempt < attempts:
                time.sleep(backoff_seconds * attempt)
    logger.error(f"Giving up on {url} after {attempts} attempts.")
    raise DownloadError(url, attempts, last_error)


def download_file(
    session: requests.Session,
    url: str,
    dest: Path,
    attempts: int = FETCH_ATTEMPTS,
    backoff_seconds: float = FETCH_BACKOFF_SECONDS,
    timeout: float = HTTP_TIMEOUT,
    logger: Optional[logging.Logger] = None
) -> Path:
    """Streams url into dest. A partially written file never survives a failed attempt."""
    log = logger or app_logger
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")

    def _attempt() -> Path:
        try:
            response = session.get(url, stream=True, timeout=timeout)
            response.raise_for_status()
            with open(partial, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
        except requests.exceptions.RequestException:
            partial.unlink(missing_ok=True)
            raise
        partial.replace(dest)
        return dest

    log.info(f"Downloading {url} -> {dest}")
    result = _with_retries(_attempt, url, attempts, backoff_seconds, log)
    log.info(f"Downloaded {url} ({dest.stat().st_size} bytes).")
    return result


def fetch_json(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, str]] = None,
    attempts: int = FETCH_ATTEMPTS,
    backoff_seconds: float = FETCH_BACKOFF_SECONDS,
    timeout: float = HTTP_TIMEOUT,
    logger: Optional[logging.Logger] = None
) -> Any:
    """GETs url and decodes the JSON body, with the same retry policy as download_file."""
    log = logger or app_logger

    def _attempt() -> Any:
        response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()

    log.debug(f"Fetching JSON from {url} params={params}")
    return _with_retries(_attempt, url, attempts, backoff_seconds, log)
