"""
Network helpers with retry logic.

This module provides the two network operations MaturinKit performs:
- Streaming a release archive to disk
- Fetching a JSON document from the GitHub API

Both retry transient failures (timeouts, connection errors, 5xx responses)
with exponential backoff. Client errors (4xx) are not retried.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.exceptions import ConnectionError, HTTPError, RequestException, Timeout

logger = logging.getLogger(__name__)

USER_AGENT = "maturinkit"
# Upper bound for a single retry delay, in seconds
MAX_BACKOFF = 10.0


class DownloadError(Exception):
    """Exception raised when a download or API request fails."""

    pass


def _is_transient(error: RequestException) -> bool:
    if isinstance(error, (Timeout, ConnectionError)):
        return True
    if isinstance(error, HTTPError) and error.response is not None:
        return error.response.status_code >= 500
    return False


def _with_retries(operation, description: str, max_retries: int, backoff: float):
    """Run operation(), retrying transient request failures."""
    for attempt in range(max_retries):
        try:
            return operation()
        except RequestException as e:
            if not _is_transient(e) or attempt == max_retries - 1:
                raise DownloadError(
                    f"{description} failed after {attempt + 1} attempt(s): {e}"
                ) from e

            backoff_seconds = min(backoff * 2**attempt, MAX_BACKOFF)
            logger.warning(
                f"{description} attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds:g}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"{description} failed: no attempts were made")


def download_file(
    url: str,
    destination: Path,
    timeout: int = 30,
    max_retries: int = 3,
    backoff: float = 1.0,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts
        backoff: Base delay in seconds between attempts (doubled every retry)
        session: Optional requests session (a fresh one is used if None)

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ValueError: If URL or destination is invalid

    Example:
        >>> url = "https://github.com/PyO3/maturin/releases/download/v1.4.0/maturin-x86_64-unknown-linux-musl.tar.gz"
        >>> download_file(url, Path("downloads/maturin.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    http = session or requests

    def _download() -> Path:
        logger.info(f"Downloading from {url}")
        response = http.get(
            url,
            stream=True,
            timeout=timeout,
            allow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()

        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)

        logger.debug(f"Download complete: {destination}")
        return destination

    return _with_retries(_download, f"Download of {url}", max_retries, backoff)


def fetch_json(
    url: str,
    token: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 10,
    backoff: float = 1.0,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    GET a JSON document.

    Args:
        url: URL to request
        token: Optional bearer token sent in the Authorization header
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts
        backoff: Base delay in seconds between attempts
        session: Optional requests session

    Returns:
        Decoded JSON body

    Raises:
        DownloadError: If the request fails after retries
        ValueError: If the body is not valid JSON
    """
    headers: Dict[str, str] = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    http = session or requests

    def _get():
        response = http.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response

    response = _with_retries(_get, f"GET {url}", max_retries, backoff)
    return response.json()
