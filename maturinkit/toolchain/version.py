"""
maturin release version resolution.

'latest' is looked up through the GitHub releases API. The lookup can
never fail the run: any error falls back to DEFAULT_MATURIN_VERSION.
"""

import logging
import os
from typing import Optional

import requests

from maturinkit.core import reporting
from maturinkit.core.download import DownloadError, fetch_json

logger = logging.getLogger(__name__)

DEFAULT_MATURIN_VERSION = "v0.11.5"
LATEST_RELEASE_URL = "https://api.github.com/repos/PyO3/maturin/releases/latest"
LATEST = "latest"


def resolve_version(
    requested: str,
    session: Optional[requests.Session] = None,
    max_retries: int = 10,
    backoff: float = 1.0,
    token: Optional[str] = None,
) -> str:
    """
    Resolve the maturin version input to a release tag.

    Args:
        requested: 'latest' or an explicit version ('v1.2.3' or '1.2.3')
        session: Optional requests session for the API call
        max_retries: Attempts for the API call
        backoff: Base delay between attempts in seconds
        token: GitHub token (defaults to GITHUB_TOKEN)

    Returns:
        A 'v'-prefixed release tag

    Example:
        >>> resolve_version('1.2.3')
        'v1.2.3'
    """
    if requested != LATEST:
        if not requested.startswith("v"):
            reporting.warning(
                f"Corrected 'maturin-version' from '{requested}' to 'v{requested}'"
            )
            return f"v{requested}"
        return requested

    logger.debug("Searching the latest version of maturin ...")
    if token is None:
        token = os.environ.get("GITHUB_TOKEN") or None

    tag = None
    try:
        body = fetch_json(
            LATEST_RELEASE_URL,
            token=token,
            max_retries=max_retries,
            backoff=backoff,
            session=session,
        )
        if isinstance(body, dict) and isinstance(body.get("tag_name"), str):
            tag = body["tag_name"] or None
    except (DownloadError, ValueError) as e:
        logger.debug(f"Latest release lookup failed: {e}")

    if not tag:
        tag = DEFAULT_MATURIN_VERSION
        reporting.warning(f"Fetch latest maturin tag name failed, fallback to '{tag}'")
    return tag
