# session_repair/verifier.py
# Checks that a converted file is reachable over HTTP

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class AccessCheck:
    """Result of a HEAD request against a public URL"""
    url: str
    accessible: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def reason(self) -> str:
        if self.error:
            return f"error accessing converted file: {self.error}"
        if not self.accessible:
            return f"converted file not accessible ({self.status_code})"
        return "accessible"


class UrlVerifier:
    """Issues HEAD requests; one attempt per URL, no retries"""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """
        Args:
            session: HTTP session to reuse (a new one is created if omitted)
            timeout: Request timeout in seconds, None for no explicit timeout
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def check(self, url: str) -> AccessCheck:
        """HEAD the URL and report whether it answered with a 2xx status"""
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            logger.debug(f"HEAD {url} failed: {e}")
            return AccessCheck(url=url, accessible=False, error=str(e))

        accessible = 200 <= response.status_code < 300
        logger.debug(f"HEAD {url} -> {response.status_code}")
        return AccessCheck(url=url, accessible=accessible, status_code=response.status_code)

    def close(self):
        self.session.close()
