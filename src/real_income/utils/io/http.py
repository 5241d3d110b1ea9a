from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Protocol
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from real_income.domain.errors import HttpError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "real-income/0.3.1 (python requests)"


class HttpTransport(Protocol):
    def fetch(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes: ...


@dataclass(frozen=True)
class HTTPConfig:
    timeout_sec: int = 30
    max_retries: int = 4
    backoff_sec: float = 1.0
    headers: Optional[Dict[str, str]] = None
    user_agent: str = DEFAULT_USER_AGENT


# Sem esses headers o DataMapper responde 403.
DATAMAPPER_HEADERS: Dict[str, str] = {
    "User-Agent": "curl/8.5.0",
    "Accept": "application/json,text/plain,*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.imf.org/external/datamapper/",
}


class RequestsTransport:
    """
    Transporte HTTP com retry (429/5xx) no nível do adapter.

    Retorna os bytes do corpo; status não-2xx vira HttpError(status, body).
    """

    def __init__(self, cfg: HTTPConfig):
        self.cfg = cfg
        session = requests.Session()
        session.headers["User-Agent"] = cfg.user_agent
        retries = Retry(
            total=cfg.max_retries,
            backoff_factor=cfg.backoff_sec,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        self.session = session

    def fetch(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        h = headers or self.cfg.headers
        try:
            r = self.session.get(url, params=params, headers=h, timeout=self.cfg.timeout_sec)
        except requests.RequestException as exc:
            raise TransportError(f"Request failed for {url}: {exc}", url=url) from exc
        if not 200 <= r.status_code < 300:
            raise HttpError(status=r.status_code, body=r.text, url=r.url)

        logger.info("GET %s -> %s (%d bytes)", r.url, r.status_code, len(r.content))
        return r.content
