# ingestion/fetcher.py
from __future__ import annotations

import logging
import requests
from typing import Any, Callable

from common.errors import TransportError

LOG = logging.getLogger(__name__)

FetchJSON = Callable[[str], Any]


def build_url(template: str, **tokens: Any) -> str:
    """
    Substitute {name} placeholders in a provider URL template.
    Placeholders without a matching token are left untouched.
    """
    url = template
    for name, value in tokens.items():
        url = url.replace("{" + name + "}", str(value))
    return url


def fetch_json(url: str, timeout: float = 30.0) -> Any:
    """
    GET url and return the parsed JSON body.
    """
    if not isinstance(url, str) or not url.startswith(("https://", "http://")):
        raise ValueError("url must be an absolute http(s) URL")
    LOG.debug("GET %s", url)
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as e:
        raise TransportError(f"request failed url={url}: {e}", url=url) from e
    except ValueError as e:
        # body is not JSON
        raise TransportError(f"invalid JSON body url={url}", url=url) from e


def json_fetcher(timeout: float) -> FetchJSON:
    def _fetch(url: str) -> Any:
        return fetch_json(url, timeout=timeout)
    return _fetch


__all__ = ["build_url", "fetch_json", "json_fetcher", "FetchJSON"]
