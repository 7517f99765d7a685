from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout as RequestsTimeout

from template_api.config import DEFAULT_TIMEOUT_SECS
from template_api.errors import MalformedPayload, ProviderTimeout, TransportError

log = logging.getLogger(__name__)


def post_json(
    url: str,
    body: Dict[str, Any],
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECS,
    provider: Optional[str] = None,
):
    """POST ``body`` as JSON and return the response within ``timeout`` seconds.

    A watchdog timer arms a cancellation flag when the deadline passes; it is
    cancelled on every exit path. ``requests`` applies the same timeout per
    socket operation, so a slow trickle of bytes can outlive it. A response
    that only arrives after the flag fired is discarded as a timeout.
    """
    cancelled = threading.Event()
    watchdog = threading.Timer(timeout, cancelled.set)
    watchdog.daemon = True
    watchdog.start()
    try:
        resp = requests.post(url, headers=headers, params=params, json=body, timeout=timeout)
    except RequestsTimeout as exc:
        raise ProviderTimeout(f"request timed out after {timeout:g}s", provider) from exc
    except RequestException as exc:
        raise TransportError(f"request error: {exc!r}", provider) from exc
    finally:
        watchdog.cancel()

    if cancelled.is_set():
        log.warning("remote: %s answered after the %gs deadline; discarding", provider or url, timeout)
        raise ProviderTimeout(f"request exceeded {timeout:g}s deadline", provider)
    return resp


def ensure_ok(resp, provider: Optional[str] = None) -> None:
    """Raise TransportError unless ``resp`` carries a 2xx status."""
    status = getattr(resp, "status_code", 0)
    if 200 <= status < 300:
        return
    try:
        msg = resp.text[:400]
    except Exception:
        msg = str(status)
    log.warning("%s HTTP %s: %s", provider or "remote", status, msg)
    raise TransportError(f"HTTP {status}", provider, status_code=status)


def json_body(resp, provider: Optional[str] = None) -> Any:
    try:
        return resp.json()
    except Exception as exc:
        raise MalformedPayload("non-JSON HTTP body", provider) from exc
