"""Retrying HTTP helper shared by the API clients."""

from __future__ import annotations

import random
import time
from typing import Mapping, Sequence

import requests

from PaperQuery.utils.log import log

MAX_ATTEMPTS = 4
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def request_with_retry(
    session: requests.Session,
    method: str,
    url: str,
    *,
    params: Sequence[tuple[str, str]] | None = None,
    data: str | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float,
    label: str,
    max_attempts: int = MAX_ATTEMPTS,
) -> requests.Response:
    """Issue a request, retrying timeouts, connection errors and 429/5xx.

    The last response is returned even if its status is still retryable;
    callers decide how to report non-success statuses.

    Args:
        session: Session to send through.
        method: HTTP method.
        url: Absolute URL.
        params: Ordered query pairs.
        data: Optional request body.
        headers: Request headers.
        timeout: Per-attempt timeout in seconds.
        label: Client name used in retry log lines.
        max_attempts: Total attempts including the first.

    Returns:
        The final response.

    Raises:
        requests.Timeout: If the last attempt timed out.
        requests.ConnectionError: If the last attempt could not connect.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            response = session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=timeout,
            )
            if response.status_code not in RETRYABLE_STATUS or attempt == max_attempts:
                return response
            reason = f"HTTP {response.status_code}"
        except (requests.Timeout, requests.ConnectionError) as error:
            if attempt == max_attempts:
                raise
            reason = str(error)
        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
        log.debug("%s retry attempt=%d/%d delay=%.2fs error=%s", label, attempt, max_attempts, delay, reason)
        time.sleep(delay)
    raise AssertionError("unreachable")
