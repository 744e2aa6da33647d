from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

import requests

from ..models import ApiError, ApiResponse, AuthConfig, Endpoint, RequestOutcome
from .templating import substitute

logger = logging.getLogger(__name__)


class RequestExecutor(Protocol):
    """Performs an endpoint's request and reports exactly one outcome.

    Implementations must not raise for HTTP errors, timeouts or network
    failures; those are returned as RequestOutcome.failure values.
    """

    async def execute(
        self, endpoint: Endpoint, auth: AuthConfig, variables: Mapping[str, str]
    ) -> RequestOutcome: ...


class HttpRequestExecutor:
    """RequestExecutor backed by a requests.Session.

    The blocking call runs in a worker thread so the event loop keeps ticking;
    the outcome is handed back to the awaiting coroutine on the loop.

    Usage:
        executor = HttpRequestExecutor(timeout=5.0)
        outcome = await executor.execute(endpoint, auth, {"baseUrl": "https://api.example.com"})
    """

    def __init__(
        self,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        user_agent: str = "haunted-api-house/0.1",
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", user_agent)
        self._log = logging.getLogger(self.__class__.__name__)

    async def execute(
        self, endpoint: Endpoint, auth: AuthConfig, variables: Mapping[str, str]
    ) -> RequestOutcome:
        return await asyncio.to_thread(self.execute_sync, endpoint, auth, variables)

    def execute_sync(
        self, endpoint: Endpoint, auth: AuthConfig, variables: Mapping[str, str]
    ) -> RequestOutcome:
        method = endpoint.method.upper()
        url = substitute(endpoint.url, variables)
        headers: Dict[str, str] = substitute(dict(endpoint.headers), variables)
        params: Dict[str, str] = {}
        basic = self._apply_auth(auth, headers, params, variables)

        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if params:
            kwargs["params"] = params
        if basic is not None:
            kwargs["auth"] = basic
        if endpoint.body is not None:
            body = substitute(endpoint.body, variables)
            if isinstance(body, str):
                kwargs["data"] = body
            else:
                kwargs["json"] = body

        self._log.debug("%s %s", method, url)
        start = time.perf_counter()
        try:
            resp = self._session.request(method, url, **kwargs)
        except requests.Timeout:
            duration = _elapsed_ms(start)
            self._log.warning("%s %s timed out after %.0fms", method, url, duration)
            return RequestOutcome.failure(
                ApiError(
                    message=f"Request timed out after {self.timeout:g}s",
                    is_timeout=True,
                    duration_ms=duration,
                )
            )
        except requests.RequestException as e:
            duration = _elapsed_ms(start)
            self._log.warning("%s %s failed: %s", method, url, e)
            return RequestOutcome.failure(ApiError(message=str(e), duration_ms=duration))

        duration = _elapsed_ms(start)
        status_text = resp.reason or ""
        if resp.status_code >= 400:
            message = f"{resp.status_code} {status_text}".strip()
            detail = _decode_body(resp)
            if isinstance(detail, dict) and "message" in detail:
                message = f"{message}: {detail['message']}"
            self._log.info("%s %s -> %d (%.0fms)", method, url, resp.status_code, duration)
            return RequestOutcome.failure(
                ApiError(message=message, status=resp.status_code, duration_ms=duration)
            )
        self._log.info("%s %s -> %d (%.0fms)", method, url, resp.status_code, duration)
        return RequestOutcome.success(
            ApiResponse(
                status=resp.status_code,
                status_text=status_text,
                duration_ms=duration,
                body=_decode_body(resp),
            )
        )

    @staticmethod
    def _apply_auth(
        auth: AuthConfig,
        headers: Dict[str, str],
        params: Dict[str, str],
        variables: Mapping[str, str],
    ) -> Optional[Tuple[str, str]]:
        kind = (auth.type or "none").lower()
        if kind == "none":
            return None
        if kind == "bearer":
            if auth.token:
                headers["Authorization"] = f"Bearer {substitute(auth.token, variables)}"
            return None
        if kind == "basic":
            return (
                substitute(auth.username or "", variables),
                substitute(auth.password or "", variables),
            )
        if kind == "apikey":
            if auth.key and auth.value is not None:
                value = substitute(auth.value, variables)
                if auth.location == "query":
                    params[auth.key] = value
                else:
                    headers[auth.key] = value
            return None
        logger.warning("Unknown auth type '%s'; sending request without credentials", auth.type)
        return None


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _decode_body(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
