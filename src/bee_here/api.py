"""aiohttp transport for the attendance REST service."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import aiohttp

from .coordinator import TokenStore
from .utils.logger import get_logger

LOGGER = get_logger("api")


class ApiError(Exception):
    """Raised when a request cannot be completed or its body is not JSON."""


@dataclass(frozen=True)
class ApiResponse:
    status: int
    payload: Any


class AttendanceApiClient:
    """Issue the student, session and attendance calls with a JWT bearer token.

    The token is read from ``token_store`` on every request, so clearing the
    store on sign-out takes effect for all later calls.

    The client owns one :class:`aiohttp.ClientSession`; use it as an async
    context manager (or call :meth:`close`) to release the connection pool.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        *,
        timeout: Optional[float] = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._token_store = token_store
        self._timeout = aiohttp.ClientTimeout(total=timeout or None)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AttendanceApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"JWT {self._token_store.token}",
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _request(
        self,
        method: str,
        resource: str,
        *,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        url = urljoin(self._base_url, resource)
        LOGGER.debug("%s %s params=%s", method, url, params)
        try:
            async with self._get_session().request(
                method,
                url,
                params=params,
                data=json.dumps(body) if body is not None else None,
                headers=self.headers,
            ) as response:
                text = await response.text()
                status = response.status
        except asyncio.TimeoutError as exc:
            raise ApiError(f"{method} {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise ApiError(f"{method} {url} failed: {exc}") from exc

        LOGGER.debug("%s %s -> HTTP %s", method, url, status)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ApiError(f"{method} {url} returned a non-JSON body (HTTP {status})") from exc
        return ApiResponse(status=status, payload=payload)

    async def fetch_current_student(self) -> ApiResponse:
        return await self._request("GET", "student", params={"is_user": "True"})

    async def find_sessions(self, class_code: str) -> ApiResponse:
        return await self._request("GET", "session", params={"class_code": class_code})

    async def post_attendance(self, session_id: Any, student_id: Any) -> ApiResponse:
        return await self._request(
            "POST",
            "attendance",
            body={"session": session_id, "student": student_id},
        )
