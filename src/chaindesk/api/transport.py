# File: src/chaindesk/api/transport.py
"""
HTTP transport for the chain service.

Sends a request and returns the decoded JSON body, or raises
RequestFailedError. Envelope handling lives in normalize.py.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
from async_timeout import timeout

from .normalize import normalize_error_message
from ..exceptions import MalformedResponseError, RequestFailedError
from ..utils.config import Config
from ..utils.logger import get_logger

logger = get_logger(__name__)

class HttpTransport:
    def __init__(
        self,
        base_url: str = Config.DEFAULT_API_BASE_URL,
        request_timeout: float = Config.REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.request_timeout = request_timeout
        self._session = session
        self._owns_session = session is None

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": Config.USER_AGENT,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self._get_headers())
            self._owns_session = True
        return self._session

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """Send a request and return the decoded body"""
        url = self._url(endpoint)
        session = await self._get_session()

        try:
            async with timeout(self.request_timeout):
                async with session.request(method, url, json=data) as response:
                    text = await response.text()
                    logger.debug(f"{method} {url} - Status: {response.status}")
                    body = self._decode(text)
                    if response.status >= 400:
                        raise RequestFailedError(
                            self._error_message(body, response.reason),
                            status=response.status
                        )
                    return body
        except asyncio.TimeoutError:
            logger.error(f"Request timeout: {method} {url}")
            raise RequestFailedError(f"Request timeout after {self.request_timeout}s")
        except aiohttp.ClientError as e:
            logger.error(f"Request error: {method} {url}: {e}")
            raise RequestFailedError(f"Request error: {str(e)}")
        except UnicodeDecodeError as e:
            logger.error(f"Undecodable response body: {method} {url}: {e}")
            raise MalformedResponseError(f"Response body is not valid text: {e.reason}")

    def _decode(self, text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    def _error_message(self, body: Any, reason: Optional[str]) -> str:
        if isinstance(body, dict):
            message = normalize_error_message(body.get("error"))
            if message:
                return message
            if isinstance(body.get("message"), str) and body["message"]:
                return body["message"]
        if isinstance(body, str) and body:
            return body
        return reason or Config.DEFAULT_REQUEST_ERROR

    async def get(self, endpoint: str) -> Any:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", endpoint, data)

    async def close(self):
        """Close the session if this transport created it"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
