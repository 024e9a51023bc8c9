"""
Authenticated requests against the storage endpoint.

Every storage operation goes through RequestDispatcher.request. It adds the
auth token, prefixes the session path, turns 404s into NotFound and
decodes JSON bodies. Any other httpx error is re-raised exactly as httpx
raised it: retry policy belongs to the caller.
"""

import json
import logging
import re
from typing import Any, Optional

import httpx

from ...core.errors import NotFound
from ...core.models import Session, StorageResponse

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = re.compile(r"application/json")


class RequestDispatcher:
    """
    Sends requests for one session and token.

    Not thread-safe. One dispatcher holds one httpx.Client; share it
    between threads only with your own locking.
    """

    def __init__(
        self,
        session: Session,
        auth_token: str,
        user_agent: Optional[str] = None,
    ) -> None:
        self._session = session
        self._auth_token = auth_token
        self._user_agent = user_agent
        self._connection = self._connect()

    @property
    def session(self) -> Session:
        return self._session

    def _connect(self) -> httpx.Client:
        options = dict(self._session.connection_options)
        if not self._session.persistent:
            options.setdefault("limits", httpx.Limits(max_keepalive_connections=0))
        return httpx.Client(base_url=self._session.base_url, **options)

    def reload(self) -> None:
        """
        Drop the current connection and open a new one.

        Only ever called by the caller, typically to recover a stalled
        persistent connection.
        """
        self._connection.close()
        self._connection = self._connect()
        logger.debug("Connection reloaded", extra={"host": self._session.host})

    def close(self) -> None:
        self._connection.close()

    def request(self, params: dict[str, Any], parse_json: bool = True) -> StorageResponse:
        """
        Send one request.

        params:
            method:  HTTP verb
            path:    path relative to the session path
            headers: extra headers; these win over the defaults
            body:    request body (bytes or str)
            query:   query string parameters
            expects: acceptable status codes; defaults to any 2xx
        """
        headers = httpx.Headers({
            "Content-Type": "application/json",
            "X-Auth-Token": self._auth_token,
        })
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        headers.update(params.get("headers") or {})

        method = params.get("method", "GET")
        path = f"{self._session.path}/{params.get('path', '')}"

        try:
            response = self._connection.request(
                method,
                path,
                headers=headers,
                content=params.get("body"),
                params=params.get("query"),
            )
            _check_status(response, params.get("expects"))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFound.from_http_error(e) from e
            raise

        logger.debug(
            "Storage request",
            extra={"method": method, "path": path, "status": response.status_code}
        )

        body: Any = response.content
        content_type = response.headers.get("Content-Type", "")
        if body and parse_json and JSON_CONTENT_TYPE.search(content_type):
            body = json.loads(response.text)

        return StorageResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=body,
        )


def _check_status(response: httpx.Response, expects=None) -> None:
    if expects is None:
        response.raise_for_status()
        return
    if response.status_code not in expects:
        raise httpx.HTTPStatusError(
            f"Expected status in {list(expects)}, got {response.status_code} "
            f"for {response.request.method} {response.request.url}",
            request=response.request,
            response=response,
        )
