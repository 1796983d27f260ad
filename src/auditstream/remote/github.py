"""GitHub Enterprise audit log streaming client.

Thin httpx wrapper over the enterprise audit-log stream endpoints. Each
method issues exactly one request; retries, if wanted, belong to the
caller's transport.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from auditstream.common.config import Config
from auditstream.common.constants import APIConstants
from auditstream.common.exceptions import RemoteFailureError, RemoteNotFoundError
from auditstream.streams.schemas import (
    ObservedStreamState,
    StreamConfigPayload,
    StreamSigningKey,
)

logger = logging.getLogger(__name__)


class GitHubAuditStreamClient:
    """Client for /enterprises/{enterprise}/audit-log/streams."""
    
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = APIConstants.DEFAULT_BASE_URL,
        api_version: str = APIConstants.DEFAULT_API_VERSION,
        timeout: float = APIConstants.DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.Client] = None,
    ):
        headers = {
            "Accept": APIConstants.ACCEPT_HEADER,
            "X-GitHub-Api-Version": api_version,
            "User-Agent": APIConstants.USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=self.base_url, timeout=timeout)
        self._headers = headers
    
    @classmethod
    def from_config(cls, config: Config) -> "GitHubAuditStreamClient":
        return cls(
            token=config.github_token,
            base_url=config.api_url,
            api_version=config.api_version,
            timeout=config.http_timeout,
        )
    
    def close(self) -> None:
        if self._owns_client:
            self._http.close()
    
    def __enter__(self) -> "GitHubAuditStreamClient":
        return self
    
    def __exit__(self, *exc_info) -> None:
        self.close()
    
    @staticmethod
    def _enterprise_path(scope: str) -> str:
        # the slug is one path segment; "/" and "?" must not reach the router
        return f"/enterprises/{quote(scope, safe='')}/audit-log"
    
    @classmethod
    def _streams_path(cls, scope: str) -> str:
        return f"{cls._enterprise_path(scope)}/streams"
    
    def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {path}")
        try:
            response = self._http.request(
                method, self.base_url + path, json=json_body, headers=self._headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise RemoteNotFoundError(
                    f"{method} {path}: not found", details={"path": path}
                ) from e
            raise RemoteFailureError(
                f"{method} {path} failed with HTTP {status}: {_error_message(e.response)}",
                status_code=status,
                details={"path": path},
            ) from e
        except httpx.RequestError as e:
            raise RemoteFailureError(
                f"{method} {path} failed: {e}", details={"path": path}
            ) from e
        return response
    
    def _parse(self, model, response: httpx.Response):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteFailureError(
                f"unexpected response from {response.request.url.path}: {e}",
                status_code=response.status_code,
            ) from e
    
    def create_stream(self, scope: str, config: StreamConfigPayload) -> ObservedStreamState:
        response = self._request(
            "POST", self._streams_path(scope), json_body=config.to_request_body()
        )
        return self._parse(ObservedStreamState, response)
    
    def get_stream(self, scope: str, stream_id: int) -> ObservedStreamState:
        response = self._request("GET", f"{self._streams_path(scope)}/{stream_id}")
        return self._parse(ObservedStreamState, response)
    
    def update_stream(self, scope: str, stream_id: int, config: StreamConfigPayload) -> None:
        self._request(
            "PUT",
            f"{self._streams_path(scope)}/{stream_id}",
            json_body=config.to_request_body(),
        )
    
    def delete_stream(self, scope: str, stream_id: int) -> None:
        self._request("DELETE", f"{self._streams_path(scope)}/{stream_id}")
    
    def get_stream_signing_key(self, scope: str) -> StreamSigningKey:
        response = self._request("GET", f"{self._enterprise_path(scope)}/stream-key")
        return self._parse(StreamSigningKey, response)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
