"""
VolcEngineClient - signed client for the VolcEngine OpenAPI
"""

import json
import logging
from enum import Enum
from typing import Optional, Dict, Any
from urllib.parse import urlencode, urlparse

import httpx

from . import __version__
from ._http import HttpClient
from ._signer import VolcEngineSigner
from .credentials import CredentialStore
from .models import (
    API_VERSION,
    DEFAULT_ENDPOINT,
    Credentials,
    ResponseMetadata,
    Service,
)
from .error import (
    ApiException,
    ResponseParseException,
    ServerException,
    TransportException,
)


def _form_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_form_value(item) for item in value)
    return str(value)


def encode_form(envelope: Dict[str, Any]) -> str:
    """URL-encode an action envelope as a form body, dropping None values."""
    return urlencode(
        [(key, _form_value(value)) for key, value in envelope.items() if value is not None]
    )


class VolcEngineClient:
    """
    Signed client for the VolcEngine OpenAPI.

    Example:
        client = VolcEngineClient(
            Credentials("AKLT...", "secret", region="cn-beijing")
        )

        async with client:
            data = await client.request("DescribeTasks", {"TaskIds": ["t-1"]})
    """

    def __init__(
        self,
        credentials: Credentials,
        endpoint: str = DEFAULT_ENDPOINT,
        version: str = API_VERSION,
        request_timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[HttpClient] = None,
    ):
        """
        Initialize VolcEngineClient.

        Args:
            credentials: Access key pair and region used for signing
            endpoint: OpenAPI base URL
            version: API version sent with every action
            request_timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport)
            http_client: Optional pre-built HttpClient; overrides transport
        """
        self.credentials = credentials
        self.endpoint = endpoint.rstrip("/")
        self.version = version
        self.host = urlparse(self.endpoint).netloc

        self._http = http_client or HttpClient(timeout=request_timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_store(
        cls,
        store: CredentialStore,
        name: str = "default",
        **kwargs
    ) -> "VolcEngineClient":
        """Build a client from a named credential set."""
        return cls(store.get_credentials(name), **kwargs)

    def _parse_response(self, response: httpx.Response, service: str) -> Dict[str, Any]:
        """Decode the JSON envelope and raise on provider-reported errors."""
        text = response.text

        if response.status_code >= 400:
            try:
                data = json.loads(text)
            except ValueError:
                data = None
            metadata = ResponseMetadata.from_dict(
                data.get("ResponseMetadata") if isinstance(data, dict) else None
            )
            if metadata.error:
                raise ApiException(
                    metadata.error.code,
                    metadata.error.message,
                    request_id=metadata.request_id,
                    service=service,
                    status_code=response.status_code,
                )
            raise ServerException(
                f"Request failed with status {response.status_code}",
                response.status_code,
            )

        try:
            data = json.loads(text)
        except ValueError:
            raise ResponseParseException(text, status_code=response.status_code) from None
        if not isinstance(data, dict):
            raise ResponseParseException(text, status_code=response.status_code)

        metadata = ResponseMetadata.from_dict(data.get("ResponseMetadata"))
        if metadata.error:
            # Provider errors can arrive with a 2xx status.
            raise ApiException(
                metadata.error.code,
                metadata.error.message,
                request_id=metadata.request_id,
                service=service,
                status_code=response.status_code,
            )

        self._logger.info(
            "[VolcEngine][Response] action=%s requestId=%s",
            metadata.action,
            metadata.request_id,
        )
        return data

    async def request(
        self,
        action: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        service: str = Service.ECS.value,
        method: str = "POST",
    ) -> Dict[str, Any]:
        """
        Call one OpenAPI action and return the decoded response envelope.

        Raises:
            TransportException: the HTTP call failed
            ResponseParseException: the body is not a JSON object
            ApiException: the provider reported ResponseMetadata.Error
            ServerException: HTTP error status without an error envelope
        """
        envelope = {"Action": action, "Version": self.version}
        envelope.update(body or {})
        form_body = encode_form(envelope)

        signer = VolcEngineSigner(self.credentials, service, self.host)
        request_headers = signer.sign(method, self.endpoint, headers=headers, body=form_body)
        request_headers["User-Agent"] = f"volcecs/{__version__}"

        self._logger.info(
            "[VolcEngine][Request] action=%s service=%s region=%s",
            action,
            service,
            self.credentials.region,
        )

        try:
            response = await self._http.request(
                method,
                self.endpoint,
                headers=request_headers,
                content=form_body.encode("utf-8"),
                params=query,
            )
        except httpx.RequestError as ex:
            raise TransportException(
                f"VolcEngine request failed: {ex}", cause=ex
            ) from ex

        return self._parse_response(response, service)

    async def verify_credentials(self) -> bool:
        """Check the credentials by calling DescribeRegions."""
        await self.request("DescribeRegions")
        return True

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
