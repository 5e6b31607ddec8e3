"""
Exception classes for the VolcEngine ECS node
"""

from typing import Optional


class VolcEngineException(Exception):
    """
    Base exception for all VolcEngine node errors.
    """

    def __init__(self, message: str, status_code: int = None, error_code: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class ValidationException(VolcEngineException):
    """Thrown when input parameters are rejected before any request is sent."""

    def __init__(self, message: str):
        super().__init__(message)


class CredentialsException(VolcEngineException):
    """Thrown when a credential store cannot supply credentials."""

    def __init__(self, message: str):
        super().__init__(message, error_code="InvalidCredentials")


class TransportException(VolcEngineException):
    """Thrown when the HTTP call itself fails (connection, timeout, ...)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ResponseParseException(VolcEngineException):
    """Thrown when a response body is not valid JSON."""

    def __init__(self, raw_text: str, status_code: int = None):
        super().__init__(f"Failed to parse response: {raw_text}", status_code=status_code)
        self.raw_text = raw_text


class ApiException(VolcEngineException):
    """Thrown when the provider reports an error in ResponseMetadata."""

    def __init__(
        self,
        code: str,
        message: str,
        request_id: Optional[str] = None,
        service: Optional[str] = None,
        status_code: int = None,
        provider: str = "VolcEngine",
    ):
        super().__init__(
            f"{provider} API Error: {code} - {message}",
            status_code=status_code,
            error_code=code,
        )
        self.api_message = message
        self.request_id = request_id
        self.service = service


class ServerException(VolcEngineException):
    """Thrown when the server returns an HTTP error without an error envelope."""

    def __init__(self, message: str, status_code: int, error_code: str = None):
        super().__init__(message, status_code, error_code)
