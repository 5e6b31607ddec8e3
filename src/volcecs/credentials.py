"""
Credential stores for the VolcEngine ECS node
"""

import os
from typing import Dict, Mapping, Optional, Protocol

from .error import CredentialsException
from .models import Credentials, Region, DEFAULT_REGION


ENV_ACCESS_KEY_ID = "VOLCENGINE_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "VOLCENGINE_SECRET_ACCESS_KEY"
ENV_REGION = "VOLCENGINE_REGION"


def _validate_region(region: str) -> str:
    try:
        return Region(region).value
    except ValueError:
        raise CredentialsException(f"Unsupported region '{region}'.") from None


class CredentialStore(Protocol):
    """Supplies credentials by the name of a credential set."""

    def get_credentials(self, name: str = "default") -> Credentials:
        ...


class StaticCredentialStore:
    """Holds named credential sets in memory."""

    def __init__(self, credentials: Optional[Mapping[str, Credentials]] = None):
        self._credentials: Dict[str, Credentials] = {}
        for name, value in (credentials or {}).items():
            self.add(name, value)

    def add(self, name: str, credentials: Credentials) -> None:
        _validate_region(credentials.region)
        self._credentials[name] = credentials

    def get_credentials(self, name: str = "default") -> Credentials:
        try:
            return self._credentials[name]
        except KeyError:
            raise CredentialsException(f"No credentials named '{name}'.") from None


class EnvironmentCredentialStore:
    """
    Resolves credentials from environment variables.

    VOLCENGINE_ACCESS_KEY_ID and VOLCENGINE_SECRET_ACCESS_KEY are required;
    VOLCENGINE_REGION defaults to cn-beijing. The environment is read on
    every call, so the ``name`` argument is ignored.
    """

    def get_credentials(self, name: str = "default") -> Credentials:
        access_key_id = os.getenv(ENV_ACCESS_KEY_ID)
        secret_access_key = os.getenv(ENV_SECRET_ACCESS_KEY)

        if not access_key_id or not secret_access_key:
            raise CredentialsException(
                f"{ENV_ACCESS_KEY_ID} and {ENV_SECRET_ACCESS_KEY} are required"
            )

        region = _validate_region(os.getenv(ENV_REGION, DEFAULT_REGION.value))
        return Credentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            region=region,
        )
