"""Credential providers handed to the Letters API client."""
import os
from typing import Callable, Optional

CredentialProvider = Callable[[], Optional[str]]


class MissingCredentialsError(RuntimeError):
    """No API key is available."""


class StaticCredentials:
    """Provides a fixed API key."""

    def __init__(self, api_key: Optional[str]):
        self._api_key = api_key

    def __call__(self) -> Optional[str]:
        return self._api_key


class EnvCredentials:
    """Reads the API key from an environment variable on every call."""

    def __init__(self, var: str = "LETTERS_API_KEY"):
        self.var = var

    def __call__(self) -> Optional[str]:
        return os.getenv(self.var)


def resolve_api_key(provider: CredentialProvider) -> str:
    api_key = provider()
    if not api_key:
        raise MissingCredentialsError("API key is required")
    return api_key
