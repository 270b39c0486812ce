"""
Handles secret management for quackspace.

Connection credentials (most often the `token_id`) can be kept out of the YAML
file and looked up by a logical `secret_name`. Providers are tried in order
until one returns a non-empty bundle.
"""
import os
import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .exceptions import SecretError

# Only these keys are read from a bundle; anything else is ignored.
SECRET_KEYS = ("identity_endpoint", "tenant_id", "token_id", "region")


class BaseSecretProvider(ABC):
    """Abstract base class for a secret provider."""
    @abstractmethod
    def get_secret(self, name: str) -> Dict[str, str]:
        """
        Fetch a bundle of connection settings for a given logical name.

        Args:
            name: The logical name of the secret bundle (e.g., 'rax_prod').

        Returns:
            A dictionary of connection settings. Returns an empty dictionary
            if this provider does not know the bundle.
        """
        pass


class EnvSecretProvider(BaseSecretProvider):
    """
    Fetches secrets from environment variables.
    Convention: for secret 'rax_prod' it reads RAX_PROD_TOKEN_ID,
    RAX_PROD_TENANT_ID, RAX_PROD_REGION and RAX_PROD_IDENTITY_ENDPOINT.
    """
    def get_secret(self, name: str) -> Dict[str, str]:
        prefix = f"{name.upper()}_"
        secrets = {}
        for key in SECRET_KEYS:
            value = os.environ.get(prefix + key.upper())
            if value:
                secrets[key] = value
        return secrets


class JsonFileSecretProvider(BaseSecretProvider):
    """Fetches secrets from `<secrets_dir>/<name>.json` files."""
    def __init__(self, secrets_dir: str = "./secrets"):
        self.secrets_dir = secrets_dir

    def get_secret(self, name: str) -> Dict[str, str]:
        path = os.path.join(self.secrets_dir, f"{name}.json")
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            raise SecretError(f"Secret file '{path}' is not valid JSON: {e}") from e
        return {k: str(v) for k, v in data.items() if k in SECRET_KEYS and v}


_providers: List[BaseSecretProvider] = [EnvSecretProvider()]


def set_secret_providers(providers: List[BaseSecretProvider]):
    """
    Sets the default chain of secret providers.

    Args:
        providers: A list of provider instances. They will be tried in order.
    """
    global _providers
    if not isinstance(providers, list) or not all(isinstance(p, BaseSecretProvider) for p in providers):
        raise TypeError("Argument must be a list of BaseSecretProvider instances.")
    _providers = providers


def fetch_secret_bundle(name: Optional[str], providers: Optional[List[BaseSecretProvider]] = None) -> Dict[str, str]:
    """
    Fetches a secret bundle from the given providers, or the default chain.
    """
    if not name:
        return {}

    for provider in providers if providers is not None else _providers:
        secrets = provider.get_secret(name)
        if secrets:
            return secrets

    raise SecretError(f"Secret bundle '{name}' not found in any configured provider.")
