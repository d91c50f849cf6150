"""
Configuration management for the upload function app
"""
import os
import json
import logging
from typing import Optional
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient
from .errors import ConfigurationMissing


DEFAULT_CONTAINER_NAME = 'rag-container'
DEFAULT_BLOB_NAME_PREFIX = 'file'
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_STORAGE_TIMEOUT = 30


class Config:
    """Configuration manager for Azure Blob Storage uploads"""

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'development')
        self._load_local_settings()

        # Only initialize DefaultAzureCredential if Key Vault URL is provided
        key_vault_url = os.getenv('AZURE_KEY_VAULT_URL')
        if key_vault_url:
            try:
                self.credential = DefaultAzureCredential()
                self.key_vault_client = SecretClient(
                    vault_url=key_vault_url,
                    credential=self.credential
                )
            except (AzureError, ValueError) as e:
                logging.warning(f"Key Vault client unavailable, using environment only: {str(e)}")
                self.key_vault_client = None
        else:
            self.key_vault_client = None

    def _load_local_settings(self):
        """Load local.settings.json for local development"""
        settings_file = 'local.settings.json'
        paths_to_try = [
            settings_file,
            os.path.join(os.path.dirname(__file__), '..', settings_file),
            os.path.join(os.getcwd(), settings_file)
        ]

        for path in paths_to_try:
            if os.path.exists(path):
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        settings = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    logging.warning(f"Could not read {path}: {str(e)}")
                    continue
                values = settings.get('Values', {})
                for key, value in values.items():
                    if key not in os.environ:
                        os.environ[key] = str(value)
                return

    def get_secret(self, secret_name: str) -> Optional[str]:
        """Get secret from Key Vault or environment variables"""
        if self.key_vault_client:
            try:
                # Key Vault secret names only allow alphanumerics and dashes
                secret = self.key_vault_client.get_secret(secret_name.replace('_', '-'))
                return secret.value
            except AzureError:
                return os.getenv(secret_name)
        return os.getenv(secret_name)

    def _get_required_config(self, key: str, default: Optional[str] = None) -> str:
        value = self.get_secret(key) or default
        if value is None:
            raise ConfigurationMissing(f"Required configuration '{key}' is not set")
        return str(value)

    def _get_int_config(self, key: str, default: int) -> int:
        value = os.getenv(key)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            logging.warning(f"Invalid integer for '{key}': {value!r}, using {default}")
            return default

    @property
    def storage_connection_string(self) -> str:
        return self._get_required_config('AZURE_STORAGE_CONNECTION_STRING')

    @property
    def has_storage_connection_string(self) -> bool:
        return bool(self.get_secret('AZURE_STORAGE_CONNECTION_STRING'))

    @property
    def container_name(self) -> str:
        return os.getenv('AZURE_STORAGE_CONTAINER_NAME') or DEFAULT_CONTAINER_NAME

    @property
    def public_access(self) -> Optional[str]:
        value = os.getenv('AZURE_STORAGE_PUBLIC_ACCESS', 'blob').strip().lower()
        if value in ('', 'none', 'private', 'off'):
            return None
        return value

    @property
    def storage_timeout(self) -> int:
        return self._get_int_config('AZURE_STORAGE_TIMEOUT', DEFAULT_STORAGE_TIMEOUT)

    @property
    def blob_name_prefix(self) -> str:
        return os.getenv('BLOB_NAME_PREFIX') or DEFAULT_BLOB_NAME_PREFIX

    @property
    def max_upload_bytes(self) -> int:
        return self._get_int_config('MAX_UPLOAD_BYTES', DEFAULT_MAX_UPLOAD_BYTES)

    @property
    def filename_diagnostics(self) -> bool:
        value = os.getenv('FILENAME_DIAGNOSTICS', '')
        return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Global config instance
config = Config()
