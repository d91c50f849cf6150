"""
Blob store collaborator and its Azure Blob Storage implementation
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional
from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings
from .config import Config
from .errors import BlobStoreError


class BlobStore(ABC):
    """
    Key-addressed object storage with per-object string metadata.

    Implementations raise BlobStoreError when a backend call fails.
    """

    @abstractmethod
    def ensure_container(self) -> None:
        """Create the container if it does not exist; safe to call repeatedly"""

    @abstractmethod
    def put_object(self, key: str, data: bytes, content_type: str, metadata: Dict[str, str]) -> str:
        """Write an object (overwriting) and return its URL"""

    @abstractmethod
    def get_metadata(self, key: str) -> Optional[Dict[str, str]]:
        """Metadata of an object, or None if the object does not exist"""

    @abstractmethod
    def list_objects(self) -> Iterator[str]:
        """Keys of all objects in backend enumeration order"""

    @abstractmethod
    def object_url(self, key: str) -> str:
        """Access URL of an object"""


class AzureBlobStore(BlobStore):
    """Blob store backed by a single Azure Blob Storage container"""

    def __init__(
        self,
        connection_string: str,
        container_name: str,
        public_access: Optional[str] = 'blob',
        timeout: Optional[int] = None,
    ):
        self.container_name = container_name
        self.public_access = public_access
        self.timeout = timeout

        try:
            self.blob_service_client = BlobServiceClient.from_connection_string(connection_string)
        except ValueError as e:
            raise BlobStoreError(f"Invalid storage connection string: {str(e)}") from e
        self.container_client = self.blob_service_client.get_container_client(container_name)

    @classmethod
    def from_config(cls, cfg: Config) -> 'AzureBlobStore':
        """
        Build a store from configuration; raises ConfigurationMissing
        when no connection string is available
        """
        return cls(
            connection_string=cfg.storage_connection_string,
            container_name=cfg.container_name,
            public_access=cfg.public_access,
            timeout=cfg.storage_timeout,
        )

    def _call_kwargs(self) -> dict:
        return {"timeout": self.timeout} if self.timeout else {}

    def ensure_container(self) -> None:
        try:
            self.container_client.create_container(
                public_access=self.public_access,
                **self._call_kwargs()
            )
            logging.info(f"Created container '{self.container_name}'")
        except ResourceExistsError:
            logging.debug(f"Container '{self.container_name}' already exists")
        except AzureError as e:
            raise BlobStoreError(f"Could not ensure container '{self.container_name}': {str(e)}") from e

    def put_object(self, key: str, data: bytes, content_type: str, metadata: Dict[str, str]) -> str:
        blob_client = self.container_client.get_blob_client(key)
        try:
            blob_client.upload_blob(
                data,
                length=len(data),
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                metadata=metadata,
                **self._call_kwargs()
            )
        except AzureError as e:
            raise BlobStoreError(f"Could not upload blob '{key}': {str(e)}") from e
        return blob_client.url

    def get_metadata(self, key: str) -> Optional[Dict[str, str]]:
        blob_client = self.container_client.get_blob_client(key)
        try:
            properties = blob_client.get_blob_properties(**self._call_kwargs())
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise BlobStoreError(f"Could not read properties of blob '{key}': {str(e)}") from e
        return dict(properties.metadata or {})

    def list_objects(self) -> Iterator[str]:
        try:
            for blob in self.container_client.list_blobs(**self._call_kwargs()):
                yield blob.name
        except AzureError as e:
            raise BlobStoreError(f"Could not list container '{self.container_name}': {str(e)}") from e

    def object_url(self, key: str) -> str:
        return self.container_client.get_blob_client(key).url
