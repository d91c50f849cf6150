import os
import sys
from typing import Dict, Iterator, Optional
from urllib.parse import quote

import azure.functions as func
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from filestore.blob_store import BlobStore
from filestore.errors import BlobStoreError
from filestore.uploads import FileUploadService


BASE_URL = "https://devstoreaccount.blob.core.windows.net/rag-container"
BOUNDARY = "----uploadtestboundary7MA4YWxkTrZu0gW"


class InMemoryBlobStore(BlobStore):
    """Blob store fake that lower-cases metadata keys the way Azure can"""

    def __init__(self):
        self.objects: Dict[str, dict] = {}
        self.calls = []
        self.containers_created = 0
        self.container_exists = False
        self.fail_on = set()
        self.fail_keys = set()
        self.lose_writes = False

    def _record(self, operation: str, key: Optional[str] = None):
        self.calls.append(operation)
        if operation in self.fail_on or (key is not None and key in self.fail_keys):
            raise BlobStoreError(f"{operation} failed")

    def ensure_container(self) -> None:
        self._record('ensure_container')
        if not self.container_exists:
            self.container_exists = True
            self.containers_created += 1

    def put_object(self, key: str, data: bytes, content_type: str, metadata: Dict[str, str]) -> str:
        self._record('put_object', key)
        if not self.lose_writes:
            self.objects[key] = {
                "data": bytes(data),
                "content_type": content_type,
                "metadata": {k.lower(): v for k, v in metadata.items()},
            }
        return self.object_url(key)

    def get_metadata(self, key: str) -> Optional[Dict[str, str]]:
        self._record('get_metadata', key)
        stored = self.objects.get(key)
        if stored is None:
            return None
        return dict(stored["metadata"])

    def list_objects(self) -> Iterator[str]:
        self._record('list_objects')
        return iter(list(self.objects))

    def object_url(self, key: str) -> str:
        return f"{BASE_URL}/{quote(key)}"


def multipart_request(filename: str, data: bytes, content_type: str = "text/plain", field: str = "file") -> func.HttpRequest:
    """Build a multipart/form-data upload request with a raw UTF-8 filename"""
    head = (
        f"--{BOUNDARY}\r\n"
        f"Content-Disposition: form-data; name=\"{field}\"; filename=\"{filename}\"\r\n"
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode('utf-8')
    tail = f"\r\n--{BOUNDARY}--\r\n".encode('utf-8')
    return func.HttpRequest(
        method='POST',
        url='/api/upload',
        headers={'Content-Type': f'multipart/form-data; boundary={BOUNDARY}'},
        body=head + data + tail,
    )


def get_request(url: str, route_params: Optional[dict] = None) -> func.HttpRequest:
    return func.HttpRequest(
        method='GET',
        url=url,
        headers={},
        params={},
        route_params=route_params or {},
        body=b'',
    )


@pytest.fixture
def store():
    return InMemoryBlobStore()


@pytest.fixture
def service(store):
    return FileUploadService(store, blob_name_prefix='file', max_upload_bytes=1024)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting the app reads so defaults apply"""
    for key in (
        'AZURE_STORAGE_CONNECTION_STRING',
        'AZURE_STORAGE_CONTAINER_NAME',
        'AZURE_STORAGE_PUBLIC_ACCESS',
        'AZURE_STORAGE_TIMEOUT',
        'AZURE_KEY_VAULT_URL',
        'BLOB_NAME_PREFIX',
        'MAX_UPLOAD_BYTES',
        'FILENAME_DIAGNOSTICS',
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
