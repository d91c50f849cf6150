"""
Upload and listing logic over a BlobStore
"""
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from . import filename_codec
from .blob_store import BlobStore
from .config import DEFAULT_BLOB_NAME_PREFIX, DEFAULT_MAX_UPLOAD_BYTES, Config
from .errors import (
    BlobStoreError,
    ContainerUnavailable,
    DecodeError,
    FileTooLarge,
    ListingFailed,
    NoFileProvided,
    WriteFailed,
)
from .naming import derive_blob_name


# Canonical lower-case metadata keys; Azure may return them lower-cased
METADATA_FILENAME_KEY = 'originalfilename'
METADATA_UPLOADED_KEY = 'dateuploaded'

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


@dataclass
class UploadResult:
    blob_name: str
    filename: str
    decoded_name: Optional[str]
    url: str
    mimetype: str
    size: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ListingEntry:
    name: str
    url: str
    decoded_name: Optional[str]

    def to_dict(self) -> dict:
        return asdict(self)


def build_metadata(filename: str, uploaded_at: Optional[datetime] = None) -> Dict[str, str]:
    """
    Metadata map stored alongside an uploaded blob
    """
    if uploaded_at is None:
        uploaded_at = datetime.now(timezone.utc)
    return {
        METADATA_FILENAME_KEY: filename_codec.encode(filename),
        METADATA_UPLOADED_KEY: uploaded_at.isoformat(),
    }


def recover_filename(metadata: Optional[Dict[str, str]]) -> Optional[str]:
    """
    Decode the original filename from blob metadata.

    Returns None when the key is absent or the value does not decode.
    """
    if not metadata:
        return None
    normalized = {key.lower(): value for key, value in metadata.items()}
    token = normalized.get(METADATA_FILENAME_KEY)
    if token is None:
        return None
    try:
        return filename_codec.decode(token)
    except DecodeError as e:
        logging.warning(f"Could not decode stored filename {token!r}: {str(e)}")
        return None


class FileUploadService:
    """Uploads files to a blob store and lists them with their original names"""

    def __init__(
        self,
        store: BlobStore,
        blob_name_prefix: str = DEFAULT_BLOB_NAME_PREFIX,
        max_upload_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES,
        diagnostics: bool = False,
    ):
        self.store = store
        self.blob_name_prefix = blob_name_prefix
        self.max_upload_bytes = max_upload_bytes
        self.diagnostics = diagnostics

    @classmethod
    def from_config(cls, store: BlobStore, cfg: Config) -> 'FileUploadService':
        return cls(
            store,
            blob_name_prefix=cfg.blob_name_prefix,
            max_upload_bytes=cfg.max_upload_bytes,
            diagnostics=cfg.filename_diagnostics,
        )

    def upload(self, data: Optional[bytes], filename: Optional[str], content_type: Optional[str] = None) -> UploadResult:
        """
        Store one file and return where it went and what name it recovers to.

        Raises:
            NoFileProvided: payload or filename missing; no storage I/O happens.
            FileTooLarge: payload exceeds max_upload_bytes.
            ContainerUnavailable: the container could not be ensured.
            WriteFailed: the write or the metadata read-back failed.
        """
        if data is None:
            raise NoFileProvided("Request did not include a file")
        if not filename:
            raise NoFileProvided("No filename provided")
        if self.max_upload_bytes is not None and len(data) > self.max_upload_bytes:
            raise FileTooLarge(f"File is {len(data)} bytes, limit is {self.max_upload_bytes} bytes")

        content_type = content_type or DEFAULT_CONTENT_TYPE
        logging.info(f"Uploading file \"{filename}\" ({len(data)} bytes, {content_type})")
        if self.diagnostics:
            logging.info(f"Filename details: {json.dumps(filename_codec.describe_filename(filename), ensure_ascii=False)}")

        try:
            self.store.ensure_container()
        except BlobStoreError as e:
            logging.error(f"Error ensuring container exists: {str(e)}")
            raise ContainerUnavailable(str(e)) from e

        blob_name = derive_blob_name(filename, prefix=self.blob_name_prefix)
        metadata = build_metadata(filename)
        logging.info(f"Using blob name: \"{blob_name}\"")

        try:
            url = self.store.put_object(blob_name, data, content_type, metadata)
        except BlobStoreError as e:
            logging.error(f"Error uploading blob {blob_name}: {str(e)}")
            raise WriteFailed(str(e)) from e

        # Read back so the response reflects what later reads will see
        try:
            stored_metadata = self.store.get_metadata(blob_name)
        except BlobStoreError as e:
            logging.error(f"Error reading back metadata for {blob_name}: {str(e)}")
            raise WriteFailed(str(e)) from e
        if stored_metadata is None:
            raise WriteFailed(f"Blob {blob_name} was not found after upload")
        logging.debug(f"Stored metadata: {stored_metadata}")

        decoded_name = recover_filename(stored_metadata)
        logging.info(f"Upload completed: {url}")
        return UploadResult(
            blob_name=blob_name,
            filename=filename,
            decoded_name=decoded_name,
            url=url,
            mimetype=content_type,
            size=len(data),
        )

    def _entry(self, key: str) -> ListingEntry:
        try:
            metadata = self.store.get_metadata(key)
        except BlobStoreError as e:
            logging.warning(f"Could not read metadata for {key}: {str(e)}")
            metadata = None
        return ListingEntry(name=key, url=self.store.object_url(key), decoded_name=recover_filename(metadata))

    def list_files(self) -> List[ListingEntry]:
        """
        All stored files in backend order; entries whose name cannot be
        recovered are kept with decoded_name None
        """
        try:
            keys = list(self.store.list_objects())
        except BlobStoreError as e:
            logging.error(f"Error listing files: {str(e)}")
            raise ListingFailed(str(e)) from e

        entries = [self._entry(key) for key in keys]
        logging.info(f"Listed {len(entries)} files")
        return entries

    def get_file(self, key: str) -> Optional[ListingEntry]:
        """
        Entry for a single blob, or None if it does not exist
        """
        try:
            metadata = self.store.get_metadata(key)
        except BlobStoreError as e:
            raise ListingFailed(str(e)) from e
        if metadata is None:
            return None
        return ListingEntry(name=key, url=self.store.object_url(key), decoded_name=recover_filename(metadata))
