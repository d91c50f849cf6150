"""
Shared response helpers for the HTTP functions
"""
import json
import logging
from typing import Any, Callable, Optional
import azure.functions as func
from .blob_store import AzureBlobStore
from .config import Config, config
from .errors import BlobStoreError, ConfigurationInvalid, FileStoreError
from .uploads import FileUploadService


ServiceFactory = Callable[[], FileUploadService]


def create_upload_service(cfg: Optional[Config] = None) -> FileUploadService:
    """
    Build an upload service backed by Azure Blob Storage.

    Raises ConfigurationMissing when the connection string is not set and
    ConfigurationInvalid when it cannot be parsed.
    """
    cfg = cfg or config
    try:
        store = AzureBlobStore.from_config(cfg)
    except BlobStoreError as e:
        logging.error(f"Storage configuration is invalid: {str(e)}")
        raise ConfigurationInvalid(str(e)) from e
    return FileUploadService.from_config(store, cfg)


def json_response(data: Any, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(data, ensure_ascii=False),
        status_code=status_code,
        mimetype="application/json",
        charset="utf-8"
    )


def error_response(error: Exception) -> func.HttpResponse:
    """Map an exception onto a structured JSON failure"""
    if isinstance(error, FileStoreError):
        return json_response(error.to_dict(), status_code=error.status_code)

    logging.error(f"Unexpected error: {str(error)}", exc_info=error)
    return json_response(
        {
            "success": False,
            "error": "internal_error",
            "message": "Internal server error",
            "details": str(error)
        },
        status_code=500
    )
