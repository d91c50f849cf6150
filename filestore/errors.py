"""
Error kinds surfaced by the upload and listing functions
"""


class BlobStoreError(Exception):
    """Raised by a blob store when the backend call itself fails"""


class DecodeError(ValueError):
    """A metadata value is not a valid encoded filename"""


class FileStoreError(Exception):
    """Base class for failures reported back to the HTTP caller"""

    status_code = 500
    kind = "internal_error"
    message = "Internal server error"

    def __init__(self, details: str = ""):
        super().__init__(details or self.message)
        self.details = details

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": self.kind,
            "message": self.message,
            "details": self.details,
        }


class NoFileProvided(FileStoreError):
    status_code = 400
    kind = "no_file_provided"
    message = "No file uploaded"


class FileTooLarge(FileStoreError):
    status_code = 413
    kind = "file_too_large"
    message = "Uploaded file exceeds the maximum allowed size"


class ContainerUnavailable(FileStoreError):
    status_code = 503
    kind = "container_unavailable"
    message = "Error with Azure Blob Storage container"


class WriteFailed(FileStoreError):
    status_code = 502
    kind = "write_failed"
    message = "Error uploading file to Azure Blob Storage"


class ListingFailed(FileStoreError):
    status_code = 502
    kind = "listing_failed"
    message = "Error listing files"


class FileNotFound(FileStoreError):
    status_code = 404
    kind = "file_not_found"
    message = "File not found"


class ConfigurationMissing(FileStoreError):
    status_code = 500
    kind = "configuration_missing"
    message = "Azure Storage is not configured"


class ConfigurationInvalid(FileStoreError):
    status_code = 500
    kind = "configuration_invalid"
    message = "Azure Storage connection string is invalid"
