"""
Blob name derivation for uploaded files

Format for names that cannot be used directly: {prefix}-{epoch_ms}-{token}{ext}

Examples:
    >>> derive_blob_name("report.pdf")
    'report.pdf'
    >>> derive_blob_name("ทดสอบภาษาไทย.txt")  # doctest: +SKIP
    'file-1760875200000-3f9a1c0b7d2e.txt'
"""
import uuid
from datetime import datetime, timezone
from typing import Optional


MAX_BLOB_NAME_LENGTH = 1024


def is_key_safe(name: str) -> bool:
    """
    True if the name can be used as a blob name as-is.

    Printable ASCII only, and nothing the URL layer would rewrite: no
    backslashes, no leading '/', no trailing '.' or '/', and no '.' or
    '..' path segments.
    """
    if not name or len(name) > MAX_BLOB_NAME_LENGTH:
        return False
    if not all(' ' <= char <= '~' for char in name):
        return False
    if '\\' in name or name.startswith('/') or name.endswith(('.', '/')):
        return False
    return not any(segment in ('.', '..') for segment in name.split('/'))


def file_extension(filename: str) -> str:
    """
    Substring from the last '.' (inclusive), or '' when there is none
    """
    index = filename.rfind('.')
    return filename[index:] if index >= 0 else ''


def derive_blob_name(
    filename: str,
    prefix: str = 'file',
    now: Optional[datetime] = None,
    token: Optional[str] = None,
) -> str:
    """
    Choose the blob name for a declared filename

    Key-safe names are used unmodified. Anything else gets a synthesized
    name that keeps only the extension; the original name is recovered
    from metadata, never from the blob name.

    Args:
        filename: Declared filename from the client.
        prefix: Leading segment of synthesized names.
        now: Timestamp to use (defaults to current UTC time).
        token: Random segment (defaults to 12 hex chars of a uuid4).

    Returns:
        Blob name.
    """
    if is_key_safe(filename):
        return filename

    if now is None:
        now = datetime.now(timezone.utc)
    if token is None:
        token = uuid.uuid4().hex[:12]

    timestamp = int(now.timestamp() * 1000)
    extension = file_extension(filename)
    # A non-ASCII extension would put the name back out of bounds
    if not is_key_safe(extension):
        extension = ''

    return f"{prefix}-{timestamp}-{token}{extension}"
