"""
Lossless metadata-safe encoding for Unicode filenames

Blob metadata only reliably carries ASCII, so the declared filename is
stored as standard Base64 over its UTF-8 bytes.
"""
import base64
import binascii
import string
from typing import Any, Dict

from .errors import DecodeError


SAFE_ALPHABET = frozenset(string.ascii_letters + string.digits + '+/=')


def encode(name: str) -> str:
    """
    Encode a filename into a Base64 token safe for blob metadata
    """
    return base64.b64encode(name.encode('utf-8')).decode('ascii')


def decode(token: str) -> str:
    """
    Decode a token produced by encode()

    Raises DecodeError for anything encode() could not have produced:
    characters outside the alphabet, bad padding, non-canonical padding
    bits or bytes that are not UTF-8.
    """
    if not isinstance(token, str):
        raise DecodeError(f"Expected str token, got {type(token).__name__}")
    if not SAFE_ALPHABET.issuperset(token):
        raise DecodeError("Token contains characters outside the Base64 alphabet")

    try:
        raw = base64.b64decode(token, validate=True)
    except binascii.Error as e:
        raise DecodeError(f"Malformed Base64 token: {str(e)}") from e

    try:
        name = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(f"Decoded bytes are not valid UTF-8: {str(e)}") from e

    if encode(name) != token:
        raise DecodeError("Token is not in canonical Base64 form")
    return name


def describe_filename(name: str) -> Dict[str, Any]:
    """
    Byte and code point breakdown of a filename for debug logging
    """
    return {
        "filename": name,
        "is_ascii": name.isascii(),
        "utf8_hex": name.encode('utf-8').hex(),
        "code_points": [
            {"char": char, "code_point": f"{ord(char):04x}"}
            for char in name
        ],
    }
