"""
multipart/form-data body encoding for grid uploads.

Fields are written in mapping order. A ``pathlib.Path`` value becomes a
file part whose bytes are read from disk; anything else is written as
its string form.
"""

import mimetypes
import secrets
from collections.abc import Mapping
from pathlib import Path

FieldValue = str | int | float | Path

CRLF = b"\r\n"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
BOUNDARY_BITS = 256


def new_boundary() -> str:
    """Random 256-bit boundary rendered in decimal."""
    return str(secrets.randbits(BOUNDARY_BITS))


def guess_content_type(path: Path) -> str:
    """Sniff a MIME type from the file name."""
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or DEFAULT_CONTENT_TYPE


def encode_multipart(
    fields: Mapping[str, FieldValue],
    boundary: str | None = None,
) -> tuple[str, bytes]:
    """
    Serialize fields into a multipart/form-data body.

    Args:
        fields: Field name to scalar value or file path
        boundary: Boundary token (random per call if None)

    Returns:
        tuple[str, bytes]: The boundary used and the encoded body

    Raises:
        OSError: If a file part cannot be read
    """
    boundary = boundary or new_boundary()
    delimiter = f"--{boundary}".encode()
    parts: list[bytes] = []

    for name, value in fields.items():
        parts.append(delimiter + CRLF)
        disposition = f'Content-Disposition: form-data; name="{name}"'

        if isinstance(value, Path):
            header = (
                f'{disposition}; filename="{value.name}"\r\n'
                f"Content-Type: {guess_content_type(value)}\r\n\r\n"
            )
            parts.append(header.encode("utf-8"))
            parts.append(value.read_bytes())
            parts.append(CRLF)
        else:
            parts.append(f"{disposition}\r\n\r\n{value}\r\n".encode("utf-8"))

    parts.append(delimiter + b"--")
    return boundary, b"".join(parts)
