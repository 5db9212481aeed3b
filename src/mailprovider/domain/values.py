"""Immutable value types: recipient addresses and attachments."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from .errors import AttachmentNotFoundError, InvalidArgumentError
from .validation import describe_type, require_optional_str, require_str

DEFAULT_MIME_TYPE = "application/octet-stream"
_SNIFF_BYTES = 512

# Leading bytes of common attachment formats.
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
)


def sniff_mime_type(content: bytes) -> str:
    """Infer a MIME type from the first bytes of a payload.

    Known signatures win; otherwise text that decodes as UTF-8 without
    control characters is ``text/plain`` and anything else is binary.

    Example:
        >>> sniff_mime_type(b"%PDF-1.7 ...")
        'application/pdf'
        >>> sniff_mime_type(b"plain words\\n")
        'text/plain'
        >>> sniff_mime_type(b"\\x00\\x01")
        'application/octet-stream'
    """
    head = content[:_SNIFF_BYTES]
    for signature, mime_type in _SIGNATURES:
        if head.startswith(signature):
            return mime_type
    if not head:
        return DEFAULT_MIME_TYPE
    try:
        text = head.decode("utf-8")
    except UnicodeDecodeError as exc:
        # A multi-byte character may be cut at the sniff boundary.
        if len(head) < _SNIFF_BYTES or exc.start < len(head) - 3:
            return DEFAULT_MIME_TYPE
        text = head[: exc.start].decode("utf-8")
    if any(ord(char) < 32 and char not in "\t\n\r\f" for char in text):
        return DEFAULT_MIME_TYPE
    return "text/plain"


def guess_mime_type(filename: str, content: bytes | None = None) -> str:
    """Infer a MIME type from a file name, then from *content* when the name says nothing.

    Example:
        >>> guess_mime_type("report.pdf")
        'application/pdf'
        >>> guess_mime_type("no-extension")
        'application/octet-stream'
        >>> guess_mime_type("no-extension", b"%PDF-1.4")
        'application/pdf'
    """
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    if mime_type:
        return mime_type
    if content is not None:
        return sniff_mime_type(content)
    return DEFAULT_MIME_TYPE


@dataclass(frozen=True, slots=True)
class Address:
    """One mailbox: an email address plus an optional display name.

    Example:
        >>> Address("ops@example.com")
        Address(email='ops@example.com', name='')
        >>> Address("")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidArgumentError: Address: email must not be empty
    """

    email: str
    name: str = ""

    def __post_init__(self) -> None:
        require_str("Address", self.email)
        require_str("Address", self.name)
        if not self.email:
            raise InvalidArgumentError("Address: email must not be empty")

    def to_dict(self) -> dict[str, str]:
        return {"email": self.email, "name": self.name}


@dataclass(frozen=True, slots=True)
class FileAttachment:
    """A file on disk, resolved and checked when it was added."""

    path: Path
    name: str | None
    mime_type: str

    @classmethod
    def resolve(
        cls,
        path: str | Path,
        name: str | None = None,
        mime_type: str | None = None,
    ) -> FileAttachment:
        """Validate *path* now and capture its absolute location.

        Args:
            path: File to attach.
            name: Optional file name shown to the recipient.
            mime_type: Optional MIME type; inferred from the file name, then
                from the first bytes of the file, when omitted.

        Raises:
            InvalidArgumentError: When an argument has the wrong type.
            AttachmentNotFoundError: When *path* is not an existing regular file.
        """
        if not isinstance(path, (str, Path)):
            raise InvalidArgumentError(
                f'add_attachment: expects a string argument; received "{describe_type(path)}"'
            )
        require_optional_str("add_attachment", name)
        require_optional_str("add_attachment", mime_type)

        candidate = Path(path)
        if not candidate.is_file():
            raise AttachmentNotFoundError(f'File at path "{path}" does not exist.')
        resolved = candidate.resolve()
        if not mime_type:
            mime_type, _ = mimetypes.guess_type(resolved.name, strict=False)
        if not mime_type:
            with resolved.open("rb") as handle:
                mime_type = sniff_mime_type(handle.read(_SNIFF_BYTES))
        return cls(path=resolved, name=name, mime_type=mime_type)

    @property
    def display_name(self) -> str:
        return self.name or self.path.name

    def to_dict(self) -> dict[str, str | None]:
        return {"file": str(self.path), "name": self.name, "type": self.mime_type}


@dataclass(frozen=True, slots=True)
class InlineAttachment:
    """A binary payload attached straight from memory."""

    data: bytes
    name: str
    encoding: str = "base64"
    mime_type: str = DEFAULT_MIME_TYPE
    disposition: str = "attachment"

    @classmethod
    def build(
        cls,
        data: bytes | bytearray | str,
        name: str,
        encoding: str = "base64",
        mime_type: str = "",
        disposition: str = "attachment",
    ) -> InlineAttachment:
        """Validate arguments and infer the MIME type from *name*, then *data*, when empty.

        Text payloads are stored UTF-8 encoded.
        """
        if isinstance(data, str):
            payload = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray)):
            payload = bytes(data)
        else:
            raise InvalidArgumentError(
                f'add_string_attachment: expects a bytes argument; received "{describe_type(data)}"'
            )
        for value in (name, encoding, mime_type, disposition):
            require_str("add_string_attachment", value)
        return cls(
            data=payload,
            name=name,
            encoding=encoding,
            mime_type=mime_type or guess_mime_type(name, payload),
            disposition=disposition,
        )

    @property
    def display_name(self) -> str:
        return Path(self.name).name


Attachment = FileAttachment | InlineAttachment


__all__ = [
    "DEFAULT_MIME_TYPE",
    "Address",
    "Attachment",
    "FileAttachment",
    "InlineAttachment",
    "guess_mime_type",
    "sniff_mime_type",
]
