"""The Message aggregate: builder state for one email.

A Message starts empty and changes only through its builder operations.
Each operation checks its arguments before touching state and returns the
Message itself, so calls chain::

    >>> msg = Message().set_from("app@example.com").add_to("a@example.com").set_subject("Hi")
    >>> [a.email for a in msg.tos]
    ['a@example.com']

Serialisation goes through :meth:`Message.to_dict` and
:meth:`Message.from_dict`; the latter replays the same builder operations,
so data loaded from storage is validated exactly like data set in code.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

import orjson

from .enums import ContentType
from .errors import InvalidArgumentError, InvalidMessageError
from .values import Address, Attachment, FileAttachment, InlineAttachment
from .validation import require_mapping, require_optional_str, require_sequence, require_str

_M = TypeVar("_M", bound="Message")

# Hex escapes matching what mail APIs expect for header payloads embedded in HTML/JS.
# Escape pairs are matched first so an escaped backslash never swallows a quote.
_JSON_HEX_ESCAPES = {
    "<": "\\u003C",
    ">": "\\u003E",
    "'": "\\u0027",
    "&": "\\u0026",
    '\\"': "\\u0022",
}
_JSON_HEX_PATTERN = re.compile(r"\\.|[<>'&]")


def _hex_escape(match: re.Match[str]) -> str:
    token = match.group(0)
    return _JSON_HEX_ESCAPES.get(token, token)


class Message:
    """Mutable builder state for one email.

    Attributes:
        name: Label prefixed to every entry in :attr:`errors`. A bare
            Message reports as ``MailService``; a provider reports as its
            transport.
    """

    name: str = "MailService"

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._from_email: str | None = None
        self._from_name: str = ""
        self._reply_to: Address | None = None
        self._to: list[Address] = []
        self._cc: list[Address] = []
        self._bcc: list[Address] = []
        self._subject: str | None = None
        self._text: str | None = None
        self._html: str | None = None
        self._content_type = ContentType.TEXT
        self._headers: dict[str, str] = {}
        self._attachments: list[Attachment] = []
        self._errors: list[str] = []
        if data is not None:
            self.from_dict(data)

    # ------------------------------------------------------------------
    # Sender and reply-to
    # ------------------------------------------------------------------

    def set_from(self: _M, email: str, name: str = "") -> _M:
        """Set the sender address; a non-empty *name* also sets the display name."""
        require_str("set_from", email)
        require_str("set_from", name)
        Address(email)
        self._from_email = email
        if name != "":
            self._from_name = name
        return self

    def set_from_name(self: _M, name: str) -> _M:
        require_str("set_from_name", name)
        self._from_name = name
        return self

    def set_reply_to(self: _M, email: str) -> _M:
        require_str("set_reply_to", email)
        self._reply_to = Address(email)
        return self

    @property
    def from_address(self) -> str | None:
        return self._from_email

    @property
    def from_name(self) -> str:
        return self._from_name

    @property
    def sender(self) -> Address | None:
        """The sender as an Address, or None while no sender is set."""
        if self._from_email is None:
            return None
        return Address(self._from_email, self._from_name)

    @property
    def reply_to(self) -> Address | None:
        return self._reply_to

    # ------------------------------------------------------------------
    # Recipients
    # ------------------------------------------------------------------

    def add_to(self: _M, email: str, name: str = "") -> _M:
        self._to.append(_address("add_to", email, name))
        return self

    def add_cc(self: _M, email: str, name: str = "") -> _M:
        self._cc.append(_address("add_cc", email, name))
        return self

    def add_bcc(self: _M, email: str, name: str = "") -> _M:
        self._bcc.append(_address("add_bcc", email, name))
        return self

    def remove_to(self: _M, email: str) -> _M:
        """Drop every 'to' entry with this address; survivors keep their order."""
        self._to = _without("remove_to", self._to, email)
        return self

    def remove_cc(self: _M, email: str) -> _M:
        """Drop every 'cc' entry with this address; survivors keep their order."""
        self._cc = _without("remove_cc", self._cc, email)
        return self

    def remove_bcc(self: _M, email: str) -> _M:
        """Drop every 'bcc' entry with this address; survivors keep their order."""
        self._bcc = _without("remove_bcc", self._bcc, email)
        return self

    @property
    def tos(self) -> list[Address]:
        return list(self._to)

    @property
    def ccs(self) -> list[Address]:
        return list(self._cc)

    @property
    def bccs(self) -> list[Address]:
        return list(self._bcc)

    # ------------------------------------------------------------------
    # Subject and body
    # ------------------------------------------------------------------

    def set_subject(self: _M, subject: str) -> _M:
        self._subject = require_str("set_subject", subject)
        return self

    def set_text(self: _M, text: str) -> _M:
        """Set the plain-text body and make plain text the content type."""
        self._text = require_str("set_text", text)
        self._content_type = ContentType.TEXT
        return self

    def set_html(self: _M, html: str) -> _M:
        """Set the HTML body and make HTML the content type."""
        self._html = require_str("set_html", html)
        self._content_type = ContentType.HTML
        return self

    @property
    def subject(self) -> str | None:
        return self._subject

    @property
    def text(self) -> str | None:
        return self._text

    @property
    def html(self) -> str | None:
        return self._html

    @property
    def content_type(self) -> ContentType:
        """HTML when ``set_html`` ran last, plain text otherwise."""
        return self._content_type

    @property
    def body(self) -> str | None:
        """The body that goes out under the current content type."""
        if self._content_type is ContentType.HTML:
            return self._html
        return self._text

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def add_attachment(
        self: _M,
        path: str | Path,
        name: str | None = None,
        mime_type: str | None = None,
    ) -> _M:
        """Attach a file; the path is checked and resolved right now.

        Raises:
            InvalidArgumentError: When an argument has the wrong type.
            AttachmentNotFoundError: When *path* is not an existing regular file.
        """
        self._attachments.append(FileAttachment.resolve(path, name, mime_type))
        return self

    def add_string_attachment(
        self: _M,
        data: bytes | str,
        name: str,
        encoding: str = "base64",
        mime_type: str = "",
        disposition: str = "attachment",
    ) -> _M:
        """Attach an in-memory payload under file name *name*."""
        self._attachments.append(InlineAttachment.build(data, name, encoding, mime_type, disposition))
        return self

    @property
    def attachments(self) -> list[Attachment]:
        return list(self._attachments)

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def add_header(self: _M, key: str, value: str) -> _M:
        require_str("add_header", key)
        require_str("add_header", value)
        self._headers[key] = value
        return self

    def remove_header(self: _M, key: str) -> _M:
        require_str("remove_header", key)
        self._headers.pop(key, None)
        return self

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def headers_json(self) -> str:
        """Render the headers as JSON with ``<``, ``>``, ``'``, ``"``, ``&`` hex-escaped.

        Example:
            >>> Message().headers_json()
            '{}'
            >>> Message().add_header("X-Tag", "<a&b>").headers_json()
            '{"X-Tag":"\\\\u003Ca\\\\u0026b\\\\u003E"}'
        """
        if not self._headers:
            return "{}"
        rendered = orjson.dumps(self._headers).decode("utf-8")
        return _JSON_HEX_PATTERN.sub(_hex_escape, rendered)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def add_error(self, error: str, *, source: str | None = None) -> None:
        """Append *error* tagged with *source*, or with :attr:`name` when omitted."""
        self._errors.append(f"{source or self.name}: {error}")

    def set_errors(self, errors: Sequence[str]) -> None:
        """Append each entry through :meth:`add_error`; existing errors stay."""
        for error in require_sequence("set_errors", errors):
            self.add_error(error)

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    # ------------------------------------------------------------------
    # Dispatch checks
    # ------------------------------------------------------------------

    def validate_for_dispatch(self) -> None:
        """Raise when the message cannot be handed to a transport.

        Raises:
            InvalidMessageError: No sender set, or no recipient in to/cc/bcc.
        """
        if self._from_email is None:
            raise InvalidMessageError("No sender address set")
        if not (self._to or self._cc or self._bcc):
            raise InvalidMessageError("No recipients set")

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return every builder-settable field as plain nested data.

        Example:
            >>> data = Message().set_from("a@example.com", "A").add_cc("c@example.com").to_dict()
            >>> data["from"], data["cc"]
            ({'email': 'a@example.com', 'name': 'A'}, [{'email': 'c@example.com', 'name': ''}])
        """
        return {
            "from": {"email": self._from_email, "name": self._from_name},
            "replyTo": {"email": self._reply_to.email if self._reply_to else None, "name": ""},
            "to": [address.to_dict() for address in self._to],
            "cc": [address.to_dict() for address in self._cc],
            "bcc": [address.to_dict() for address in self._bcc],
            "subject": self._subject,
            "text": self._text,
            "html": self._html,
            "contentType": self._content_type.value,
            "attachments": [_attachment_to_dict(attachment) for attachment in self._attachments],
            "headers": dict(self._headers),
        }

    def from_dict(self: _M, data: Mapping[str, Any]) -> _M:
        """Replay the builder operations that *data* describes.

        Keys that are missing or ``None`` leave their field alone, so partial
        data is fine. On any validation error the message is restored to what
        it was before the call.

        Raises:
            InvalidArgumentError: Malformed shape or wrongly typed values.
            AttachmentNotFoundError: An attachment file no longer exists.
        """
        payload = require_mapping("from_dict", data)
        snapshot = self._snapshot()
        try:
            self._apply(payload)
        except Exception:
            self._restore(snapshot)
            raise
        return self

    def _apply(self, data: Mapping[str, Any]) -> None:
        sender = data.get("from")
        if sender is not None:
            sender = require_mapping("from_dict", sender)
            if sender.get("email") is not None:
                self.set_from(sender["email"])
                if sender.get("name") is not None:
                    self.set_from_name(sender["name"])

        for key, add in (("to", self.add_to), ("cc", self.add_cc), ("bcc", self.add_bcc)):
            entries = data.get(key)
            if entries is None:
                continue
            for entry in require_sequence("from_dict", entries):
                entry = require_mapping("from_dict", entry)
                add(entry.get("email"), entry.get("name") or "")

        reply_to = data.get("replyTo")
        if reply_to is not None:
            reply_to = require_mapping("from_dict", reply_to)
            if reply_to.get("email") is not None:
                self.set_reply_to(reply_to["email"])

        if data.get("subject") is not None:
            self.set_subject(data["subject"])

        body_setters = [("text", self.set_text), ("html", self.set_html)]
        if data.get("contentType") == ContentType.TEXT.value:
            body_setters.reverse()
        for key, setter in body_setters:
            if data.get(key) is not None:
                setter(data[key])

        attachments = data.get("attachments")
        if attachments is not None:
            for entry in require_sequence("from_dict", attachments):
                self._apply_attachment(require_mapping("from_dict", entry))

        headers = data.get("headers")
        if headers is not None:
            for key, value in require_mapping("from_dict", headers).items():
                self.add_header(key, value)

    def _apply_attachment(self, entry: Mapping[str, Any]) -> None:
        if "content" not in entry:
            self.add_attachment(entry.get("file"), entry.get("name"), entry.get("type"))  # type: ignore[arg-type]
            return
        content = require_str("from_dict", entry["content"])
        try:
            payload = base64.b64decode(content, validate=True)
        except binascii.Error as exc:
            raise InvalidArgumentError(f"from_dict: attachment content is not valid base64: {exc}") from exc
        self.add_string_attachment(
            payload,
            entry.get("name"),  # type: ignore[arg-type]
            entry.get("encoding") or "base64",
            require_optional_str("from_dict", entry.get("type")) or "",
            entry.get("disposition") or "attachment",
        )

    def _snapshot(self) -> dict[str, Any]:
        state = dict(vars(self))
        for key, value in state.items():
            if isinstance(value, (list, dict)):
                state[key] = value.copy()
        return state

    def _restore(self, state: dict[str, Any]) -> None:
        vars(self).update(state)


def _address(method: str, email: object, name: object) -> Address:
    require_str(method, email)
    require_str(method, name)
    return Address(email, name)  # type: ignore[arg-type]


def _without(method: str, addresses: list[Address], email: str) -> list[Address]:
    require_str(method, email)
    return [address for address in addresses if address.email != email]


def _attachment_to_dict(attachment: Attachment) -> dict[str, Any]:
    if isinstance(attachment, FileAttachment):
        return attachment.to_dict()
    return {
        "content": base64.b64encode(attachment.data).decode("ascii"),
        "name": attachment.name,
        "type": attachment.mime_type,
        "encoding": attachment.encoding,
        "disposition": attachment.disposition,
    }


__all__ = ["Message"]
