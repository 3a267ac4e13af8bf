"""Request body re-encoding for forwarded requests."""

import json
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any

from starlette.datastructures import UploadFile
from starlette.requests import Request

from core.exceptions import BodyDecodeError

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

TEXT_CONTENT_TYPE = "text/plain;charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"


class BodyEncoding(str, Enum):
    JSON = "json"
    TEXT = "text"
    FORM = "form"
    BLOB = "blob"


# Checked top to bottom, first substring match wins
ENCODING_TABLE: tuple[tuple[str, BodyEncoding], ...] = (
    ("application/json", BodyEncoding.JSON),
    ("application/text", BodyEncoding.TEXT),
    ("text/html", BodyEncoding.TEXT),
    ("form", BodyEncoding.FORM),
)


def select_encoding(content_type: str | None) -> BodyEncoding:
    """Pick the body encoding for an inbound content-type."""
    normalized = (content_type or "").lower()
    for needle, encoding in ENCODING_TABLE:
        if needle in normalized:
            return encoding
    return BodyEncoding.BLOB


FormPart = tuple[str, tuple[str | None, bytes] | tuple[str | None, bytes, str | None]]


@dataclass(frozen=True)
class EncodedBody:
    """Re-encoded body ready to hand to httpx."""

    encoding: BodyEncoding
    content: bytes | None = None
    parts: list[FormPart] | None = None
    content_type: str | None = None

    def as_request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient.build_request``."""
        if self.encoding is BodyEncoding.FORM and self.parts:
            # Every field goes through ``files`` so httpx always emits multipart
            return {"files": self.parts}
        return {"content": self.content if self.content is not None else b""}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class RequestTransformer:
    """Reinterpret inbound bodies according to their content type."""

    async def encode_body(
        self,
        request: Request,
        content_type: str | None,
    ) -> EncodedBody | None:
        """Return the forwarded body, or None when the method carries none."""
        if request.method not in BODY_METHODS:
            return None

        encoding = select_encoding(content_type)
        if encoding is BodyEncoding.JSON:
            return await self._encode_json(request)
        if encoding is BodyEncoding.TEXT:
            raw = await request.body()
            return EncodedBody(
                encoding,
                content=raw.decode("utf-8", errors="replace").encode("utf-8"),
                content_type=TEXT_CONTENT_TYPE,
            )
        if encoding is BodyEncoding.FORM:
            return await self._encode_form(request)
        return EncodedBody(
            encoding,
            content=await request.body(),
            content_type=content_type or None,
        )

    async def _encode_json(self, request: Request) -> EncodedBody:
        raw = await request.body()
        try:
            parsed = json.loads(raw, parse_constant=_reject_constant)
            text = json.dumps(
                parsed, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            )
        except ValueError as e:
            raise BodyDecodeError(f"Invalid JSON body: {e}", encoding="json") from e
        return EncodedBody(
            BodyEncoding.JSON,
            content=text.encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
        )

    async def _encode_form(self, request: Request) -> EncodedBody:
        try:
            form = await request.form()
        except Exception as e:
            raise BodyDecodeError(f"Invalid form body: {e}", encoding="form") from e

        parts: list[FormPart] = []
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                parts.append((key, (value.filename, await value.read(), value.content_type)))
            else:
                parts.append((key, (None, value.encode("utf-8"))))
        await form.close()
        if not parts:
            # httpx drops empty multipart bodies, so write the closing delimiter
            boundary = os.urandom(16).hex()
            return EncodedBody(
                BodyEncoding.FORM,
                content=f"--{boundary}--\r\n".encode("ascii"),
                content_type=f"multipart/form-data; boundary={boundary}",
            )
        return EncodedBody(BodyEncoding.FORM, parts=parts)
