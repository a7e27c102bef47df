"""Dataset loader: transport decoding, decompression and materialization.

A payload is base64 text wrapping a gzip stream. The decompressed text is a
JSON document, optionally wrapped in the ``metricsData = {...};`` assignment
that the HTML report generator emits. The wrapper is stripped textually and
only ``json.loads`` ever sees the content; nothing is evaluated.

Every failure, at any stage, surfaces as a single ``DecodeError``. No partial
Dataset is ever returned.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import importlib
import io
import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional, Union

from metrix.errors import DecodeError
from metrix.models import Dataset

logger = logging.getLogger("metrix.core.loader")

Payload = Union[bytes, str]
Inflater = Callable[[bytes], bytes]

_ASSIGNMENT_RE = re.compile(r"^\s*(?:(?:const|let|var)\s+)?metricsData\s*=\s*")
_TRAILER_RE = re.compile(r"(?:;\s*(?:return\s+metricsData\s*;?)?)?\s*$")
_EMBEDDED_RE = re.compile(r"compressedData\s*=\s*[\"']([A-Za-z0-9+/=\s]+)[\"']")
_GZIP_MAGIC = b"\x1f\x8b"


# ── Decompression ──

def _fast_inflater() -> Optional[Inflater]:
    """Return the zlib inflater, or None if the host lacks zlib.

    Mirrors ``gzip.GzipFile``: every concatenated member is inflated, zero
    padding between members is skipped and any other trailing bytes are an
    error.
    """
    try:
        zlib = importlib.import_module("zlib")
    except ImportError:
        return None

    def inflate(data: bytes) -> bytes:
        chunks = []
        rest = data
        while rest:
            if rest[:2] != _GZIP_MAGIC:
                raise ValueError("Not a gzipped member")
            member = zlib.decompressobj(16 + zlib.MAX_WBITS)
            try:
                chunks.append(member.decompress(rest))
            except zlib.error as e:
                raise ValueError(str(e)) from e
            if not member.eof:
                raise ValueError("Compressed stream ended before the end-of-stream marker")
            rest = member.unused_data.lstrip(b"\x00")
        return b"".join(chunks)

    return inflate


def _fallback_inflater() -> Inflater:
    """Acquire the streaming gzip reader on demand."""
    gzip = importlib.import_module("gzip")

    def inflate(data: bytes) -> bytes:
        try:
            with gzip.GzipFile(fileobj=io.BytesIO(data)) as fh:
                return fh.read()
        except gzip.zlib.error as e:
            raise ValueError(str(e)) from e

    return inflate


def decompress(data: bytes) -> bytes:
    """Inflate a gzip stream, preferring the fast path.

    Raises:
        DecodeError: If no decompressor is available or the stream is corrupt.
    """
    inflate = _fast_inflater()
    if inflate is None:
        logger.warning("zlib unavailable, loading streaming gzip decompressor")
        try:
            inflate = _fallback_inflater()
        except ImportError as e:
            raise DecodeError(f"No gzip decompressor available: {e}", stage="decompress") from e
    try:
        return inflate(data)
    except (OSError, EOFError, ValueError) as e:
        raise DecodeError(f"Payload is not a valid gzip stream: {e}", stage="decompress") from e


# ── Stages ──

def decode_transport(payload: Payload) -> bytes:
    """Strip the base64 transport encoding."""
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("ascii")
        except UnicodeDecodeError as e:
            raise DecodeError("Payload is not base64 text", stage="transport") from e
    compact = "".join(payload.split())
    if not compact:
        raise DecodeError("Payload is empty", stage="transport")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Payload is not valid base64: {e}", stage="transport") from e


def parse_document(text: Union[str, bytes]) -> dict:
    """Parse decompressed text into the raw document dict.

    Accepts bare JSON or the ``metricsData = {...};`` assignment form.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Decompressed payload is not UTF-8", stage="parse") from e

    body, wrapped = _ASSIGNMENT_RE.subn("", text, count=1)
    if wrapped:
        body = _TRAILER_RE.sub("", body, count=1)
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DecodeError(f"Payload is not a metrics document: {e}", stage="parse") from e
    validate_shape(document)
    return document


def validate_shape(document: Any) -> None:
    """Check the structural skeleton a Dataset needs."""
    if not isinstance(document, dict):
        raise DecodeError("Metrics document must be an object", stage="shape")
    packages = document.get("packageStats")
    if not isinstance(packages, list):
        raise DecodeError("Metrics document has no 'packageStats' list", stage="shape")
    for i, pkg in enumerate(packages):
        meta = pkg.get("metadata") if isinstance(pkg, dict) else None
        if not isinstance(meta, dict) or not isinstance(meta.get("name"), str):
            raise DecodeError(f"Package #{i} has no metadata.name", stage="shape")
        files = pkg.get("fileStats", [])
        if files is not None and not isinstance(files, list):
            raise DecodeError(f"Package '{meta['name']}' has a non-list fileStats", stage="shape")


def materialize(document: dict) -> Dataset:
    """Build the immutable Dataset from a validated document."""
    try:
        dataset = Dataset.from_dict(document)
    except (TypeError, AttributeError, ValueError) as e:
        raise DecodeError(f"Metrics document is malformed: {e}", stage="shape") from e
    logger.debug(
        "Loaded dataset '%s': %d packages, %d methods",
        dataset.meta.name, len(dataset.packages), dataset.method_count(),
    )
    return dataset


# ── Public API ──

def load(encoded_payload: Payload) -> Dataset:
    """Decode a base64 gzip payload into a Dataset.

    Raises:
        DecodeError: On any transport, decompression, parse or shape failure.
    """
    raw = decode_transport(encoded_payload)
    logger.debug("Transport decoded: %d compressed bytes", len(raw))
    return materialize(parse_document(decompress(raw)))


async def load_async(encoded_payload: Payload) -> Dataset:
    """Async variant of ``load``; decompression runs off the event loop."""
    raw = decode_transport(encoded_payload)
    text = await asyncio.to_thread(decompress, raw)
    return materialize(parse_document(text))


def encode_payload(document: Union[dict, str]) -> str:
    """Inverse transport: gzip and base64-encode a document."""
    gzip = importlib.import_module("gzip")
    text = document if isinstance(document, str) else json.dumps(document, separators=(",", ":"))
    return base64.b64encode(gzip.compress(text.encode("utf-8"), mtime=0)).decode("ascii")


def read_payload(path: Path) -> tuple[str, str]:
    """Read a payload file and classify it.

    Returns:
        ``("document", text)`` for ``.json`` files, otherwise
        ``("payload", base64_text)``. HTML reports have their embedded
        payload extracted.

    Raises:
        DecodeError: If the file cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DecodeError(f"Cannot read payload file {path}: {e}", stage="transport", source=str(path)) from e

    if path.suffix.lower() == ".json":
        return "document", text
    embedded = _EMBEDDED_RE.search(text)
    if embedded:
        return "payload", embedded.group(1)
    return "payload", text


def load_path(path: Path) -> Dataset:
    """Load a Dataset from a payload, HTML report or plain JSON file."""
    kind, content = read_payload(path)
    try:
        if kind == "document":
            return materialize(parse_document(content))
        return load(content)
    except DecodeError as e:
        e.context["source"] = str(path)
        raise


async def load_path_async(path: Path) -> Dataset:
    """Async variant of ``load_path``."""
    kind, content = await asyncio.to_thread(read_payload, path)
    try:
        if kind == "document":
            return materialize(parse_document(content))
        return await load_async(content)
    except DecodeError as e:
        e.context["source"] = str(path)
        raise
