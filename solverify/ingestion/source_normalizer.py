"""Normalize explorer source metadata into a solc standard-JSON input.

The explorer's ``SourceCode`` field carries one of three encodings:

1. ``{{...}}`` — a complete standard-JSON input wrapped in an extra pair of
   braces. Used verbatim, including its own settings.
2. ``{...}`` — a flat ``{filename: {"content": ...}}`` object (older
   multi-file uploads).
3. anything else — the literal contents of a single file.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from solverify.core.errors import MalformedStandardInput, UnknownEvmVersion
from solverify.core.types import (
    CanonicalSourceDocument,
    CompilerSettings,
    EvmVersion,
    OptimizerSettings,
    RawMetadataRecord,
    default_output_selection,
)

logger = logging.getLogger(__name__)

DEFAULT_EVM_SENTINEL = "default"
DEFAULT_OPTIMIZER_RUNS = 200

_REQUIRED_INPUT_KEYS = ("language", "sources", "settings")


# ── Encodings ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StandardInput:
    document: CanonicalSourceDocument


@dataclass(frozen=True)
class MultiFile:
    files: dict[str, str]


@dataclass(frozen=True)
class SingleFile:
    name: str
    content: str


SourceEncoding = Union[StandardInput, MultiFile, SingleFile]


def classify(record: RawMetadataRecord) -> SourceEncoding:
    """Decide which encoding ``record.source_code`` uses.

    Raises:
        MalformedStandardInput: If a ``{{``-wrapped payload is not a valid
            standard-JSON input.
    """
    source = record.source_code

    if source.startswith("{{"):
        return StandardInput(_parse_standard_input(source[1:-1]))

    if source.startswith("{"):
        data = _load_json_object(source)
        if data is not None:
            if "sources" in data:
                return StandardInput(_validate_standard_input(data))
            files = _flat_files(data)
            if files:
                return MultiFile(files)

    return SingleFile(name=record.file_name or f"{record.contract_name}.sol", content=source)


def normalize(record: RawMetadataRecord) -> CanonicalSourceDocument:
    """Turn an explorer record into a compiler-ready document.

    A standard-JSON upload is returned as-is; its ``evmVersion`` wins and the
    record's ``EVMVersion`` is not consulted. Single- and multi-file uploads
    get default settings with the record's EVM target, optimizer and
    library settings applied.

    Raises:
        MalformedStandardInput: Standard-JSON payload is invalid, or a
            single- or multi-file path is blank, absolute or contains ``..``.
        UnknownEvmVersion: ``EVMVersion`` is not a recognised target.
    """
    encoding = classify(record)

    if isinstance(encoding, StandardInput):
        logger.debug(
            "Using uploaded standard-JSON input (%d sources)",
            len(encoding.document.sources),
        )
        return encoding.document

    if isinstance(encoding, MultiFile):
        files = encoding.files
    else:
        files = {encoding.name: encoding.content}

    settings = CompilerSettings(
        optimizer=_optimizer_settings(record),
        evm_version=normalize_evm_version(record.evm_version),
        output_selection=default_output_selection(),
        libraries=_library_settings(record.library, files),
    )

    try:
        document = CanonicalSourceDocument.from_files(files, settings)
    except ValueError as exc:
        kind = "multi-file upload" if isinstance(encoding, MultiFile) else "single-file upload"
        raise MalformedStandardInput(f"Invalid source path in {kind}: {exc}") from exc

    logger.debug(
        "Normalized %s source into %d file(s)",
        type(encoding).__name__,
        len(document.sources),
    )
    return document


def normalize_evm_version(value: str) -> EvmVersion | None:
    """Map the explorer's EVM target onto :class:`EvmVersion`.

    ``"default"`` in any casing (and an empty field) means the toolchain
    picks; anything else must name a target exactly.
    """
    if not value or value.lower() == DEFAULT_EVM_SENTINEL:
        return None
    try:
        return EvmVersion(value)
    except ValueError as exc:
        raise UnknownEvmVersion(f"Unknown EVM version: {value!r}") from exc


# ── Helpers ──────────────────────────────────────────────────────────────────


def _parse_standard_input(text: str) -> CanonicalSourceDocument:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedStandardInput(f"Standard JSON input is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedStandardInput("Standard JSON input must be a JSON object")
    return _validate_standard_input(data)


def _validate_standard_input(data: dict[str, Any]) -> CanonicalSourceDocument:
    missing = [key for key in _REQUIRED_INPUT_KEYS if key not in data]
    if missing:
        raise MalformedStandardInput(
            f"Standard JSON input is missing: {', '.join(missing)}"
        )
    try:
        return CanonicalSourceDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedStandardInput(f"Invalid standard JSON input: {exc}") from exc


def _load_json_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _flat_files(data: dict[str, Any]) -> dict[str, str]:
    """Return ``{name: content}`` when every value is ``{"content": str}``."""
    files: dict[str, str] = {}
    for name, entry in data.items():
        if not isinstance(entry, dict) or not isinstance(entry.get("content"), str):
            return {}
        files[name] = entry["content"]
    return files


def _optimizer_settings(record: RawMetadataRecord) -> OptimizerSettings:
    runs = record.runs.strip()
    return OptimizerSettings(
        enabled=record.optimization_used.strip() == "1",
        runs=int(runs) if runs.isdigit() else DEFAULT_OPTIMIZER_RUNS,
    )


def _library_settings(raw: str, files: dict[str, str]) -> dict[str, dict[str, str]] | None:
    """Link ``Name:0xaddr`` entries from the explorer against every file."""
    libraries: dict[str, str] = {}
    for entry in re.split(r"[;,]", raw):
        name, sep, address = entry.partition(":")
        name, address = name.strip(), address.strip()
        if not sep or not name or not address:
            continue
        if not address.startswith("0x"):
            address = f"0x{address}"
        libraries[name] = address

    if not libraries:
        return None
    return {path: dict(libraries) for path in files}
