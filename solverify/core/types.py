"""Shared enums and types used across the pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SOLIDITY_LANGUAGE = "Solidity"


# ── Enums ────────────────────────────────────────────────────────────────────


class EvmVersion(str, enum.Enum):
    """EVM instruction-set revisions, spelled exactly as solc expects them."""

    HOMESTEAD = "homestead"
    TANGERINE_WHISTLE = "tangerineWhistle"
    SPURIOUS_DRAGON = "spuriousDragon"
    BYZANTIUM = "byzantium"
    CONSTANTINOPLE = "constantinople"
    PETERSBURG = "petersburg"
    ISTANBUL = "istanbul"
    BERLIN = "berlin"
    LONDON = "london"
    PARIS = "paris"
    SHANGHAI = "shanghai"
    CANCUN = "cancun"
    PRAGUE = "prague"
    OSAKA = "osaka"


# ── Explorer record ──────────────────────────────────────────────────────────


class RawMetadataRecord(BaseModel):
    """One entry of an explorer ``getsourcecode`` result.

    Everything is an untrusted string exactly as the explorer returned it.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    source_code: str = Field(default="", alias="SourceCode")
    abi: str = Field(default="", alias="ABI")
    contract_name: str = Field(default="", alias="ContractName")
    file_name: str | None = Field(default=None, alias="FileName")
    compiler_version: str = Field(default="", alias="CompilerVersion")
    optimization_used: str = Field(default="", alias="OptimizationUsed")
    runs: str = Field(default="", alias="Runs")
    constructor_arguments: str = Field(default="", alias="ConstructorArguments")
    evm_version: str = Field(default="", alias="EVMVersion")
    library: str = Field(default="", alias="Library")
    license_type: str = Field(default="", alias="LicenseType")
    proxy: str = Field(default="", alias="Proxy")
    implementation: str = Field(default="", alias="Implementation")
    swarm_source: str = Field(default="", alias="SwarmSource")


# ── Compiler input ───────────────────────────────────────────────────────────


def default_output_selection() -> dict[str, dict[str, list[str]]]:
    return {
        "*": {
            "*": [
                "abi",
                "evm.bytecode",
                "evm.deployedBytecode",
                "evm.methodIdentifiers",
                "metadata",
            ],
        }
    }


class OptimizerSettings(BaseModel):
    """solc ``settings.optimizer``."""

    model_config = ConfigDict(extra="allow")

    enabled: bool = False
    runs: int = 200


class CompilerSettings(BaseModel):
    """solc ``settings`` block.

    Keys this model does not name (``remappings``, ``metadata``, ``viaIR``...)
    are kept verbatim so an uploaded standard-JSON input round-trips intact.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    evm_version: EvmVersion | None = Field(default=None, alias="evmVersion")
    output_selection: dict[str, dict[str, list[str]]] = Field(
        default_factory=default_output_selection, alias="outputSelection"
    )
    libraries: dict[str, dict[str, str]] | None = None


class SourceFile(BaseModel):
    """A single entry of ``sources``."""

    model_config = ConfigDict(extra="allow")

    content: str


class CanonicalSourceDocument(BaseModel):
    """A well-formed solc standard-JSON input."""

    model_config = ConfigDict(populate_by_name=True)

    language: str = SOLIDITY_LANGUAGE
    sources: dict[str, SourceFile]
    settings: CompilerSettings = Field(default_factory=CompilerSettings)

    @field_validator("sources")
    @classmethod
    def _check_sources(cls, sources: dict[str, SourceFile]) -> dict[str, SourceFile]:
        if not sources:
            raise ValueError("sources must contain at least one file")
        # Deterministic ordering regardless of how the upload listed files
        return dict(sorted(sources.items()))

    @classmethod
    def from_files(
        cls,
        files: dict[str, str],
        settings: CompilerSettings | None = None,
    ) -> CanonicalSourceDocument:
        """Build a document from ``{path: content}``.

        Paths must be non-empty and relative, with no ``..`` segment.
        Uploaded standard-JSON inputs skip this and go through
        :meth:`model_validate` with their keys as given.

        Raises:
            ValueError: If a path is blank, absolute or escapes the source root.
        """
        for path in files:
            if not path.strip():
                raise ValueError("source paths must be non-empty")
            if path.startswith("/"):
                raise ValueError(f"source path must be relative: {path!r}")
            if ".." in PurePosixPath(path).parts:
                raise ValueError(f"source path must not contain '..': {path!r}")
        return cls(
            language=SOLIDITY_LANGUAGE,
            sources={path: SourceFile(content=content) for path, content in files.items()},
            settings=settings or CompilerSettings(),
        )

    def to_input(self) -> dict[str, Any]:
        """Render the document as the JSON object solc reads on stdin."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Toolchain ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, order=True)
class ToolchainVersion:
    """An exact solc release, ``major.minor.patch`` with no prefix or build tag."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
