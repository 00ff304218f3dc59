"""Solidity compiler integration: solc acquisition and standard-JSON compilation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import solcx
from solcx.exceptions import SolcError
from solcx.install import get_executable

from solverify.core.config import Settings, get_settings
from solverify.core.errors import CompilationFailure, ToolchainAcquisitionError
from solverify.core.types import CanonicalSourceDocument, ToolchainVersion

logger = logging.getLogger(__name__)

# One lock per (install dir, version), shared by every SolcToolchain in the
# process, so two verifications never install the same release at once.
_install_locks: dict[tuple[str, str], threading.Lock] = {}
_install_locks_guard = threading.Lock()


def _install_lock(binary_path: str, version: str) -> threading.Lock:
    with _install_locks_guard:
        return _install_locks.setdefault((binary_path, version), threading.Lock())


@dataclass(frozen=True)
class SolcHandle:
    """A locally installed solc binary."""

    version: ToolchainVersion
    executable: Path


@dataclass
class CompiledContract:
    """A single compiled contract."""

    name: str
    source: str
    abi: list[dict[str, Any]] = field(default_factory=list)
    bytecode: str = ""
    deployed_bytecode: str = ""
    method_identifiers: dict[str, str] = field(default_factory=dict)
    metadata: str = ""


@dataclass
class CompilationResult:
    """Result of compiling a standard-JSON input."""

    version: str
    output: dict[str, Any]
    contracts: dict[str, CompiledContract] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


class SolcToolchain:
    """Find or install solc releases and compile with them."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._binary_path = self.settings.solc_binary_path or None

    def acquire(self, version: ToolchainVersion) -> SolcHandle:
        """Return an installed solc for ``version``, installing it if absent.

        Raises:
            ToolchainAcquisitionError: If the release cannot be installed.
        """
        wanted = str(version)
        with _install_lock(self._binary_path or "", wanted):
            try:
                installed = {str(v) for v in solcx.get_installed_solc_versions(self._binary_path)}
                if wanted not in installed:
                    logger.info(
                        "Installing solc %s",
                        wanted,
                        extra={"stage": "acquire", "solc_version": wanted},
                    )
                    solcx.install_solc(
                        wanted,
                        show_progress=self.settings.solc_show_progress,
                        solcx_binary_path=self._binary_path,
                    )
                executable = get_executable(wanted, self._binary_path)
            except Exception as exc:
                raise ToolchainAcquisitionError(f"Could not install solc {wanted}: {exc}") from exc

        return SolcHandle(version=version, executable=Path(executable))

    def compile(self, handle: SolcHandle, document: CanonicalSourceDocument) -> CompilationResult:
        """Compile a standard-JSON document with an acquired solc.

        Raises:
            CompilationFailure: If solc reports errors or cannot be run.
        """
        try:
            output = solcx.compile_standard(
                document.to_input(),
                solc_binary=handle.executable,
            )
        except SolcError as exc:
            message = getattr(exc, "message", "") or str(exc)
            raise CompilationFailure(
                f"solc {handle.version} rejected the input",
                errors=[line for line in message.splitlines() if line.strip()],
            ) from exc
        except OSError as exc:
            raise CompilationFailure(f"Could not run solc {handle.version}: {exc}") from exc

        return self._parse_output(handle.version, output)

    def _parse_output(self, version: ToolchainVersion, output: dict[str, Any]) -> CompilationResult:
        """Pick contracts and warnings out of solc's standard-JSON output."""
        warnings: list[str] = []
        contracts: dict[str, CompiledContract] = {}

        for error in output.get("errors", []):
            if error.get("severity") != "error":
                warnings.append(error.get("formattedMessage", error.get("message", "")))

        for source_name, file_contracts in output.get("contracts", {}).items():
            for contract_name, contract_data in file_contracts.items():
                evm = contract_data.get("evm", {})
                contracts[f"{source_name}:{contract_name}"] = CompiledContract(
                    name=contract_name,
                    source=source_name,
                    abi=contract_data.get("abi", []),
                    bytecode=evm.get("bytecode", {}).get("object", ""),
                    deployed_bytecode=evm.get("deployedBytecode", {}).get("object", ""),
                    method_identifiers=evm.get("methodIdentifiers", {}),
                    metadata=contract_data.get("metadata", ""),
                )

        return CompilationResult(
            version=str(version),
            output=output,
            contracts=contracts,
            warnings=warnings,
        )
