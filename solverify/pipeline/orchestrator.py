"""Verification orchestrator — reproduces the compilation of a deployed contract."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import contextmanager
from typing import Iterator

from solverify.core.config import Settings, get_settings
from solverify.core.errors import Stage
from solverify.ingestion.contract_fetcher import ContractFetcher
from solverify.ingestion.solidity_compiler import CompilationResult, SolcToolchain
from solverify.ingestion.source_normalizer import normalize
from solverify.ingestion.version_resolver import resolve

logger = logging.getLogger(__name__)


class VerificationOrchestrator:
    """Coordinates the verification pipeline.

    Flow:
    1. FETCH — Pull source metadata from the block explorer
    2. RESOLVE — Turn the compiler version string into an exact solc release
    3. NORMALIZE — Build a standard-JSON input from the uploaded sources
    4. ACQUIRE — Find or install that solc release
    5. COMPILE — Run solc and return its output

    The first failure ends the attempt; nothing is retried here.
    """

    def __init__(
        self,
        chain: str | None = None,
        settings: Settings | None = None,
        fetcher: ContractFetcher | None = None,
        toolchain: SolcToolchain | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._fetcher = fetcher or ContractFetcher(chain=chain, settings=self._settings)
        self._toolchain = toolchain or SolcToolchain(settings=self._settings)

    async def verify(self, address: str) -> CompilationResult:
        """Fetch, normalize and recompile the contract at ``address``."""
        with self._stage(Stage.FETCH, address):
            record = await self._fetcher.fetch(address)

        with self._stage(Stage.RESOLVE, address):
            version = resolve(record.compiler_version)

        with self._stage(Stage.NORMALIZE, address):
            document = normalize(record)

        # solc install and execution block on disk and subprocess I/O
        with self._stage(Stage.ACQUIRE, address):
            handle = await asyncio.to_thread(self._toolchain.acquire, version)

        with self._stage(Stage.COMPILE, address):
            result = await asyncio.to_thread(self._toolchain.compile, handle, document)

        logger.info(
            "Recompiled %s with solc %s: %d contract(s) across %d source(s)",
            record.contract_name,
            version,
            len(result.contracts),
            len(document.sources),
            extra={"address": address, "solc_version": str(version)},
        )
        return result

    async def close(self) -> None:
        await self._fetcher.close()

    async def __aenter__(self) -> VerificationOrchestrator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @contextmanager
    def _stage(self, stage: Stage, address: str) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        except Exception as exc:
            duration_ms = round((time.monotonic() - start) * 1000, 1)
            logger.warning(
                "%s failed after %.1fms: %s",
                stage.value,
                duration_ms,
                exc,
                extra={"address": address, "stage": stage.value, "duration_ms": duration_ms},
            )
            raise
        duration_ms = round((time.monotonic() - start) * 1000, 1)
        logger.debug(
            "%s done in %.1fms",
            stage.value,
            duration_ms,
            extra={"address": address, "stage": stage.value, "duration_ms": duration_ms},
        )
