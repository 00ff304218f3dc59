"""Fetch verified smart contract source metadata from block explorers."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from solverify.core.chains import ChainConfig, get_chain_config
from solverify.core.config import Settings, get_settings
from solverify.core.errors import NotFound, ProviderError, TransportError
from solverify.core.types import RawMetadataRecord

logger = logging.getLogger(__name__)

# Explorer messages that mean "nothing here" rather than "request failed"
_NOT_FOUND_MESSAGES = ("no data found", "no records found", "contract source code not verified")


class ExplorerResponse(BaseModel):
    """Etherscan-style ``{status, message, result}`` envelope."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    status: str
    message: str = ""
    result: list[RawMetadataRecord] | str


class ContractFetcher:
    """Fetch verified contract metadata from an Etherscan-compatible API."""

    def __init__(
        self,
        chain: str | None = None,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        chain_name = chain or self.settings.default_chain
        chain_config = get_chain_config(chain_name)
        if not chain_config:
            raise ValueError(f"Unsupported chain: {chain_name}")
        self.chain: ChainConfig = chain_config
        self._client = client or httpx.AsyncClient(timeout=self.settings.http_timeout_seconds)

    async def fetch(self, address: str) -> RawMetadataRecord:
        """Fetch the source metadata record for a contract.

        Args:
            address: Contract address (0x...). Passed through unvalidated.

        Returns:
            The first record the explorer returned.

        Raises:
            TransportError: The request failed or the body is not a valid envelope.
            NotFound: The explorer has no verified source for ``address``.
            ProviderError: The explorer reported a failure.
        """
        params: dict[str, Any] = {
            "chainid": self.chain.chain_id,
            "module": "contract",
            "action": "getsourcecode",
            "address": address,
        }
        if self.settings.etherscan_api_key:
            params["apikey"] = self.settings.etherscan_api_key

        logger.debug(
            "GET %s for %s on %s",
            self.settings.explorer_api_url,
            address,
            self.chain.name,
            extra={"address": address, "stage": "fetch"},
        )

        try:
            response = await self._client.get(self.settings.explorer_api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise TransportError(f"Explorer request failed for {address}: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"Explorer returned a non-JSON body for {address}") from exc

        try:
            envelope = ExplorerResponse.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(f"Unexpected explorer response shape for {address}: {exc}") from exc

        record = self._first_record(envelope, address)
        logger.info(
            "Fetched %s (%s) from %s",
            record.contract_name or "<unnamed>",
            record.compiler_version,
            self.chain.name,
            extra={"address": address, "stage": "fetch"},
        )
        return record

    def _first_record(self, envelope: ExplorerResponse, address: str) -> RawMetadataRecord:
        if isinstance(envelope.result, str):
            if envelope.status != "1" and _is_not_found(envelope.message, envelope.result):
                raise NotFound(f"No verified source for {address} on {self.chain.name}")
            raise ProviderError(
                f"Explorer error for {address}: {envelope.message or 'NOTOK'} ({envelope.result})"
            )

        if not envelope.result:
            raise NotFound(f"No verified source for {address} on {self.chain.name}")

        if envelope.status != "1":
            raise ProviderError(f"Explorer error for {address}: {envelope.message or 'NOTOK'}")

        record = envelope.result[0]
        if not record.source_code:
            raise NotFound(f"Contract at {address} on {self.chain.name} is not verified")
        return record

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> ContractFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _is_not_found(*messages: str) -> bool:
    text = " ".join(messages).lower()
    return any(marker in text for marker in _NOT_FOUND_MESSAGES)
