"""Supported EVM chain configurations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainConfig:
    """A chain reachable through the explorer's ``chainid`` parameter."""

    chain_id: int
    name: str


# ── Chain Registry ───────────────────────────────────────────────────────────

CHAINS: dict[str, ChainConfig] = {
    "ethereum": ChainConfig(chain_id=1, name="Ethereum Mainnet"),
    "polygon": ChainConfig(chain_id=137, name="Polygon Mainnet"),
    "bsc": ChainConfig(chain_id=56, name="BNB Smart Chain"),
    "arbitrum": ChainConfig(chain_id=42161, name="Arbitrum One"),
    "optimism": ChainConfig(chain_id=10, name="Optimism"),
    "base": ChainConfig(chain_id=8453, name="Base"),
    "sepolia": ChainConfig(chain_id=11155111, name="Sepolia Testnet"),
}


def get_chain_config(chain_name: str) -> ChainConfig | None:
    """Get chain configuration by name."""
    return CHAINS.get(chain_name.lower())
