"""Shared fixtures for the solverify test suite."""

from __future__ import annotations

import json
from typing import Any

import pytest

from solverify.core.config import Settings
from solverify.core.types import RawMetadataRecord

UNI_ADDRESS = "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984"


# ── Mock Solidity Source ─────────────────────────────────────────────────────


MOCK_UNI_SOURCE = """\
/**
 *Submitted for verification at Etherscan.io on 2020-09-16
*/

pragma solidity ^0.5.16;
pragma experimental ABIEncoderV2;

contract Uni {
    string public constant name = "Uniswap";
    string public constant symbol = "UNI";
    uint8 public constant decimals = 18;
    uint public totalSupply = 1_000_000_000e18;

    mapping (address => uint96) internal balances;

    function balanceOf(address account) external view returns (uint) {
        return balances[account];
    }
}
"""


MOCK_STANDARD_INPUT: dict[str, Any] = {
    "language": "Solidity",
    "sources": {
        "contracts/core/EntryPoint.sol": {
            "content": "pragma solidity ^0.8.12;\nimport \"../interfaces/IEntryPoint.sol\";\ncontract EntryPoint {}\n",
        },
        "contracts/interfaces/IEntryPoint.sol": {
            "content": "pragma solidity ^0.8.12;\ninterface IEntryPoint {}\n",
        },
    },
    "settings": {
        "optimizer": {"enabled": True, "runs": 1000000},
        "evmVersion": "london",
        "outputSelection": {"*": {"*": ["evm.bytecode", "abi"]}},
        "remappings": ["@openzeppelin/=lib/openzeppelin-contracts/"],
        "metadata": {"useLiteralContent": True},
    },
}


def make_record(**overrides: Any) -> RawMetadataRecord:
    """Build an explorer record in wire format, UNI-flavoured by default."""
    fields: dict[str, Any] = {
        "SourceCode": MOCK_UNI_SOURCE,
        "ABI": "[]",
        "ContractName": "Uni",
        "FileName": "",
        "CompilerVersion": "v0.5.16+commit.9c3226ce",
        "OptimizationUsed": "0",
        "Runs": "200",
        "ConstructorArguments": "",
        "EVMVersion": "Default",
        "Library": "",
        "LicenseType": "BSD-3-Clause",
        "Proxy": "0",
        "Implementation": "",
        "SwarmSource": "",
    }
    fields.update(overrides)
    return RawMetadataRecord.model_validate(fields)


def explorer_payload(
    results: list[dict[str, Any]] | str,
    status: str = "1",
    message: str = "OK",
) -> dict[str, Any]:
    return {"status": status, "message": message, "result": results}


@pytest.fixture
def settings() -> Settings:
    """Settings with a fake explorer key; never read from the real environment."""
    return Settings(
        _env_file=None,
        etherscan_api_key="test-key",
        explorer_api_url="https://explorer.test/v2/api",
        default_chain="ethereum",
    )


@pytest.fixture
def uni_record() -> RawMetadataRecord:
    return make_record(CompilerVersion="v0.7.6+commit.7338295f")


@pytest.fixture
def standard_input() -> dict[str, Any]:
    return json.loads(json.dumps(MOCK_STANDARD_INPUT))


@pytest.fixture
def wrapped_standard_input(standard_input: dict[str, Any]) -> str:
    """Standard JSON input in the explorer's ``{{...}}`` encoding."""
    return "{" + json.dumps(standard_input) + "}"


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def payload_factory():
    return explorer_payload
