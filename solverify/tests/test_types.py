"""Tests for solverify.core.types — explorer records and compiler input schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from solverify.core.types import (
    CanonicalSourceDocument,
    CompilerSettings,
    EvmVersion,
    RawMetadataRecord,
    SourceFile,
)


class TestRawMetadataRecord:
    def test_wire_aliases(self):
        record = RawMetadataRecord.model_validate(
            {
                "SourceCode": "contract A {}",
                "ContractName": "A",
                "CompilerVersion": "v0.8.19+commit.7dd6d404",
                "EVMVersion": "Default",
                "FileName": "A.sol",
            }
        )
        assert record.source_code == "contract A {}"
        assert record.contract_name == "A"
        assert record.compiler_version == "v0.8.19+commit.7dd6d404"
        assert record.evm_version == "Default"
        assert record.file_name == "A.sol"

    def test_python_names_accepted(self):
        record = RawMetadataRecord(source_code="x", contract_name="X")
        assert record.source_code == "x"

    def test_defaults(self):
        record = RawMetadataRecord()
        assert record.source_code == ""
        assert record.file_name is None

    def test_abi_passed_through(self):
        abi = '[{"type":"constructor","inputs":[]}]'
        assert RawMetadataRecord(ABI=abi).abi == abi


class TestCanonicalSourceDocument:
    def test_sources_sorted(self):
        doc = CanonicalSourceDocument(
            sources={"z.sol": SourceFile(content="z"), "a.sol": SourceFile(content="a")}
        )
        assert list(doc.sources) == ["a.sol", "z.sol"]

    def test_empty_sources_rejected(self):
        with pytest.raises(ValidationError):
            CanonicalSourceDocument(sources={})

    def test_uploaded_keys_kept_as_given(self):
        doc = CanonicalSourceDocument.model_validate(
            {
                "language": "Solidity",
                "sources": {"/home/dev/contracts/A.sol": {"content": "contract A {}"}},
                "settings": {},
            }
        )
        assert list(doc.sources) == ["/home/dev/contracts/A.sol"]


class TestFromFiles:
    def test_builds_sorted_document(self):
        doc = CanonicalSourceDocument.from_files({"z.sol": "z", "a/A.sol": "a"})
        assert list(doc.sources) == ["a/A.sol", "z.sol"]
        assert doc.sources["a/A.sol"].content == "a"
        assert doc.language == "Solidity"

    def test_settings_applied(self):
        doc = CanonicalSourceDocument.from_files(
            {"A.sol": "x"}, CompilerSettings(evm_version=EvmVersion.PARIS)
        )
        assert doc.settings.evm_version == EvmVersion.PARIS

    @pytest.mark.parametrize(
        "path",
        [" ", "/etc/A.sol", "../escape/A.sol", "contracts/../../A.sol", ".."],
    )
    def test_unsafe_paths_rejected(self, path):
        with pytest.raises(ValueError):
            CanonicalSourceDocument.from_files({path: "contract A {}"})

    def test_dots_inside_names_allowed(self):
        doc = CanonicalSourceDocument.from_files({"lib/a..b/A.sol": "x", "./B.sol": "y"})
        assert set(doc.sources) == {"lib/a..b/A.sol", "./B.sol"}

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            CanonicalSourceDocument.from_files({})

    def test_to_input_uses_solc_names(self):
        doc = CanonicalSourceDocument(
            sources={"A.sol": SourceFile(content="contract A {}")},
            settings=CompilerSettings(evm_version=EvmVersion.SHANGHAI),
        )
        rendered = doc.to_input()
        assert rendered["language"] == "Solidity"
        assert rendered["sources"] == {"A.sol": {"content": "contract A {}"}}
        assert rendered["settings"]["evmVersion"] == "shanghai"
        assert "outputSelection" in rendered["settings"]
        assert rendered["settings"]["optimizer"] == {"enabled": False, "runs": 200}

    def test_to_input_omits_default_evm_version(self):
        doc = CanonicalSourceDocument(sources={"A.sol": SourceFile(content="x")})
        assert "evmVersion" not in doc.to_input()["settings"]

    def test_unknown_settings_kept(self):
        settings = CompilerSettings.model_validate({"viaIR": True, "remappings": ["a=b"]})
        doc = CanonicalSourceDocument(sources={"A.sol": SourceFile(content="x")}, settings=settings)
        rendered = doc.to_input()["settings"]
        assert rendered["viaIR"] is True
        assert rendered["remappings"] == ["a=b"]


def test_evm_versions_match_solc_spelling():
    assert EvmVersion("tangerineWhistle") is EvmVersion.TANGERINE_WHISTLE
    assert EvmVersion.CANCUN.value == "cancun"
    with pytest.raises(ValueError):
        EvmVersion("Cancun")
