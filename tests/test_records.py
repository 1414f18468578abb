"""Tests for the deployment record and card catalog files."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from carddraw.errors import RecordError, UnknownCardError, UnknownRarityError
from carddraw.records.catalog import CardMetadata, load_catalog
from carddraw.records.deployment import DeploymentRecord, load_deployment, write_deployment
from carddraw.records.schemas import SchemaValidationError

from conftest import CARD_ABI, CONTRACT_ADDRESS


class TestDeploymentRecord:
    def test_round_trip_with_array_abi(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        write_deployment(path, DeploymentRecord(address=CONTRACT_ADDRESS, abi=CARD_ABI))

        record = load_deployment(path)
        assert record.address == CONTRACT_ADDRESS
        assert record.abi == CARD_ABI

    def test_string_encoded_abi_is_normalized(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        path.write_text(
            json.dumps({"address": CONTRACT_ADDRESS, "abi": json.dumps(CARD_ABI)}),
            encoding="utf-8",
        )

        record = load_deployment(path)
        assert isinstance(record.abi, list)
        assert record.abi == CARD_ABI

    def test_optional_fields_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        original = DeploymentRecord(
            address=CONTRACT_ADDRESS,
            abi=CARD_ABI,
            network="sepolia",
            chain_id=11155111,
            transaction_hash="0x" + "12" * 32,
        )
        write_deployment(path, original)

        assert load_deployment(path) == original
        stored = json.loads(path.read_text(encoding="utf-8"))
        assert stored["chainId"] == 11155111
        assert stored["transactionHash"] == "0x" + "12" * 32

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RecordError, match="not found"):
            load_deployment(tmp_path / "deployment.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RecordError, match="not valid JSON"):
            load_deployment(path)

    @pytest.mark.parametrize(
        "payload",
        [
            {"abi": []},
            {"address": CONTRACT_ADDRESS},
            {"address": "YOUR_CONTRACT_ADDRESS_HERE", "abi": []},
            {"address": CONTRACT_ADDRESS, "abi": 42},
            [],
        ],
    )
    def test_schema_violations(self, tmp_path: Path, payload) -> None:
        path = tmp_path / "deployment.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(SchemaValidationError):
            load_deployment(path)

    def test_abi_string_that_is_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        path.write_text(
            json.dumps({"address": CONTRACT_ADDRESS, "abi": '{"type": "function"}'}),
            encoding="utf-8",
        )
        with pytest.raises(RecordError, match="JSON array"):
            load_deployment(path)

    def test_failed_write_keeps_previous_record(self, tmp_path: Path) -> None:
        path = tmp_path / "deployment.json"
        write_deployment(path, DeploymentRecord(address=CONTRACT_ADDRESS, abi=CARD_ABI))
        before = path.read_text(encoding="utf-8")

        replacement = DeploymentRecord(address="0x" + "11" * 20, abi=CARD_ABI)
        with patch("carddraw.records.schemas.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                write_deployment(path, replacement)

        assert path.read_text(encoding="utf-8") == before
        assert not (tmp_path / "deployment.json.tmp").exists()


class TestCardCatalog:
    def test_metadata_for_known_card(self, catalog_path: Path) -> None:
        catalog = load_catalog(catalog_path)
        assert catalog.metadata(1) == CardMetadata(
            id=1,
            name="Ember Drake",
            description="A young drake wreathed in flame.",
            image_uri="ipfs://bafy/1.png",
            rarity_code=4,
        )

    def test_ssr_maps_to_five(self, catalog_path: Path) -> None:
        assert load_catalog(catalog_path).metadata(3).rarity_code == 5

    def test_unknown_card(self, catalog_path: Path) -> None:
        catalog = load_catalog(catalog_path)
        assert 99 not in catalog
        with pytest.raises(UnknownCardError):
            catalog.metadata(99)

    def test_unmapped_rarity(self, catalog_path: Path) -> None:
        with pytest.raises(UnknownRarityError, match="LEGENDARY"):
            load_catalog(catalog_path).metadata(7)

    def test_missing_rarity_attribute(self, catalog_path: Path) -> None:
        with pytest.raises(UnknownRarityError, match="No Rarity attribute"):
            load_catalog(catalog_path).metadata(8)

    def test_bad_entries_do_not_block_good_ones(self, catalog_path: Path) -> None:
        catalog = load_catalog(catalog_path)
        assert len(catalog) == 5
        assert catalog.metadata(2).rarity_code == 1

    def test_duplicate_ids_rejected(self, tmp_path: Path) -> None:
        card = {"id": 1, "name": "a", "description": "b", "image": "c", "attributes": []}
        path = tmp_path / "cards.json"
        path.write_text(json.dumps({"cards": [card, card]}), encoding="utf-8")
        with pytest.raises(RecordError, match="Duplicate card id 1"):
            load_catalog(path)

    def test_missing_fields_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps({"cards": [{"id": 1, "name": "a"}]}), encoding="utf-8")
        with pytest.raises(SchemaValidationError) as exc_info:
            load_catalog(path)
        assert any("description" in err for err in exc_info.value.errors)

    def test_missing_catalog_file(self, tmp_path: Path) -> None:
        with pytest.raises(RecordError, match="Card catalog not found"):
            load_catalog(tmp_path / "cards.json")
