"""Tests for the JSON snapshot store."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from settleme.errors import NotFoundError, StoreError
from settleme.stores import InMemoryStore, load_snapshot, parse_snapshot


def test_load_snapshot_reads_users_and_groups(data_file):
    store = load_snapshot(data_file)
    beta = store.users.get("usr_beta")
    assert beta.display_name == "Beta Ruiz"
    assert len(beta.times) == 2
    assert beta.times[1].clock_out is None
    assert store.groups.get("grp_ventas").members == ("usr_beta", "usr_ghost", "usr_alpha")


def test_receipt_amounts_are_decimals_or_absent(store):
    receipts = store.users.get("usr_beta").receipts
    assert receipts[0].amount is None
    assert receipts[1].amount == Decimal("5")


def test_non_numeric_amount_is_absent(sample_data):
    sample_data["users"][0]["receipts"][0]["amount"] = "n/a"
    store = parse_snapshot(sample_data)
    assert store.users.get("usr_beta").receipts[0].amount is None


def test_missing_note_defaults_to_empty(sample_data):
    del sample_data["users"][0]["receipts"][0]["note"]
    store = parse_snapshot(sample_data)
    assert store.users.get("usr_beta").receipts[0].note == ""


def test_unknown_ids_raise_not_found(store):
    with pytest.raises(NotFoundError):
        store.users.get("usr_nobody")
    with pytest.raises(LookupError):
        store.groups.get("grp_nobody")


def test_missing_file_gives_empty_snapshot(tmp_path):
    store = load_snapshot(tmp_path / "absent.json")
    assert len(store.users) == 0
    with pytest.raises(NotFoundError):
        store.users.get("usr_beta")


def test_invalid_json_raises_store_error(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        load_snapshot(path)


def test_non_object_document_raises_store_error(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(StoreError):
        load_snapshot(path)


def test_time_entry_without_clock_in_is_rejected(sample_data):
    del sample_data["users"][0]["times"][0]["clockIn"]
    store = parse_snapshot(sample_data)
    with pytest.raises(StoreError, match="usr_beta"):
        store.users.get("usr_beta")


def test_malformed_record_does_not_affect_other_users(sample_data):
    sample_data["users"][0]["receipts"][1]["date"] = "not a date"
    store = parse_snapshot(sample_data)
    assert store.users.get("usr_alpha").display_name == "alpha Díaz"
    assert store.groups.get("grp_ventas").name == "Ventas"
    with pytest.raises(StoreError):
        store.users.get("usr_beta")


def test_records_are_decoded_once(store):
    assert store.users.get("usr_beta") is store.users.get("usr_beta")


def test_records_without_id_are_skipped(sample_data):
    sample_data["users"].append({"firstName": "Sin", "lastName": "Id"})
    sample_data["groups"].append("grp_text")
    store = parse_snapshot(sample_data)
    assert len(store.users) == 2
    assert len(store.groups) == 2
    assert "usr_alpha" in store.users


def test_non_list_collection_raises_store_error(sample_data):
    sample_data["users"] = {"usr_beta": {}}
    with pytest.raises(StoreError):
        parse_snapshot(sample_data)


def test_in_memory_store_defaults_empty():
    store = InMemoryStore()
    assert len(store.users) == 0 and len(store.groups) == 0
