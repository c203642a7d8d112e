"""Shared pytest fixtures for the SettleMe export test suite."""

from __future__ import annotations

import copy
import json
import os

import pytest
from fastapi.testclient import TestClient

# ── Environment setup (must happen BEFORE importing server) ──────────────────
os.environ["SETTLEME_TIMEZONE"] = "UTC"
os.environ["SETTLEME_LOG_LEVEL"] = "DEBUG"


_SAMPLE_DATA = {
    "users": [
        {
            "id": "usr_beta",
            "firstName": "Beta",
            "middleName": "",
            "lastName": "Ruiz",
            "email": "beta@example.com",
            "role": "employee",
            # Stored out of chronological order on purpose
            "times": [
                {"clockIn": "2024-03-10T09:00:00.000Z", "clockOut": "2024-03-10T17:30:00.000Z"},
                {"clockIn": "2024-03-08T09:00:00.000Z", "clockOut": None},
            ],
            "receipts": [
                {
                    "id": "rcp_taxi",
                    "date": "2024-03-05T09:30:00.000Z",
                    "category": "Taxi",
                    "imageData": "data:image/png;base64,AAAA",
                    "note": "",
                    "amount": None,
                },
                {
                    "id": "rcp_hotel",
                    "date": "2024-03-01T18:00:00.000Z",
                    "category": "Hotel, centro",
                    "imageData": "data:image/png;base64,AAAA",
                    "note": 'Noche "extra"',
                    "amount": 5,
                },
            ],
            "schedules": [],
        },
        {
            "id": "usr_alpha",
            "firstName": "alpha",
            "lastName": "Díaz",
            "times": [
                {"clockIn": "2024-03-07T08:00:00.000Z", "clockOut": "2024-03-07T12:15:00.000Z"},
            ],
            "receipts": [
                {
                    "id": "rcp_lunch",
                    "date": "2024-03-02T10:00:00.000Z",
                    "category": "Comida",
                    "note": "Almuerzo\ncon cliente",
                    "amount": 12.5,
                },
            ],
        },
    ],
    "groups": [
        {"id": "grp_ventas", "name": "Ventas", "members": ["usr_beta", "usr_ghost", "usr_alpha"]},
        {"id": "grp_vacio", "name": "Vacío", "members": ["usr_ghost"]},
    ],
}


@pytest.fixture
def sample_data() -> dict:
    """Raw data-file content as written by the user/group endpoints."""
    return copy.deepcopy(_SAMPLE_DATA)


@pytest.fixture
def store(sample_data):
    from settleme.stores import parse_snapshot

    return parse_snapshot(sample_data)


@pytest.fixture
def data_file(tmp_path, sample_data, monkeypatch):
    """Write the sample data file and point SETTLEME_DATA_FILE at it."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_data, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setenv("SETTLEME_DATA_FILE", str(path))
    return path


@pytest.fixture
def client(data_file):
    """A TestClient for the FastAPI app backed by the sample data file."""
    from settleme.server import app

    return TestClient(app, raise_server_exceptions=True)
