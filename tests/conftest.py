"""Pytest configuration and fixtures for the gas-track tests."""

import json
import os
from pathlib import Path

import pytest

from gas_track.models import Snapshot


@pytest.fixture
def baseline_snapshot() -> Snapshot:
    """Baseline from a previous run of the Token test suite."""
    return Snapshot.model_validate(
        {
            "Token:transfer": {"gas": 150000, "calls": 10},
            "Token:deploy": {"gas": 2500000, "calls": 1},
        }
    )


@pytest.fixture
def current_snapshot() -> Snapshot:
    """Current run: transfer got slightly more expensive, deploy unchanged."""
    return Snapshot.model_validate(
        {
            "Token:transfer": {"gas": 155000, "calls": 10},
            "Token:deploy": {"gas": 2500000, "calls": 1},
        }
    )


@pytest.fixture
def gas_reporter_report() -> dict:
    """Gas reporter JSON output (outputJSON: true) for a small auction suite."""
    return {
        "namespace": "HardhatGasReporter",
        "toolchain": "hardhat",
        "data": {
            "methods": {
                "EnglishAuction_bid()": {
                    "contract": "EnglishAuction",
                    "method": "bid",
                    "fnSig": "bid()",
                    "gasData": [52000, 48000, 50000],
                    "numberOfCalls": 3,
                },
                "EnglishAuction_withdraw()": {
                    "contract": "EnglishAuction",
                    "method": "withdraw",
                    "fnSig": "withdraw()",
                    "gasData": [],
                    "numberOfCalls": 0,
                },
                "DutchAuction_buy()": {
                    "contract": "DutchAuction",
                    "method": "buy",
                    "fnSig": "buy()",
                    "gasData": [61000, 63000],
                },
            },
            "deployments": [
                {"name": "EnglishAuction", "bytecode": "0x", "gasData": [1200000]},
                {"name": "AuctionFactory", "bytecode": "0x", "gasData": []},
            ],
        },
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under tmp_path and return its path."""

    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload))
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep GAS_TRACK_* variables from the outer environment out of the tests."""
    for name in list(os.environ):
        if name.startswith("GAS_TRACK_"):
            monkeypatch.delenv(name)
