"""Pytest configuration and shared record fixtures.

Tests import from the flat `src.*` namespace without installing the package, so the repository
root is put on `sys.path` here.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def mock_transactions() -> list[dict[str, Any]]:
    return [
        {
            "id": "1",
            "amount": -45.67,
            "date": "2024-01-15",
            "merchant": {"name": "Amazon"},
            "category": {"name": "Shopping"},
            "account": {"displayName": "Chase Checking", "mask": "1234"},
        },
        {
            "id": "2",
            "amount": -12.34,
            "date": "2024-01-14",
            "merchant": {"name": "Starbucks"},
            "category": {"name": "Dining"},
            "account": {"displayName": "Chase Checking", "mask": "1234"},
        },
    ]


@pytest.fixture
def mock_accounts() -> list[dict[str, Any]]:
    return [
        {
            "id": "1",
            "displayName": "Chase Checking",
            "currentBalance": 5234.56,
            "type": {"name": "checking", "display": "Checking"},
            "institution": {"name": "Chase"},
            "isHidden": False,
            "updatedAt": "2024-01-01T12:00:00Z",
        },
        {
            "id": "2",
            "displayName": "Savings Account",
            "currentBalance": 15678.90,
            "type": {"name": "savings", "display": "Savings"},
            "institution": {"name": "Wells Fargo"},
            "isHidden": False,
            "updatedAt": "2024-01-01T12:00:00Z",
        },
    ]
