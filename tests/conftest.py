from pathlib import Path

import pytest

from src.pickpath.config import settings
from src.pickpath.data.inventory_repository import clear_caches

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@pytest.fixture(autouse=True)
def shipped_layout(monkeypatch):
    """Point the repository at the demo layout and drop cached CSV reads around each test."""
    monkeypatch.setattr(settings, "data_root", DATA_DIR)
    monkeypatch.setattr(settings, "locations_file", DATA_DIR / "locations.csv")
    monkeypatch.setattr(settings, "items_file", DATA_DIR / "items.csv")
    monkeypatch.setattr(settings, "inventory_file", DATA_DIR / "inventory.csv")
    monkeypatch.setattr(settings, "unresolved_sku_policy", "drop")
    monkeypatch.setattr(settings, "two_opt_restarts", 0)
    clear_caches()
    yield
    clear_caches()
