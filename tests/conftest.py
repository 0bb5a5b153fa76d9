"""
Shared fixtures
"""
import pytest

import app as hotel_app
from catalog import HotelCatalog
from models import RegularBilling, RoomCategory


@pytest.fixture
def catalog():
    """Empty catalog"""
    return HotelCatalog()


@pytest.fixture
def single_room(catalog):
    """Room 101: Single, 75 per night, Regular billing"""
    return catalog.add_room(101, RoomCategory.SINGLE, 75, RegularBilling(), 1)


@pytest.fixture
def client(monkeypatch):
    """Test client over a fresh catalog"""
    monkeypatch.setattr(hotel_app, "catalog", HotelCatalog())
    hotel_app.app.config["TESTING"] = True
    with hotel_app.app.test_client() as test_client:
        yield test_client
