import os
import sys
from datetime import date

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from app import create_app
from configs import db
from db.models.material import RawMaterial
from db.models.process import Process, ProcessType
from db.models.stock_purchase import StockPurchase

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "LOGIN_DISABLED": True,
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_material(app):
    def _make(name, category="Main ingredient", unit="kg", min_stock=0, current_stock=0):
        m = RawMaterial(
            name=name,
            category=category,
            unit=unit,
            min_stock=min_stock,
            current_stock=current_stock,
        )
        db.session.add(m)
        db.session.commit()
        return m.id

    return _make


@pytest.fixture
def make_process(app):
    def _make(name, ptype=ProcessType.PRODUCTION):
        p = Process(name=name, type=ptype)
        db.session.add(p)
        db.session.commit()
        return p.id

    return _make


@pytest.fixture
def add_purchase(app):
    def _add(material_id, quantity, on, vendor="Binh An Flour Co."):
        if isinstance(on, str):
            on = date.fromisoformat(on)
        db.session.add(
            StockPurchase(
                vendor=vendor, raw_material_id=material_id, quantity=quantity, date=on
            )
        )
        db.session.commit()

    return _add
