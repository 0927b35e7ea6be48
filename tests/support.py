import unittest
from datetime import date

from fastapi.testclient import TestClient

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from store_sales import models  # noqa: F401
from store_sales.config import Settings
from store_sales.database.base import Base
from store_sales.database.engine import enable_sqlite_pragmas
from store_sales.database.session import get_db
from store_sales.main import app
from store_sales.models.sale import Sale
from store_sales.models.store import Store


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_pragmas(engine, memory=True)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False), engine


def login_settings(**overrides):
    values = {"DASHBOARD_USERNAME": "admin", "DASHBOARD_PASSWORD": "secret"}
    values.update(overrides)
    return Settings(**values)


def open_settings():
    return Settings(DASHBOARD_USERNAME=None, DASHBOARD_PASSWORD=None, DASHBOARD_PASSWORD_HASH=None)


def add_store(db, name="Central", location="Mumbai", **extra):
    store = Store(name=name, location=location, **extra)
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


def add_sale(db, store, item_name, month, quantity, price):
    sale = Sale(
        store_id=store.id,
        item_name=item_name,
        month=month if isinstance(month, date) else date.fromisoformat(month),
        quantity=quantity,
        price=price,
    )
    db.add(sale)
    db.commit()
    db.refresh(sale)
    return sale


def sale_dict(month, item_name, quantity, price, store_id=1):
    return {
        "month": month,
        "item_name": item_name,
        "quantity": quantity,
        "price": price,
        "store_id": store_id,
    }


SCENARIO_SALES = [
    sale_dict("2024-01-01", "A", 2, 10),
    sale_dict("2024-01-15", "A", 1, 10),
    sale_dict("2024-02-01", "B", 3, 5),
]


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.Session, self.engine = make_session_factory()
        self.db = self.Session()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.db.close()
        self.engine.dispose()
