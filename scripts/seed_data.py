import argparse
import logging
from datetime import date

from sqlalchemy import delete, select

from store_sales import models  # noqa: F401
from store_sales.core.logging import setup_logging
from store_sales.database import Base, engine, session_scope
from store_sales.models.sale import Sale
from store_sales.models.store import Store

logger = logging.getLogger(__name__)

DEMO_STORES = (
    {"name": "Central Market", "location": "Mumbai", "manager": "A. Rao", "email": "central@example.com"},
    {"name": "Lakeside", "location": "Pune", "phone": "+91 20 5550 0101"},
)

DEMO_SALES = (
    # (store index, item, month, quantity, unit price)
    (0, "Basmati Rice 5kg", date(2024, 1, 1), 40, 650.0),
    (0, "Sunflower Oil 1L", date(2024, 1, 1), 55, 180.0),
    (0, "Basmati Rice 5kg", date(2024, 2, 1), 35, 660.0),
    (1, "Sunflower Oil 1L", date(2024, 1, 1), 20, 175.0),
    (1, "Tea 500g", date(2024, 2, 1), 30, 240.0),
    (1, "Tea 500g", date(2024, 3, 1), 28, 245.0),
)


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample stores and sales.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        if args.reset:
            db.execute(delete(Sale))
            db.execute(delete(Store))

        has_store = db.execute(select(Store.id).limit(1)).first()
        if has_store:
            logger.info("Seed skipped: stores already exist.")
            return

        stores = [Store(**values) for values in DEMO_STORES]
        db.add_all(stores)
        db.flush()

        db.add_all(
            Sale(
                store_id=stores[index].id,
                item_name=item,
                month=month,
                quantity=quantity,
                price=price,
            )
            for index, item, month, quantity, price in DEMO_SALES
        )
        logger.info("Seed data created: %d stores, %d sales.", len(stores), len(DEMO_SALES))


if __name__ == "__main__":
    main()
