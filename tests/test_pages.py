import unittest
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from store_sales.core.constants import MAX_ENTRY_ROWS
from store_sales.models.sale import Sale
from store_sales.models.store import Store
from store_sales.routers.stores import blank_entries, sales_recorded_message, zip_entries
from tests.support import ApiTestCase, add_sale, add_store, open_settings


class PageTestCase(ApiTestCase):
    def setUp(self):
        super().setUp()
        patcher = patch("store_sales.core.auth.get_settings", return_value=open_settings())
        patcher.start()
        self.addCleanup(patcher.stop)


class StorePagesTest(PageTestCase):
    def test_store_list_shows_stores(self):
        add_store(self.db, name="Lakeside", location="Pune")
        response = self.client.get("/stores")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Lakeside", response.text)

    def test_add_store_invalid_keeps_form(self):
        response = self.client.post("/stores/add", data={"name": "L", "location": "Pune", "email": "bad"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Store name must be at least 2 characters", response.text)
        self.assertEqual(self.db.query(Store).count(), 0)

    def test_add_store_redirects_with_flash(self):
        response = self.client.post(
            "/stores/add",
            data={"name": "Lakeside", "location": "Pune", "manager": "", "phone": "", "email": ""},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/stores")

        listing = self.client.get("/stores")
        self.assertIn("created successfully!", listing.text)
        self.assertNotIn("created successfully!", self.client.get("/stores").text)

    def test_store_detail(self):
        store = add_store(self.db, name="Lakeside", location="Pune")
        add_sale(self.db, store, "Tea", "2024-03-01", 2, 10)
        response = self.client.get("/stores/{}".format(store.id))
        self.assertEqual(response.status_code, 200)
        self.assertIn("March 2024", response.text)
        self.assertIn("Not specified", response.text)

    def test_missing_store_renders_not_found(self):
        response = self.client.get("/stores/999")
        self.assertEqual(response.status_code, 404)
        self.assertIn("Store not found", response.text)
        self.assertIn("Back to Stores", response.text)

    def test_store_list_backend_failure(self):
        with patch("store_sales.services.store_service.get_stores", side_effect=SQLAlchemyError("down")):
            response = self.client.get("/stores")
        self.assertEqual(response.status_code, 500)
        self.assertIn("Failed to load stores", response.text)


class SalesPagesTest(PageTestCase):
    def setUp(self):
        super().setUp()
        self.store = add_store(self.db, name="Lakeside", location="Pune")

    def test_add_page_offers_requested_rows(self):
        response = self.client.get("/sales/add", params={"rows": 3})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text.count('name="item_name"'), 3)

    def test_add_page_caps_requested_rows(self):
        response = self.client.get("/sales/add", params={"rows": 100_000_000})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text.count('name="item_name"'), MAX_ENTRY_ROWS)

        page = self.client.get("/stores/{}/sales".format(self.store.id), params={"rows": 10_000})
        self.assertEqual(page.text.count('name="item_name"'), MAX_ENTRY_ROWS)

    def test_batch_submit_creates_every_row(self):
        response = self.client.post(
            "/sales/add",
            data={
                "store_id": str(self.store.id),
                "month": "2024-03",
                "item_name": ["Tea", "Coffee"],
                "quantity": ["2", "1"],
                "price": ["10", "25.5"],
            },
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/sales")

        rows = self.db.query(Sale).order_by(Sale.id).all()
        self.assertEqual([row.item_name for row in rows], ["Tea", "Coffee"])
        self.assertEqual({row.month.isoformat() for row in rows}, {"2024-03-01"})
        self.assertIn("2 sales recorded successfully!", self.client.get("/sales").text)

    def test_batch_submit_with_bad_row_writes_nothing(self):
        response = self.client.post(
            "/sales/add",
            data={
                "store_id": str(self.store.id),
                "month": "2024-03",
                "item_name": ["Tea", ""],
                "quantity": ["2", "1"],
                "price": ["10", "5"],
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("All items must have a name", response.text)
        self.assertEqual(self.db.query(Sale).count(), 0)

    def test_batch_submit_with_infinite_price_is_rejected(self):
        response = self.client.post(
            "/sales/add",
            data={
                "store_id": str(self.store.id),
                "month": "2024-03",
                "item_name": ["Tea"],
                "quantity": ["1"],
                "price": ["1e309"],
            },
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("All prices must be greater than zero", response.text)
        self.assertEqual(self.db.query(Sale).count(), 0)
        self.assertEqual(self.client.get("/api/dashboard").status_code, 200)

    def test_store_sales_page_submit(self):
        response = self.client.post(
            "/stores/{}/sales".format(self.store.id),
            data={"month": "2024-04", "item_name": ["Tea"], "quantity": ["1"], "price": ["9"]},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        page = self.client.get("/stores/{}/sales".format(self.store.id))
        self.assertIn("1 sale recorded successfully!", page.text)
        self.assertIn("Tea", page.text)

    def test_sales_list_groups_by_month(self):
        add_sale(self.db, self.store, "Tea", "2024-01-01", 1, 10)
        add_sale(self.db, self.store, "Tea", "2024-02-01", 1, 10)
        response = self.client.get("/sales")
        self.assertEqual(response.status_code, 200)
        self.assertLess(response.text.index("February 2024"), response.text.index("January 2024"))


class DashboardPageTest(PageTestCase):
    def test_dashboard_renders_report(self):
        store = add_store(self.db, name="Lakeside", location="Pune")
        add_sale(self.db, store, "Tea", "2024-01-01", 2, 10)
        response = self.client.get("/dashboard")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Lakeside", response.text)
        self.assertIn("Tea", response.text)

    def test_dashboard_bad_date(self):
        response = self.client.get("/dashboard", params={"startDate": "soon"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("startDate must be an ISO date", response.text)


class FormHelpersTest(unittest.TestCase):
    def test_zip_entries_pads_short_columns(self):
        self.assertEqual(
            zip_entries(["Tea", "Coffee"], ["1"], None),
            [
                {"item_name": "Tea", "quantity": "1", "price": ""},
                {"item_name": "Coffee", "quantity": "", "price": ""},
            ],
        )

    def test_blank_entries_bounds(self):
        self.assertEqual(len(blank_entries(0)), 1)
        self.assertEqual(len(blank_entries(3)), 3)
        self.assertEqual(len(blank_entries(10**8)), MAX_ENTRY_ROWS)

    def test_sales_recorded_message(self):
        self.assertEqual(sales_recorded_message(1), "1 sale recorded successfully!")
        self.assertEqual(sales_recorded_message(3), "3 sales recorded successfully!")


if __name__ == "__main__":
    unittest.main()
