import unittest
from datetime import date

from store_sales.services.aggregation import (
    monthly_time_series,
    product_performance,
    sale_revenue,
    store_performance_summary,
    store_totals,
    summarize,
    top_products,
)
from tests.support import SCENARIO_SALES, sale_dict


class MonthlyTimeSeriesTest(unittest.TestCase):
    def test_scenario_buckets(self):
        buckets = monthly_time_series(SCENARIO_SALES)
        self.assertEqual(
            buckets,
            [
                {"month": "2024-01", "count": 2, "items": 3, "revenue": 30.0},
                {"month": "2024-02", "count": 1, "items": 3, "revenue": 15.0},
            ],
        )

    def test_groups_by_calendar_month_and_sorts_ascending(self):
        sales = [
            sale_dict(date(2024, 3, 1), "A", 1, 1.5),
            sale_dict(date(2023, 12, 1), "A", 1, 2.0),
            sale_dict("2024-03-20", "B", 2, 1.0),
        ]
        buckets = monthly_time_series(sales)
        self.assertEqual([bucket["month"] for bucket in buckets], ["2023-12", "2024-03"])
        self.assertEqual(buckets[1]["count"], 2)

    def test_descending_order(self):
        buckets = monthly_time_series(SCENARIO_SALES, descending=True)
        self.assertEqual([bucket["month"] for bucket in buckets], ["2024-02", "2024-01"])

    def test_bucket_revenues_sum_to_total_revenue(self):
        sales = [
            sale_dict("2024-0{}-01".format(month), "item-{}".format(n), n + 1, 0.1 * (n + 3))
            for month in range(1, 7)
            for n in range(5)
        ]
        buckets = monthly_time_series(sales)
        expected = 0.0
        for sale in sales:
            expected += sale["quantity"] * sale["price"]
        self.assertAlmostEqual(sum(bucket["revenue"] for bucket in buckets), expected, places=9)

    def test_empty_input(self):
        self.assertEqual(monthly_time_series([]), [])

    def test_accepts_objects(self):
        class Row:
            def __init__(self, month, quantity, price):
                self.month = month
                self.quantity = quantity
                self.price = price
                self.item_name = "x"
                self.store_id = 1

        buckets = monthly_time_series([Row(date(2024, 5, 1), 2, 2.5)])
        self.assertEqual(buckets, [{"month": "2024-05", "count": 1, "items": 2, "revenue": 5.0}])


class ProductPerformanceTest(unittest.TestCase):
    def test_scenario_products(self):
        self.assertEqual(
            product_performance(SCENARIO_SALES),
            [
                {"item": "A", "quantity": 3, "revenue": 30.0},
                {"item": "B", "quantity": 3, "revenue": 15.0},
            ],
        )

    def test_sorted_descending_with_stable_ties(self):
        sales = [
            sale_dict("2024-01-01", "tie-first", 1, 10),
            sale_dict("2024-01-01", "small", 1, 1),
            sale_dict("2024-01-01", "tie-second", 2, 5),
            sale_dict("2024-01-01", "big", 10, 10),
        ]
        items = [entry["item"] for entry in product_performance(sales)]
        self.assertEqual(items, ["big", "tie-first", "tie-second", "small"])

    def test_exact_name_match(self):
        sales = [sale_dict("2024-01-01", "Tea", 1, 1), sale_dict("2024-01-01", "tea", 1, 1)]
        self.assertEqual(len(product_performance(sales)), 2)

    def test_top_products_limit(self):
        sales = [sale_dict("2024-01-01", "item-{}".format(n), 1, n + 1) for n in range(8)]
        top = top_products(sales)
        self.assertEqual(len(top), 5)
        self.assertEqual(top[0]["item"], "item-7")

    def test_empty_input(self):
        self.assertEqual(product_performance([]), [])


class TotalsTest(unittest.TestCase):
    def test_summary(self):
        self.assertEqual(
            summarize(SCENARIO_SALES, total_stores=2),
            {"total_stores": 2, "total_sales": 3, "total_items": 6, "total_revenue": 45.0},
        )

    def test_store_totals_empty(self):
        self.assertEqual(store_totals([]), {"total_sales": 0, "total_items": 0, "total_revenue": 0.0})

    def test_sale_revenue(self):
        self.assertEqual(sale_revenue(sale_dict("2024-01-01", "A", 3, 2.5)), 7.5)

    def test_store_performance_is_reshaped_not_regrouped(self):
        rows = [
            {"store_id": 2, "store_name": "North", "total_quantity": 7, "total_revenue": 70.0},
            {"store_id": 1, "store_name": "Central", "total_quantity": None, "total_revenue": None},
        ]
        self.assertEqual(
            store_performance_summary(rows),
            [
                {"id": 2, "name": "North", "sales": 7, "revenue": 70.0},
                {"id": 1, "name": "Central", "sales": 0, "revenue": 0.0},
            ],
        )


if __name__ == "__main__":
    unittest.main()
