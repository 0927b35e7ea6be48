import unittest
from datetime import date

from store_sales.core.dates import first_of_month, month_key, month_label, normalize_date
from store_sales.services.filtering import SaleFilters, filter_sales, page_bounds, paginate
from tests.support import sale_dict


SALES = [
    sale_dict("2024-01-01", "Green Tea", 1, 1.0, store_id=1),
    sale_dict("2024-02-01", "Black Tea", 2, 1.0, store_id=2),
    sale_dict("2024-03-01", "Coffee", 3, 1.0, store_id=1),
    sale_dict("2024-04-01", "TEA bags", 4, 1.0, store_id=2),
]


class SaleFiltersTest(unittest.TestCase):
    def test_no_filters_match_everything(self):
        self.assertEqual(filter_sales(SALES, SaleFilters()), SALES)

    def test_inclusive_date_range(self):
        filters = SaleFilters.from_params(start_date="2024-02-01", end_date="2024-03-01")
        self.assertEqual([s["item_name"] for s in filter_sales(SALES, filters)], ["Black Tea", "Coffee"])

    def test_open_ended_ranges(self):
        start_only = SaleFilters.from_params(start_date="2024-03-01")
        end_only = SaleFilters.from_params(end_date="2024-01-31")
        self.assertEqual(len(filter_sales(SALES, start_only)), 2)
        self.assertEqual(len(filter_sales(SALES, end_only)), 1)

    def test_store_filter_is_exact_and_idempotent(self):
        filters = SaleFilters(store_id=2)
        once = filter_sales(SALES, filters)
        self.assertTrue(all(sale["store_id"] == 2 for sale in once))
        self.assertEqual(filter_sales(once, filters), once)

    def test_item_substring_is_case_insensitive(self):
        filters = SaleFilters.from_params(item="tea")
        self.assertEqual(len(filter_sales(SALES, filters)), 3)

    def test_filters_compose_with_and(self):
        filters = SaleFilters.from_params(item="tea", store_id=2, start_date="2024-03")
        self.assertEqual([s["item_name"] for s in filter_sales(SALES, filters)], ["TEA bags"])

    def test_blank_params_mean_no_filter(self):
        filters = SaleFilters.from_params(start_date="", end_date="  ", item=" ")
        self.assertEqual(filters, SaleFilters())

    def test_invalid_date_raises(self):
        with self.assertRaises(ValueError):
            SaleFilters.from_params(start_date="next tuesday")


class PaginationTest(unittest.TestCase):
    def test_pages_reconstruct_the_full_sequence(self):
        items = list(range(23))
        first = paginate(items, page=1, page_size=5)
        self.assertEqual(first.total, 23)
        self.assertEqual(first.total_pages, 5)

        collected = []
        for page in range(1, first.total_pages + 1):
            collected.extend(paginate(items, page=page, page_size=5).data)
        self.assertEqual(collected, items)

    def test_page_beyond_last_is_empty(self):
        result = paginate(list(range(3)), page=4, page_size=2)
        self.assertEqual(result.data, [])
        self.assertEqual(result.total_pages, 2)

    def test_defaults(self):
        result = paginate(list(range(60)))
        self.assertEqual(result.page, 1)
        self.assertEqual(result.page_size, 50)
        self.assertEqual(len(result.data), 50)

    def test_empty(self):
        result = paginate([], page=1, page_size=10)
        self.assertEqual((result.total, result.total_pages, result.data), (0, 0, []))

    def test_page_bounds(self):
        self.assertEqual(page_bounds(3, 20), (40, 20))
        with self.assertRaises(ValueError):
            page_bounds(0, 20)


class DatesTest(unittest.TestCase):
    def test_normalize_date(self):
        self.assertEqual(normalize_date("2024-02"), date(2024, 2, 1))
        self.assertEqual(normalize_date("2024-02-17T10:00:00Z"), date(2024, 2, 17))
        self.assertIsNone(normalize_date("2024-13"))
        self.assertIsNone(normalize_date(""))

    def test_month_helpers(self):
        self.assertEqual(first_of_month("2024-02-17"), date(2024, 2, 1))
        self.assertEqual(month_key(date(2024, 2, 17)), "2024-02")
        self.assertEqual(month_label("2024-02"), "February 2024")
        with self.assertRaises(ValueError):
            month_key("garbage")


if __name__ == "__main__":
    unittest.main()
