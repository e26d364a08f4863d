import unittest

from core.pagination import clamp_page, next_page, paginate, prev_page, total_pages


class PaginationTestCase(unittest.TestCase):
    def test_twelve_results(self):
        results = list(range(12))
        self.assertEqual(total_pages(len(results), 5), 3)

        page = paginate(results, 5, 3)
        self.assertEqual(page.items, [10, 11])
        self.assertEqual(page.total_pages, 3)
        self.assertFalse(page.has_next)
        self.assertTrue(page.has_prev)

        self.assertEqual(next_page(3, len(results), 5), 3)
        self.assertEqual(prev_page(1, len(results), 5), 1)
        self.assertEqual(next_page(1, len(results), 5), 2)

    def test_first_page(self):
        page = paginate(list(range(12)))
        self.assertEqual(page.items, [0, 1, 2, 3, 4])
        self.assertEqual(page.page, 1)

    def test_empty_results_have_one_page(self):
        page = paginate([], 5, 1)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total_pages, 1)
        self.assertFalse(page.has_next)
        self.assertFalse(page.has_prev)

    def test_out_of_range_pages_are_clamped(self):
        self.assertEqual(clamp_page(0, 12), 1)
        self.assertEqual(clamp_page(-3, 12), 1)
        self.assertEqual(clamp_page(99, 12), 3)
        self.assertEqual(paginate(list(range(12)), 5, 99).items, [10, 11])

    def test_exact_multiple(self):
        self.assertEqual(total_pages(10, 5), 2)
        self.assertEqual(paginate(list(range(10)), 5, 2).items, [5, 6, 7, 8, 9])

    def test_page_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            total_pages(3, 0)


if __name__ == "__main__":
    unittest.main()
