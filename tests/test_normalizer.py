import unittest

from core.normalizer import (
    BARCODE_ACCESSORS,
    CODE_ACCESSORS,
    NAME_ACCESSORS,
    PRICE_ACCESSORS,
    format_price,
    normalize_location,
    normalize_product,
    normalize_products,
    unwrap_locations,
)


class AliasOrderTestCase(unittest.TestCase):
    def test_alias_order_is_fixed(self):
        names = lambda accessors: [a.__name__ for a in accessors]  # noqa: E731
        self.assertEqual(
            names(CODE_ACCESSORS), ["key_prod_code", "key_product_code", "key_code"]
        )
        self.assertEqual(
            names(NAME_ACCESSORS),
            ["key_prod_name", "key_product_name", "key_product_name_en", "key_name"],
        )
        self.assertEqual(names(PRICE_ACCESSORS), ["key_selling_price", "key_price"])
        self.assertEqual(names(BARCODE_ACCESSORS)[0], "key_barcode")
        self.assertEqual(names(BARCODE_ACCESSORS)[1:], names(CODE_ACCESSORS))


class NormalizeProductTestCase(unittest.TestCase):
    def test_code_resolution(self):
        self.assertEqual(
            normalize_product({"prod_code": "A", "product_code": "B", "code": "C"}).code,
            "A",
        )
        self.assertEqual(normalize_product({"product_code": "B", "code": "C"}).code, "B")
        self.assertEqual(normalize_product({"code": "C"}).code, "C")
        self.assertEqual(normalize_product({"name": "x"}).code, "N/A")

    def test_blank_values_are_skipped(self):
        p = normalize_product({"prod_code": "  ", "product_code": None, "code": "C"})
        self.assertEqual(p.code, "C")

    def test_name_resolution(self):
        self.assertEqual(
            normalize_product({"product_name_en": "English", "name": "Generic"}).name,
            "English",
        )
        self.assertEqual(normalize_product({"name": "Generic"}).name, "Generic")
        self.assertEqual(normalize_product({"prod_name": "", "code": "1"}).name, "Unknown")

    def test_price(self):
        self.assertEqual(normalize_product({"selling_price": "12.5", "price": 3}).price, "12.50")
        self.assertEqual(normalize_product({"price": 3}).price, "3.00")
        self.assertEqual(normalize_product({}).price, "0.00")

    def test_invalid_prices_become_zero(self):
        for value in ["abc", None, "", "NaN", "inf", "-4", -1, [], {}, True]:
            with self.subTest(value=value):
                self.assertEqual(format_price(value), "0.00")

    def test_price_rounding(self):
        self.assertEqual(format_price("1.005"), "1.01")
        self.assertEqual(format_price("2.004"), "2.00")
        self.assertEqual(format_price(" 7 "), "7.00")

    def test_exponent_and_huge_prices(self):
        self.assertEqual(format_price("2.5e3"), "2500.00")
        self.assertEqual(format_price("1e30"), "1" + "0" * 30 + ".00")
        self.assertEqual(format_price(1e300), "1" + "0" * 300 + ".00")
        self.assertEqual(
            format_price("123456789012345678901234567890"),
            "123456789012345678901234567890.00",
        )
        # beyond any float the amount is treated as invalid
        self.assertEqual(format_price("1e999"), "0.00")

    def test_huge_price_record_normalizes(self):
        p = normalize_product({"id": 1, "selling_price": 1e300})
        self.assertTrue(p.price.endswith(".00"))
        self.assertEqual(len(p.price), 304)

    def test_barcode_fallback(self):
        self.assertEqual(normalize_product({"barcode": "999", "prod_code": "A"}).barcode, "999")
        self.assertEqual(normalize_product({"product_code": "B"}).barcode, "B")
        self.assertEqual(normalize_product({"name": "x"}).barcode, "N/A")

    def test_source_id_is_kept(self):
        p = normalize_product({"id": 42, "code": "A"})
        self.assertEqual(p.id, "42")
        self.assertFalse(p.surrogate_id)

    def test_surrogate_ids_do_not_collide(self):
        products = normalize_products([{"code": "A"}] * 500)
        ids = {p.id for p in products}
        self.assertEqual(len(ids), 500)
        self.assertTrue(all(p.surrogate_id for p in products))

    def test_normalize_products_keeps_order(self):
        products = normalize_products([{"id": 3}, "garbage", {"id": 1}, {"id": 2}])
        self.assertEqual([p.id for p in products], ["3", "1", "2"])


class LocationTestCase(unittest.TestCase):
    def test_normalize_location(self):
        loc = normalize_location({"id": 3, "loca_code": "L01", "loca_name": "Main"})
        self.assertEqual((loc.value, loc.label), ("L01", "Main"))

        loc = normalize_location({"id": 3})
        self.assertEqual((loc.value, loc.label), ("3", "Location 3"))

        self.assertIsNone(normalize_location({"name": "no id"}))

    def test_unwrap_both_shapes(self):
        records = [{"id": 1, "code": "A", "name": "Alpha"}, {"id": 2, "location_name": "Beta"}]
        self.assertEqual(
            [l.label for l in unwrap_locations(records)], ["Alpha", "Beta"]
        )
        self.assertEqual(
            [l.value for l in unwrap_locations({"success": True, "data": records})],
            ["A", "2"],
        )

    def test_unwrap_rejects_other_shapes(self):
        self.assertEqual(unwrap_locations({"success": False, "data": [{"id": 1}]}), [])
        self.assertEqual(unwrap_locations({"data": "nope"}), [])
        self.assertEqual(unwrap_locations(None), [])
        self.assertEqual(unwrap_locations(["x", {"id": 1}])[0].value, "1")


if __name__ == "__main__":
    unittest.main()
