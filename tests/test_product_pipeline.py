# tests/test_product_pipeline.py

"""Tests for the listing filter/sort pipeline."""

import unittest

from storefront.filters.product_pipeline import ProductPipeline
from storefront.models.filter_config import FilterConfig, SortMode
from storefront.models.product import Product


def _p(
    pid: str,
    price: float = 100.0,
    name: str = "",
    short: str = "",
    image: str = "/img/panel.jpg",
) -> Product:
    """Create a minimal Product for testing."""
    return Product(
        id=pid,
        name=name or f"Product {pid}",
        short_description=short,
        price=price,
        image=image,
    )


def _ids(products: list[Product]) -> list[str]:
    return [p.id for p in products]


class TestScenarios(unittest.TestCase):
    """Reference scenarios for the pipeline."""

    def setUp(self) -> None:
        self.products = [_p("1", 500), _p("2", 200), _p("3", 800)]

    def test_price_ascending(self) -> None:
        """Scenario A: ascending price order."""
        result = ProductPipeline.apply(
            self.products,
            FilterConfig(sort_mode=SortMode.PRICE_ASCENDING),
        )
        self.assertEqual(_ids(result), ["2", "1", "3"])

    def test_price_descending(self) -> None:
        result = ProductPipeline.apply(
            self.products,
            FilterConfig(sort_mode=SortMode.PRICE_DESCENDING),
        )
        self.assertEqual(_ids(result), ["3", "1", "2"])

    def test_price_range(self) -> None:
        """Scenario B: inclusive price window."""
        result = ProductPipeline.apply(
            self.products, FilterConfig(min_price=300, max_price=600)
        )
        self.assertEqual(result, [_p("1", 500)])

    def test_require_image(self) -> None:
        """Scenario C: empty and placeholder images are excluded."""
        products = [
            _p("empty", image=""),
            _p("placeholder", image="/img/placeholder.svg"),
            _p("real", image="/img/panel.jpg"),
        ]
        result = ProductPipeline.apply(
            products, FilterConfig(require_image=True)
        )
        self.assertEqual(_ids(result), ["real"])

    def test_search_checks_name_or_short_description(self) -> None:
        """Scenario D: either field matching keeps the product."""
        products = [
            _p("panel", name="Solar Panel X"),
            _p("battery", name="Battery Y", short="for solar use"),
            _p("cable", name="Cable Z", short="6mm copper"),
        ]
        result = ProductPipeline.apply(
            products, FilterConfig(search_text="solar")
        )
        self.assertEqual(_ids(result), ["panel", "battery"])

    def test_empty_input(self) -> None:
        """Scenario E: empty input is never an error."""
        configs = [
            FilterConfig(),
            FilterConfig(search_text="x", min_price=1, max_price=2,
                         require_image=True,
                         sort_mode=SortMode.PRICE_DESCENDING),
        ]
        for config in configs:
            with self.subTest(config=config):
                self.assertEqual(ProductPipeline.apply([], config), [])


class TestFilterRules(unittest.TestCase):
    """Individual filter steps."""

    def test_search_is_case_insensitive_and_trimmed(self) -> None:
        products = [_p("1", name="MPPT Charge Controller")]
        result = ProductPipeline.apply(
            products, FilterConfig(search_text="  mppt  ")
        )
        self.assertEqual(_ids(result), ["1"])

    def test_whitespace_search_is_ignored(self) -> None:
        products = [_p("1"), _p("2")]
        result = ProductPipeline.apply(
            products, FilterConfig(search_text="   ")
        )
        self.assertEqual(len(result), 2)

    def test_search_does_not_match_full_description(self) -> None:
        products = [
            Product(id="1", name="Cable", full_description="solar cable")
        ]
        result = ProductPipeline.apply(
            products, FilterConfig(search_text="solar")
        )
        self.assertEqual(result, [])

    def test_bounds_are_inclusive(self) -> None:
        products = [_p("lo", 300), _p("hi", 600), _p("out", 601)]
        result = ProductPipeline.apply(
            products, FilterConfig(min_price=300, max_price=600)
        )
        self.assertEqual(_ids(result), ["lo", "hi"])

    def test_zero_bound_is_applied(self) -> None:
        """A bound of 0 is set, not absent."""
        products = [_p("free", 0), _p("paid", 10)]
        result = ProductPipeline.apply(products, FilterConfig(max_price=0))
        self.assertEqual(_ids(result), ["free"])

    def test_no_matches_returns_empty_list(self) -> None:
        result = ProductPipeline.apply(
            [_p("1", 100)], FilterConfig(min_price=1000)
        )
        self.assertEqual(result, [])

    def test_search_never_grows_result(self) -> None:
        """Adding search text never increases the result size."""
        products = [
            _p("1", name="Solar Panel"),
            _p("2", name="Battery", short="solar storage"),
            _p("3", name="Cable"),
        ]
        base = FilterConfig(min_price=50)
        without = ProductPipeline.apply(products, base)
        for query in ("solar", "cable", "zzz", "a"):
            with self.subTest(query=query):
                with_search = ProductPipeline.apply(
                    products,
                    FilterConfig(search_text=query, min_price=50),
                )
                self.assertLessEqual(len(with_search), len(without))

    def test_sort_mode_accepts_plain_string(self) -> None:
        result = ProductPipeline.apply(
            [_p("a", 2), _p("b", 1)],
            FilterConfig(sort_mode="price-ascending"),  # type: ignore[arg-type]
        )
        self.assertEqual(_ids(result), ["b", "a"])


class TestOrdering(unittest.TestCase):
    """Sort stability and input preservation."""

    def test_newest_keeps_input_order(self) -> None:
        products = [_p("c", 1), _p("a", 3), _p("b", 2)]
        result = ProductPipeline.apply(products, FilterConfig())
        self.assertEqual(_ids(result), ["c", "a", "b"])

    def test_equal_prices_keep_relative_order(self) -> None:
        """Both price sorts are stable for equal prices."""
        products = [_p("x", 100), _p("first", 50), _p("second", 50)]
        for mode in (SortMode.PRICE_ASCENDING, SortMode.PRICE_DESCENDING):
            with self.subTest(mode=mode):
                result = ProductPipeline.apply(
                    products, FilterConfig(sort_mode=mode)
                )
                ids = _ids(result)
                self.assertLess(ids.index("first"), ids.index("second"))

    def test_input_not_mutated(self) -> None:
        products = [_p("1", 500), _p("2", 200), _p("3", 800)]
        snapshot = list(products)
        ProductPipeline.apply(
            products,
            FilterConfig(sort_mode=SortMode.PRICE_ASCENDING, min_price=300),
        )
        self.assertEqual(products, snapshot)

    def test_returns_new_list(self) -> None:
        products = [_p("1")]
        result = ProductPipeline.apply(products, FilterConfig())
        self.assertIsNot(result, products)

    def test_accepts_tuple(self) -> None:
        result = ProductPipeline.apply(
            (_p("1", 2), _p("2", 1)),
            FilterConfig(sort_mode=SortMode.PRICE_ASCENDING),
        )
        self.assertEqual(_ids(result), ["2", "1"])


class TestMemoisation(unittest.TestCase):
    """apply_cached keys on the products and the config only."""

    def setUp(self) -> None:
        ProductPipeline.clear_cache()

    def test_same_inputs_hit_cache(self) -> None:
        products = (_p("1", 500), _p("2", 200))
        config = FilterConfig(sort_mode=SortMode.PRICE_ASCENDING)
        first = ProductPipeline.apply_cached(products, config)
        second = ProductPipeline.apply_cached(list(products), config)
        self.assertEqual(first, second)
        self.assertIn("hits=1", ProductPipeline.cache_info())

    def test_changed_config_recomputes(self) -> None:
        products = (_p("1", 500), _p("2", 200))
        asc = ProductPipeline.apply_cached(
            products, FilterConfig(sort_mode=SortMode.PRICE_ASCENDING)
        )
        desc = ProductPipeline.apply_cached(
            products, FilterConfig(sort_mode=SortMode.PRICE_DESCENDING)
        )
        self.assertEqual(_ids(asc), ["2", "1"])
        self.assertEqual(_ids(desc), ["1", "2"])

    def test_changed_products_recompute(self) -> None:
        config = FilterConfig()
        first = ProductPipeline.apply_cached((_p("1"),), config)
        second = ProductPipeline.apply_cached((_p("1"), _p("2")), config)
        self.assertEqual(len(first), 1)
        self.assertEqual(len(second), 2)

    def test_cached_result_is_a_fresh_list(self) -> None:
        """Mutating a returned list does not corrupt the memo."""
        products = (_p("1"),)
        config = FilterConfig()
        result = ProductPipeline.apply_cached(products, config)
        result.append(_p("extra"))
        again = ProductPipeline.apply_cached(products, config)
        self.assertEqual(len(again), 1)


class TestSummarize(unittest.TestCase):
    """Status line helper."""

    def test_messages(self) -> None:
        self.assertEqual(
            ProductPipeline.summarize(0, 0), "No products in the catalog yet"
        )
        self.assertEqual(
            ProductPipeline.summarize(0, 4), "No products match your filters"
        )
        self.assertEqual(
            ProductPipeline.summarize(4, 4), "Showing all 4 products"
        )
        self.assertEqual(
            ProductPipeline.summarize(2, 4), "Showing 2 of 4 products"
        )


if __name__ == "__main__":
    unittest.main()
