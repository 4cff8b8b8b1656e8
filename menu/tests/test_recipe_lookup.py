import json
import tempfile
import unittest
from pathlib import Path

import httpx

from menu.domain.Recipe import Recipe
from menu.infra.Recipe_Lookup import HttpRecipeLookup, LocalRecipeLookup, reading_from_recipes
from menu.utilities.errors import RecipeLookupError

DATA_DIR = Path(__file__).parent.parent / 'data'


def lookup_with(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpRecipeLookup("http://recipes.test/api/", client=client)


class TestHttpRecipeLookup(unittest.TestCase):

    def test_request_parameters(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"_id": "r9", "title": "Soupe", "category": "entree", "servings": 2}])

        recipes = lookup_with(handler).fetch_random(3, "entree", frozenset({"r2", "r1"}))
        self.assertEqual(recipes, [Recipe(id="r9", title="Soupe", category="entree", servings=2)])
        request = seen[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/api/recipe/random")
        self.assertEqual(request.url.params["count"], "3")
        self.assertEqual(request.url.params["category"], "entree")
        self.assertEqual(request.url.params["exclude"], "r1,r2")

    def test_empty_exclusion_is_omitted(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        self.assertEqual(lookup_with(handler).fetch_random(1, "plat", frozenset()), [])
        self.assertNotIn("exclude", seen[0].url.params)

    def test_answer_is_cleaned_and_capped(self):
        body = [{"_id": "a"}, {"title": "no id"}, {"id": "b"}, {"_id": "c"}]
        recipes = lookup_with(lambda request: httpx.Response(200, json=body)).fetch_random(2, "plat", frozenset())
        self.assertEqual([r.id for r in recipes], ["a", "b"])

    def test_non_list_body_counts_as_empty(self):
        lookup = lookup_with(lambda request: httpx.Response(200, json={"error": "none"}))
        self.assertEqual(lookup.fetch_random(2, "plat", frozenset()), [])

    def test_server_error(self):
        lookup = lookup_with(lambda request: httpx.Response(500, text="boom"))
        with self.assertRaises(RecipeLookupError):
            lookup.fetch_random(2, "plat", frozenset())

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(RecipeLookupError):
            lookup_with(handler).fetch_random(2, "plat", frozenset())

    def test_invalid_json(self):
        lookup = lookup_with(lambda request: httpx.Response(200, content=b"<html>"))
        with self.assertRaises(RecipeLookupError):
            lookup.fetch_random(2, "plat", frozenset())

    def test_nothing_requested_means_no_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        self.assertEqual(lookup_with(handler).fetch_random(0, "plat", frozenset()), [])


class TestLocalRecipeLookup(unittest.TestCase):

    def setUp(self):
        self.recipes = [Recipe(id=f"p{i}", category="plat") for i in range(5)] + [Recipe(id="d1", category="dessert")]

    def test_filters_category_and_exclusions(self):
        lookup = LocalRecipeLookup(self.recipes, seed=3)
        picked = lookup.fetch_random(10, "plat", frozenset({"p0", "p1"}))
        self.assertEqual(sorted(r.id for r in picked), ["p2", "p3", "p4"])
        self.assertEqual(lookup.fetch_random(2, "brunch", frozenset()), [])

    def test_seed_makes_draws_repeatable(self):
        first = LocalRecipeLookup(self.recipes, seed=42).fetch_random(3, "plat", frozenset())
        second = LocalRecipeLookup(self.recipes, seed=42).fetch_random(3, "plat", frozenset())
        self.assertEqual(first, second)
        self.assertEqual(len({r.id for r in first}), 3)

    def test_bundled_recipes_file(self):
        lookup = LocalRecipeLookup.from_json(DATA_DIR / 'recipes.json', seed=1)
        self.assertGreater(len(lookup.recipes), 10)
        self.assertTrue(all(r.category == "plat" for r in lookup.fetch_random(3, "plat", frozenset())))

    def test_reading_bad_files(self):
        self.assertEqual(reading_from_recipes(DATA_DIR / 'missing.json'), [])

    def test_reading_non_list_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'recipes.json'
            path.write_text(json.dumps({"_id": "r1"}), encoding='utf-8')
            self.assertEqual(reading_from_recipes(path), [])
            path.write_text("[{", encoding='utf-8')
            self.assertEqual(reading_from_recipes(path), [])


if __name__ == '__main__':
    unittest.main()
