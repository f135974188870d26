import os
import tempfile
import unittest

from weatherdish.corpus import (
    DEFAULT_RECIPES_CSV,
    find_recipe,
    load_recipes,
    parse_ingredients,
    parse_instructions,
)
from weatherdish.errors import LoadError

CSV_TEXT = '''Title,Ingredients,Instructions,Image_Name,Cleaned_Ingredients
Tomato Soup,"['2 lb. tomatoes', '1 onion, chopped']","Roast the tomatoes.

Blend until smooth.",tomato-soup,"['2 lb. TOMATOES', '1 onion']"
,"salt, pepper , ,oil",Mix.,,salt pepper oil
Broken List,"['unterminated, 'list'",Stir.,,
'''


class CorpusTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "recipes.csv")
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(CSV_TEXT)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_load_normalizes_rows(self):
        recipes = load_recipes(self.path)
        self.assertEqual([r.id for r in recipes], ["0", "1", "2"])

        soup = recipes[0]
        self.assertEqual(soup.title, "Tomato Soup")
        self.assertEqual(soup.ingredients, ("2 lb. tomatoes", "1 onion, chopped"))
        self.assertEqual(soup.instructions, ("Roast the tomatoes.", "Blend until smooth."))
        self.assertEqual(soup.image_name, "tomato-soup")
        self.assertIn("tomatoes", soup.cleaned_ingredients_text)

    def test_missing_title_and_plain_ingredients(self):
        recipe = load_recipes(self.path)[1]
        self.assertEqual(recipe.title, "Recipe 2")
        self.assertEqual(recipe.ingredients, ("salt", "pepper", "oil"))
        self.assertEqual(recipe.image_name, "")

    def test_malformed_ingredient_list_degrades(self):
        recipe = load_recipes(self.path)[2]
        self.assertEqual(recipe.title, "Broken List")
        self.assertTrue(recipe.ingredients)

    def test_missing_file_raises_load_error(self):
        with self.assertRaises(LoadError):
            load_recipes(os.path.join(self.tmpdir.name, "nope.csv"))

    def test_empty_file_raises_load_error(self):
        empty = os.path.join(self.tmpdir.name, "empty.csv")
        open(empty, "w").close()
        with self.assertRaises(LoadError):
            load_recipes(empty)

    def test_header_only_raises_load_error(self):
        header_only = os.path.join(self.tmpdir.name, "header.csv")
        with open(header_only, "w") as f:
            f.write("Title,Ingredients,Instructions,Image_Name,Cleaned_Ingredients\n")
        with self.assertRaises(LoadError):
            load_recipes(header_only)

    def test_row_with_extra_fields_keeps_later_ids(self):
        ragged = os.path.join(self.tmpdir.name, "ragged.csv")
        with open(ragged, "w", encoding="utf-8") as f:
            f.write(
                "Title,Ingredients,Instructions,Image_Name,Cleaned_Ingredients\n"
                "Rice,rice,Boil.,rice,rice\n"
                "Stew,beef,Simmer.,stew,beef,extra\n"
                "Salad,lettuce,Toss.,salad,lettuce\n"
            )
        recipes = load_recipes(ragged)
        self.assertEqual([(r.id, r.title) for r in recipes], [("0", "Rice"), ("1", "Stew"), ("2", "Salad")])
        self.assertEqual(recipes[1].image_name, "stew")
        self.assertEqual(find_recipe(recipes, "2").title, "Salad")

    def test_find_recipe(self):
        recipes = load_recipes(self.path)
        self.assertEqual(find_recipe(recipes, 0).title, "Tomato Soup")
        self.assertIsNone(find_recipe(recipes, "99"))

    def test_bundled_corpus_loads(self):
        recipes = load_recipes(DEFAULT_RECIPES_CSV)
        self.assertGreater(len(recipes), 10)
        self.assertTrue(all(r.title for r in recipes))


class ParseHelpersTestCase(unittest.TestCase):
    def test_curly_quotes(self):
        self.assertEqual(parse_ingredients("[“1 egg”, “2 cups flour”]"), ["1 egg", "2 cups flour"])

    def test_apostrophes_inside_items(self):
        self.assertEqual(parse_ingredients("[\"baker's yeast\", 'salt']"), ["baker's yeast", "salt"])

    def test_blank_values(self):
        self.assertEqual(parse_ingredients(""), [])
        self.assertEqual(parse_ingredients(None), [])
        self.assertEqual(parse_instructions(None), [])

    def test_instructions_windows_newlines(self):
        self.assertEqual(parse_instructions("Step one.\r\nStep two.\r\n"), ["Step one.", "Step two."])


if __name__ == '__main__':
    unittest.main()
