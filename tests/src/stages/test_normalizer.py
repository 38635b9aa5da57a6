import unittest
import sys
import json
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from src.models.recipe import (
    Confidence,
    Difficulty,
    ExtractionMethod,
    RecipeInput,
    ScrapedRecipeData,
    Visibility,
)
from src.stages.extract.recipe_scraper import RecipeScraper
from src.stages.normalize.normalizer import (
    INGREDIENT_PLACEHOLDER,
    INSTRUCTION_PLACEHOLDER,
    NormalizationSummary,
    format_normalization_summary,
    normalize_recipe,
    normalize_scraped_recipe,
)


class TestNormalizeRecipe(unittest.TestCase):
    """Тесты нормализации импортированного рецепта"""

    def test_empty_payload_gets_placeholders(self):
        """Тест: без ингредиентов и шагов добавляются заглушки"""
        summary = NormalizationSummary()
        record = normalize_recipe({}, author_id='user-1', summary=summary)

        self.assertEqual(len(record.ingredients), 1)
        self.assertEqual(record.ingredients[0].name, INGREDIENT_PLACEHOLDER)
        self.assertEqual(record.ingredients[0].amount, 0)
        self.assertEqual(record.ingredients[0].position, 0)
        self.assertEqual(len(record.instructions), 1)
        self.assertEqual(record.instructions[0].content, INSTRUCTION_PLACEHOLDER)
        self.assertEqual(record.instructions[0].step, 1)
        self.assertEqual(record.title, 'Untitled Recipe')
        self.assertEqual(record.author_id, 'user-1')
        self.assertEqual(record.visibility, Visibility.PRIVATE)
        self.assertEqual(summary.placeholders_added, 2)

    def test_non_dict_input_never_raises(self):
        for raw in (None, 'recipe', 42, ['a']):
            record = normalize_recipe(raw)
            self.assertEqual(record.title, 'Untitled Recipe')
            self.assertEqual(len(record.ingredients), 1)

    def test_hostile_values_never_raise(self):
        """Тест: огромные числа и битые ссылки не роняют нормализацию"""
        huge = '9' * 400
        record = normalize_recipe({
            'prepTime': huge,
            'cookTime': 10 ** 400,
            'servings': float('inf'),
            'imageUrl': 'http://[broken/x.jpg',
            'sourceUrl': 'http://[oops',
            'ingredients': [
                f'{huge}/1 cup flour',
                '1/0 cup milk',
                {'name': 'sugar', 'amount': huge + '/1'},
                {'name': 'salt', 'amount': 10 ** 400},
            ],
            'instructions': [{'content': 'Mix', 'duration': huge}],
        })

        self.assertIsNone(record.prep_time)
        self.assertIsNone(record.cook_time)
        self.assertIsNone(record.servings)
        self.assertIsNone(record.image_url)
        self.assertIsNone(record.source_url)
        flour, milk, sugar, salt = record.ingredients
        self.assertEqual((flour.amount, flour.name), (1.0, f'{huge}/1 cup flour'))
        self.assertEqual(milk.amount, 1.0)
        self.assertEqual((sugar.amount, salt.amount), (0, 0))
        self.assertIsNone(record.instructions[0].duration)

    def test_positions_are_reassigned_in_input_order(self):
        """Тест: позиции {0, нет, -1} становятся {0, 1, 2}"""
        summary = NormalizationSummary()
        record = normalize_recipe({'ingredients': [
            {'name': 'flour', 'position': 0},
            {'name': 'sugar'},
            {'name': 'butter', 'position': -1},
        ]}, summary=summary)

        self.assertEqual([i.name for i in record.ingredients], ['flour', 'sugar', 'butter'])
        self.assertEqual([i.position for i in record.ingredients], [0, 1, 2])
        self.assertEqual(summary.positions_assigned, 2)
        self.assertEqual(summary.ids_generated, 3)

    def test_duplicate_tags(self):
        record = normalize_recipe({'tags': ['Dessert', 'dessert', 'Easy']})
        self.assertEqual(record.tags, ['dessert', 'easy'])

    def test_tags_from_string_and_limit(self):
        record = normalize_recipe({'tags': 'Quick, Dinner ,, quick'})
        self.assertEqual(record.tags, ['quick', 'dinner'])

        record = normalize_recipe({'tags': [f'tag{n}' for n in range(25)] + [5, None]})
        self.assertEqual(len(record.tags), 20)

    def test_title_boilerplate_is_stripped(self):
        self.assertEqual(normalize_recipe({'title': 'Recipe: Best Brownies Ever - Recipe'}).title, 'Best brownies ever')
        self.assertEqual(normalize_recipe({'title': 'How to make Pancakes'}).title, 'Pancakes')
        self.assertEqual(normalize_recipe({'title': '   '}).title, 'Untitled Recipe')

    def test_long_fields_are_truncated(self):
        record = normalize_recipe({
            'title': 'a' * 600,
            'description': 'word ' * 600,
            'notes': 'x' * 2500,
        })

        self.assertEqual(len(record.title), 500)
        self.assertTrue(record.title.endswith('...'))
        self.assertEqual(len(record.description), 2000)
        self.assertEqual(len(record.notes), 2000)

    def test_description_whitespace(self):
        record = normalize_recipe({'description': '  Rich \n\n and  dark ', 'notes': '   '})

        self.assertEqual(record.description, 'Rich and dark')
        self.assertIsNone(record.notes)

    def test_string_ingredients_use_parser(self):
        record = normalize_recipe({'ingredients': ['2 cups flour', '   ', 'salt to taste']})

        flour, salt = record.ingredients
        self.assertEqual((flour.amount, flour.unit, flour.name), (2.0, 'cup', 'flour'))
        # у строки без количества остается значение парсера по умолчанию
        self.assertEqual(salt.amount, 1.0)

    def test_object_ingredients(self):
        summary = NormalizationSummary()
        record = normalize_recipe({'ingredients': [
            {'id': 'ing-1', 'name': ' Milk ', 'amount': '1 1/2', 'unit': 'Cups', 'category': ' Dairy '},
            {'name': 'Sugar', 'amount': -2, 'unit': 'Tablespoons'},
            {'name': 'Spice', 'amount': 'a bit', 'unit': 'handful', 'notes': '  to  taste '},
            {'name': None, 'amount': 2},
            {'name': '   '},
            42,
            None,
        ]}, summary=summary)

        milk, sugar, spice, unknown = record.ingredients
        self.assertEqual(milk.id, 'ing-1')
        self.assertEqual((milk.name, milk.amount, milk.unit, milk.category), ('Milk', 1.5, 'cup', 'dairy'))
        self.assertEqual((sugar.amount, sugar.unit), (0, 'tbsp'))
        self.assertEqual((spice.amount, spice.unit, spice.notes), (0, '', 'to taste'))
        self.assertEqual(unknown.name, 'Unknown ingredient')
        self.assertEqual(unknown.amount, 2)
        self.assertEqual(summary.items_dropped, 3)

    def test_missing_object_amount_defaults_to_zero(self):
        record = normalize_recipe({'ingredients': [{'name': 'pepper'}]})
        self.assertEqual(record.ingredients[0].amount, 0)

    def test_instructions(self):
        record = normalize_recipe({'instructions': [
            '1. mix the flour',
            {'text': 'bake   for 20 minutes', 'duration': 20},
            {'content': ''},
            {'content': 'Rest', 'duration': -5},
            7,
        ]})

        self.assertEqual(
            [step.content for step in record.instructions],
            ['Mix the flour', 'Bake for 20 minutes', 'Rest'],
        )
        self.assertEqual([step.step for step in record.instructions], [1, 2, 3])
        self.assertEqual([step.position for step in record.instructions], [0, 1, 2])
        self.assertEqual([step.duration for step in record.instructions], [None, 20, None])

    def test_times_and_servings(self):
        record = normalize_recipe({'prepTime': '30 minutes', 'cookTime': True, 'servings': 4.6})

        self.assertEqual(record.prep_time, 30)
        self.assertIsNone(record.cook_time)
        self.assertEqual(record.servings, 5)
        self.assertIsNone(normalize_recipe({'servings': 0}).servings)

    def test_urls_visibility_difficulty(self):
        record = normalize_recipe({
            'imageUrl': '/img.jpg',
            'source_url': 'https://example.com/r',
            'visibility': 'PUBLIC',
            'difficulty': 'Hard',
        })

        self.assertIsNone(record.image_url)
        self.assertEqual(record.source_url, 'https://example.com/r')
        self.assertEqual(record.visibility, Visibility.PUBLIC)
        self.assertEqual(record.difficulty, Difficulty.HARD)

        record = normalize_recipe({'visibility': 'friends', 'difficulty': 'expert'})
        self.assertEqual(record.visibility, Visibility.PRIVATE)
        self.assertIsNone(record.difficulty)

    def test_clean_payload_needs_no_changes(self):
        summary = NormalizationSummary()
        normalize_recipe({
            'title': 'Soup',
            'ingredients': [{'id': 'i1', 'name': 'water', 'amount': 1, 'unit': 'l', 'position': 0}],
            'instructions': [{'id': 's1', 'step': 1, 'content': 'Boil', 'position': 0}],
        }, summary=summary)

        self.assertFalse(summary.has_changes)
        self.assertEqual(format_normalization_summary(summary), 'No changes needed')

    def test_to_dict_uses_camel_case(self):
        data = normalize_recipe({'title': 'Soup', 'prep_time': 10}).to_dict()

        self.assertEqual(data['prepTime'], 10)
        self.assertIn('authorId', data)
        self.assertEqual(data['visibility'], 'private')
        json.dumps(data)


class TestNormalizeScrapedRecipe(unittest.TestCase):
    """Тесты нормализации результата скрапинга"""

    def test_scraped_recipe(self):
        scraped = ScrapedRecipeData(
            recipe=RecipeInput(title='Recipe: Tomato Soup', author_id='scraper', tags=['Soup']),
            method=ExtractionMethod.HTML_FALLBACK,
            confidence=Confidence.LOW,
            warnings=('No ingredients found - manual entry required',),
        )

        record = normalize_scraped_recipe(scraped, author_id='user-9')

        self.assertEqual(record.title, 'Tomato soup')
        self.assertEqual(record.author_id, 'user-9')
        self.assertEqual(record.tags, ['soup'])
        self.assertEqual(record.ingredients[0].name, INGREDIENT_PLACEHOLDER)

    def test_author_from_payload(self):
        record = normalize_recipe(RecipeInput(author_id='scraper'))
        self.assertEqual(record.author_id, 'scraper')

    def test_end_to_end(self):
        """Тест: страница с JSON-LD -> скрапинг -> нормализация"""
        block = json.dumps({
            "@type": "Recipe",
            "name": "Recipe: Best Brownies Ever - Recipe",
            "recipeIngredient": ["1 cup sugar", "2 large eggs"],
            "recipeInstructions": "1. Preheat the oven.\n2. bake for 25 minutes.",
            "keywords": ["Dessert", "dessert", "Easy"],
        })
        html = f'<html><head><script type="application/ld+json">{block}</script></head><body></body></html>'

        scraped = RecipeScraper().parse_html(html, url='https://example.com/brownies')
        summary = NormalizationSummary()
        record = normalize_scraped_recipe(scraped, author_id='user-1', summary=summary)

        self.assertEqual(record.title, 'Best brownies ever')
        self.assertEqual(record.tags, ['dessert', 'easy'])
        self.assertEqual([i.name for i in record.ingredients], ['sugar', 'large eggs'])
        self.assertEqual([s.content for s in record.instructions], ['Preheat the oven.', 'Bake for 25 minutes.'])
        self.assertEqual(record.source_url, 'https://example.com/brownies')
        self.assertFalse(summary.has_changes)


class TestFormatNormalizationSummary(unittest.TestCase):

    def test_format(self):
        self.assertEqual(
            format_normalization_summary(NormalizationSummary(items_dropped=2, ids_generated=3)),
            'Fixed: dropped 2 empty items, generated 3 IDs',
        )
        self.assertEqual(
            format_normalization_summary(NormalizationSummary(items_dropped=1, placeholders_added=1)),
            'Fixed: dropped 1 empty item, added 1 placeholder',
        )
        self.assertEqual(format_normalization_summary(NormalizationSummary()), 'No changes needed')


if __name__ == '__main__':
    unittest.main()
