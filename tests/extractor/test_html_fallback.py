"""
Тесты для эвристического экстрактора
"""

import unittest
import sys
from pathlib import Path

# Добавляем корневую директорию в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from extractor.html_fallback import HtmlFallbackExtractor
from src.models.recipe import Confidence, ExtractionMethod

FULL_PAGE = """
<html><head>
<title>Easy Stir-Fry | My Blog</title>
<meta name="description" content="Quick   weeknight dinner.">
<meta property="og:image" content="https://example.com/stir-fry.jpg">
</head><body>
<div class="ingredients"><ul><li>2 cups rice</li><li>1 tbsp soy sauce</li></ul></div>
<div class="instructions"><ol><li>Cook the rice until tender.</li><li>Stir fry everything together.</li></ol></div>
</body></html>
"""

INGREDIENTS_ONLY_PAGE = """
<html><body>
<h1>Rice Bowl</h1>
<ul class="recipe-ingredients"><li>2 cups rice</li><li>1 egg</li></ul>
</body></html>
"""


class TestHtmlFallbackExtractor(unittest.TestCase):
    """Тесты для HtmlFallbackExtractor"""

    def test_extract_full_page(self):
        """Тест: найдены и ингредиенты, и шаги - уверенность средняя"""
        result = HtmlFallbackExtractor(FULL_PAGE, url="https://example.com/stir-fry").extract_all()

        self.assertIsNotNone(result)
        self.assertEqual(result.method, ExtractionMethod.HTML_FALLBACK)
        self.assertEqual(result.confidence, Confidence.MEDIUM)
        self.assertEqual(result.warnings, ())

        recipe = result.recipe
        self.assertEqual(recipe.title, "Easy Stir-Fry")
        self.assertEqual(recipe.description, "Quick weeknight dinner.")
        self.assertEqual(recipe.image_url, "https://example.com/stir-fry.jpg")
        self.assertEqual([i.name for i in recipe.ingredients], ["rice", "soy sauce"])
        self.assertEqual(len(recipe.instructions), 2)

    def test_only_ingredients_is_low_confidence(self):
        """Тест: без шагов уверенность низкая"""
        result = HtmlFallbackExtractor(INGREDIENTS_ONLY_PAGE).extract_all()

        self.assertEqual(result.confidence, Confidence.LOW)
        self.assertEqual(result.recipe.title, "Rice Bowl")
        self.assertIn("No instructions found - manual entry required", result.warnings)

    def test_short_items_are_skipped(self):
        """Тест: слишком короткие шаги и ингредиенты отбрасываются"""
        page = """
        <h1>Soup</h1>
        <ul class="ingredients"><li>ab</li><li>1 l water</li></ul>
        <ol class="instructions"><li>Boil.</li><li>Simmer for twenty minutes.</li></ol>
        """
        recipe = HtmlFallbackExtractor(page).extract_all().recipe

        self.assertEqual([i.name for i in recipe.ingredients], ["water"])
        self.assertEqual([s.content for s in recipe.instructions], ["Simmer for twenty minutes."])

    def test_title_keeps_hyphenated_words(self):
        """Тест: из <title> убирается только название сайта, дефисы внутри слов остаются"""
        for title in ("Chicken Stir-Fry | Blog", "Chicken Stir-Fry - Blog", "Chicken Stir-Fry — Blog"):
            page = f"<html><head><title>{title}</title></head><body></body></html>"
            self.assertEqual(HtmlFallbackExtractor(page).extract_title(), "Chicken Stir-Fry")

    def test_empty_page(self):
        """Тест: без названия и списков результата нет"""
        self.assertIsNone(HtmlFallbackExtractor("<html><body><div>Nothing</div></body></html>").extract_all())


if __name__ == '__main__':
    unittest.main()
