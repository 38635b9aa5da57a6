"""
Экстрактор рецепта из структурированных данных schema.org (JSON-LD)
"""

import json
import logging
import re
from typing import Any, Optional

from extractor.base import BaseRecipeExtractor
from src.models.recipe import Confidence, ExtractionMethod, ScrapedRecipeData
from utils.duration import parse_iso_duration

logger = logging.getLogger(__name__)


def is_recipe(item: Any) -> bool:
    """@type может быть строкой или списком"""
    if not isinstance(item, dict):
        return False
    item_type = item.get('@type', '')
    if isinstance(item_type, list):
        return 'Recipe' in item_type
    return item_type == 'Recipe'


def find_recipe(data: Any) -> Optional[dict]:
    """
    Поиск объекта Recipe в данных JSON-LD

    Recipe может лежать на верхнем уровне, в списке объектов или внутри @graph
    """
    if isinstance(data, list):
        for item in data:
            recipe = find_recipe(item)
            if recipe:
                return recipe
        return None

    if not isinstance(data, dict):
        return None

    if is_recipe(data):
        return data

    graph = data.get('@graph')
    if isinstance(graph, list):
        for item in graph:
            if is_recipe(item):
                return item

    return None


class JsonLdExtractor(BaseRecipeExtractor):
    """Экстрактор для <script type="application/ld+json"> с @type Recipe"""

    method = ExtractionMethod.STRUCTURED_DATA

    def get_recipe_json_ld(self) -> Optional[dict]:
        """Извлечение Recipe данных из JSON-LD"""
        json_ld_scripts = self.soup.find_all('script', type='application/ld+json')

        for script in json_ld_scripts:
            content = script.string or script.get_text()
            if not content or not content.strip():
                continue
            try:
                data = json.loads(content)
            except (json.JSONDecodeError, TypeError) as e:
                logger.debug(f"Пропущен невалидный блок JSON-LD: {e}")
                continue

            recipe = find_recipe(data)
            if recipe:
                return recipe

        return None

    def extract_ingredients(self, recipe_data: dict) -> list[str]:
        """Строки ингредиентов (recipeIngredient или устаревшее ingredients)"""
        ingredients = recipe_data.get('recipeIngredient') or recipe_data.get('ingredients') or []
        if isinstance(ingredients, str):
            ingredients = [ingredients]
        if not isinstance(ingredients, list):
            return []
        return [item for item in ingredients if isinstance(item, str)]

    def extract_steps(self, instructions: Any) -> list[str]:
        """
        Тексты шагов из recipeInstructions

        Поддерживает строку (делится по переносам строк), список строк,
        HowToStep (text или name) и HowToSection (itemListElement)
        """
        if isinstance(instructions, str):
            return [line for line in re.split(r'[\r\n]+', instructions) if line.strip()]

        if isinstance(instructions, dict):
            if 'itemListElement' in instructions:
                return self.extract_steps(instructions['itemListElement'])
            text = instructions.get('text') or instructions.get('name')
            return [text] if isinstance(text, str) else []

        steps = []
        if isinstance(instructions, list):
            for step in instructions:
                if isinstance(step, str):
                    steps.append(step)
                else:
                    steps.extend(self.extract_steps(step))
        return steps

    def extract_servings(self, recipe_yield: Any) -> Optional[int]:
        """recipeYield: число, строка "4 servings" или список (первое числовое значение)"""
        if isinstance(recipe_yield, list):
            for item in recipe_yield:
                servings = self.parse_servings(item)
                if servings:
                    return servings
            return None
        return self.parse_servings(recipe_yield)

    def extract_image_url(self, image: Any) -> Optional[str]:
        """image: строка, список строк, ImageObject или список ImageObject"""
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get('url') or image.get('contentUrl')
        if isinstance(image, str):
            return self.resolve_url(image)
        return None

    def extract_tags(self, keywords: Any) -> list[str]:
        """keywords: строка через запятую или список"""
        if isinstance(keywords, str):
            keywords = keywords.split(',')
        if not isinstance(keywords, list):
            return []
        return [tag.strip() for tag in keywords if isinstance(tag, str) and tag.strip()]

    def extract(self) -> Optional[ScrapedRecipeData]:
        recipe_data = self.get_recipe_json_ld()
        if not recipe_data:
            return None

        title = recipe_data.get('name')
        description = recipe_data.get('description')

        recipe_fields = {
            'title': self.clean_text(title) if isinstance(title, str) else None,
            'description': self.clean_text(description) if isinstance(description, str) else None,
            'ingredients': self.build_ingredients(self.extract_ingredients(recipe_data)),
            'instructions': self.build_instructions(self.extract_steps(recipe_data.get('recipeInstructions'))),
            'prep_time': parse_iso_duration(recipe_data.get('prepTime')) or None,
            'cook_time': parse_iso_duration(recipe_data.get('cookTime')) or None,
            'servings': self.extract_servings(recipe_data.get('recipeYield')),
            'tags': self.extract_tags(recipe_data.get('keywords')),
            'image_url': self.extract_image_url(recipe_data.get('image')),
        }

        logger.info(f"Найден рецепт в JSON-LD: {recipe_fields['title']}")
        return self.make_result(Confidence.HIGH, **recipe_fields)
