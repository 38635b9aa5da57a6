"""
Эвристический экстрактор рецепта по распространенным CSS классам.
Используется последним, когда на странице нет структурированных данных.
"""

import logging
import re
from typing import Optional

from extractor.base import BaseRecipeExtractor
from src.models.recipe import Confidence, ExtractionMethod, ScrapedRecipeData

logger = logging.getLogger(__name__)

INGREDIENT_SELECTORS = [
    '.recipe-ingredient',
    '.ingredient',
    '.ingredients li',
    '.recipe-ingredients li',
    '[class*="ingredient"] li',
    'ul:-soup-contains("cup") li',
    'ul:-soup-contains("tablespoon") li',
    'ul:-soup-contains("teaspoon") li',
]

INSTRUCTION_SELECTORS = [
    '.recipe-instruction',
    '.instruction',
    '.instructions li',
    '.recipe-instructions li',
    '.directions li',
    '.recipe-directions li',
    '[class*="instruction"] li',
    '[class*="direction"] li',
    'ol li',
]

IMAGE_SELECTORS = [
    '.recipe-image img',
    '.recipe img',
    '[class*="recipe"] img',
    'meta[property="og:image"]',
]

# Разделитель названия сайта в <title>: "Pancakes | My Blog", "Pancakes - My Blog"
TITLE_SEPARATOR_PATTERN = re.compile(r'\s*\|\s*|\s+[-–—]\s+')


class HtmlFallbackExtractor(BaseRecipeExtractor):
    """Последний вариант: поиск заголовка, списков и картинки по типичной верстке"""

    method = ExtractionMethod.HTML_FALLBACK

    def extract_title(self) -> str:
        """Извлечение названия: <h1>, иначе <title> без названия сайта"""
        h1 = self.soup.find('h1')
        if h1:
            title = self.clean_text(h1.get_text())
            if title:
                return title

        title_tag = self.soup.find('title')
        if title_tag:
            title = self.clean_text(title_tag.get_text())
            # Убираем суффиксы типа " | Site name", " - Site name"
            return TITLE_SEPARATOR_PATTERN.split(title)[0].strip()

        return ''

    def extract_description(self) -> str:
        """Извлечение описания: meta description, og:description или первый абзац"""
        meta_desc = self.soup.find('meta', attrs={'name': 'description'})
        if meta_desc and meta_desc.get('content'):
            return self.clean_text(meta_desc['content'])

        og_desc = self.soup.find('meta', property='og:description')
        if og_desc and og_desc.get('content'):
            return self.clean_text(og_desc['content'])

        paragraph = self.soup.find('p')
        if paragraph:
            return self.clean_text(paragraph.get_text())

        return ''

    def select_texts(self, selectors: list[str], min_length: int, max_length: Optional[int] = None) -> list[str]:
        """Тексты элементов первого селектора, который дал хоть что-то"""
        for selector in selectors:
            texts = []
            for element in self.soup.select(selector):
                text = self.clean_text(element.get_text(separator=' ', strip=True))
                if len(text) < min_length:
                    continue
                if max_length is not None and len(text) >= max_length:
                    continue
                texts.append(text)

            if texts:
                logger.debug(f"Селектор {selector} дал {len(texts)} элементов")
                return texts

        return []

    def extract_ingredients(self) -> list[str]:
        return self.select_texts(INGREDIENT_SELECTORS, min_length=3, max_length=200)

    def extract_steps(self) -> list[str]:
        return self.select_texts(INSTRUCTION_SELECTORS, min_length=11)

    def extract_image_url(self) -> Optional[str]:
        for selector in IMAGE_SELECTORS:
            element = self.soup.select_one(selector)
            if element is None:
                continue
            src = element.get('src') or element.get('data-src') or element.get('content')
            if src:
                return self.resolve_url(src)
        return None

    def extract(self) -> Optional[ScrapedRecipeData]:
        title = self.extract_title()
        ingredient_lines = self.extract_ingredients()
        steps = self.extract_steps()

        # Без названия, ингредиентов и шагов рецепта на странице нет
        if not title and not ingredient_lines and not steps:
            return None

        warnings = []
        if len(title) < 3:
            warnings.append('Recipe title may be inaccurate')
        if not ingredient_lines:
            warnings.append('No ingredients found - manual entry required')
        if not steps:
            warnings.append('No instructions found - manual entry required')

        ingredients = self.build_ingredients(ingredient_lines)
        instructions = self.build_instructions(steps)
        confidence = Confidence.MEDIUM if ingredients and instructions else Confidence.LOW

        if warnings:
            logger.warning(f"Эвристическое извлечение {self.url or 'HTML'}: {'; '.join(warnings)}")

        return self.make_result(
            confidence,
            warnings,
            title=title or 'Imported Recipe',
            description=self.extract_description() or None,
            ingredients=ingredients,
            instructions=instructions,
            image_url=self.extract_image_url(),
        )
