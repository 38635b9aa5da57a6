"""
Экстрактор рецепта из микроразметки schema.org (itemscope / itemtype / itemprop)
"""

import logging
from typing import Optional

from bs4 import Tag

from extractor.base import BaseRecipeExtractor
from src.models.recipe import Confidence, ExtractionMethod, ScrapedRecipeData

logger = logging.getLogger(__name__)


class MicrodataExtractor(BaseRecipeExtractor):
    """Экстрактор для элементов с itemtype="https://schema.org/Recipe" """

    method = ExtractionMethod.MICRODATA

    def find_recipe_element(self) -> Optional[Tag]:
        """Первый элемент, помеченный как Recipe"""
        return self.soup.select_one('[itemtype*="schema.org/Recipe"]')

    @staticmethod
    def find_props(root: Tag, prop: str) -> list[Tag]:
        """
        Элементы с itemprop=prop, принадлежащие самому рецепту

        Свойства вложенных сущностей (автор, отзывы и т.п.) пропускаются
        """
        found = []
        for element in root.find_all(attrs={'itemprop': True}):
            itemprop = element.get('itemprop', '')
            if isinstance(itemprop, list):
                itemprop = ' '.join(itemprop)
            if prop not in itemprop.split():
                continue

            # ближайший itemscope между элементом и рецептом означает вложенную сущность
            parent = element.parent
            while parent is not None and parent is not root:
                if parent.has_attr('itemscope'):
                    break
                parent = parent.parent
            if parent is root:
                found.append(element)
        return found

    def prop_value(self, element: Tag) -> str:
        """Значение свойства по правилам микроразметки"""
        if element.name == 'meta':
            return element.get('content', '') or ''
        if element.name in ('img', 'audio', 'video', 'source'):
            return element.get('src', '') or ''
        if element.name in ('a', 'link', 'area'):
            return element.get('href', '') or ''
        if element.name == 'time' and element.get('datetime'):
            return element['datetime']
        if element.get('content'):
            return element['content']
        return element.get_text(separator=' ', strip=True)

    def first_value(self, root: Tag, prop: str) -> str:
        elements = self.find_props(root, prop)
        if not elements:
            return ''
        return self.clean_text(self.prop_value(elements[0]))

    def extract_instruction_texts(self, root: Tag) -> list[str]:
        """Контейнер со списком дает по шагу на каждый <li>"""
        texts = []
        for element in self.find_props(root, 'recipeInstructions'):
            items = element.find_all('li')
            if items:
                texts.extend(item.get_text(separator=' ', strip=True) for item in items)
            else:
                text_props = self.find_props(element, 'text') if element.has_attr('itemscope') else []
                if text_props:
                    texts.append(self.prop_value(text_props[0]))
                else:
                    texts.append(self.prop_value(element))
        return texts

    def extract_time(self, root: Tag, prop: str) -> Optional[int]:
        elements = self.find_props(root, prop)
        if not elements:
            return None
        element = elements[0]
        value = element.get('datetime') or element.get('content') or element.get_text(strip=True)
        return self.parse_minutes(value)

    def extract_image_url(self, root: Tag) -> Optional[str]:
        for element in self.find_props(root, 'image'):
            src = element.get('src') or element.get('content') or element.get('href')
            if src:
                return self.resolve_url(src)
        return None

    def extract(self) -> Optional[ScrapedRecipeData]:
        recipe_element = self.find_recipe_element()
        if recipe_element is None:
            return None

        warnings = []

        title = self.first_value(recipe_element, 'name')
        if not title:
            h1 = self.soup.find('h1')
            title = self.clean_text(h1.get_text()) if h1 else ''

        description = self.first_value(recipe_element, 'description')

        ingredient_elements = (
            self.find_props(recipe_element, 'recipeIngredient')
            or self.find_props(recipe_element, 'ingredients')
        )
        ingredients = self.build_ingredients(self.prop_value(el) for el in ingredient_elements)
        instructions = self.build_instructions(self.extract_instruction_texts(recipe_element))

        servings_value = self.first_value(recipe_element, 'recipeYield')

        if not title:
            warnings.append('No recipe title found')
        if not ingredients:
            warnings.append('No ingredients found')
        if not instructions:
            warnings.append('No instructions found')

        confidence = Confidence.MEDIUM if ingredients and instructions else Confidence.LOW
        logger.info(f"Найдена микроразметка рецепта: {title or '(без названия)'}, уверенность {confidence.value}")

        return self.make_result(
            confidence,
            warnings,
            title=title or 'Untitled Recipe',
            description=description or None,
            ingredients=ingredients,
            instructions=instructions,
            prep_time=self.extract_time(recipe_element, 'prepTime'),
            cook_time=self.extract_time(recipe_element, 'cookTime'),
            servings=self.parse_servings(servings_value),
            image_url=self.extract_image_url(recipe_element),
        )
