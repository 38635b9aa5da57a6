"""
базовый класс экстрактора данных рецептов
Каждый экстрактор реализует одну стратегию извлечения (JSON-LD, микроразметка, эвристики по HTML)
Все классы должны наследоваться от этого класса и реализовывать метод extract
Для поиска все наследники должны иметь имя вида <Strategy>Extractor, например JsonLdExtractor
"""

import html
import logging
import re
from abc import ABC, abstractmethod
from functools import cached_property
from typing import Iterable, Optional

from bs4 import BeautifulSoup

from src.models.recipe import (
    Confidence,
    ExtractionMethod,
    Ingredient,
    Instruction,
    RecipeInput,
    ScrapedRecipeData,
    Visibility,
)
from utils.duration import parse_iso_duration
from utils.html import get_base_url, is_absolute_url, resolve_url
from utils.normalization import leading_number, parse_ingredient_text

logger = logging.getLogger(__name__)


class BaseRecipeExtractor(ABC):
    """базовый экстрактор данных рецептов"""

    method: ExtractionMethod

    def __init__(self, html_content: str, url: Optional[str] = None,
                 author_id: Optional[str] = None, soup: Optional[BeautifulSoup] = None):
        """
        Args:
            html_content: HTML страницы
            url: адрес страницы (для относительных ссылок и source_url)
            author_id: идентификатор автора, передается в рецепт как есть
            soup: уже разобранная страница, чтобы не парсить HTML повторно
        """
        self.html_content = html_content or ''
        self.url = url
        self.author_id = author_id
        self.soup = soup if soup is not None else BeautifulSoup(self.html_content, 'lxml')

    @cached_property
    def base_url(self) -> Optional[str]:
        """Базовый URL для относительных ссылок, вычисляется при первом обращении"""
        return get_base_url(self.soup, self.url)

    @staticmethod
    def clean_text(text: str) -> str:
        """Очистка текста от нечитаемых символов и нормализация"""
        if not text:
            return ''

        # Декодируем HTML entities (&#039; -> ', &quot; -> ", etc.)
        text = html.unescape(text)

        # Удаляем Unicode символы типа ▢, □, ✓ и другие специальные символы
        text = re.sub(r'[▢□✓✔▪▫●○■]', '', text)
        # Удаляем лишние пробелы
        text = re.sub(r'\s+', ' ', text)
        return text.strip()

    @staticmethod
    def parse_minutes(value) -> Optional[int]:
        """Время из ISO 8601 duration ("PT15M") или из числа в начале строки ("15 min")"""
        minutes = parse_iso_duration(value)
        if minutes is None:
            number = leading_number(value)
            minutes = int(number) if number is not None else None
        return minutes if minutes else None

    @staticmethod
    def parse_servings(value) -> Optional[int]:
        """Количество порций из числа или строки вида "4 servings" """
        number = leading_number(value)
        if number is None or number <= 0:
            return None
        return int(number)

    def resolve_url(self, src: Optional[str]) -> Optional[str]:
        """Ссылка относительно базового URL страницы"""
        return resolve_url(src, self.base_url)

    def build_ingredients(self, lines: Iterable[str]) -> list[Ingredient]:
        """Строки ингредиентов -> Ingredient через парсер количества и единиц"""
        ingredients = []
        for line in lines:
            text = self.clean_text(line) if isinstance(line, str) else ''
            if not text:
                continue
            parsed = parse_ingredient_text(text)
            ingredients.append(Ingredient(
                name=parsed.name or text,
                amount=round(parsed.amount, 2),
                unit=parsed.unit,
                position=len(ingredients),
            ))
        return ingredients

    def build_instructions(self, texts: Iterable[str]) -> list[Instruction]:
        """Тексты шагов -> Instruction с последовательными step/position"""
        instructions = []
        for text in texts:
            content = self.clean_text(text) if isinstance(text, str) else ''
            if not content:
                continue
            instructions.append(Instruction(
                step=len(instructions) + 1,
                content=content,
                position=len(instructions),
            ))
        return instructions

    def make_result(self, confidence: Confidence, warnings: Optional[list[str]] = None,
                    **recipe_fields) -> ScrapedRecipeData:
        """Сборка ScrapedRecipeData с общими полями (автор, источник, видимость)"""
        recipe = RecipeInput(
            author_id=self.author_id,
            source_url=self.url if is_absolute_url(self.url) else None,
            visibility=Visibility.PRIVATE.value,
            **recipe_fields,
        )
        return ScrapedRecipeData(
            recipe=recipe,
            method=self.method,
            confidence=confidence,
            warnings=tuple(warnings or ()),
        )

    def extract_all(self) -> Optional[ScrapedRecipeData]:
        """
        Извлечение рецепта; любая ошибка разбора означает "нет результата",
        чтобы можно было перейти к следующей стратегии
        """
        try:
            return self.extract()
        except Exception as e:
            logger.error(f"Ошибка извлечения рецепта ({self.method.value}) из {self.url or 'HTML'}: {e}")
            return None

    @abstractmethod
    def extract(self) -> Optional[ScrapedRecipeData]:
        """Извлечение данных рецепта из HTML"""
        raise NotImplementedError("Метод extract должен быть реализован в подклассе")
