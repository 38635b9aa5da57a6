"""Выбор стратегии извлечения рецепта со страницы"""
import logging
from typing import Optional, Type

import requests
from bs4 import BeautifulSoup

from extractor.base import BaseRecipeExtractor
from extractor.html_fallback import HtmlFallbackExtractor
from extractor.json_ld import JsonLdExtractor
from extractor.microdata import MicrodataExtractor
from src.common.http_client import fetch_html
from src.models.recipe import Confidence, ScrapedRecipeData

logger = logging.getLogger(__name__)


class RecipeScraper:
    """
    Загружает страницу и пробует экстракторы по порядку приоритета.

    Результат с уверенностью выше low возвращается сразу; низкая уверенность
    запоминается и возвращается, только если следующие стратегии ничего не дали.
    Последняя стратегия возвращается при любом результате.
    """

    # от самого надежного источника к самому ненадежному
    EXTRACTORS: list[Type[BaseRecipeExtractor]] = [
        JsonLdExtractor,
        MicrodataExtractor,
        HtmlFallbackExtractor,
    ]

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        """
        Args:
            timeout: таймаут загрузки страницы в секундах
            session: requests.Session для загрузки (по умолчанию одиночные запросы)
        """
        self.timeout = timeout
        self.session = session

    def parse_html(self, html: str, author_id: Optional[str] = None,
                   url: Optional[str] = None) -> Optional[ScrapedRecipeData]:
        """
        Извлекает рецепт из уже загруженного HTML

        Args:
            html: HTML страницы
            author_id: идентификатор автора
            url: адрес страницы, если известен

        Returns:
            ScrapedRecipeData или None, если ни одна стратегия не сработала
        """
        soup = BeautifulSoup(html or '', 'lxml')
        low_confidence_result: Optional[ScrapedRecipeData] = None

        for index, extractor_class in enumerate(self.EXTRACTORS):
            extractor = extractor_class(html, url=url, author_id=author_id, soup=soup)
            result = extractor.extract_all()
            if result is None:
                continue

            is_last = index == len(self.EXTRACTORS) - 1
            if result.confidence != Confidence.LOW or is_last:
                logger.info(f"Рецепт извлечен методом {result.method.value}, уверенность {result.confidence.value}")
                return result

            if low_confidence_result is None:
                low_confidence_result = result
            logger.info(f"{extractor_class.__name__}: низкая уверенность, пробуем следующую стратегию")

        if low_confidence_result is not None:
            logger.warning(f"Возвращаем результат с низкой уверенностью ({low_confidence_result.method.value})")
            return low_confidence_result

        logger.warning(f"Рецепт не найден на странице {url or '(HTML)'}")
        return None

    def scrape(self, url: str, author_id: Optional[str] = None) -> Optional[ScrapedRecipeData]:
        """
        Загружает страницу и извлекает рецепт

        Raises:
            FetchError: страницу не удалось загрузить
        """
        html = fetch_html(url, timeout=self.timeout, session=self.session)
        return self.parse_html(html, author_id=author_id, url=url)


def scrape_recipe_from_url(url: str, author_id: Optional[str] = None) -> Optional[ScrapedRecipeData]:
    """Загрузка страницы и извлечение рецепта с настройками по умолчанию"""
    return RecipeScraper().scrape(url, author_id)
