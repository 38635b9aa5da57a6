"""
Конфигурация импорта рецептов и скриптов
"""
import os
from typing import Optional
from dotenv import load_dotenv

# Загружаем переменные из .env файла
load_dotenv()

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
)


class Config:
    """Централизованная конфигурация приложения из переменных окружения"""

    # настройки загрузки страниц
    SCRAPER_TIMEOUT: float = float(os.getenv('SCRAPER_TIMEOUT', '30'))
    SCRAPER_USER_AGENT: str = os.getenv('SCRAPER_USER_AGENT', DEFAULT_USER_AGENT)
    SCRAPER_ACCEPT_LANGUAGE: str = os.getenv('SCRAPER_ACCEPT_LANGUAGE', 'en-US,en;q=0.5')
    SCRAPER_PROXY: Optional[str] = os.getenv('SCRAPER_PROXY', None)

    # логирование
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

# единый экземпляр конфигурации
config = Config()
