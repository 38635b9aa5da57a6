from typing import Optional
from urllib.parse import urljoin, urlparse
from bs4 import BeautifulSoup
import logging

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ('text/html', 'application/xhtml+xml')


def is_html_content_type(content_type: Optional[str]) -> bool:
    """Проверка заголовка Content-Type на HTML"""
    if not content_type:
        return False
    return any(html_type in content_type.lower() for html_type in HTML_CONTENT_TYPES)


def is_absolute_url(url: Optional[str]) -> bool:
    """URL валиден, если у него есть схема и хост"""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def get_base_url(soup: BeautifulSoup, page_url: Optional[str]) -> Optional[str]:
    """
    Базовый URL страницы для относительных ссылок

    Args:
        soup: разобранная страница
        page_url: адрес, с которого загружена страница

    Returns:
        <base href> относительно page_url, иначе сам page_url
    """
    base_tag = soup.find('base', href=True)
    if not base_tag:
        return page_url

    href = base_tag['href'].strip()
    if not page_url:
        return href
    try:
        return urljoin(page_url, href)
    except ValueError as e:
        logger.debug(f"Некорректный <base href> {href}: {e}")
        return page_url


def resolve_url(src: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """
    Преобразование ссылки в абсолютную

    Returns:
        Абсолютный URL или None, если его не получилось построить
    """
    if not src or not isinstance(src, str):
        return None

    src = src.strip()
    if is_absolute_url(src):
        return src

    if base_url:
        try:
            resolved = urljoin(base_url, src)
        except ValueError as e:
            logger.debug(f"Некорректная ссылка {src}: {e}")
            return None
        if is_absolute_url(resolved):
            return resolved
    elif src.startswith('//'):
        return f'https:{src}'

    logger.debug(f"Не удалось построить абсолютный URL для {src}")
    return None
