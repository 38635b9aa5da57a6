"""
Загрузка HTML страниц рецептов
"""
import logging
import time
from typing import Optional

import requests

from config.config import config
from utils.html import is_html_content_type

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Страницу не удалось загрузить: таймаут, HTTP статус не 2xx или не HTML"""

    TIMEOUT = 'timeout'
    HTTP_STATUS = 'http_status'
    NOT_HTML = 'not_html'
    NETWORK = 'network'

    def __init__(self, message: str, reason: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.status_code = status_code


def build_headers() -> dict[str, str]:
    """Заголовки как у обычного браузера"""
    return {
        'User-Agent': config.SCRAPER_USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': config.SCRAPER_ACCEPT_LANGUAGE,
        'Accept-Encoding': 'gzip, deflate',
        'DNT': '1',
        'Connection': 'keep-alive',
        'Upgrade-Insecure-Requests': '1',
    }


CHUNK_SIZE = 64 * 1024


def _timeout_error() -> FetchError:
    return FetchError(
        'Request timeout - the website took too long to respond',
        FetchError.TIMEOUT,
    )


def _read_body(response, deadline: float, url: str) -> bytes:
    """
    Чтение тела ответа с общим ограничением времени

    timeout в requests ограничивает только соединение и паузу между байтами,
    поэтому медленная отдача проверяется по deadline на каждом куске
    """
    body = bytearray()
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if time.monotonic() > deadline:
            response.close()
            logger.error(f"Превышено общее время загрузки {url}")
            raise _timeout_error()
        body.extend(chunk)
    return bytes(body)


def fetch_html(url: str, timeout: Optional[float] = None,
               session: Optional[requests.Session] = None) -> str:
    """
    Загрузка HTML страницы

    Args:
        url: адрес страницы
        timeout: общий таймаут загрузки в секундах (по умолчанию SCRAPER_TIMEOUT)
        session: requests.Session (по умолчанию одиночный запрос)

    Returns:
        HTML страницы

    Raises:
        FetchError: таймаут, HTTP статус не 2xx, ответ не HTML или сетевая ошибка
    """
    timeout = config.SCRAPER_TIMEOUT if timeout is None else timeout
    proxies = {"http": config.SCRAPER_PROXY, "https": config.SCRAPER_PROXY} if config.SCRAPER_PROXY else None
    http = session or requests
    deadline = time.monotonic() + timeout

    logger.info(f"Загрузка {url}")
    try:
        response = http.get(url, headers=build_headers(), timeout=timeout, proxies=proxies, stream=True)
    except requests.exceptions.Timeout as e:
        logger.error(f"Таймаут загрузки {url} ({timeout}с)")
        raise _timeout_error() from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Ошибка загрузки {url}: {e}")
        raise FetchError(f'Failed to fetch content from URL: {e}', FetchError.NETWORK) from e

    if not 200 <= response.status_code < 300:
        logger.error(f"HTTP {response.status_code} при загрузке {url}")
        response.close()
        raise FetchError(
            f'HTTP {response.status_code}: {response.reason}',
            FetchError.HTTP_STATUS,
            status_code=response.status_code,
        )

    content_type = response.headers.get('Content-Type', '')
    if not is_html_content_type(content_type):
        logger.error(f"{url} вернул {content_type or 'неизвестный тип'} вместо HTML")
        response.close()
        raise FetchError('URL does not return HTML content', FetchError.NOT_HTML)

    try:
        body = _read_body(response, deadline, url)
    except requests.exceptions.Timeout as e:
        logger.error(f"Таймаут чтения {url} ({timeout}с)")
        raise _timeout_error() from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Ошибка чтения ответа {url}: {e}")
        raise FetchError(f'Failed to fetch content from URL: {e}', FetchError.NETWORK) from e

    # тело уже прочитано потоком, отдаем его requests для декодирования
    response._content = body

    # Без charset в заголовке requests считает страницу latin-1
    if 'charset' not in content_type.lower():
        response.encoding = response.apparent_encoding

    return response.text
