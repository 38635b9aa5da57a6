"""
Импорт рецепта со страницы: загрузка, извлечение и нормализация
"""
import sys
import json
import logging
from pathlib import Path
import argparse

# Добавление корневой директории в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import config
from src.common.http_client import FetchError
from src.stages.extract import RecipeScraper
from src.stages.normalize import (
    NormalizationSummary,
    format_normalization_summary,
    normalize_scraped_recipe,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Импорт рецепта с веб-страницы")
    parser.add_argument('url', nargs='?', default=None, help='Адрес страницы с рецептом')
    parser.add_argument('--html', type=str, default=None, help='Путь к сохраненному HTML файлу вместо загрузки страницы')
    parser.add_argument('--url', dest='page_url', type=str, default=None, help='Адрес страницы для относительных ссылок при --html')
    parser.add_argument('--author-id', type=str, default=None, help='Идентификатор автора рецепта')
    parser.add_argument('--raw', action='store_true', default=False, help='Вывести результат извлечения без нормализации')
    parser.add_argument('--output', type=str, default=None, help='Сохранить JSON в файл')
    parser.add_argument('--timeout', type=float, default=None, help=f'Таймаут загрузки в секундах (по умолчанию: {config.SCRAPER_TIMEOUT})')
    return parser


def main(argv=None) -> int:
    """Основная функция, возвращает код выхода"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.url and not args.html:
        parser.error('нужно указать url или --html')

    scraper = RecipeScraper(timeout=args.timeout)

    if args.html:
        html = Path(args.html).read_text(encoding='utf-8')
        scraped = scraper.parse_html(html, author_id=args.author_id, url=args.page_url or args.url)
    else:
        try:
            scraped = scraper.scrape(args.url, author_id=args.author_id)
        except FetchError as e:
            logger.error(f"Не удалось загрузить страницу ({e.reason}): {e.message}")
            return 1

    if scraped is None:
        logger.error("Рецепт на странице не найден")
        return 1

    summary = None
    if args.raw:
        data = scraped.to_dict()
    else:
        summary = NormalizationSummary()
        data = normalize_scraped_recipe(scraped, author_id=args.author_id, summary=summary).to_dict()

    output = json.dumps(data, ensure_ascii=False, indent=4)
    if args.output:
        Path(args.output).write_text(output, encoding='utf-8')
        logger.info(f"Рецепт сохранен в {args.output}")
    else:
        print(output)

    print(f"Метод: {scraped.method.value}, уверенность: {scraped.confidence.value}")
    for warning in scraped.warnings:
        print(f"Предупреждение: {warning}")
    if summary is not None:
        print(format_normalization_summary(summary))
    return 0


if __name__ == '__main__':
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )
    sys.exit(main())
