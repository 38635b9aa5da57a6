"""
Нормализация импортированного рецепта.

На вход приходит что угодно: результат скрапинга, JSON из внешнего источника,
словарь с camelCase или snake_case ключами. На выходе всегда RecipeRecord,
который проходит валидацию модели: есть хотя бы один ингредиент и один шаг,
позиции идут подряд с нуля, длины полей в допустимых пределах.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from src.models.imported import (
    ImportedIngredient,
    ImportedInstruction,
    ImportedRecipe,
    classify_ingredient,
    classify_instruction,
)
from src.models.recipe import (
    Difficulty,
    Ingredient,
    Instruction,
    RecipeRecord,
    ScrapedRecipeData,
    Visibility,
    new_id,
)
from utils.html import is_absolute_url
from utils.normalization import leading_number, normalize_unit, parse_ingredient_text, parse_quantity

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500
MAX_TEXT_LENGTH = 2000
MAX_TAGS = 20

UNTITLED_RECIPE = 'Untitled Recipe'
UNKNOWN_INGREDIENT = 'Unknown ingredient'
INGREDIENT_PLACEHOLDER = 'Add ingredients here'
INSTRUCTION_PLACEHOLDER = 'Add cooking instructions here'

# Применяются по очереди, каждый один раз
TITLE_NOISE_PATTERNS = [
    re.compile(r'^Recipe:\s*', re.IGNORECASE),
    re.compile(r'^How to make\s*', re.IGNORECASE),
    re.compile(r'\s*-\s*Recipe$', re.IGNORECASE),
    re.compile(r'\s*Recipe$', re.IGNORECASE),
]

STEP_NUMBER_PATTERN = re.compile(r'^\d+\.\s*')


@dataclass
class NormalizationSummary:
    """Что пришлось исправить во входных данных"""
    items_dropped: int = 0
    ids_generated: int = 0
    positions_assigned: int = 0
    placeholders_added: int = 0

    @property
    def has_changes(self) -> bool:
        return any((self.items_dropped, self.ids_generated, self.positions_assigned, self.placeholders_added))


def _plural(count: int, word: str) -> str:
    return f'{count} {word}' if count == 1 else f'{count} {word}s'


def format_normalization_summary(summary: NormalizationSummary) -> str:
    """
    Короткое описание исправлений для пользователя

    Examples:
        "Fixed: dropped 2 empty items, generated 3 IDs"
        "No changes needed"
    """
    parts = []
    if summary.items_dropped:
        parts.append(f'dropped {_plural(summary.items_dropped, "empty item")}')
    if summary.ids_generated:
        parts.append(f'generated {_plural(summary.ids_generated, "ID")}')
    if summary.positions_assigned:
        parts.append(f'assigned {_plural(summary.positions_assigned, "position")}')
    if summary.placeholders_added:
        parts.append(f'added {_plural(summary.placeholders_added, "placeholder")}')

    if not parts:
        return 'No changes needed'
    return 'Fixed: ' + ', '.join(parts)


def _collapse_whitespace(value: Any) -> str:
    if not isinstance(value, str):
        return ''
    return ' '.join(value.split())


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit - 3] + '...'
    return text


def normalize_title(value: Any) -> str:
    """
    Название без служебных слов, с заглавной буквы

    "Recipe: Best Brownies Ever - Recipe" -> "Best brownies ever"
    """
    title = _collapse_whitespace(value)
    for pattern in TITLE_NOISE_PATTERNS:
        title = pattern.sub('', title)
    title = title.strip().capitalize()
    if not title:
        return UNTITLED_RECIPE
    return _truncate(title, MAX_TITLE_LENGTH)


def normalize_long_text(value: Any) -> Optional[str]:
    """Описание и заметки: пробелы схлопнуты, длина ограничена, пустое -> None"""
    text = _collapse_whitespace(value)
    if not text:
        return None
    return _truncate(text, MAX_TEXT_LENGTH)


def normalize_positive_int(value: Any) -> Optional[int]:
    """Число или строка с числом в начале ("30 minutes"); только > 0"""
    number = leading_number(value)
    if number is None:
        return None
    number = round(number)
    return number if number > 0 else None


def normalize_tags(value: Any) -> list[str]:
    """Список или строка через запятую -> уникальные теги в нижнем регистре"""
    if isinstance(value, str):
        value = value.split(',')
    if not isinstance(value, (list, tuple)):
        return []

    tags = []
    for tag in value:
        if not isinstance(tag, str):
            continue
        tag = tag.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags[:MAX_TAGS]


def normalize_url(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    url = value.strip()
    return url if is_absolute_url(url) else None


def normalize_visibility(value: Any) -> Visibility:
    if isinstance(value, str) and value.strip().lower() == Visibility.PUBLIC.value:
        return Visibility.PUBLIC
    return Visibility.PRIVATE


def normalize_difficulty(value: Any) -> Optional[Difficulty]:
    if not isinstance(value, str):
        return None
    try:
        return Difficulty(value.strip().lower())
    except ValueError:
        return None


def _normalize_id(value: Any, summary: NormalizationSummary) -> str:
    if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value).strip():
        return str(value).strip()
    summary.ids_generated += 1
    return new_id()


def _normalize_amount(value: Any) -> float:
    amount = parse_quantity(value)
    if amount is None or amount < 0:
        return 0.0
    return round(amount, 2)


def _ingredient_from_text(text: str, summary: NormalizationSummary) -> Optional[Ingredient]:
    cleaned = _collapse_whitespace(text)
    if not cleaned:
        return None
    parsed = parse_ingredient_text(cleaned)
    return Ingredient(
        id=_normalize_id(None, summary),
        name=parsed.name or cleaned,
        amount=round(parsed.amount, 2),
        unit=parsed.unit,
    )


def _ingredient_from_object(entry: ImportedIngredient, summary: NormalizationSummary) -> Optional[Ingredient]:
    if isinstance(entry.name, str):
        name = _collapse_whitespace(entry.name)
        # пустое название означает пустую строку формы
        if not name:
            return None
    else:
        name = UNKNOWN_INGREDIENT

    category = entry.category.strip().lower() if isinstance(entry.category, str) else ''
    return Ingredient(
        id=_normalize_id(entry.id, summary),
        name=name,
        amount=_normalize_amount(entry.amount),
        unit=normalize_unit(entry.unit),
        notes=normalize_long_text(entry.notes) or '',
        category=category,
    )


def _assign_position(original: Any, index: int, summary: NormalizationSummary) -> int:
    if original != index or isinstance(original, bool):
        summary.positions_assigned += 1
    return index


def normalize_ingredients(entries: Any, summary: NormalizationSummary) -> list[Ingredient]:
    """
    Ингредиенты из строк и объектов

    Пустые записи и записи других типов отбрасываются, позиции
    переназначаются по порядку входа. Пустой результат заменяется заглушкой.
    """
    if not isinstance(entries, (list, tuple)):
        entries = []

    ingredients = []
    for raw_entry in entries:
        entry = classify_ingredient(raw_entry)
        if isinstance(entry, str):
            ingredient = _ingredient_from_text(entry, summary)
            original_position = None
        elif isinstance(entry, ImportedIngredient):
            ingredient = _ingredient_from_object(entry, summary)
            original_position = entry.position
        else:
            ingredient = None
            original_position = None

        if ingredient is None:
            summary.items_dropped += 1
            continue

        ingredient.position = _assign_position(original_position, len(ingredients), summary)
        ingredients.append(ingredient)

    if not ingredients:
        summary.placeholders_added += 1
        ingredients.append(Ingredient(
            id=new_id(),
            name=INGREDIENT_PLACEHOLDER,
            amount=0,
            unit='',
            position=0,
        ))
    return ingredients


def normalize_instruction_text(value: Any) -> str:
    """Текст шага без номера в начале ("1. Mix" -> "Mix"), с заглавной буквы"""
    text = STEP_NUMBER_PATTERN.sub('', _collapse_whitespace(value)).strip()
    if not text:
        return ''
    return text[0].upper() + text[1:]


def normalize_instructions(entries: Any, summary: NormalizationSummary) -> list[Instruction]:
    """Шаги из строк и объектов (content или text), step = 1..n, position = 0..n-1"""
    if not isinstance(entries, (list, tuple)):
        entries = []

    instructions = []
    for raw_entry in entries:
        entry = classify_instruction(raw_entry)
        entry_id = None
        duration = None
        original_position = None

        if isinstance(entry, str):
            content = normalize_instruction_text(entry)
        elif isinstance(entry, ImportedInstruction):
            content = normalize_instruction_text(entry.content) or normalize_instruction_text(entry.text)
            entry_id = entry.id
            duration = normalize_positive_int(entry.duration)
            original_position = entry.position
        else:
            content = ''

        if not content:
            summary.items_dropped += 1
            continue

        index = len(instructions)
        instructions.append(Instruction(
            id=_normalize_id(entry_id, summary),
            step=index + 1,
            content=content,
            duration=duration,
            position=_assign_position(original_position, index, summary),
        ))

    if not instructions:
        summary.placeholders_added += 1
        instructions.append(Instruction(
            id=new_id(),
            step=1,
            content=INSTRUCTION_PLACEHOLDER,
            position=0,
        ))
    return instructions


def normalize_recipe(raw: Any, author_id: Optional[str] = None,
                     summary: Optional[NormalizationSummary] = None) -> RecipeRecord:
    """
    Приведение импортированных данных к RecipeRecord

    Args:
        raw: dict, RecipeInput, ScrapedRecipeData или что угодно (тогда рецепт пустой)
        author_id: автор рецепта; если не задан, берется из raw
        summary: сюда записывается, что было исправлено

    Returns:
        RecipeRecord, всегда удовлетворяющий ограничениям модели
    """
    if summary is None:
        summary = NormalizationSummary()

    imported = ImportedRecipe.from_raw(raw)
    if author_id is None and isinstance(imported.author_id, str):
        author_id = imported.author_id

    record = RecipeRecord(
        title=normalize_title(imported.title),
        description=normalize_long_text(imported.description),
        ingredients=normalize_ingredients(imported.ingredients, summary),
        instructions=normalize_instructions(imported.instructions, summary),
        prep_time=normalize_positive_int(imported.prep_time),
        cook_time=normalize_positive_int(imported.cook_time),
        servings=normalize_positive_int(imported.servings),
        difficulty=normalize_difficulty(imported.difficulty),
        tags=normalize_tags(imported.tags),
        notes=normalize_long_text(imported.notes),
        image_url=normalize_url(imported.image_url),
        source_url=normalize_url(imported.source_url),
        author_id=author_id,
        visibility=normalize_visibility(imported.visibility),
    )

    logger.info(f"Нормализован рецепт '{record.title}': {format_normalization_summary(summary)}")
    return record


def normalize_scraped_recipe(scraped: ScrapedRecipeData, author_id: Optional[str] = None,
                             summary: Optional[NormalizationSummary] = None) -> RecipeRecord:
    """Нормализация результата скрапинга; предупреждения экстрактора пишутся в лог"""
    for warning in scraped.warnings:
        logger.warning(f"{scraped.method.value}: {warning}")
    return normalize_recipe(scraped, author_id=author_id, summary=summary)
