"""
Парсинг строки ингредиента в количество, единицу измерения и название.

Здесь же лежат общие таблицы (синонимы единиц, счетные ингредиенты),
экстракторы и нормализатор берут их только отсюда.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

# Единицы измерения, которые принимает схема рецепта ('' - без единицы)
CANONICAL_UNITS = (
    'g', 'kg', 'ml', 'l', 'tsp', 'tbsp', 'cup', 'oz', 'lb',
    'fl oz', 'pint', 'quart', 'gallon', 'pinch',
)

# Регистрозависимые сокращения: T - столовая ложка, t - чайная
CASE_SENSITIVE_UNITS = {
    'T': 'tbsp',
    't': 'tsp',
}

# Синонимы единиц (ключи в нижнем регистре, без точек)
UNIT_SYNONYMS = {
    # метрические
    'g': 'g', 'gr': 'g', 'gram': 'g', 'grams': 'g', 'gramme': 'g', 'grammes': 'g',
    'kg': 'kg', 'kgs': 'kg', 'kilo': 'kg', 'kilos': 'kg', 'kilogram': 'kg', 'kilograms': 'kg',
    'ml': 'ml', 'milliliter': 'ml', 'milliliters': 'ml', 'millilitre': 'ml', 'millilitres': 'ml',
    'l': 'l', 'liter': 'l', 'liters': 'l', 'litre': 'l', 'litres': 'l',

    # чайные ложки
    'tsp': 'tsp', 'tsps': 'tsp', 'teaspoon': 'tsp', 'teaspoons': 'tsp',

    # столовые ложки
    'tbsp': 'tbsp', 'tbsps': 'tbsp', 'tbs': 'tbsp', 'tbl': 'tbsp',
    'tablespoon': 'tbsp', 'tablespoons': 'tbsp',

    # чашки
    'cup': 'cup', 'cups': 'cup', 'c': 'cup',

    # вес
    'oz': 'oz', 'ounce': 'oz', 'ounces': 'oz',
    'lb': 'lb', 'lbs': 'lb', 'pound': 'lb', 'pounds': 'lb',

    # жидкие унции
    'fl oz': 'fl oz', 'fl': 'fl oz', 'fluid': 'fl oz',
    'fluid oz': 'fl oz', 'fluid ounce': 'fl oz', 'fluid ounces': 'fl oz',

    # объем
    'pint': 'pint', 'pints': 'pint', 'pt': 'pint',
    'quart': 'quart', 'quarts': 'quart', 'qt': 'quart',
    'gallon': 'gallon', 'gallons': 'gallon', 'gal': 'gallon',

    # прочее
    'pinch': 'pinch', 'pinches': 'pinch', 'dash': 'pinch', 'dashes': 'pinch',
}

MULTI_WORD_UNITS = frozenset(key for key in UNIT_SYNONYMS if ' ' in key)

# Ингредиенты, которые считают штуками (без единицы измерения)
COUNT_BASED_INGREDIENTS = frozenset({
    'egg', 'onion', 'shallot', 'apple', 'pear', 'banana', 'lemon', 'lime', 'orange',
    'potato', 'tomato', 'carrot', 'zucchini', 'avocado', 'clove', 'slice', 'piece',
    'can', 'jar', 'bottle', 'package', 'packet', 'bag', 'box', 'sheet', 'stick',
})

# Размер перед счетным ингредиентом: "2 large eggs"
SIZE_DESCRIPTORS = ('extra large', 'large', 'medium', 'small', 'jumbo')

# Unicode дроби -> (числитель, знаменатель)
UNICODE_FRACTIONS = {
    '½': (1, 2), '¼': (1, 4), '¾': (3, 4),
    '⅓': (1, 3), '⅔': (2, 3),
    '⅛': (1, 8), '⅜': (3, 8), '⅝': (5, 8), '⅞': (7, 8),
    '⅕': (1, 5), '⅖': (2, 5), '⅗': (3, 5), '⅘': (4, 5),
    '⅙': (1, 6), '⅚': (5, 6),
}

_GLYPHS = ''.join(UNICODE_FRACTIONS)

# Число в начале строки: порядок альтернатив важен (смешанная дробь - первой!)
NUMBER = (
    r'('
    r'\d+\s+\d+\s*/\s*\d+|'                           # 1 1/2
    r'\d+\s*/\s*\d+|'                                 # 1/2
    rf'\d+\s*[{_GLYPHS}]|'                            # 1½, 1 ½
    rf'[{_GLYPHS}]|'                                  # ½
    r'\d+(?:[.,]\d+)?\s*[-–—]\s*\d+(?:[.,]\d+)?|'     # 2-3
    r'\d+(?:[.,]\d+)?'                                # 2, 1.5
    r')'
)

COUNT_WITH_SIZE_PATTERN = re.compile(
    rf'^{NUMBER}\s+(extra\s+large|large|medium|small|jumbo)\s+(.+)$',
    re.IGNORECASE
)
SIMPLE_COUNT_PATTERN = re.compile(rf'^{NUMBER}\s+([a-zA-Z][^0-9]*)$')
MEASURED_PATTERN = re.compile(rf'^{NUMBER}\s*([a-zA-Z].*)$')

# Шаблоны для уже очищенного количества
_MIXED_RE = re.compile(r'(\d+) (\d+)\s*/\s*(\d+)')
_FRACTION_RE = re.compile(r'(\d+)\s*/\s*(\d+)')
_RANGE_RE = re.compile(r'(\d+(?:\.\d+)?)\s*[-–—]\s*(\d+(?:\.\d+)?)')
_DECIMAL_RE = re.compile(r'\d+(?:\.\d+)?|\.\d+')


@dataclass(frozen=True)
class ParsedIngredient:
    """Результат разбора строки ингредиента, все поля всегда заполнены"""
    amount: float
    unit: str
    name: str


def _finite(number: Any) -> Optional[float]:
    """float только для конечных значений (огромные числа и inf -> None)"""
    try:
        number = float(number)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _quantity_from_text(text: str) -> Optional[float]:
    match = _MIXED_RE.fullmatch(text)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        return whole + numerator / denominator

    match = _FRACTION_RE.fullmatch(text)
    if match:
        return int(match.group(1)) / int(match.group(2))

    match = _RANGE_RE.fullmatch(text)
    if match:
        # Диапазон - берём среднее
        return (float(match.group(1)) + float(match.group(2))) / 2

    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    return None


def parse_quantity(value: Any) -> Optional[float]:
    """
    Преобразует количество в float

    Поддерживает: 2, 1.5, 1,5, 1/2, 1 1/2, ½, 1½, диапазон 2-3 (берётся среднее)

    Returns:
        Число или None, если распознать не удалось
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(value)
    if not isinstance(value, str):
        return None

    text = value.strip().replace(',', '.').replace('⁄', '/')
    for glyph, (numerator, denominator) in UNICODE_FRACTIONS.items():
        text = text.replace(glyph, f' {numerator}/{denominator}')
    text = ' '.join(text.split())
    if not text:
        return None

    # int() длиннее 4300 цифр -> ValueError, деление огромных int -> OverflowError
    try:
        quantity = _quantity_from_text(text)
    except (ZeroDivisionError, OverflowError, ValueError):
        return None
    return _finite(quantity) if quantity is not None else None


_LEADING_NUMBER_RE = re.compile(r'^\s*(\d+(?:[.,]\d+)?)')


def leading_number(value: Any) -> Optional[float]:
    """
    Число из значения: само число или число в начале строки ("4 servings" -> 4)

    Returns:
        float или None (в том числе для чисел, не помещающихся в float)
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER_RE.match(value)
    if not match:
        return None
    return _finite(match.group(1).replace(',', '.'))


def normalize_unit(unit: Any) -> str:
    """Приводит единицу измерения к каноническому виду, неизвестная -> ''"""
    if not unit or not isinstance(unit, str):
        return ''

    stripped = unit.strip().strip(',;:')
    if stripped in CASE_SENSITIVE_UNITS:
        return CASE_SENSITIVE_UNITS[stripped]

    # "Tbsp." -> "tbsp", "fl. oz" -> "fl oz"
    key = ' '.join(stripped.lower().replace('.', ' ').split())
    return UNIT_SYNONYMS.get(key, '')


def _singular_forms(word: str) -> set[str]:
    forms = {word}
    if word.endswith('es'):
        forms.add(word[:-2])
    if word.endswith('s'):
        forms.add(word[:-1])
    return forms


def is_count_based(phrase: str) -> bool:
    """Проверяет, есть ли в фразе счетный ингредиент (egg, onion, can...)"""
    words = re.findall(r'[a-z]+', phrase.lower())
    return any(_singular_forms(word) & COUNT_BASED_INGREDIENTS for word in words)


def _split_unit(rest: str) -> tuple[str, str]:
    """
    Отделяет единицу измерения от названия

    Returns:
        (каноническая единица или '', название)
    """
    words = rest.split()

    # двухсловные единицы: "fl oz", "fluid ounces"
    if len(words) > 2:
        two_word_key = ' '.join(f'{words[0]} {words[1]}'.lower().replace('.', ' ').split())
        if two_word_key in MULTI_WORD_UNITS:
            return UNIT_SYNONYMS[two_word_key], ' '.join(words[2:])

    unit = normalize_unit(words[0])
    if unit:
        return unit, ' '.join(words[1:])

    # Неизвестная единица остается частью названия
    return '', rest


def _clean_name(name: str) -> str:
    return ' '.join(name.split()).strip(' ,;:')


def parse_ingredient_text(text: Any, default_amount: float = 1.0) -> ParsedIngredient:
    """
    Разбор строки ингредиента на количество, единицу и название.
    Никогда не падает: если ничего не распознано, вся строка - название.

    Examples:
        "2 cups flour"   -> amount=2,   unit="cup",  name="flour"
        "1 1/2 tbsp oil" -> amount=1.5, unit="tbsp", name="oil"
        "2 large eggs"   -> amount=2,   unit="",     name="large eggs"
        "salt to taste"  -> amount=default_amount, unit="", name="salt to taste"

    Args:
        text: строка ингредиента
        default_amount: количество, если число в строке не найдено

    Returns:
        ParsedIngredient
    """
    cleaned = ' '.join(text.split()) if isinstance(text, str) else ''

    # 1. "2 large eggs" - счетный ингредиент с размером
    match = COUNT_WITH_SIZE_PATTERN.match(cleaned)
    if match:
        amount = parse_quantity(match.group(1))
        if amount is not None:
            size = ' '.join(match.group(2).lower().split())
            return ParsedIngredient(amount=amount, unit='', name=_clean_name(f'{size} {match.group(3)}'))

    # 2. "3 eggs", "2 cloves garlic" - счетный ингредиент без единицы
    match = SIMPLE_COUNT_PATTERN.match(cleaned)
    if match:
        phrase = match.group(2).strip()
        first_word = phrase.split()[0]
        if is_count_based(phrase) and not normalize_unit(first_word):
            amount = parse_quantity(match.group(1))
            if amount is not None:
                return ParsedIngredient(amount=amount, unit='', name=_clean_name(phrase))

    # 3. "2 cups flour", "1/2 tsp salt", "200g butter" - количество + единица + название
    match = MEASURED_PATTERN.match(cleaned)
    if match and len(match.group(2).split()) >= 2:
        amount = parse_quantity(match.group(1))
        if amount is not None:
            unit, name = _split_unit(match.group(2))
            name = _clean_name(name)
            if name:
                return ParsedIngredient(amount=amount, unit=unit, name=name)

    # 4. Не распознали - вся строка считается названием
    return ParsedIngredient(amount=default_amount, unit='', name=cleaned.strip())
