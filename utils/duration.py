"""
Декодирование ISO 8601 duration ("PT1H30M", "P1DT2H") в минуты
"""
import re
from typing import Any, Optional

# P[nD][T[nH][nM][nS]] - все компоненты необязательные
ISO_DURATION_PATTERN = re.compile(
    r'^P'
    r'(?:(\d+)D)?'
    r'(?:T'
    r'(?:(\d+)H)?'
    r'(?:(\d+)M)?'
    r'(?:(\d+(?:\.\d+)?)S)?'
    r')?$',
    re.IGNORECASE
)


def parse_iso_duration(duration: Any) -> Optional[int]:
    """
    Конвертирует ISO 8601 duration в целое число минут

    Args:
        duration: строка вида "PT20M", "PT1H30M" или "P1DT2H"

    Returns:
        Количество минут (дни*1440 + часы*60 + минуты + секунды/60 с округлением)
        или None, если строка пустая или не соответствует формату
    """
    if not duration or not isinstance(duration, str):
        return None

    match = ISO_DURATION_PATTERN.match(duration.strip())
    if not match:
        return None

    # int() длиннее 4300 цифр -> ValueError, бесконечные секунды -> OverflowError
    try:
        days = int(match.group(1) or 0)
        hours = int(match.group(2) or 0)
        minutes = int(match.group(3) or 0)
        seconds = float(match.group(4) or 0)

        # секунды округляются до минут, половина вверх
        return days * 24 * 60 + hours * 60 + minutes + int(seconds / 60 + 0.5)
    except (OverflowError, ValueError):
        return None
