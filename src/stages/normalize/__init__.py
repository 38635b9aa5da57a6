from .normalizer import (
    NormalizationSummary,
    format_normalization_summary,
    normalize_recipe,
    normalize_scraped_recipe,
)

__all__ = [
    'NormalizationSummary', 'format_normalization_summary',
    'normalize_recipe', 'normalize_scraped_recipe',
]
