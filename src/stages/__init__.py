"""
Recipe import pipeline stages
"""

from .extract import RecipeScraper
from .normalize import normalize_recipe

__all__ = ['RecipeScraper', 'normalize_recipe']
