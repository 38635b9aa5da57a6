"""
Data models
"""

from .recipe import (
    Confidence,
    Difficulty,
    ExtractionMethod,
    Ingredient,
    Instruction,
    RecipeInput,
    RecipeRecord,
    ScrapedRecipeData,
    Visibility,
)
from .imported import ImportedIngredient, ImportedInstruction, ImportedRecipe

__all__ = [
    'Confidence', 'Difficulty', 'ExtractionMethod', 'Ingredient', 'Instruction',
    'RecipeInput', 'RecipeRecord', 'ScrapedRecipeData', 'Visibility',
    'ImportedIngredient', 'ImportedInstruction', 'ImportedRecipe',
]
