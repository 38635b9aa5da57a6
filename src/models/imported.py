"""
Допустимые формы сырых данных импорта.

Данные приходят неизвестной формы (скрапинг, внешний JSON, выгрузки),
поэтому сначала классифицируем каждую запись (строка или объект),
а уже потом нормализуем отдельные поля.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from src.models.recipe import ScrapedRecipeData


class ImportedModel(BaseModel):
    """Любое поле может отсутствовать или иметь неожиданный тип"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')


class ImportedIngredient(ImportedModel):
    id: Any = None
    name: Any = None
    amount: Any = None
    unit: Any = None
    notes: Any = None
    category: Any = None
    position: Any = None


class ImportedInstruction(ImportedModel):
    id: Any = None
    step: Any = None
    content: Any = None
    text: Any = None
    duration: Any = None
    position: Any = None


class ImportedRecipe(ImportedModel):
    title: Any = None
    description: Any = None
    ingredients: Any = None
    instructions: Any = None
    prep_time: Any = None
    cook_time: Any = None
    servings: Any = None
    difficulty: Any = None
    tags: Any = None
    notes: Any = None
    image_url: Any = None
    source_url: Any = None
    visibility: Any = None
    author_id: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> 'ImportedRecipe':
        """
        Приведение произвольного входа к ImportedRecipe

        Args:
            raw: dict (camelCase или snake_case), RecipeInput, ScrapedRecipeData или что угодно

        Returns:
            ImportedRecipe (пустой, если вход не похож на рецепт)
        """
        if isinstance(raw, ScrapedRecipeData):
            raw = raw.recipe
        if isinstance(raw, BaseModel):
            raw = raw.model_dump()
        if not isinstance(raw, dict):
            return cls()
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return cls()


IngredientEntry = Union[str, ImportedIngredient]
InstructionEntry = Union[str, ImportedInstruction]


def _as_mapping(entry: Any) -> Optional[dict]:
    if isinstance(entry, BaseModel):
        return entry.model_dump()
    if isinstance(entry, dict):
        return entry
    return None


def classify_ingredient(entry: Any) -> Optional[IngredientEntry]:
    """Строка остается строкой, объект -> ImportedIngredient, остальное -> None"""
    if isinstance(entry, str):
        return entry
    mapping = _as_mapping(entry)
    if mapping is None:
        return None
    try:
        return ImportedIngredient.model_validate(mapping)
    except ValidationError:
        return None


def classify_instruction(entry: Any) -> Optional[InstructionEntry]:
    """Строка остается строкой, объект -> ImportedInstruction, остальное -> None"""
    if isinstance(entry, str):
        return entry
    mapping = _as_mapping(entry)
    if mapping is None:
        return None
    try:
        return ImportedInstruction.model_validate(mapping)
    except ValidationError:
        return None
