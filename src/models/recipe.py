from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Confidence(str, Enum):
    """Насколько можно доверять результату извлечения"""
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class ExtractionMethod(str, Enum):
    """Каким способом рецепт был извлечен со страницы"""
    STRUCTURED_DATA = 'structured-data'
    MICRODATA = 'microdata'
    HTML_FALLBACK = 'html-fallback'


class Visibility(str, Enum):
    PUBLIC = 'public'
    PRIVATE = 'private'


class Difficulty(str, Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'


def new_id() -> str:
    return str(uuid.uuid4())


class RecipeBaseModel(BaseModel):
    """Общая конфигурация: snake_case в python, camelCase наружу"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Преобразование модели в JSON-совместимый словарь (camelCase ключи)"""
        return self.model_dump(mode='json', by_alias=True)


class Ingredient(RecipeBaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    amount: float = Field(default=0, ge=0)
    unit: str = ''  # одно из CANONICAL_UNITS или ''
    notes: str = ''
    category: str = ''
    position: int = Field(default=0, ge=0)


class Instruction(RecipeBaseModel):
    id: str = Field(default_factory=new_id)
    step: int = Field(ge=1)
    content: str
    duration: Optional[int] = Field(default=None, gt=0)  # минуты
    position: int = Field(default=0, ge=0)


class RecipeInput(RecipeBaseModel):
    """Частично заполненный рецепт - ни одно поле не гарантировано"""
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[Instruction] = Field(default_factory=list)
    prep_time: Optional[int] = None  # минуты
    cook_time: Optional[int] = None  # минуты
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    visibility: Optional[str] = None
    author_id: Optional[str] = None


class ScrapedRecipeData(RecipeBaseModel):
    """Результат одной попытки извлечения рецепта со страницы"""
    model_config = ConfigDict(frozen=True)

    recipe: RecipeInput
    method: ExtractionMethod
    confidence: Confidence
    warnings: tuple[str, ...] = ()


class RecipeRecord(RecipeBaseModel):
    """
    Канонический рецепт после нормализации.
    Все инварианты соблюдены, запись готова к валидации и сохранению.
    """
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    ingredients: list[Ingredient] = Field(min_length=1)
    instructions: list[Instruction] = Field(min_length=1)
    prep_time: Optional[int] = Field(default=None, gt=0)
    cook_time: Optional[int] = Field(default=None, gt=0)
    servings: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    tags: list[str] = Field(default_factory=list, max_length=20)
    notes: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    author_id: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
