"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from typing import List, Optional
from datetime import date as _date

_MEAL_TYPE_PATTERN = r'^(breakfast|lunch|dinner|snack)$'
_INGREDIENT_TYPE_PATTERN = r'^(regular|pantry)$'


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class NutritionInput(BaseModel):
    """Nutrition values per 100 g of an ingredient."""
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)


class IngredientInput(BaseModel):
    """Schema for a new catalog ingredient."""
    name: str = Field(..., min_length=1, max_length=100)
    ingredient_type: str = Field('regular', pattern=_INGREDIENT_TYPE_PATTERN)
    nutrition: Optional[NutritionInput] = None
    image_url: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        v = _strip(v)
        if not v:
            raise ValueError('Ingredient name cannot be empty')
        return v


class IngredientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    ingredient_type: Optional[str] = Field(None, pattern=_INGREDIENT_TYPE_PATTERN)
    nutrition: Optional[NutritionInput] = None
    image_url: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class FridgeItemInput(BaseModel):
    """Schema for adding stock to the fridge."""
    ingredient_id: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=20)
    expires_at: Optional[_date] = None

    @field_validator('unit')
    @classmethod
    def strip_unit(cls, v):
        return _strip(v)


class FridgeItemUpdate(BaseModel):
    ingredient_id: Optional[str] = Field(None, min_length=1)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    expires_at: Optional[_date] = None


class MealIngredientInput(BaseModel):
    """Schema for one ingredient requirement of a meal."""
    ingredient_id: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=20)

    @field_validator('unit')
    @classmethod
    def strip_unit(cls, v):
        return _strip(v)


class MealIngredientUpdate(BaseModel):
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=20)


class MealInput(BaseModel):
    """Schema for meal input validation."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1, le=50)
    cuisine: Optional[str] = None
    image_url: Optional[str] = None
    source: Optional[str] = None
    ingredients: List[MealIngredientInput] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate meal name."""
        if not v.strip():
            raise ValueError('Meal name cannot be empty')
        return v.strip()


class MealUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1, le=50)
    cuisine: Optional[str] = None
    image_url: Optional[str] = None


class RatingInput(BaseModel):
    """A like (true) or dislike (false) for a meal."""
    rating: StrictBool


class PlanEntryInput(BaseModel):
    """Schema for scheduling a meal."""
    meal_id: str = Field(..., min_length=1)
    date: _date
    meal_type: str = Field(..., pattern=_MEAL_TYPE_PATTERN)


class PlanEntryUpdate(BaseModel):
    meal_id: Optional[str] = Field(None, min_length=1)
    date: Optional[_date] = None
    meal_type: Optional[str] = Field(None, pattern=_MEAL_TYPE_PATTERN)


class HealthPrincipleInput(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    enabled: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()


class HealthPrincipleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    enabled: Optional[bool] = None


class RecommendedIngredientInput(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(0, ge=0)
    unit: str = ''


class RecommendedMealInput(BaseModel):
    """A recommendation as produced by the AI endpoint, to be saved as a meal."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0, alias='prepTime')
    cook_time: Optional[int] = Field(None, ge=0, alias='cookTime')
    servings: Optional[int] = Field(None, ge=1)
    cuisine: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[RecommendedIngredientInput] = Field(default_factory=list)
