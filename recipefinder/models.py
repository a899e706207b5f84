"""
Recipe and search models for the recipe finder.

This module defines the pydantic schemas that describe the data flowing between
the Streamlit UI, the local proxy routes and the remote recipe backend.

# NOTE: The matching and ranking helpers work on plain recipe dictionaries, as
    returned by the backend. These models are used at the edges: to normalise
    incoming search payloads and to document the search routes' responses.

Wire field names follow the backend contract (camelCase for matchAll,
cookingTime, mealType, matchScore; snake_case for page_size, max_results).
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_RESULTS = 100

# Wire names of the dietary flags, in display order
DIETARY_FLAGS = ("vegetarian", "vegan", "glutenFree", "dairyFree", "lowCarb")


class RecipeNutrition(BaseModel):
    """Nutrition facts as strings (e.g. "320 kcal"); extra keys are kept."""
    calories: Optional[str] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None
    fiber: Optional[str] = None
    sugar: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Recipe(BaseModel):
    """
    Display record for a recipe returned by the backend.

    Only title and ingredients are guaranteed. Ranking adds matchScore and
    matchPercentage; unknown backend fields are preserved.
    """
    id: Optional[Union[str, int]] = Field(None, description="Recipe identifier (generated client-side if missing)")
    title: str = Field(..., description="Recipe title")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient lines")
    directions: Optional[List[str]] = Field(None, description="Preparation steps")
    nutrition: Optional[RecipeNutrition] = Field(None, description="Nutrition facts")
    matchScore: Optional[int] = Field(None, description="Number of search terms matched")
    matchPercentage: Optional[float] = Field(None, description="Share of search terms matched (0-100)")
    cuisine: Optional[str] = None
    cookingTime: Optional[Union[str, int]] = None
    mealType: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class DietaryFilters(BaseModel):
    """Boolean dietary flags selected by the user."""
    vegetarian: bool = False
    vegan: bool = False
    glutenFree: bool = False
    dairyFree: bool = False
    lowCarb: bool = False

    model_config = ConfigDict(validate_assignment=True)


class Pagination(BaseModel):
    """Pagination block returned by the backend."""
    page: int = Field(DEFAULT_PAGE, ge=1)
    pages: int = Field(1, ge=0)
    total: Optional[int] = Field(None, ge=0)
    page_numbers: Optional[List[int]] = None

    model_config = ConfigDict(extra="allow")


class SearchRequest(BaseModel):
    """
    Search payload sent to the recipe backend.

    Values are coerced leniently: a non-list ingredients/dietary becomes an
    empty list, missing, non-numeric or non-positive paging values fall back
    to the defaults.
    Extra keys are passed through to the backend untouched.
    """
    ingredients: List[str] = Field(default_factory=list)
    dietary: List[str] = Field(default_factory=list)
    matchAll: bool = False
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    max_results: int = DEFAULT_MAX_RESULTS
    cookingTime: Optional[str] = None
    cuisine: Optional[str] = None
    mealType: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("ingredients", "dietary", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if item is not None]

    @field_validator("matchAll", mode="before")
    @classmethod
    def _coerce_bool(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("page", "page_size", "max_results", mode="before")
    @classmethod
    def _coerce_positive_int(cls, value: Any, info) -> int:
        defaults = {
            "page": DEFAULT_PAGE,
            "page_size": DEFAULT_PAGE_SIZE,
            "max_results": DEFAULT_MAX_RESULTS,
        }
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            return defaults[info.field_name]
        return number if number >= 1 else defaults[info.field_name]

    @field_validator("cookingTime", "cuisine", "mealType", mode="before")
    @classmethod
    def _drop_empty(cls, value: Any) -> Optional[str]:
        return str(value) if value else None

    def to_payload(self) -> Dict[str, Any]:
        """Serialise for the wire, omitting unset optional filters."""
        return self.model_dump(exclude_none=True)


class SearchResponse(BaseModel):
    """Backend search response."""
    recipes: List[Recipe] = Field(default_factory=list)
    pagination: Optional[Pagination] = None

    model_config = ConfigDict(extra="allow")
