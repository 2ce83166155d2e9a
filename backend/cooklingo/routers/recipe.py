from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..deps import get_recipe_client, get_store
from ..errors import InvalidRequest, UnexpectedResponseShape
from ..vocabulary_store import VocabularyStore
from ..workflow_client import WorkflowClient, extract_output

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipe", tags=["recipe"])


class Vocabulary(BaseModel):
	word: str
	translation: str
	part_of_speech: str = Field(default="", alias="partOfSpeech")

	model_config = ConfigDict(populate_by_name=True)


class Recipe(BaseModel):
	dish: str
	cooking_time: str = Field(default="", alias="cookingTime")
	difficulty: str = ""
	ingredients: List[str] = []
	steps: List[str] = []
	vocabulary: List[Vocabulary] = []
	tips: List[str] = []

	model_config = ConfigDict(populate_by_name=True)


class GenerateRecipeRequest(BaseModel):
	dish: str


class GenerateRecipeResponse(BaseModel):
	recipe: Recipe
	saved: bool
	words_added: int = 0


def normalize_recipe(body: Any) -> Recipe:
	payload = extract_output(body, "json")
	try:
		return Recipe.model_validate(payload)
	except ValidationError as err:
		raise UnexpectedResponseShape("Failed to get structured recipe from the workflow response") from err


def save_recipe(store: VocabularyStore, recipe: Recipe) -> Dict[str, Any]:
	try:
		store.save_recipe(recipe.model_dump(by_alias=True))
	except SQLAlchemyError as err:
		logger.error("Error saving recipe: %s", err)
		store.db.rollback()
		return {"saved": False, "words_added": 0}
	words_added = 0
	if recipe.vocabulary:
		try:
			words_added = store.upsert_words((v.word, v.translation) for v in recipe.vocabulary)
		except SQLAlchemyError as err:
			# The recipe itself is stored; a word failure is not worth surfacing
			logger.error("Error upserting words: %s", err)
			store.db.rollback()
	return {"saved": True, "words_added": words_added}


@router.post("/generate", response_model=GenerateRecipeResponse, response_model_by_alias=True)
async def generate(
	req: GenerateRecipeRequest,
	store: VocabularyStore = Depends(get_store),
	client: WorkflowClient = Depends(get_recipe_client),
):
	dish = req.dish.strip()
	if not dish:
		raise InvalidRequest("Please enter a dish name")
	recipe = normalize_recipe(await client.generate_recipe(dish))
	result = save_recipe(store, recipe)
	return GenerateRecipeResponse(recipe=recipe, **result)


@router.get("/history")
def history(limit: Optional[int] = 20, store: VocabularyStore = Depends(get_store)):
	return store.list_recipes(limit=max(1, min(limit or 20, 100)))
