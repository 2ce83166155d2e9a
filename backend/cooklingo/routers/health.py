from fastapi import APIRouter
from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	return {
		"status": "ok",
		"quiz_workflow_configured": bool(settings.dify_quiz_api_key),
		"recipe_workflow_configured": bool(settings.dify_recipe_api_key),
	}
