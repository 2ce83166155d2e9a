from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from ..settings import settings

router = APIRouter(prefix="/chat", tags=["chat"])


class ChatConfig(BaseModel):
	chatbot_url: Optional[str] = None


@router.get("/config", response_model=ChatConfig)
def get_chat_config():
	return ChatConfig(chatbot_url=settings.chatbot_url)
