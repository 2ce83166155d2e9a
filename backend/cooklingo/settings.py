from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Dify workflow endpoint shared by the recipe and quiz workflows
	dify_base_url: str = Field(default="https://api.dify.ai/v1/workflows/run", validation_alias="DIFY_BASE_URL")
	# Each workflow app has its own bearer key
	dify_quiz_api_key: str | None = Field(default=None, validation_alias="DIFY_QUIZ_API_KEY")
	dify_recipe_api_key: str | None = Field(default=None, validation_alias="DIFY_RECIPE_API_KEY")
	dify_user: str = Field(default="cooklingo-user", validation_alias="DIFY_USER")
	# Blocking workflows can take a while to finish
	dify_timeout_seconds: float = Field(default=60.0, validation_alias="DIFY_TIMEOUT_SECONDS")

	# Embedded chat widget (optional)
	chatbot_url: str | None = Field(default=None, validation_alias="CHATBOT_URL")

	# Server
	host: str = Field(default="0.0.0.0", validation_alias="HOST")
	port: int = Field(default=8000, validation_alias="PORT")

	# Quiz configuration
	quiz_size: int = Field(default=5, validation_alias="QUIZ_SIZE")
	quiz_session_ttl_minutes: int = Field(default=120, validation_alias="QUIZ_SESSION_TTL_MINUTES")

	# Logging
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	log_dir: str = Field(default="log", validation_alias="LOG_DIR")
	log_file: str = Field(default="cooklingo.log", validation_alias="LOG_FILE")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
