import asyncio
import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .cleanup import purge_expired_sessions
from .db import Base, engine, ensure_schema
from .errors import CookLingoError
from .settings import settings
from .routers import health, chat
from .routers import recipe
from .routers import words
from .routers import quiz

logger = logging.getLogger("cooklingo")


def setup_logging() -> None:
	level = getattr(logging, settings.log_level.upper(), logging.INFO)
	logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
	if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
		return
	try:
		os.makedirs(settings.log_dir, exist_ok=True)
		file_handler = RotatingFileHandler(
			os.path.join(settings.log_dir, settings.log_file), maxBytes=5_000_000, backupCount=3
		)
	except OSError as exc:
		logger.warning("File logging disabled: %s", exc)
		return
	file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
	logger.addHandler(file_handler)


async def _cleanup_watcher():
	# Expired quiz sessions are dropped every few minutes
	while True:
		await asyncio.sleep(5 * 60)
		removed = purge_expired_sessions(quiz._sessions, settings.quiz_session_ttl_minutes)
		if removed:
			logger.info("Purged %d expired quiz sessions", removed)


@asynccontextmanager
async def lifespan(app: FastAPI):
	Base.metadata.create_all(bind=engine)
	# Apply lightweight dev migrations
	ensure_schema()
	task = asyncio.create_task(_cleanup_watcher())
	try:
		yield
	finally:
		task.cancel()


async def handle_app_error(request: Request, exc: CookLingoError):
	if exc.level == "error":
		logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
	else:
		logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
	return JSONResponse(status_code=exc.status_code, content=exc.to_notification())


def create_app() -> FastAPI:
	setup_logging()
	app = FastAPI(title="CookLingo API", lifespan=lifespan)
	app.add_exception_handler(CookLingoError, handle_app_error)
	app.include_router(health.router)
	app.include_router(chat.router)
	app.include_router(recipe.router)
	app.include_router(words.router)
	app.include_router(quiz.router)
	return app


app = create_app()
