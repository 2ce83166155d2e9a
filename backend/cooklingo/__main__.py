import uvicorn

from .settings import settings


def run() -> None:
	uvicorn.run("cooklingo.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
	run()
