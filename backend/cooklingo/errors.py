from __future__ import annotations


class CookLingoError(Exception):
	"""Base for failures that end up as a dismissible notification in the UI."""

	status_code: int = 500
	level: str = "error"

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message

	def to_notification(self) -> dict:
		return {"detail": self.message, "error": type(self).__name__, "level": self.level}


class InsufficientData(CookLingoError):
	status_code = 409
	level = "warning"


class RequestFailed(CookLingoError):
	status_code = 502


class MalformedResponse(CookLingoError):
	status_code = 502


class UnexpectedResponseShape(CookLingoError):
	status_code = 502


class IncompleteAnswers(CookLingoError):
	status_code = 400
	level = "warning"


class GenerationInProgress(CookLingoError):
	status_code = 409
	level = "warning"


class InvalidQuizAction(CookLingoError):
	status_code = 409
	level = "warning"


class InvalidRequest(CookLingoError):
	status_code = 400
	level = "warning"


class InvalidAnswer(InvalidRequest):
	pass


class SessionNotFound(CookLingoError):
	status_code = 404


class WordNotFound(CookLingoError):
	status_code = 404
