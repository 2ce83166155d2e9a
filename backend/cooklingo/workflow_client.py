from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import MalformedResponse, RequestFailed, UnexpectedResponseShape
from .settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowConfig:
	endpoint: str
	credential: Optional[str]
	user: str = "cooklingo-user"
	timeout: float = 60.0

	@classmethod
	def for_quiz(cls) -> "WorkflowConfig":
		return cls(
			endpoint=settings.dify_base_url,
			credential=settings.dify_quiz_api_key,
			user=settings.dify_user,
			timeout=settings.dify_timeout_seconds,
		)

	@classmethod
	def for_recipe(cls) -> "WorkflowConfig":
		return cls(
			endpoint=settings.dify_base_url,
			credential=settings.dify_recipe_api_key,
			user=settings.dify_user,
			timeout=settings.dify_timeout_seconds,
		)


class WorkflowClient:
	"""Runs a Dify workflow in blocking mode and hands back the raw response body.

	Exactly one POST per call; there is no retry and no fallback provider.
	"""

	def __init__(self, config: WorkflowConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		if not config.credential:
			raise RequestFailed("Workflow API key is not configured")
		self.config = config
		self._client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

	async def run(self, inputs: Dict[str, Any]) -> Any:
		headers = {
			"Authorization": f"Bearer {self.config.credential}",
			"Content-Type": "application/json",
		}
		payload: Dict[str, Any] = {
			"inputs": inputs,
			"response_mode": "blocking",
			"user": self.config.user,
		}
		try:
			r = await self._client.post(self.config.endpoint, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.warning("Workflow request failed with status %s", http_err.response.status_code)
			raise RequestFailed(f"Workflow request failed ({http_err.response.status_code})") from http_err
		except httpx.RequestError as net_err:
			logger.warning("Workflow request could not be sent: %s", net_err)
			raise RequestFailed("Could not reach the workflow service") from net_err
		try:
			return r.json()
		except ValueError as err:
			logger.error("Workflow returned a non-JSON body: %s", r.text[:500])
			raise MalformedResponse("Workflow returned a non-JSON response") from err

	async def generate_quiz(self, word_list: str) -> Any:
		return await self.run({"word_list": word_list})

	async def generate_recipe(self, dish: str) -> Any:
		return await self.run({"recipe_name": dish})

	async def aclose(self) -> None:
		await self._client.aclose()


def extract_output(body: Any, key: str) -> Any:
	"""Return ``data.outputs.<key>`` from a workflow envelope.

	Workflows configured with a text output hand back the JSON document as a
	string, so a string value is decoded before returning.
	"""
	try:
		value = body["data"]["outputs"][key]
	except (KeyError, TypeError):
		logger.error("Unexpected workflow response structure: %s", str(body)[:500])
		raise UnexpectedResponseShape("Unexpected API response structure from the workflow")
	if value is None:
		raise UnexpectedResponseShape("Unexpected API response structure from the workflow")
	if isinstance(value, str):
		try:
			return json.loads(value)
		except json.JSONDecodeError as err:
			logger.error("Failed to parse %s output as JSON: %s", key, value[:500])
			raise MalformedResponse(f"Failed to parse {key} from the workflow response") from err
	return value
