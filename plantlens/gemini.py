import base64
import json
import logging

import requests

from plantlens import prompts
from plantlens.errors import ClassificationError, ConversationError, ImageError, ServiceError
from plantlens.imaging import to_jpeg_bytes
from plantlens.models import PlantRecord

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient:
    """Thin wrapper around the Gemini generateContent REST endpoint."""

    def __init__(self, api_key, model, timeout=30, session=None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session

    @property
    def url(self):
        return f"{GEMINI_BASE_URL}/{self.model}:generateContent"

    def generate(self, contents, system_instruction=None, generation_config=None):
        """Send one generateContent request and return the first candidate's text.

        Raises ServiceError for timeouts, network/HTTP errors, bodies that are
        not JSON and responses without any candidate text.
        """
        payload = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        headers = {"Content-Type": "application/json"}

        try:
            post = self.session.post if self.session is not None else requests.post
            response = post(
                self.url, params={"key": self.api_key}, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise ServiceError("Gemini API request timed out") from e
        except requests.exceptions.RequestException as e:
            resp_detail = ""
            if getattr(e, "response", None) is not None:
                try:
                    resp_detail = e.response.json().get("error", {}).get("message", "")
                except ValueError:
                    resp_detail = e.response.text
            raise ServiceError(f"Error calling Gemini API: {e} {resp_detail}".strip()) from e
        except ValueError as e:
            raise ServiceError("Gemini API returned invalid JSON") from e

        text = _candidate_text(data)
        if not text:
            raise ServiceError(f"Unexpected response from Gemini: {data!r}")
        return text


def _candidate_text(data):
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates or not isinstance(candidates, list):
        return ""
    content = candidates[0].get("content")
    if not content or not isinstance(content, dict):
        return ""
    parts = content.get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def parse_plant_json(raw_text):
    """Parse the model's JSON text into a PlantRecord. Raises ValueError on anything malformed."""
    cleaned = raw_text.strip()
    if cleaned.startswith("```"):
        # model wrapped the JSON in a markdown fence
        cleaned = cleaned.strip("`").strip()
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:].strip()
    return PlantRecord.from_payload(json.loads(cleaned))


class PlantChat:
    """Chat session seeded with one plant's details.

    Only successful exchanges are kept in the history sent with each request.
    """

    def __init__(self, client, record):
        self.client = client
        self.record = record
        self.system_instruction = prompts.get_chat_system_message(record)
        self.history = []

    def _ask(self, message):
        contents = self.history + [{"role": "user", "parts": [{"text": message}]}]
        try:
            return self.client.generate(contents, system_instruction=self.system_instruction)
        except ServiceError as e:
            raise ConversationError(str(e)) from e

    def send(self, message):
        try:
            reply = self._ask(message)
        except ConversationError as e:
            logger.error("Chat error: %s", e)
            return prompts.CHAT_UNAVAILABLE_REPLY
        if not reply.strip():
            return prompts.CHAT_EMPTY_REPLY
        self.history.extend([
            {"role": "user", "parts": [{"text": message}]},
            {"role": "model", "parts": [{"text": reply}]},
        ])
        return reply


class GeminiGateway:
    """Classify and chat operations backed by Gemini."""

    def __init__(self, client, max_image_side=1536):
        self.client = client
        self.max_image_side = max_image_side

    def classify(self, image_bytes):
        try:
            jpeg = to_jpeg_bytes(image_bytes, max_side=self.max_image_side)
        except ImageError as e:
            raise ClassificationError(str(e)) from e

        contents = [{
            "role": "user",
            "parts": [
                {"inline_data": {"mime_type": "image/jpeg", "data": base64.b64encode(jpeg).decode()}},
                {"text": prompts.IDENTIFY_PROMPT},
            ],
        }]
        generation_config = {
            "responseMimeType": "application/json",
            "responseSchema": prompts.PLANT_RESPONSE_SCHEMA,
        }
        try:
            raw_text = self.client.generate(contents, generation_config=generation_config)
            record = parse_plant_json(raw_text)
        except ServiceError as e:
            raise ClassificationError(str(e)) from e
        except ValueError as e:
            raise ClassificationError(f"Malformed identification response: {e}") from e
        logger.info("Identified plant as %s (%s)", record.common_name, record.scientific_name)
        return record

    def start_chat(self, record):
        return PlantChat(self.client, record)


def build_gateway(settings):
    """GeminiGateway when an API key is configured, the offline demo gateway otherwise."""
    if settings.has_api_key:
        client = GeminiClient(settings.gemini_api_key, settings.gemini_model, timeout=settings.gemini_timeout)
        return GeminiGateway(client, max_image_side=settings.max_image_side)
    from plantlens.demo import DemoGateway

    logger.warning("GEMINI_API_KEY not set, running in demo mode")
    return DemoGateway()
