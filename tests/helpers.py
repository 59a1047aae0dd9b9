import json
from io import BytesIO

import requests
from PIL import Image

MONSTERA_PAYLOAD = {
    "commonName": "Monstera",
    "scientificName": "Monstera deliciosa",
    "description": "A tropical climber with split leaves.",
    "care": {
        "light": "Bright indirect",
        "water": "Weekly",
        "soil": "Well-draining",
        "toxicity": "Toxic to pets",
    },
    "funFact": "Its fruit tastes like pineapple and banana.",
}


def make_image_bytes(fmt="PNG", size=(32, 24), color=(34, 139, 34)):
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def gemini_body(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, body=None, status_code=200, text=None, content=b""):
        self.body = body
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.body is None:
            return json.loads(self.text)
        return self.body


class FakeSession:
    """Stands in for requests.Session; replays queued responses or raises queued exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


