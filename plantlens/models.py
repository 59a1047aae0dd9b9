from dataclasses import dataclass
from datetime import datetime

USER = "user"
ASSISTANT = "assistant"


def _text_field(payload, key):
    value = payload.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' missing or not a string")
    return value


@dataclass(frozen=True)
class CareGuide:
    light: str
    water: str
    soil: str
    toxicity: str

    @classmethod
    def from_payload(cls, payload):
        if not isinstance(payload, dict):
            raise ValueError("Field 'care' missing or not an object")
        return cls(
            light=_text_field(payload, "light"),
            water=_text_field(payload, "water"),
            soil=_text_field(payload, "soil"),
            toxicity=_text_field(payload, "toxicity"),
        )

    def to_payload(self):
        return {"light": self.light, "water": self.water, "soil": self.soil, "toxicity": self.toxicity}


@dataclass(frozen=True)
class PlantRecord:
    """One identification result, in the shape the vision model returns."""

    common_name: str
    scientific_name: str
    description: str
    care: CareGuide
    fun_fact: str

    @classmethod
    def from_payload(cls, payload):
        """Build a record from the service JSON (camelCase keys). Raises ValueError on a bad shape."""
        if not isinstance(payload, dict):
            raise ValueError("Plant payload is not a JSON object")
        return cls(
            common_name=_text_field(payload, "commonName"),
            scientific_name=_text_field(payload, "scientificName"),
            description=_text_field(payload, "description"),
            care=CareGuide.from_payload(payload.get("care")),
            fun_fact=_text_field(payload, "funFact"),
        )

    def to_payload(self):
        return {
            "commonName": self.common_name,
            "scientificName": self.scientific_name,
            "description": self.description,
            "care": self.care.to_payload(),
            "funFact": self.fun_fact,
        }


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    text: str
    created_at: datetime

    @property
    def is_user(self):
        return self.role == USER
