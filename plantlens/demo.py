"""Offline gateway used when no Gemini API key is configured."""
import logging
import random

from fuzzywuzzy import fuzz, process

from plantlens.errors import ClassificationError, ImageError
from plantlens.imaging import to_jpeg_bytes
from plantlens.models import PlantRecord

logger = logging.getLogger(__name__)

# --- Sample plants returned in demo mode ---
SAMPLE_PLANTS = [
    {
        "commonName": "Monstera",
        "scientificName": "Monstera deliciosa",
        "description": "A climbing tropical aroid with large, glossy leaves that split and develop holes as they mature.",
        "care": {
            "light": "Bright indirect light, can tolerate some shade",
            "water": "Allow the top inch of soil to dry out between waterings, typically every 1-2 weeks.",
            "soil": "Chunky, well-draining aroid mix with bark and perlite.",
            "toxicity": "Toxic to pets (cats, dogs) and humans if ingested, causing oral irritation and vomiting.",
        },
        "funFact": "In the wild its fruit ripens from the base up and tastes like a mix of pineapple and banana.",
    },
    {
        "commonName": "Snake Plant",
        "scientificName": "Dracaena trifasciata",
        "description": "A hardy succulent with stiff, upright, sword-shaped leaves banded in grey-green.",
        "care": {
            "light": "Highly adaptable. Tolerates low light to bright indirect light. Avoid direct, intense sun.",
            "water": "Allow soil to dry out completely between waterings, about every 2-4 weeks and less in winter.",
            "soil": "Fast-draining cactus or succulent mix.",
            "toxicity": "Mildly toxic to pets (cats, dogs) if ingested, may cause nausea or diarrhea.",
        },
        "funFact": "It keeps its stomata closed during the day and takes in carbon dioxide at night.",
    },
    {
        "commonName": "Peace Lily",
        "scientificName": "Spathiphyllum wallisii",
        "description": "A shade-tolerant evergreen with dark leaves and white, sail-like spathes.",
        "care": {
            "light": "Low to medium indirect light. Avoid direct sunlight which can scorch leaves.",
            "water": "Keep soil consistently moist but not waterlogged. It droops dramatically when thirsty.",
            "soil": "Rich, loose potting mix that holds some moisture.",
            "toxicity": "Toxic to pets (cats, dogs) and humans if ingested. Contains calcium oxalate crystals.",
        },
        "funFact": "Its white 'flower' is really a modified leaf called a spathe.",
    },
]

# care topic -> words a question about it is likely to contain
TOPIC_KEYWORDS = {
    "light": ["light", "sun", "sunlight", "shade", "window", "bright"],
    "water": ["water", "watering", "moist", "dry", "thirsty", "often"],
    "soil": ["soil", "repot", "potting", "drainage", "fertilizer"],
    "toxicity": ["toxic", "poisonous", "pets", "cat", "dog", "safe"],
    "fun_fact": ["fact", "interesting", "trivia"],
}


def match_topic(question, threshold=80):
    """Return the care topic a question is about, or None when nothing matches well enough.

    Each word of the question is fuzzy-matched against the topic keywords so
    small typos ("watring", "toxik") still land on the right topic.
    """
    choices = {keyword: topic for topic, keywords in TOPIC_KEYWORDS.items() for keyword in keywords}
    best_topic, highest_score = (None, 0)
    for word in question.lower().split():
        term = word.strip("?!.,;:'\"")
        if len(term) < 3:
            continue
        result = process.extractOne(term, list(choices.keys()), scorer=fuzz.ratio, score_cutoff=threshold)
        if result and result[1] > highest_score:
            highest_score, best_topic = result[1], choices[result[0]]
    return best_topic


class DemoChat:
    def __init__(self, record):
        self.record = record

    def send(self, message):
        topic = match_topic(message)
        care = self.record.care
        name = self.record.common_name
        if topic == "light":
            return f"For light, your {name} likes: {care.light}"
        if topic == "water":
            return f"Watering tip for your {name}: {care.water}"
        if topic == "soil":
            return f"Best soil for a {name}: {care.soil}"
        if topic == "toxicity":
            return f"About toxicity: {care.toxicity}"
        if topic == "fun_fact":
            return f"Here's a fun fact: {self.record.fun_fact}"
        return (
            f"I'm running in demo mode, so I can only answer from the {name} care guide. "
            "Try asking about light, water, soil or toxicity."
        )


class DemoGateway:
    """Returns bundled sample plants instead of calling Gemini."""

    def __init__(self, seed=None):
        self._random = random.Random(seed)
        self.samples = [PlantRecord.from_payload(p) for p in SAMPLE_PLANTS]

    def classify(self, image_bytes):
        try:
            to_jpeg_bytes(image_bytes, max_side=64)
        except ImageError as e:
            raise ClassificationError(str(e)) from e
        record = self._random.choice(self.samples)
        logger.info("Demo mode: returning sample plant %s", record.common_name)
        return record

    def start_chat(self, record):
        return DemoChat(record)
