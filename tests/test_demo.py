import pytest

from plantlens.demo import SAMPLE_PLANTS, DemoChat, DemoGateway, match_topic
from plantlens.errors import ClassificationError
from plantlens.models import PlantRecord


@pytest.mark.parametrize("question, topic", [
    ("How often should I water it?", "water"),
    ("Is it toxic to cats?", "toxicity"),
    ("Does it need a lot of sunlight?", "light"),
    ("What soil should I use when I repot?", "soil"),
    ("Tell me an interesting fact", "fun_fact"),
    ("Shuold I watr it daily?", "water"),
    ("What is the meaning of life?", None),
])
def test_match_topic(question, topic):
    assert match_topic(question) == topic


def test_demo_chat_answers_from_care_guide():
    record = PlantRecord.from_payload(SAMPLE_PLANTS[0])
    chat = DemoChat(record)
    assert record.care.water in chat.send("How often should I water it?")
    assert "demo mode" in chat.send("What is the meaning of life?")


def test_demo_gateway_returns_sample_record(image_bytes):
    gateway = DemoGateway(seed=1)
    record = gateway.classify(image_bytes)
    assert record in gateway.samples
    assert isinstance(gateway.start_chat(record), DemoChat)


def test_demo_gateway_rejects_non_images():
    with pytest.raises(ClassificationError):
        DemoGateway().classify(b"not an image")
