import json

import pytest

from tests.helpers import MONSTERA_PAYLOAD, make_image_bytes


@pytest.fixture
def image_bytes():
    return make_image_bytes()


@pytest.fixture
def monstera_payload():
    return json.loads(json.dumps(MONSTERA_PAYLOAD))
