from unittest.mock import MagicMock

import pytest
import requests

from app import app as flask_app


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def fake_response():
    """Factory for stand-ins of requests.Response."""

    def _build(payload, status_code=200):
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = payload
        if status_code >= 400:
            resp.raise_for_status.side_effect = requests.HTTPError(
                f"{status_code} Error"
            )
        else:
            resp.raise_for_status.return_value = None
        return resp

    return _build
