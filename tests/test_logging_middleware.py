import pytest
import json
import itertools
import uuid
from fastapi import FastAPI, Request
from starlette.testclient import TestClient
from unittest.mock import patch
from app.core.logging_middleware import StructuredLoggingMiddleware

# Setup a simple app for testing middleware
app = FastAPI()
app.add_middleware(StructuredLoggingMiddleware)

USER_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


@app.get("/normal")
async def normal_request():
    return {"message": "ok"}


@app.get("/error")
async def error_request():
    raise ValueError("planned error with secret detail")


@app.get("/authenticated")
async def authenticated_request(request: Request):
    # Simulate what the authorization dependency does
    request.state.user_id = USER_ID
    return {"message": "authenticated"}


client = TestClient(app)


@pytest.fixture
def mock_logger():
    with patch("app.core.logging_middleware.structured_logger") as mock:
        yield mock


def logged_payload(mock_logger) -> dict:
    assert mock_logger.info.called
    return json.loads(mock_logger.info.call_args[0][0])


def test_logs_error_request(mock_logger):
    # Rule 1: Always log errors. The middleware logs and re-raises.
    with pytest.raises(ValueError):
        client.get("/error")

    log_data = logged_payload(mock_logger)
    assert log_data["status_code"] == 500
    assert log_data["error"] == "ValueError"
    assert "secret detail" not in json.dumps(log_data)


def test_logs_slow_request(mock_logger):
    # Rule 2: Always log slow requests
    with patch("app.core.logging_middleware.time") as mock_time:
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    log_data = logged_payload(mock_logger)
    # 1000.6 - 1000.0 = 0.6s = 600ms
    assert log_data["duration_ms"] >= 500
    assert log_data["path"] == "/normal"
    assert log_data["user_id"] is None


def test_logs_authenticated_user(mock_logger):
    with patch("app.core.logging_middleware.time") as mock_time:
        # Slow request to force log
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/authenticated", headers={"Authorization": "Bearer secret-token"})

    log_data = logged_payload(mock_logger)
    assert log_data["user_id"] == str(USER_ID)
    assert "secret-token" not in json.dumps(log_data)


def test_samples_normal_request(mock_logger):
    # Rule 3: Randomly sample
    with (
        patch("random.random", return_value=0.01),
        patch("app.core.logging_middleware.time") as mock_time,
    ):
        mock_time.perf_counter.side_effect = [100.0, 100.1]  # 100ms
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert mock_logger.info.called


def test_ignores_normal_request(mock_logger):
    with (
        patch("random.random", return_value=0.10),
        patch("app.core.logging_middleware.time") as mock_time,
    ):
        # Use iterator to avoid StopIteration if framework makes extra calls
        mock_time.perf_counter.side_effect = itertools.count(start=100.0, step=0.1)
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert not mock_logger.info.called
