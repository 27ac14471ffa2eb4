"""Shared fixtures: clients wired to an in-memory httpx transport."""

import json

import httpx
import pytest

from cronhost import AsyncCronhost, Cronhost

API_KEY = "ch_test_0123456789abcdefghij"
BASE_URL = "https://cron.test"
API_ROOT = f"{BASE_URL}/api/v1"

SCHEDULE = {
    "id": "sch_1",
    "name": "nightly report",
    "cronExpression": "0 2 * * *",
    "timezone": "Europe/Berlin",
    "endpoint": "https://example.com/report",
    "httpMethod": "POST",
    "isEnabled": True,
    "nextRunAtUtc": "2026-10-20T00:00:00.000Z",
    "createdAt": "2026-10-01T12:00:00.000Z",
    "updatedAt": "2026-10-02T12:00:00.000Z",
    "maxRetries": 3,
    "timeoutSeconds": 30,
}

JOB = {
    "id": "job_1",
    "scheduleId": "sch_1",
    "status": "SUCCESS",
    "scheduledRunAtUtc": "2026-10-19T00:00:00.000Z",
    "attemptNumber": 1,
    "httpMethod": "POST",
    "endpoint": "https://example.com/report",
    "statusCode": 200,
    "response": "ok",
    "startedAtUtc": "2026-10-19T00:00:01.000Z",
    "completedAtUtc": "2026-10-19T00:00:02.500Z",
    "createdAt": "2026-10-19T00:00:00.000Z",
    "updatedAt": "2026-10-19T00:00:02.500Z",
}


def envelope(data, message=None):
    body = {"data": data, "success": True}
    if message is not None:
        body["message"] = message
    return body


def reply(data=None, status=200):
    """Responder that always answers with ``data`` wrapped in an envelope."""
    return lambda request: httpx.Response(status, json=envelope(data))


class Recorder:
    """MockTransport handler that remembers every request it sees."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture()
def make_client():
    """Build a Cronhost whose transport is answered by ``responder``."""
    transports = []

    def _make(responder):
        recorder = Recorder(responder)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        transports.append(http)
        return Cronhost(api_key=API_KEY, base_url=BASE_URL, http_client=http), recorder

    yield _make
    for http in transports:
        http.close()


def make_async_client(responder):
    recorder = Recorder(responder)
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return AsyncCronhost(api_key=API_KEY, base_url=BASE_URL, http_client=http), recorder, http
