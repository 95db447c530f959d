"""Shared pytest fixtures and fakes for the dashboard tests."""

import threading

import pytest
import requests

from jobprompter.store.manager import LocalCache, MemoryStore


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {}

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeBackendClient:
    """Backend client returning canned responses and recording calls."""

    def __init__(self, logs=None, stats=None, trigger=None, error=None):
        self.logs_response = logs or FakeResponse(200, logs_body([]))
        self.stats_response = stats or FakeResponse(200, stats_body())
        self.trigger_response = trigger or FakeResponse(200, {'data': {}})
        self.error = error
        self.fetch_calls = 0
        self.trigger_calls = []
        self.reachable = True
        self._lock = threading.Lock()

    def fetch_dashboard(self):
        with self._lock:
            self.fetch_calls += 1
        if self.error is not None:
            raise self.error
        return self.logs_response, self.stats_response

    def trigger_import(self, api_name, api_url, import_type):
        self.trigger_calls.append((api_name, api_url, import_type))
        if self.error is not None:
            raise self.error
        return self.trigger_response

    def ping(self):
        return self.reachable


class FakeClock:
    """Controllable clock returning seconds since the epoch."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    @property
    def millis(self):
        return int(self.now * 1000)


class FakeSession:
    """requests.Session stand-in used by client and poller tests."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, {})
        self.error = error
        self.calls = []
        self.closed = False

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append({'method': method, 'url': url, 'timeout': timeout, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, timeout=None):
        return self.request('GET', url, timeout=timeout)

    def close(self):
        self.closed = True


def logs_body(import_logs):
    return {'data': {'importLogs': import_logs}}


def stats_body(total=0, pending=0, completed=0, failed=0):
    return {
        'data': {
            'statistics': {
                'overview': {
                    'totalJobs': total,
                    'pendingJobs': pending,
                    'completedJobs': completed,
                    'failedJobs': failed,
                }
            }
        }
    }


@pytest.fixture
def store():
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def cache(store):
    """LocalCache over the in-memory store."""
    return LocalCache(store, max_records=10)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return FakeBackendClient()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
