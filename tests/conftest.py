"""
Pytest configuration and fixtures for transfer-client-core tests.
"""

import logging

import pytest
import responses as responses_lib

from transfer_client.core.client import TransferClient
from transfer_client.core.config import TransferClientConfig
from transfer_client.core.engine import TransferEngine, TransferSession
from transfer_client.core.logging import ROOT_LOGGER_NAME, LoggingConfig
from transfer_client.core.logging.filters import clear_correlation_id
import transfer_client.core.logging.logger as logger_module


class RecordingSession(TransferSession):
    """Session that records what it was asked to do instead of transferring."""

    def __init__(self, url, engine):
        super().__init__(url)
        self.engine = engine

    def _transfer(self, url):
        self.engine.calls.append({"url": url, "options": self.options.copy()})
        outcome = self.engine.outcomes.pop(0) if self.engine.outcomes else b"ok"
        if isinstance(outcome, BaseException):
            raise outcome
        self._info["http_code"] = 200
        return outcome

    def _close(self):
        self.engine.closed += 1


class RecordingEngine(TransferEngine):
    """
    Fake engine for client tests.

    ``outcomes`` is consumed one item per perform(): bytes are returned as
    the body, exceptions are raised.
    """

    name = "recording"

    def __init__(self, available=True):
        self.available = available
        self.calls = []
        self.sessions = []
        self.outcomes = []
        self.closed = 0

    def is_available(self):
        return self.available

    def open_session(self, url):
        session = RecordingSession(url, self)
        self.sessions.append(session)
        return session


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handler / propagation changes made by configured loggers."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    logger_module._default_logger = None
    clear_correlation_id()


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def config(base_url):
    return TransferClientConfig.create(base_url=base_url, restricted_mode=False)


@pytest.fixture
def client(config, engine):
    """TransferClient on the recording engine."""
    client = TransferClient(config=config, engine=engine)
    yield client
    client.close()


@pytest.fixture
def http_client(base_url):
    """TransferClient on the default requests engine."""
    client = TransferClient(config=TransferClientConfig.create(base_url=base_url, restricted_mode=False))
    yield client
    client.close()


@pytest.fixture
def logging_config_with_file(tmp_path):
    """LoggingConfig writing JSON to a temporary file."""
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(tmp_path / "transfer.log")
    )


@pytest.fixture
def make_engine():
    """Factory for extra recording engines."""
    return RecordingEngine
