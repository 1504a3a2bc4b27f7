import logging
from typing import Any, List, Optional

import pytest
import structlog
from google.genai import types

from casegen.config import Settings
from casegen.logging import UVICORN_LOGGERS


class StubProvider:
    """Stands in for Gemini: records prompts, returns or raises what it was given."""

    def __init__(self, response: Any = None, error: Optional[BaseException] = None):
        self.response = response
        self.error = error
        self.calls: List[str] = []

    async def generate(self, message: str) -> Any:
        self.calls.append(message)
        if self.error is not None:
            raise self.error
        return self.response


class StatusError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def text_response(text: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=text)]),
                finish_reason=types.FinishReason.STOP,
            )
        ]
    )


def blocked_response(finish_reason=None) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=None, finish_reason=finish_reason)]
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(google_api_key="test-key", model="gemini-test", port=3100)


@pytest.fixture
def restore_logging():
    """Puts stdlib and structlog logging back the way the test found it."""
    root = logging.getLogger()
    saved_root = (root.handlers[:], root.level)
    saved_servers = {
        name: (logging.getLogger(name).handlers[:], logging.getLogger(name).propagate, logging.getLogger(name).level)
        for name in UVICORN_LOGGERS
    }
    yield
    root.handlers, root.level = saved_root[0], saved_root[1]
    for name, (handlers, propagate, level) in saved_servers.items():
        server_logger = logging.getLogger(name)
        server_logger.handlers = handlers
        server_logger.propagate = propagate
        server_logger.level = level
    structlog.reset_defaults()
