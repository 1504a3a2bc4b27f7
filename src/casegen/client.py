"""
Client-side request controller.

Mirrors the browser page: it reads the code and language fields when the
user triggers generation, posts them once to ``/generate-tests`` and leaves the
page in exactly one of three states (success text, server error, network
error). ``PageState`` stands in for the DOM so the flow can be driven
headlessly.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

import httpx

from casegen.logging import get_logger

logger = get_logger("casegen.client")

EMPTY_CODE_STATUS = "Please enter some code first."
WAITING_OUTPUT = "Waiting for input..."
LOADING_STATUS = "Generating test cases... Please wait."
PROCESSING_OUTPUT = "Processing..."
SUCCESS_STATUS = "Test cases generated successfully!"
FAILED_OUTPUT = "Generation failed."
NETWORK_STATUS = "Network error or server issue. Please check console or try again."

LOADING_HIDE_DELAY = 3.0


class StatusKind(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


@dataclass
class PageState:
    code: str = ""
    language: str = ""
    output: str = ""
    status_text: str = ""
    status_kind: Optional[StatusKind] = None
    status_visible: bool = False
    button_disabled: bool = False

    def show_status(self, message: str, kind: StatusKind = StatusKind.LOADING) -> None:
        self.status_text = message
        self.status_kind = kind
        self.status_visible = True

    def hide_status(self) -> None:
        self.status_text = ""
        self.status_kind = None
        self.status_visible = False


class GenerationClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def generate(self, code: str, language: str) -> Tuple[int, Any]:
        """POSTs one request; transport failures and non-JSON bodies propagate."""
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            response = await client.post(
                "/generate-tests",
                json={"code": code, "language": language},
            )
        return response.status_code, response.json()


class RequestController:
    def __init__(
        self,
        page: PageState,
        client: GenerationClient,
        loading_hide_delay: float = LOADING_HIDE_DELAY,
    ):
        self.page = page
        self.client = client
        self.loading_hide_delay = loading_hide_delay
        self._hide_handle: Optional[asyncio.TimerHandle] = None

    async def handle_generate(self) -> None:
        user_code = self.page.code.strip()
        language = self.page.language.strip()

        if not user_code:
            self.page.show_status(EMPTY_CODE_STATUS, StatusKind.ERROR)
            self.page.output = WAITING_OUTPUT
            return

        self.page.show_status(LOADING_STATUS, StatusKind.LOADING)
        self.page.button_disabled = True
        self.page.output = PROCESSING_OUTPUT

        try:
            status_code, data = await self.client.generate(user_code, language)
            data = data if isinstance(data, dict) else {}
            if 200 <= status_code < 300 and data.get("success"):
                self.page.output = data.get("tests", "")
                self.page.show_status(SUCCESS_STATUS, StatusKind.SUCCESS)
            else:
                error = data.get("error") or f"HTTP error! Status: {status_code}"
                self.page.output = FAILED_OUTPUT
                self.page.show_status(f"Error: {error}", StatusKind.ERROR)
                logger.error("backend_error", status_code=status_code, error=error)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("fetch_error", error=str(e))
            self.page.output = FAILED_OUTPUT
            self.page.show_status(NETWORK_STATUS, StatusKind.ERROR)
        finally:
            self.page.button_disabled = False
            if self.page.status_kind is StatusKind.LOADING:
                loop = asyncio.get_running_loop()
                self._hide_handle = loop.call_later(
                    self.loading_hide_delay, self._hide_if_still_loading
                )

    def _hide_if_still_loading(self) -> None:
        self._hide_handle = None
        if self.page.status_kind not in (StatusKind.ERROR, StatusKind.SUCCESS):
            self.page.hide_status()
