"""
Generation service: validates a request, builds the prompt, calls the model
once and maps every outcome onto a GenerationResult.

Error classification matches substrings of the provider's error text. Those
strings track the wording Google's API uses today and will silently stop
matching if that wording changes; the status-code checks are the stable part.
"""

from typing import Any, Callable, List, Optional, Protocol, Tuple

import httpx

from casegen import prompt
from casegen.logging import get_logger, log_event
from casegen.model import GenerateRequest, GenerationResult

logger = get_logger("casegen.service")

VALIDATION_ERROR = "Code input cannot be empty. Please provide the code snippet."

EMPTY_RESPONSE_ERROR = "AI failed to generate content."
SAFETY_BLOCK_ERROR = (
    "Content generation blocked due to safety settings. Please review the input "
    "code or contact support if this seems incorrect."
)
STOPPED_ERROR = "Content generation stopped unexpectedly. Reason: {reason}"

AUTH_ERROR = (
    "Authentication Error: The API Key is invalid or missing permissions. "
    "Please check your server configuration (.env file)."
)
RATE_LIMIT_ERROR = (
    "Rate Limit Exceeded: Too many requests have been made. Please wait a "
    "moment and try again."
)
POST_HOC_SAFETY_ERROR = (
    "Content generation blocked due to safety settings after the fact. Please "
    "review the input code."
)
NETWORK_ERROR = (
    "Network Error: Could not connect to the Google AI service. Check your "
    "server's internet connection."
)
UNKNOWN_ERROR = "Failed to generate test cases: {detail}"
UNEXPECTED_ERROR = (
    "An unexpected error occurred while generating test cases. Please try again later."
)

SAFETY_REASON = "SAFETY"


class CaseProvider(Protocol):
    async def generate(self, message: str) -> Any: ...


def validate_request(request: GenerateRequest) -> Optional[str]:
    code = request.code
    if not code or not isinstance(code, str) or not code.strip():
        return VALIDATION_ERROR
    return None


def _reason_name(reason: Any) -> Optional[str]:
    if reason is None:
        return None
    value = getattr(reason, "value", reason)
    return str(value) if value else None


def _block_reason(response: Any) -> Optional[str]:
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        return _reason_name(getattr(candidates[0], "finish_reason", None))
    feedback = getattr(response, "prompt_feedback", None)
    return _reason_name(getattr(feedback, "block_reason", None))


def _has_content(response: Any) -> bool:
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return False
    content = getattr(candidates[0], "content", None)
    if content is None:
        return False
    if not hasattr(content, "parts"):
        return True
    return bool(content.parts)


def classify_response(response: Any) -> GenerationResult:
    """Maps a model response to a result; the text is passed through untouched."""
    if response is None or not _has_content(response):
        reason = _block_reason(response) if response is not None else None
        log_event(logger, "generation_empty", {"finish_reason": reason})
        if reason == SAFETY_REASON:
            return GenerationResult.fail(SAFETY_BLOCK_ERROR)
        if reason:
            return GenerationResult.fail(STOPPED_ERROR.format(reason=reason))
        return GenerationResult.fail(EMPTY_RESPONSE_ERROR)

    text = response.text
    if text is None:
        log_event(logger, "generation_empty", {"finish_reason": _block_reason(response)})
        return GenerationResult.fail(EMPTY_RESPONSE_ERROR)
    return GenerationResult.ok(text)


def _error_text(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str):
        return message
    return str(exc)


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def _is_auth_error(exc: BaseException) -> bool:
    text = _error_text(exc)
    lowered = text.lower()
    return (
        "api key not valid" in lowered
        or "permission denied" in lowered
        or "PERMISSION_DENIED" in text
        or _status_code(exc) in (401, 403)
    )


def _is_rate_limited(exc: BaseException) -> bool:
    return "quota" in _error_text(exc) or _status_code(exc) == 429


def _is_safety_block(exc: BaseException) -> bool:
    return SAFETY_REASON in _error_text(exc)


def _is_network_error(exc: BaseException) -> bool:
    text = _error_text(exc)
    if "fetch failed" in text or "NetworkError" in text:
        return True
    return isinstance(exc, httpx.TransportError) or isinstance(
        exc.__cause__, httpx.TransportError
    )


ERROR_RULES: List[Tuple[Callable[[BaseException], bool], str]] = [
    (_is_auth_error, AUTH_ERROR),
    (_is_rate_limited, RATE_LIMIT_ERROR),
    (_is_safety_block, POST_HOC_SAFETY_ERROR),
    (_is_network_error, NETWORK_ERROR),
]


def classify_exception(exc: BaseException) -> GenerationResult:
    for matches, message in ERROR_RULES:
        if matches(exc):
            return GenerationResult.fail(message)
    detail = _error_text(exc)
    if not detail:
        return GenerationResult.fail(UNEXPECTED_ERROR)
    return GenerationResult.fail(UNKNOWN_ERROR.format(detail=detail))


class GenerationService:
    def __init__(self, provider: CaseProvider):
        self.provider = provider

    async def generate_tests(self, request: GenerateRequest) -> GenerationResult:
        error = validate_request(request)
        if error:
            logger.warning("invalid_input", reason="code missing or empty")
            return GenerationResult.fail(error, status_code=400)

        message = prompt.build_test_prompt(request.code, request.language)
        log_event(
            logger,
            "prompt_sent",
            {"language": prompt.normalize_language(request.language), "prompt_chars": len(message)},
        )

        try:
            response = await self.provider.generate(message)
            result = classify_response(response)
        except Exception as e:
            logger.error("provider_error", error=_error_text(e), status_code=_status_code(e))
            return classify_exception(e)

        if result.body.success:
            log_event(logger, "generation_succeeded", {"tests_chars": len(result.body.tests)})
        return result
