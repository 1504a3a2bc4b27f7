from typing import Any, Optional


class ConfigError(Exception):
    """Raised when required configuration is missing at startup."""


class ProviderError(Exception):
    def __init__(
        self,
        provider: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Any = None,
    ):
        self.provider = provider
        self.message = message or ""
        self.status_code = status_code
        self.response = response
        super().__init__(self.message or f"{provider} request failed")

    def __str__(self):
        if self.status_code is not None:
            return f"[{self.provider}] {self.status_code}: {self.args[0]}"
        return f"[{self.provider}] {self.args[0]}"


class AuthenticationError(ProviderError):
    def __init__(
        self,
        provider: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Any = None,
    ):
        super().__init__(
            provider,
            message=message or f"Missing or invalid {provider} API key",
            status_code=status_code,
            response=response,
        )
