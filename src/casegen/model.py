from typing import Any, Optional

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    # Left untyped so a missing or non-string value reaches the service
    # validation and gets its fixed message instead of a 422.
    code: Any = None
    language: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool
    tests: Optional[str] = None
    error: Optional[str] = None


class GenerationResult(BaseModel):
    status_code: int
    body: GenerateResponse

    @classmethod
    def ok(cls, tests: str) -> "GenerationResult":
        return cls(status_code=200, body=GenerateResponse(success=True, tests=tests))

    @classmethod
    def fail(cls, error: str, status_code: int = 500) -> "GenerationResult":
        return cls(
            status_code=status_code,
            body=GenerateResponse(success=False, error=error),
        )

    def payload(self) -> dict:
        return self.body.model_dump(exclude_none=True)
