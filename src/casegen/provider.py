import os
from typing import Dict, Optional

from google import genai
from google.genai import errors

from casegen.error import AuthenticationError, ProviderError

DEFAULT_MODEL = "gemini-2.0-flash"


class Gemini:
    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise AuthenticationError("Gemini", message="Missing Gemini API key")
        self.gemini = genai.Client(api_key=self.api_key)
        self.model = model or DEFAULT_MODEL

    async def generate(self, message: str, params: Optional[Dict] = None):
        """Sends one prompt to the model and returns the raw SDK response.

        No retries are attempted. SDK API errors keep their text and HTTP
        status code; anything else (connection failures included) is chained
        as the cause of the raised ProviderError.
        """
        try:
            params = params or {}
            response = await self.gemini.aio.models.generate_content(
                model=self.model,
                contents=message,
                **params
            )
            return response
        except errors.APIError as e:
            raise ProviderError(
                "Gemini",
                message=str(e),
                status_code=e.code,
                response=e.details,
            ) from e
        except Exception as e:
            raise ProviderError("Gemini", message=str(e)) from e
