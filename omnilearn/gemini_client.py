from __future__ import annotations

import json
from typing import Any

from google import genai
from google.genai import types

from omnilearn.config import env

FALLBACK_MODELS = (
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-2.5-pro",
)


def _is_model_not_found(msg: str) -> bool:
    return (
        "NOT_FOUND" in msg
        and ("was not found" in msg or "not found" in msg or "is not found" in msg)
        and ("Publisher Model" in msg or "models/" in msg or "Call ListModels" in msg)
    )


class GeminiClient:
    """
    Supports two modes:
    - Vertex AI mode: GOOGLE_CLOUD_PROJECT + GOOGLE_CLOUD_LOCATION
    - API key mode (local/dev): GOOGLE_API_KEY
    """

    def __init__(self, *, temperature: float = 0.4) -> None:
        # Users can override with GEMINI_MODEL env var (e.g., gemini-2.5-pro).
        self.model = env("GEMINI_MODEL", FALLBACK_MODELS[0])
        self.temperature = temperature

        api_key = env("GOOGLE_API_KEY")
        project = env("GOOGLE_CLOUD_PROJECT")
        location = env("GOOGLE_CLOUD_LOCATION", "us-central1")

        if api_key:
            self.client = genai.Client(api_key=api_key)
        elif project:
            # Uses ADC (service account)
            self.client = genai.Client(vertexai=True, project=project, location=location)
        else:
            raise RuntimeError(
                "Missing config: set GOOGLE_API_KEY (local) or GOOGLE_CLOUD_PROJECT (+ optional GOOGLE_CLOUD_LOCATION) (Vertex)."
            )

    async def generate_json(self, *, system: str, user: str, schema: dict[str, Any]) -> dict[str, Any]:
        """
        Uses response_schema to strongly bias well-formed JSON output.
        Falls back through FALLBACK_MODELS only when a model is unknown to the project.
        """
        candidates: list[str] = [self.model, *FALLBACK_MODELS]

        last_err: Exception | None = None
        resp = None
        tried: set[str] = set()
        for m in candidates:
            if m in tried:
                continue
            tried.add(m)
            try:
                resp = await self.client.aio.models.generate_content(
                    model=m,
                    contents=[
                        types.Content(role="user", parts=[types.Part(text=user)]),
                    ],
                    config=types.GenerateContentConfig(
                        system_instruction=system,
                        response_mime_type="application/json",
                        response_schema=schema,
                        temperature=self.temperature,
                    ),
                )
                break
            except Exception as e:
                last_err = e
                if _is_model_not_found(str(e)):
                    continue
                raise

        if resp is None:
            raise RuntimeError(f"All model candidates failed. Last error: {last_err}")

        parsed = getattr(resp, "parsed", None)
        if isinstance(parsed, dict):
            return parsed

        text = (resp.text or "").strip()
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            return data
        raise RuntimeError(f"Model did not return parsed JSON. Raw: {text[:500]}")
