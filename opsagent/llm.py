"""HTTP client for a local text-generation server."""

from __future__ import annotations

import json
import urllib.error
import urllib.request

DEFAULT_MODEL = "mistral"
DEFAULT_URL = "http://localhost:11434/api/generate"


class LLMError(Exception):
    """Raised when the generation server fails or returns an unusable reply."""


def ask_llm(prompt: str, model: str = DEFAULT_MODEL, url: str = DEFAULT_URL) -> str:
    """Send ``prompt`` to the model and return its complete, non-streamed reply."""
    body = json.dumps({"model": model, "prompt": prompt, "stream": False}).encode("utf-8")
    request = urllib.request.Request(
        url,
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request) as response:
            raw = response.read()
    except urllib.error.HTTPError as exc:
        # The body of an error response is still parsed like any other.
        raw = exc.read()
    except (urllib.error.URLError, OSError) as exc:
        raise LLMError(str(exc)) from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise LLMError("can not parse response from LLM") from exc
    if not isinstance(data, dict):
        raise LLMError("can not parse response from LLM")

    answer = data.get("response")
    if answer is None:
        return ""
    if not isinstance(answer, str):
        raise LLMError("can not parse response from LLM")
    return answer