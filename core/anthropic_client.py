# core/anthropic_client.py
from typing import Dict, Any, Optional
import httpx
from config.settings import settings
import logging
from util.errors import ModelUnavailable
from util.timing import timed

logger = logging.getLogger(__name__)


async def _post_json(
    url: str, headers: Dict[str, str], payload: Dict[str, Any], timeout: float = 60.0
) -> Dict[str, Any]:
    """
    Make a JSON POST to `url`. Raises for non-2xx. Returns parsed JSON dict or {} on parse failure.
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        r = await client.post(url, headers=headers, json=payload)
        r.raise_for_status()
        try:
            return r.json()
        except ValueError:
            return {}


def _first_text(data: Dict[str, Any]) -> str:
    content = data.get("content") or []
    if content and isinstance(content, list):
        node = content[0]
        if isinstance(node, dict) and node.get("type") == "text":
            return node.get("text") or ""
    return ""


async def complete(
    *,
    system: str,
    prompt: str,
    max_tokens: int = 1000,
    temperature: Optional[float] = None,
    timeout: Optional[float] = None,
    purpose: str = "complete",
) -> str:
    """
    Send one user message to the Messages API and return the first text block.
    Transport errors, timeouts and non-2xx responses raise ModelUnavailable.
    """
    headers = {
        "x-api-key": settings.ANTHROPIC_API_KEY,
        "anthropic-version": settings.ANTHROPIC_VERSION,
        "content-type": "application/json",
    }
    payload = {
        "model": settings.ANTHROPIC_MODEL,
        "max_tokens": max_tokens,
        "system": system,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": (
            settings.ANTHROPIC_TEMPERATURE if temperature is None else temperature
        ),
    }
    try:
        with timed(logger, f"ai.{purpose}", model=settings.ANTHROPIC_MODEL):
            data = await _post_json(
                settings.ANTHROPIC_API_URL,
                headers,
                payload,
                timeout=timeout or settings.ANTHROPIC_TIMEOUT_SECONDS,
            )
    except httpx.TimeoutException as e:
        logger.error("ai.%s.timeout", purpose)
        raise ModelUnavailable("request timed out") from e
    except httpx.HTTPStatusError as e:
        logger.error("ai.%s.bad_status status=%d", purpose, e.response.status_code)
        raise ModelUnavailable(f"upstream status {e.response.status_code}") from e
    except httpx.RequestError as e:
        logger.error("ai.%s.request_error err=%s", purpose, type(e).__name__)
        raise ModelUnavailable() from e

    text = _first_text(data)
    if not text.strip():
        logger.error("ai.%s.empty", purpose)
        raise ModelUnavailable("empty completion")
    logger.info("ai.%s.ok chars=%d", purpose, len(text))
    return text
