"""LLM client used as the rewrite service for block edit actions."""

import httpx
import json
from typing import AsyncIterator, Dict, Any, Optional
import asyncio

from blockshop.utils.logging import get_logger
from blockshop.models.config import LLMConfig, RewriteConfig
from blockshop.services.exceptions import EmptyRewriteError


logger = get_logger(__name__)


REWRITE_SYSTEM_PROMPT = (
    "You are a careful writing assistant that rewrites a single passage of text.\n"
    "Each request is an instruction followed by the passage in double quotes.\n\n"
    "Rules:\n"
    "1. Output ONLY the rewritten passage\n"
    "2. NO surrounding quotes, labels, markdown, or explanations\n"
    "3. Keep the passage in the same language as the input\n"
    "4. Do not add paragraph breaks unless the instruction asks for them\n"
)


def _extract_content_from_openai_chunk(data: Dict[str, Any]) -> str | None:
    """
    Extract content from OpenAI-style streaming chunk.

    OpenAI returns chunks like:
    {
        "choices": [{
            "delta": {"content": "..."},
            "finish_reason": null
        }]
    }

    Args:
        data: Parsed JSON chunk from OpenAI API

    Returns:
        Content string if present, None otherwise
    """
    try:
        if "choices" in data and len(data["choices"]) > 0:
            choice = data["choices"][0]
            if "delta" in choice and "content" in choice["delta"]:
                return choice["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        pass
    return None


def _extract_content_from_ollama_chunk(data: Dict[str, Any]) -> str | None:
    """
    Extract content from Ollama native streaming chunk.

    Ollama's /api/chat returns chunks like:
    {
        "model": "...",
        "message": {
            "role": "assistant",
            "content": "..."
        },
        "done": false
    }

    Args:
        data: Parsed JSON chunk from Ollama /api/chat

    Returns:
        Content string if present, None otherwise
    """
    try:
        if "message" in data and "content" in data["message"]:
            return data["message"]["content"]
    except (KeyError, TypeError):
        pass
    return None


def clean_rewrite_output(text: str) -> str:
    """
    Normalize a rewrite reply into block content.

    Strips surrounding whitespace and one pair of wrapping double quotes,
    which models often echo back from the quoted prompt.

    Example:
        >>> clean_rewrite_output('  "Hi."\\n')
        'Hi.'
    """
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == '"' and cleaned[-1] == '"':
        cleaned = cleaned[1:-1].strip()
    return cleaned


class LLMClient:
    """
    HTTP client for OpenAI-compatible chat APIs (including Ollama).

    Streams rewrite replies and retries once on transient errors by default.
    """

    def __init__(self, config: LLMConfig, rewrite_config: Optional[RewriteConfig] = None):
        """
        Initialize LLM client.

        Args:
            config: LLM configuration (endpoint, API key, model)
            rewrite_config: Sampling and retry settings (defaults if omitted)
        """
        self.config = config
        self.rewrite_config = rewrite_config or RewriteConfig()
        self.timeout = httpx.Timeout(
            connect=10.0,
            read=60.0,  # Per-read timeout for streaming
            write=10.0,
            pool=10.0
        )
        self._is_ollama: bool | None = None  # Cached provider detection

    def _base_url(self) -> str:
        """Endpoint without a trailing slash or /v1 suffix."""
        base_url = str(self.config.endpoint).rstrip("/")
        if base_url.endswith("/v1"):
            base_url = base_url[:-3]
        return base_url

    async def _detect_ollama(self) -> bool:
        """
        Detect if the LLM endpoint is Ollama by probing /api/version.

        This detection is cached after the first call.

        Returns:
            True if Ollama detected, False otherwise
        """
        if self._is_ollama is not None:
            return self._is_ollama

        version_url = f"{self._base_url()}/api/version"
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(5.0)) as client:
                logger.debug("llm_provider_detection", version_url=version_url)
                response = await client.get(version_url)

                if response.status_code == 200:
                    logger.info("llm_provider_detected", provider="ollama", version_url=version_url)
                    self._is_ollama = True
                    return True

        except httpx.HTTPError as e:
            logger.debug(
                "llm_provider_detection_failed",
                error=str(e),
                assumed_provider="openai",
            )

        logger.info("llm_provider_detected", provider="openai")
        self._is_ollama = False
        return False

    async def stream_text(
        self,
        prompt: str,
        system_prompt: str = REWRITE_SYSTEM_PROMPT,
        request_id: Optional[str] = None
    ) -> AsyncIterator[str]:
        """
        Stream reply text fragments from the LLM API.

        Handles SSE (``data: ...`` lines, ``data: [DONE]``) from
        OpenAI-compatible endpoints and NDJSON chunks from Ollama's native
        chat endpoint. Malformed lines are logged and skipped.

        Args:
            prompt: User prompt for the LLM
            system_prompt: System prompt for the LLM
            request_id: Optional identifier for this request (for logging/tracing)

        Yields:
            Reply text fragments in arrival order

        Raises:
            httpx.HTTPError: On network or HTTP errors after retries exhausted
        """
        if not request_id:
            current_task = asyncio.current_task()
            task_name = current_task.get_name() if current_task else None
            request_id = task_name if task_name and task_name != "None" else "unknown"

        is_ollama = await self._detect_ollama()
        max_retries = self.rewrite_config.max_retries
        retry_delay = self.rewrite_config.retry_delay

        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt}
            ],
            "stream": True,
            "temperature": self.rewrite_config.temperature,
        }

        # Ollama takes num_ctx in an options object
        if is_ollama and self.config.num_ctx:
            payload["options"] = {"num_ctx": self.config.num_ctx}

        if is_ollama:
            url = self._base_url() + "/api/chat"
        else:
            url = str(self.config.endpoint).rstrip("/") + "/chat/completions"

        logger.info(
            "llm_request_started",
            request_id=request_id,
            model=self.config.model,
            endpoint=str(self.config.endpoint),
            provider="ollama" if is_ollama else "openai",
            prompt_length=len(prompt),
            temperature=self.rewrite_config.temperature,
        )
        logger.debug("llm_request_payload", request_id=request_id, payload=payload)

        attempt = 0
        while attempt <= max_retries:
            fragment_count = 0
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    headers = {"Authorization": f"Bearer {self.config.api_key}"}

                    async with client.stream("POST", url, json=payload, headers=headers) as response:
                        response.raise_for_status()

                        async for line in response.aiter_lines():
                            if not line.strip():
                                continue

                            json_line = line
                            if line.startswith("data: "):
                                json_line = line[6:]
                                if json_line == "[DONE]":
                                    logger.debug("llm_response_sse_done", request_id=request_id)
                                    continue

                            try:
                                data = json.loads(json_line)
                            except json.JSONDecodeError as e:
                                logger.error(
                                    "llm_malformed_json",
                                    request_id=request_id,
                                    line=line,
                                    error=str(e)
                                )
                                continue

                            if is_ollama:
                                fragment = _extract_content_from_ollama_chunk(data)
                            else:
                                fragment = _extract_content_from_openai_chunk(data)

                            if fragment:
                                fragment_count += 1
                                yield fragment

                logger.info(
                    "llm_request_completed",
                    request_id=request_id,
                    fragment_count=fragment_count
                )
                return

            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as e:
                attempt += 1

                # A partially streamed reply cannot be resumed
                if fragment_count:
                    logger.error("llm_stream_interrupted", request_id=request_id, error=str(e))
                    raise

                logger.warning(
                    "llm_request_retry",
                    request_id=request_id,
                    attempt=attempt,
                    max_retries=max_retries,
                    error=str(e),
                    retry_delay=retry_delay
                )

                if attempt <= max_retries:
                    await asyncio.sleep(retry_delay)
                else:
                    logger.error(
                        "llm_request_failed",
                        request_id=request_id,
                        attempts=attempt,
                        error=str(e)
                    )
                    raise

            except httpx.HTTPStatusError as e:
                # No retry on status errors (bad request, auth, etc.)
                logger.error(
                    "llm_http_error",
                    request_id=request_id,
                    status_code=e.response.status_code,
                    error=str(e)
                )
                raise

    async def generate(self, prompt: str) -> str:
        """
        Produce replacement text for a rewrite prompt.

        Args:
            prompt: Formatted ``instruction: "content"`` prompt

        Returns:
            Cleaned reply text

        Raises:
            EmptyRewriteError: If the reply is empty after cleaning
            httpx.HTTPError: On network or HTTP errors after retries exhausted
        """
        fragments = []
        async for fragment in self.stream_text(prompt):
            fragments.append(fragment)

        result = clean_rewrite_output("".join(fragments))
        if not result:
            raise EmptyRewriteError("Rewrite service returned an empty reply")
        return result
