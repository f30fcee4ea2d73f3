"""Language model oracle.

The oracle is optional and untrusted. Every implementation answers
``Maybe[str]``: ``Some(text)`` when it produced something, ``Nothing`` when it
is unavailable for any reason. Transport errors never cross this boundary.
"""

import asyncio
from typing import Protocol, Sequence

import httpx
import pybreaker
from returns.maybe import Maybe, Nothing, Some

from uibuilder.core import Settings, get_logger
from uibuilder.monitoring import MetricsCollector
from .models import OracleMessage

logger = get_logger(__name__)


class Oracle(Protocol):
    """Anything that can answer a role-tagged conversation."""

    async def complete(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        ...


class NullOracle:
    """Oracle that is never available (oracle disabled or no credentials)."""

    async def complete(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        return Nothing


class _BreakerListener(pybreaker.CircuitBreakerListener):
    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state.name if old_state else old_state),
            to_state=str(new_state.name if new_state else new_state),
        )


class ChatCompletionsOracle:
    """
    OpenAI-compatible ``/chat/completions`` client with circuit breaker.

    Requests are made with a blocking httpx client in the default executor so
    a slow oracle never blocks the event loop.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 20.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self._client = httpx.Client(timeout=timeout)
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="oracle-http",
            listeners=[_BreakerListener()],
        )

        logger.info("oracle_init", url=self.base_url, model=model, configured=bool(api_key))

    @classmethod
    def from_settings(cls, settings: Settings, metrics: MetricsCollector | None = None) -> "ChatCompletionsOracle":
        return cls(
            api_key=settings.oracle_api_key,
            model=settings.oracle_model,
            base_url=settings.oracle_base_url,
            timeout=settings.oracle_timeout,
            fail_max=settings.oracle_breaker_fail_max,
            reset_timeout=settings.oracle_breaker_reset,
            metrics=metrics,
        )

    def _record(self, outcome: str) -> None:
        if self.metrics:
            self.metrics.record_oracle_call(outcome)

    def complete_sync(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        """Blocking call; returns Nothing on any failure."""
        if not self.api_key:
            self._record("unconfigured")
            return Nothing

        payload = {
            "model": self.model,
            "temperature": 0,
            "messages": [m.model_dump() for m in messages],
        }

        def _make_request() -> httpx.Response:
            response = self._client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
            return response

        try:
            response = self._breaker.call(_make_request)
            data = response.json()
        except pybreaker.CircuitBreakerError:
            logger.warning("oracle_unavailable", error="Circuit breaker open")
            self._record("breaker_open")
            return Nothing
        except httpx.HTTPError as e:
            logger.warning("oracle_http_error", error=str(e))
            self._record("http_error")
            return Nothing
        except ValueError as e:
            logger.warning("oracle_bad_body", error=str(e))
            self._record("bad_body")
            return Nothing

        content = _first_choice_content(data)
        if content is None:
            logger.warning("oracle_empty_response")
            self._record("empty")
            return Nothing

        self._record("ok")
        return Some(content)

    async def complete(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.complete_sync, list(messages))

    def close(self) -> None:
        self._client.close()


def _first_choice_content(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


__all__ = ["Oracle", "NullOracle", "ChatCompletionsOracle"]
