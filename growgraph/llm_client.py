import logging
import threading
import time
from typing import Callable, TypeVar, Any, Dict, List, Optional

from openai import OpenAI
from langchain_core.messages import HumanMessage, AIMessage, SystemMessage, BaseMessage

T = TypeVar("T")

logger = logging.getLogger("growgraph")

# 429: rate limited, 503: service unavailable
TRANSIENT_STATUS_CODES = (429, 503)


class MaxRetryErrorsException(Exception):
    pass


class EmptyCompletionError(Exception):
    pass


def _status_of(e: Exception) -> int | None:
    status = getattr(e, "status_code", None)
    if status is None:
        status = getattr(e, "status", None)
    return status


def is_transient_error(e: Exception) -> bool:
    return _status_of(e) in TRANSIENT_STATUS_CODES


def retry_with_backoff(
    fn: Callable[[], T],
    *,
    retries: int = 8,
    initial_delay: float = 5.0,
    sleep: Callable[[float], None] = time.sleep,
    log: Callable[[str], None] | None = None,
) -> T:
    """
    Run a sync LLM call, retrying only rate-limited (429) and
    service-unavailable (503) failures with an exponentially growing delay.

    Any other exception propagates untouched on the first occurrence.
    After `retries` transient failures a MaxRetryErrorsException is raised,
    chained to the last error.
    """
    log = log or logger.warning
    delay = initial_delay
    last_exception: Exception | None = None

    for attempt in range(retries):
        try:
            return fn()
        except Exception as e:
            last_exception = e
            log(f"Attempt {attempt + 1} failed: {e}")
            if not is_transient_error(e):
                raise
            if attempt == retries - 1:
                break
            log(f"Service unavailable or rate limited. Retrying in {delay:.1f}s...")
            sleep(delay)
            delay *= 2

    raise MaxRetryErrorsException(
        f"Failed after {retries} retries. Last error: {last_exception}"
    ) from last_exception


class ChatLlmClient:
    """
    Minimal wrapper for chat-style use:

        text = chat_llm.invoke([SystemMessage(...), HumanMessage(...)])

    Under the hood: OpenAI chat.completions with SDK retries disabled, so
    retry_with_backoff is the only retry layer.
    """

    def __init__(
        self,
        model_name: str = "gpt-4o",
        *,
        api_key: str | None = None,
        timeout: float | None = None,
        retries: int = 8,
        initial_delay: float = 5.0,
        client: Any = None,
    ):
        self.model_name = model_name
        self.retries = retries
        self.initial_delay = initial_delay
        # process-wide running total, updated from every request thread
        self.last_usage: Optional[Dict[str, int]] = None
        self._usage_lock = threading.Lock()

        if client is None:
            client_kwargs: Dict[str, Any] = {"max_retries": 0}
            if api_key is not None:
                client_kwargs["api_key"] = api_key
            if timeout is not None:
                client_kwargs["timeout"] = timeout
            client = OpenAI(**client_kwargs)
        self._client = client

    def _to_openai_messages(self, messages: List[BaseMessage]) -> List[Dict[str, str]]:
        out: List[Dict[str, str]] = []
        for m in messages:
            if isinstance(m, SystemMessage):
                role = "system"
            elif isinstance(m, HumanMessage):
                role = "user"
            elif isinstance(m, AIMessage):
                role = "assistant"
            else:
                role = "user"
            out.append({"role": role, "content": str(m.content)})
        return out

    def _merge_usage(self, resp: Any) -> None:
        usage = getattr(resp, "usage", None)
        if usage is None:
            return
        inc = {
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
            "total_tokens": getattr(usage, "total_tokens", 0) or 0,
        }
        with self._usage_lock:
            if self.last_usage is None:
                self.last_usage = inc
                return
            for k, v in inc.items():
                self.last_usage[k] = (self.last_usage.get(k, 0) or 0) + v

    def _invoke_once(self, messages: List[BaseMessage], temperature: float, max_tokens: int) -> str:
        """
        Single HTTP call without retries/backoff.
        """
        resp = self._client.chat.completions.create(
            model=self.model_name,
            messages=self._to_openai_messages(messages),
            temperature=temperature,
            max_tokens=max_tokens,
        )
        self._merge_usage(resp)

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise EmptyCompletionError("No content received from OpenAI")
        return content

    def invoke(
        self,
        messages: List[BaseMessage],
        *,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """
        Synchronous chat call with 429/503 backoff + retries.
        """
        return retry_with_backoff(
            lambda: self._invoke_once(messages, temperature, max_tokens),
            retries=self.retries,
            initial_delay=self.initial_delay,
            log=lambda msg: logger.warning(f"[CHAT-LLM-RETRY] {msg}"),
        )
