"""Ways of delivering a request envelope to the skill backend."""

import importlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import Any

import httpx

from ..config import settings
from ..errors import InvocationError

logger = logging.getLogger(__name__)

InvokeFn = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


class InvokerKind(str, Enum):
    """Where the skill runs."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Invoker:
    """A skill backend: a kind tag plus the coroutine function that calls it."""

    kind: InvokerKind
    call: InvokeFn

    async def __call__(self, envelope: dict[str, Any]) -> dict[str, Any]:
        return await self.call(envelope)


def _request_type(envelope: dict[str, Any]) -> str | None:
    return envelope.get("request", {}).get("type")


def _lambda_context() -> SimpleNamespace:
    """Minimal stand-in for the context object a Lambda handler receives."""
    return SimpleNamespace(
        aws_request_id="simulated-request-id",
        function_name="simulated-skill",
        function_version="$LATEST",
        memory_limit_in_mb=128,
        log_group_name="simulated-log-group",
        log_stream_name="simulated-log-stream",
    )


def load_handler(reference: str) -> Callable[..., Any]:
    """Resolve a ``package.module:function`` reference to a callable."""
    module_name, _, attribute = reference.partition(":")
    attribute = attribute or "handler"
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvocationError(f"Cannot import skill module {module_name}: {e}") from e

    handler = getattr(module, attribute, None)
    if not callable(handler):
        raise InvocationError(f"Skill module {module_name} has no callable {attribute}")
    return handler


def local_invoker(handler: Callable[..., Any] | str) -> Invoker:
    """Invoke a handler living in this process.

    The handler is called as ``handler(event, context)`` if it takes two
    arguments and ``handler(event)`` otherwise, and may be sync or async.
    """
    if isinstance(handler, str):
        handler = load_handler(handler)

    try:
        takes_context = len(inspect.signature(handler).parameters) >= 2
    except (TypeError, ValueError):
        takes_context = False

    async def call(envelope: dict[str, Any]) -> dict[str, Any]:
        request_type = _request_type(envelope)
        try:
            result = handler(envelope, _lambda_context()) if takes_context else handler(envelope)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(f"Skill handler failed on {request_type}: {e}")
            raise InvocationError(f"Skill handler raised {type(e).__name__}: {e}", request_type) from e

        if result is None:
            return {}
        if not isinstance(result, dict):
            raise InvocationError(f"Skill handler returned {type(result).__name__}, expected dict", request_type)
        return result

    return Invoker(kind=InvokerKind.LOCAL, call=call)


def remote_invoker(
    url: str,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Invoker:
    """Invoke a skill exposed over HTTP by POSTing the envelope as JSON."""
    timeout = settings.request_timeout if timeout is None else timeout

    async def call(envelope: dict[str, Any]) -> dict[str, Any]:
        request_type = _request_type(envelope)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(url, json=envelope)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise InvocationError(
                f"Skill endpoint returned {e.response.status_code} for {request_type}", request_type
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Skill endpoint {url} unreachable: {e}")
            raise InvocationError(f"Skill endpoint {url} unreachable: {e}", request_type) from e

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise InvocationError(f"Skill endpoint returned invalid JSON: {e}", request_type) from e
        if not isinstance(body, dict):
            raise InvocationError("Skill endpoint returned a non-object JSON body", request_type)
        return body

    return Invoker(kind=InvokerKind.REMOTE, call=call)


def invoker_from_settings() -> Invoker:
    """Pick the backend configured via environment variables."""
    if settings.skill_url:
        return remote_invoker(settings.skill_url)
    if settings.skill_handler:
        return local_invoker(settings.skill_handler)
    raise InvocationError("No skill configured. Set SKILL_SIMULATOR_SKILL_URL or SKILL_SIMULATOR_SKILL_HANDLER.")
