from __future__ import annotations

import functools
import inspect
from typing import Any

import httpx

from .retry import RetryPolicy


class RetryingProxy:
    """
    Wrap any object so its coroutine methods run under a RetryPolicy.
    Plain attributes and sync methods are passed through as-is.
    """
    def __init__(self, inner: Any, policy: RetryPolicy) -> None:
        self.inner = inner
        self.policy = policy

    def __getattr__(self, item: str) -> Any:
        attr = getattr(self.inner, item)
        if not inspect.iscoroutinefunction(attr):
            return attr

        @functools.wraps(attr)
        async def call(*args: Any, **kwargs: Any) -> Any:
            return await self.policy.run(lambda: attr(*args, **kwargs))

        return call


class RetryingHTTPClient:
    """
    Wrap httpx.AsyncClient with retries.

    Every attempt re-sends the full request. Transport errors and non-2xx
    responses are both failures; the last one is raised to the caller.
    """
    def __init__(self, client: httpx.AsyncClient, policy: RetryPolicy) -> None:
        self.client = client
        self.policy = policy

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async def attempt() -> httpx.Response:
            r = await self.client.request(method, url, **kwargs)
            r.raise_for_status()
            return r

        return await self.policy.run(attempt)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RetryingHTTPClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
