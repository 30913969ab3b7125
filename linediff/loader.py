"""Async loader for diff inputs from files, stdin or HTTP."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Self

import httpx

logger = logging.getLogger(__name__)

STDIN = "-"


@dataclass
class LoadResult:
    """Result of loading one input text."""

    source: str
    content: str | None
    error: str | None = None
    status_code: int | None = None  # HTTP sources only

    @property
    def is_success(self) -> bool:
        return self.content is not None and self.error is None


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class TextLoader:
    """Load texts to compare from local paths, stdin or URLs."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def load_local(self, source: str) -> LoadResult:
        """Read a file, or stdin when the source is ``-``."""
        if source == STDIN:
            return LoadResult(source, sys.stdin.read())

        path = Path(source)
        try:
            return LoadResult(source, path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return LoadResult(source, None, f"File not found: {path}")
        except (OSError, UnicodeDecodeError) as e:
            return LoadResult(source, None, str(e))

    async def fetch(self, url: str) -> LoadResult:
        """Fetch a single URL."""
        try:
            response = await self._client.get(url)
            if response.status_code == 200:
                return LoadResult(url, response.text, status_code=200)
            return LoadResult(
                url, None, f"HTTP {response.status_code}", status_code=response.status_code
            )
        except httpx.TimeoutException as e:
            return LoadResult(url, None, f"Connection timed out: {e}", status_code=0)
        except httpx.RequestError as e:
            return LoadResult(url, None, str(e), status_code=0)

    async def load(self, source: str) -> LoadResult:
        """Load one input, dispatching on its form."""
        if is_url(source):
            return await self.fetch(source)
        return self.load_local(source)

    async def load_with_retry(
        self,
        source: str,
        max_retries: int = 3,
        backoff_base: float = 1.0,
    ) -> LoadResult:
        """Load an input, retrying failed URL fetches with exponential backoff."""
        if not is_url(source):
            return self.load_local(source)

        last_result: LoadResult | None = None

        for attempt in range(max_retries):
            result = await self.fetch(source)
            if result.is_success:
                return result

            last_result = result

            # Don't retry on 4xx errors (client errors)
            if result.status_code is not None and 400 <= result.status_code < 500:
                return result

            if attempt < max_retries - 1:
                delay = backoff_base * (2**attempt)
                logger.warning(f"Fetching {source} failed ({result.error}), retrying in {delay}s")
                await asyncio.sleep(delay)

        return last_result or LoadResult(source, None, "Max retries exceeded")

    async def load_pair(
        self,
        original: str,
        revised: str,
        retry_count: int = 3,
        backoff_base: float = 1.0,
    ) -> tuple[LoadResult, LoadResult]:
        """Load the original and revised inputs concurrently."""
        first, second = await asyncio.gather(
            self.load_with_retry(original, retry_count, backoff_base),
            self.load_with_retry(revised, retry_count, backoff_base),
        )
        for result in (first, second):
            if not result.is_success:
                logger.error(f"Could not load {result.source}: {result.error}")
        return first, second
