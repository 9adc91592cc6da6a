"""Shared test fixtures for all test modules."""

import asyncio

import pytest


SAMPLE_TEXT = (
    "The first paragraph. It has two sentences.\n\n"
    "Second paragraph here! Is it short? Yes\n\n"
    "Third and last paragraph."
)


class FakeRewriteService:
    """In-memory rewrite service recording every prompt it receives.

    Replies come from ``replies`` (prompt -> text) or ``default``. Setting
    ``gate`` makes each call wait until the event is set, so tests can observe
    a block while its rewrite is in flight.
    """

    def __init__(self, replies=None, default="Rewritten.", error=None):
        self.replies = replies or {}
        self.default = default
        self.error = error
        self.prompts: list[str] = []
        self.gate: asyncio.Event | None = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.replies.get(prompt, self.default)


@pytest.fixture
def sample_text():
    """Three-paragraph document used across tests."""
    return SAMPLE_TEXT


@pytest.fixture
def rewrite_service():
    """Rewrite service that succeeds with a canned reply."""
    return FakeRewriteService()


@pytest.fixture
def make_rewrite_service():
    """Factory for rewrite services with custom replies or errors."""
    return FakeRewriteService
