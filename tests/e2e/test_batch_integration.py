"""
End-to-end tests for scheduled generation.

These run the real settings, content generator, OpenAI provider, task
dispatcher and post service together. Only the OpenAI SDK client is patched,
so no API calls are made.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from contentforge import AISettingsManager
from contentforge.core import BatchStatusQuery, BatchStore, InMemoryDispatcher, InMemoryPostService, ScheduledGenerator
from contentforge.exceptions import NotFoundError
from contentforge.providers import ProviderRegistry
from contentforge.utils import MemoryStore


def _completion(title, content):
    text = json.dumps({"title": title, "content": content})
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _rate_limited():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.RateLimitError(
        "rate limited",
        response=httpx.Response(429, request=request),
        body={"error": {"message": "Rate limit exceeded", "type": "requests"}},
    )


class FakeClock:
    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def client():
    ProviderRegistry.clear()
    with patch("contentforge.providers.openai.openai_provider.OpenAI") as client_class:
        mock_client = MagicMock()
        client_class.return_value = mock_client
        yield mock_client


@pytest.fixture
def system():
    store = MemoryStore()
    clock = FakeClock()
    settings = AISettingsManager(store, use_env=False)
    settings.save_settings({"provider": "openai", "model": "gpt-4o", "api_key": "sk-e2e"})

    dispatcher = InMemoryDispatcher(clock=clock)
    posts = InMemoryPostService(start_id=100)
    batch_store = BatchStore(store)
    generator = ScheduledGenerator(batch_store, dispatcher, posts, settings, clock=clock)

    return SimpleNamespace(
        clock=clock,
        dispatcher=dispatcher,
        posts=posts,
        generator=generator,
        query=BatchStatusQuery(batch_store),
    )


def test_batch_runs_one_post_every_five_seconds(client, system):
    client.chat.completions.create.side_effect = [
        _completion("First", "Opening paragraph.\n\nSecond paragraph."),
        _rate_limited(),
        _completion("Third", "<h2>Heading</h2>\n\nClosing words."),
    ]

    result = system.generator.schedule_generation({
        "post_number": 3,
        "content_type": "technology",
        "ai_prompt": "Focus on batteries",
        "user_id": 7,
    })
    assert result.total_jobs == 3

    started = system.clock.now
    for step in range(3):
        system.clock.now = started + 5 * step
        assert system.dispatcher.run_due() == 1
        # The next unit is never due in the same instant
        assert system.dispatcher.run_due() == 0

    status = system.query.get(result.batch_id)
    assert status["status"] == "completed"
    assert status["completed"] == 2
    assert status["pending"] == 1
    assert status["completed_at"] == started + 10
    assert [p["post_id"] for p in status["posts_created"]] == [100, 101]
    assert status["errors"][0]["index"] == 1
    assert "Rate limit exceeded" in status["errors"][0]["error"]

    first = system.posts.get_post(100)
    assert first.author == 7
    assert first.post_status == "draft"
    assert first.content.startswith("<!-- wp:paragraph -->")
    assert '<!-- wp:heading {"level":2} -->' in system.posts.get_post(101).content

    sent = client.chat.completions.create.call_args_list[0].kwargs
    assert sent["model"] == "gpt-4o"
    assert "Focus on batteries" in sent["messages"][1]["content"]
    assert "technology" in sent["messages"][1]["content"]


def test_finished_batch_is_removed_after_a_day(client, system):
    client.chat.completions.create.return_value = _completion("Only", "Body")

    result = system.generator.schedule_generation({"post_number": 1, "content_type": "general"})
    system.dispatcher.run_due()

    assert system.query.get(result.batch_id)["status"] == "completed"
    assert [t.hook for t in system.dispatcher.pending()] == [ScheduledGenerator.CLEANUP_HOOK]

    system.clock.now += 86400 - 1
    assert system.dispatcher.run_due() == 0

    system.clock.now += 1
    assert system.dispatcher.run_due() == 1

    with pytest.raises(NotFoundError):
        system.query.get(result.batch_id)
    # Created posts outlive the batch record
    assert system.posts.get_post(100).title == "Only"


def test_classic_editor_batch(client, system):
    client.chat.completions.create.return_value = _completion("Classic", "Plain text body")

    system.generator.schedule_generation({"post_number": 1, "content_type": "food", "editor_type": "classic"})
    system.dispatcher.run_due()

    assert system.posts.get_post(100).content == "<p>Plain text body</p>"
