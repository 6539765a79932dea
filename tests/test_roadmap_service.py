"""
Tests for the AI roadmap client, using httpx.MockTransport.
"""
import json
from types import SimpleNamespace

import httpx
import pytest

from questboard.core.config import settings
from questboard.services.roadmap_service import (
    DEFAULT_TIPS,
    RoadmapService,
    build_roadmap_prompt,
    extract_message_text,
)


GOAL = SimpleNamespace(
    title="Learn Spanish",
    description=None,
    category="Personal",
    timeframe="long-term",
)


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def service_returning(status_code=200, body=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body if body is not None else {})
    return RoadmapService(transport=httpx.MockTransport(handler), api_key="test-key")


class TestHelpers:

    def test_prompt_mentions_goal(self):
        prompt = build_roadmap_prompt(GOAL)
        assert "Goal Title: Learn Spanish" in prompt
        assert "Description: Not provided" in prompt
        assert "Timeframe: long-term (1-5 years)" in prompt

    def test_extract_message_text(self):
        assert extract_message_text(chat_reply("  hello ")) == "hello"
        assert extract_message_text({"choices": []}) is None
        assert extract_message_text({"choices": [{"message": {"content": None}}]}) is None


class TestGenerateRoadmap:

    def test_json_extracted_from_reply(self):
        roadmap = {"overview": "Daily practice", "milestones": [{"title": "Basics", "tasks": []}]}
        seen = []
        service = service_returning(body=chat_reply(f"Here you go:\n{json.dumps(roadmap)}\nGood luck!"), seen=seen)

        assert service.generate_roadmap(GOAL) == roadmap

        request = seen[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        payload = json.loads(request.content)
        assert payload["model"] == settings.AI_MODEL
        assert payload["messages"][1]["content"].startswith("Generate a detailed, structured roadmap")

    def test_server_error(self):
        service = service_returning(status_code=500)

        roadmap = service.generate_roadmap(GOAL)

        assert roadmap["error"].startswith("Failed to generate roadmap:")

    def test_reply_without_json(self):
        service = service_returning(body=chat_reply("I cannot help with that."))
        roadmap = service.generate_roadmap(GOAL)
        assert "Invalid AI response format" in roadmap["error"]

    def test_malformed_json(self):
        service = service_returning(body=chat_reply("{not json}"))
        assert "error" in service.generate_roadmap(GOAL)

    def test_empty_reply(self):
        service = service_returning(body={"choices": []})
        assert "empty response" in service.generate_roadmap(GOAL)["error"]

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "AI_API_KEY", None)
        calls = []
        service = RoadmapService(transport=httpx.MockTransport(lambda r: calls.append(r)))

        roadmap = service.generate_roadmap(GOAL)

        assert "AI_API_KEY is not configured" in roadmap["error"]
        assert calls == []

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = RoadmapService(transport=httpx.MockTransport(handler), api_key="test-key")
        assert "connection refused" in service.generate_roadmap(GOAL)["error"]


class TestProductivityTips:

    CONTEXT = {
        "recent_tasks": 12,
        "completed_tasks": 4,
        "overdue_count": 3,
        "high_priority_count": 5,
        "goals": ["Learn Spanish"],
    }

    def test_tips_parsed(self):
        seen = []
        service = service_returning(body=chat_reply('["a", "b", "c", "d"]'), seen=seen)

        assert service.generate_productivity_tips(self.CONTEXT) == ["a", "b", "c"]

        prompt = json.loads(seen[0].content)["messages"][1]["content"]
        assert "Overdue Tasks: 3" in prompt
        assert "Current Goals: Learn Spanish" in prompt

    @pytest.mark.parametrize("content", ["no tips today", "[1, 2, 3]", "[]", "[broken"])
    def test_unusable_reply_falls_back(self, content):
        service = service_returning(body=chat_reply(content))
        assert service.generate_productivity_tips(self.CONTEXT) == DEFAULT_TIPS

    def test_http_error_falls_back(self):
        service = service_returning(status_code=503)
        assert service.generate_productivity_tips({}) == DEFAULT_TIPS
