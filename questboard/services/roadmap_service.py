"""
AI roadmap client: goal -> structured roadmap, plus productivity tips.

Talks to an OpenAI-compatible chat completions endpoint. Failures never
propagate to callers: roadmaps degrade to ``{"error": ...}`` and tips to a
fixed default list.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from questboard.core.config import settings
from questboard.core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

TIMEFRAME_SPANS = {
    "short-term": "1-3 months",
    "medium-term": "3-12 months",
    "long-term": "1-5 years",
}

DEFAULT_TIPS = [
    "Try breaking down complex tasks into smaller, manageable steps.",
    "Consider using the Pomodoro technique: 25 minutes of focused work followed by a 5-minute break.",
    "Review and prioritize your tasks at the beginning of each day.",
]

SYSTEM_PROMPT = (
    "You are an expert goal planning assistant specializing in creating structured, "
    "achievable roadmaps for personal and professional goals."
)

ROADMAP_FORMAT = """{
  "overview": "Brief 2-3 sentence summary of the roadmap approach",
  "milestones": [
    {
      "title": "Milestone title",
      "description": "Description of the milestone",
      "duration": "estimated duration (e.g., '2 weeks')",
      "tasks": [
        {
          "title": "Task title",
          "description": "Detailed task description",
          "priority": "high/medium/low",
          "difficulty": "easy/normal/hard",
          "estimated_time": "estimated time to complete (e.g., '3 hours')"
        }
      ]
    }
  ],
  "weeklyPlan": [{"week": 1, "focus": "Main focus for this week", "tasks": ["Task 1"]}],
  "resources": ["Books, courses or tools"],
  "tips": ["Practical tip"],
  "challenges": ["Likely obstacle and how to handle it"],
  "successMetrics": ["Metric 1", "Metric 2"]
}"""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def build_roadmap_prompt(goal: Any) -> str:
    timeframe = getattr(goal, "timeframe", None)
    span = TIMEFRAME_SPANS.get(timeframe, "unspecified")
    return (
        "Generate a detailed, structured roadmap for the following goal:\n\n"
        f"Goal Title: {goal.title}\n"
        f"Description: {getattr(goal, 'description', None) or 'Not provided'}\n"
        f"Category: {goal.category}\n"
        f"Timeframe: {timeframe} ({span})\n\n"
        "Respond with a JSON object in exactly this format:\n"
        f"{ROADMAP_FORMAT}\n\n"
        "Make the roadmap realistic, actionable, and adaptive to the timeframe. "
        "Break down large goals into manageable steps. "
        "Only provide the JSON response with no additional text."
    )


def extract_message_text(payload: Dict[str, Any]) -> Optional[str]:
    """Assistant text from a chat completions response body"""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content.strip() or None
    return None


class RoadmapService:
    """Client for the external roadmap generator"""

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        api_key: Optional[str] = None
    ):
        self._transport = transport
        self._api_key = api_key

    def _chat(self, prompt: str) -> str:
        api_key = self._api_key or settings.AI_API_KEY
        if not api_key:
            raise ExternalServiceException("roadmap service", "AI_API_KEY is not configured")

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": settings.AI_MODEL,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.4,
        }

        try:
            with httpx.Client(transport=self._transport, timeout=settings.AI_TIMEOUT_SECONDS) as client:
                resp = client.post(settings.AI_API_URL, headers=headers, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceException("roadmap service", str(e)) from e

        text = extract_message_text(data) if isinstance(data, dict) else None
        if not text:
            raise ExternalServiceException("roadmap service", "empty response")
        return text

    def generate_roadmap(self, goal: Any) -> Dict[str, Any]:
        """Roadmap dict for the goal, or ``{"error": message}`` on any failure"""
        try:
            text = self._chat(build_roadmap_prompt(goal))
            match = _JSON_OBJECT.search(text)
            if not match:
                raise ExternalServiceException("roadmap service", "Invalid AI response format")
            roadmap = json.loads(match.group(0))
            if not isinstance(roadmap, dict):
                raise ExternalServiceException("roadmap service", "Invalid AI response format")
            return roadmap
        except (ExternalServiceException, ValueError) as e:
            logger.error(f"Error generating goal roadmap: {e}")
            return {"error": f"Failed to generate roadmap: {e}"}

    def generate_productivity_tips(self, context: Dict[str, Any]) -> List[str]:
        """Three tips for the user's current task load; defaults on failure"""
        goals = ", ".join(context.get("goals") or []) or "None"
        prompt = (
            "Based on the following user stats, generate 3 practical, specific productivity tips:\n\n"
            f"Recent Tasks: {context.get('recent_tasks', 0)}\n"
            f"Completed Tasks: {context.get('completed_tasks', 0)}\n"
            f"Overdue Tasks: {context.get('overdue_count', 0)}\n"
            f"High Priority Tasks: {context.get('high_priority_count', 0)}\n"
            f"Current Goals: {goals}\n\n"
            "Format the response as a JSON array of 3 strings. "
            "Only provide the JSON array with no additional text."
        )
        try:
            text = self._chat(prompt)
            match = _JSON_ARRAY.search(text)
            tips = json.loads(match.group(0)) if match else None
        except (ExternalServiceException, ValueError) as e:
            logger.warning(f"Error generating productivity tips: {e}")
            return list(DEFAULT_TIPS)

        if not isinstance(tips, list) or not all(isinstance(t, str) for t in tips) or not tips:
            return list(DEFAULT_TIPS)
        return tips[:3]


roadmap_service = RoadmapService()
