from __future__ import annotations

import random
from typing import Any, Dict, Optional, Protocol

DEFAULT_AI_MODEL = "gpt-3.5-turbo"

CANNED_RESPONSES = [
    "I understand your question. Let me help you with that.",
    "That's a great question! Here's what I can tell you:",
    "I'd be happy to assist you with that.",
    "Thanks for reaching out. Here's how I can help:",
    "Let me provide you with some information about that.",
]

DEMO_NOTICE = " (Note: This is a demo response. Connect OpenAI for AI-powered responses.)"


class ResponseGenerator(Protocol):
    def generate_response(self, text: str, ai_config: Dict[str, Any]) -> str:
        ...


class CannedResponseGenerator:
    """Resposta de demonstração: frase aleatória, sem olhar o texto."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate_response(self, text: str, ai_config: Dict[str, Any]) -> str:
        return self.rng.choice(CANNED_RESPONSES) + DEMO_NOTICE


def model_name(ai_config: Optional[Dict[str, Any]]) -> str:
    return (ai_config or {}).get("model") or DEFAULT_AI_MODEL


def get_response_generator() -> ResponseGenerator:
    return CannedResponseGenerator()
