"""Translation of prompts into SQL by an external text-generation service."""

from attendql.translation.gateway import TranslationGateway
from attendql.translation.openai import OpenAIGateway

__all__ = [
    "TranslationGateway",
    "OpenAIGateway",
]
