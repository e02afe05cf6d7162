"""
LLM Provider abstraction for seamless provider switching
"""
from .base import (
    ChatMessage,
    LLMProvider,
    ModelTurn,
    ToolCall,
    ToolResultBlock,
)
from .factory import get_llm_provider
from .openai_provider import OpenAIProvider
from .anthropic_provider import AnthropicProvider
from .utils import parse_json_response, strip_markdown_fences

__all__ = [
    'ChatMessage',
    'LLMProvider',
    'ModelTurn',
    'ToolCall',
    'ToolResultBlock',
    'get_llm_provider',
    'OpenAIProvider',
    'AnthropicProvider',
    'parse_json_response',
    'strip_markdown_fences',
]
