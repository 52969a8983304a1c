"""Language-model boundary for the chat pipeline.

Responsibilities:
    - Agent configuration and credential resolution
    - System prompt construction with the full document inline
    - Streaming completions through an Agno agent
    - Normalizing upstream chunks into text or sourced fragments

No retrieval happens here: the document is injected wholesale.
"""

from lumina.agent.chat_agent import (
    AgnoCompletionSource,
    CompletionError,
    CompletionSource,
    CompletionSourceFactory,
    get_completion_source,
)
from lumina.agent.config import (
    AgentConfig,
    ChatSettings,
    Credentials,
    MissingCredentialsError,
    get_agent_config,
    get_chat_settings,
)
from lumina.agent.fragments import (
    Fragment,
    SourcedFragment,
    SourceRef,
    TextFragment,
    normalize_fragment,
)
from lumina.agent.prompts import build_system_prompt

__all__ = [
    "AgentConfig",
    "AgnoCompletionSource",
    "ChatSettings",
    "CompletionError",
    "CompletionSource",
    "CompletionSourceFactory",
    "Credentials",
    "Fragment",
    "MissingCredentialsError",
    "SourceRef",
    "SourcedFragment",
    "TextFragment",
    "build_system_prompt",
    "get_agent_config",
    "get_chat_settings",
    "get_completion_source",
    "normalize_fragment",
]
