"""Lumina - chat with a PDF through a streaming language model.

Combines FastAPI for HTTP streaming, Agno for model access, pypdf for text
extraction, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - chat: Per-turn orchestration and SSE encoding
    - agent: Model configuration, prompts and completion streaming
    - sessions: In-memory per-user conversation history
    - parsing: PDF extraction and text normalization
    - client: Python client that decodes the event stream
    - models: Request, response and event schemas
"""

__version__ = "0.1.0"
