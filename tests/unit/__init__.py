"""Unit tests for individual components in isolation.

Coverage:
    - sessions/: History storage and trimming
    - parsing/: Text extraction, normalization and truncation
    - agent/: Configuration, credentials and fragment normalization
    - chat/: Orchestration and SSE encoding
    - client/: Incremental stream decoding

Uses mocks for pypdf and Agno where a real document or model would be needed.
"""
