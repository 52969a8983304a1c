"""FastAPI endpoints for the Lumina document chat service.

Endpoints:
    - GET /health: Service health status
    - POST /api/upload: Extract text from a PDF
    - POST /api/chat: Stream an answer as server-sent events
    - POST /api/clear: Clear a user's conversation history
"""

from lumina.api.app import app, create_app

__all__ = ["app", "create_app"]
