"""Integration tests for the API working as a system.

Requests go through the real FastAPI app via httpx ASGITransport. Only the
completion source is scripted.
"""
