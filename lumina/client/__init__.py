"""Python client for the Lumina API.

Consumes the chat event stream incrementally and tolerates records split
across transport chunks.
"""

from lumina.client.api_client import LuminaAPIError, LuminaClient
from lumina.client.decoder import SSEDecoder, decode_record

__all__ = ["LuminaAPIError", "LuminaClient", "SSEDecoder", "decode_record"]
