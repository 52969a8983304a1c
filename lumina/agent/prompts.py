"""System instructions for the document chat assistant.

The whole document is pushed into the system prompt on every turn. There is
no retrieval step: the client re-sends the extracted text with each request.
"""

# Documents at or below this length are treated as absent
MIN_DOCUMENT_LENGTH = 10

ASSISTANT_NAME = "Lumina"

DOCUMENT_PROMPT = """You are {name}, an intelligent AI assistant.
You have been provided with a document's full text below.
Use this document context to answer questions accurately.

[DOCUMENT CONTEXT]:
{document}

INSTRUCTIONS:
- If the answer is in the document, provide it clearly.
- If the info is missing, say so but answer based on your general knowledge if relevant.
- Keep the tone helpful and professional."""

NO_DOCUMENT_PROMPT = """You are {name}, an intelligent AI assistant.
No document is currently uploaded. Answer questions to the best of your general knowledge."""


def has_document(document_text: str | None) -> bool:
    """Whether the text is long enough to count as an uploaded document."""
    return bool(document_text) and len(document_text) > MIN_DOCUMENT_LENGTH


def build_system_prompt(document_text: str | None = None) -> str:
    """Build the system instruction for one chat turn.

    Args:
        document_text: Extracted document text sent by the client, if any.

    Returns:
        The document-grounded instruction when a document is present,
        otherwise the general-knowledge instruction.
    """
    if has_document(document_text):
        return DOCUMENT_PROMPT.format(name=ASSISTANT_NAME, document=document_text)
    return NO_DOCUMENT_PROMPT.format(name=ASSISTANT_NAME)
