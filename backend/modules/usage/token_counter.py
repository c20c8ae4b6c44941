"""
Token counting utilities.

Used to estimate usage when a provider response carries no token counts.
"""

import tiktoken

# Cache encoders to avoid repeated initialization
_encoders: dict[str, tiktoken.Encoding] = {}


def get_encoder(model: str) -> tiktoken.Encoding:
    """
    Get the appropriate tokenizer for a model.

    The gpt-4o and gpt-5 families use o200k_base; older models cl100k_base.

    Args:
        model: Model name (e.g., "gpt-5.2")

    Returns:
        tiktoken.Encoding instance
    """
    if model.startswith(("gpt-5", "gpt-4o", "o1", "o3", "o4")):
        encoding_name = "o200k_base"
    else:
        encoding_name = "cl100k_base"

    if encoding_name not in _encoders:
        _encoders[encoding_name] = tiktoken.get_encoding(encoding_name)

    return _encoders[encoding_name]


def count_tokens(text: str, model: str = "gpt-5.2") -> int:
    """
    Count tokens in a text string.

    Args:
        text: The text to count tokens for
        model: Model name for tokenizer selection

    Returns:
        Number of tokens
    """
    if not text:
        return 0

    encoder = get_encoder(model)
    return len(encoder.encode(text))
