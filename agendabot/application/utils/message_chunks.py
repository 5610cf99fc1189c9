from __future__ import annotations


def split_message(text: str, max_length: int = 1600) -> list[str]:
    """Split ``text`` into consecutive chunks of at most ``max_length`` characters."""
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    if not text:
        return []
    return [text[i : i + max_length] for i in range(0, len(text), max_length)]
