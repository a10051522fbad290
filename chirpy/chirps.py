"""Chirp validation and profanity filtering."""

from __future__ import annotations

MAX_CHIRP_LENGTH = 140
MASK = "****"
BLOCKED_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})


class ChirpTooLongError(ValueError):
    """Raised when a chirp exceeds :data:`MAX_CHIRP_LENGTH` encoded bytes."""

    def __init__(self, length: int) -> None:
        super().__init__("Chirp is too long")
        self.length = length


def clean_body(message: str) -> str:
    """Mask blocked words in ``message``.

    Tokens are split on single spaces, so consecutive spaces survive as empty
    tokens and the original spacing is kept. A token only matches when it is
    exactly a blocked word once lower-cased; ``"Fornax!"`` is left alone.
    """

    tokens = message.split(" ")
    for index, token in enumerate(tokens):
        if token.lower() in BLOCKED_WORDS:
            tokens[index] = MASK
    return " ".join(tokens)


def validate_chirp(body: str) -> str:
    """Return the cleaned chirp or raise :class:`ChirpTooLongError`."""

    length = len(body.encode("utf-8"))
    if length > MAX_CHIRP_LENGTH:
        raise ChirpTooLongError(length)
    return clean_body(body)


__all__ = [
    "BLOCKED_WORDS",
    "ChirpTooLongError",
    "MASK",
    "MAX_CHIRP_LENGTH",
    "clean_body",
    "validate_chirp",
]
