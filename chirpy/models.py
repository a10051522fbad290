"""Domain models for the Chirpy service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class User:
    """Represents a user account stored in the Chirpy database."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    email: str


__all__ = ["User"]
