"""User entity - the principal access decisions are made for."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: str
    email: str | None = None
    display_name: str | None = None
    created_at: datetime | None = None
