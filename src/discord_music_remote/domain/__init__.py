"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, events and exceptions
- music/: Track and queue domain logic
- sessions/: Control sessions and live observers
"""

from discord_music_remote.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
