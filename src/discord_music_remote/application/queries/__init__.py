"""
Application Queries (CQRS Read Side)

Query objects and handlers for read operations.
Queries do not modify state, only retrieve data.
"""

from discord_music_remote.application.queries.get_queue import GetQueueHandler, GetQueueQuery
from discord_music_remote.application.queries.search_tracks import SearchTracksHandler, SearchTracksQuery

__all__ = [
    "GetQueueQuery",
    "GetQueueHandler",
    "SearchTracksQuery",
    "SearchTracksHandler",
]
