"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Playback command layer (play, skip, stop, seek, reorder, remove, volume, pause/resume)
- queries/: Read operations (queue snapshot, search)
- services/: Queue gateway, playback engine driver, broadcaster, sessions, observers
- interfaces/: Port interfaces for infrastructure adapters
"""
