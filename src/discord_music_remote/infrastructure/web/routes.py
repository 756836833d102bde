"""HTTP API routes. Each route builds a command or query and hands it to its handler."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from discord_music_remote.application.commands.edit_queue import RemoveTrackCommand, ReorderQueueCommand
from discord_music_remote.application.commands.playback_controls import (
    PausePlaybackCommand,
    ResumePlaybackCommand,
    SetVolumeCommand,
    SkipTrackCommand,
    StopPlaybackCommand,
)
from discord_music_remote.application.commands.seek_track import SeekCommand
from discord_music_remote.application.queries.get_queue import GetQueueQuery
from discord_music_remote.application.queries.search_tracks import SearchTracksQuery
from discord_music_remote.config.container import Container
from discord_music_remote.domain.shared.exceptions import InvalidInputError
from discord_music_remote.domain.shared.messages import ErrorMessages
from discord_music_remote.infrastructure.web.schemas import (
    HealthResponse,
    MessageResponse,
    PlayRequest,
    RemoveRequest,
    ReorderRequest,
    SearchResponse,
    SeekRequest,
    SeekResponse,
    SuccessResponse,
    UserInfoResponse,
    VolumeRequest,
)

logger = logging.getLogger(__name__)


def get_container(request: Request) -> Container:
    return request.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]

api_router = APIRouter(prefix="/api")
health_router = APIRouter()


# ── Sessions ────────────────────────────────────────────────────────


@api_router.get("/user-info")
async def user_info(container: ContainerDep, token: str | None = None) -> dict[str, Any]:
    if not token:
        raise InvalidInputError(ErrorMessages.SESSION_TOKEN_REQUIRED, field="token")
    user = container.session_registry.resolve(token)
    return UserInfoResponse.from_user(user).to_wire()


# ── Queue ───────────────────────────────────────────────────────────


@api_router.post("/play")
async def play(container: ContainerDep, body: PlayRequest | None = None) -> dict[str, Any]:
    command = (body or PlayRequest()).to_command()
    result = await container.play_track_handler.handle(command)
    return MessageResponse(message=result.message).to_wire()


@api_router.get("/queue")
async def get_queue(container: ContainerDep) -> dict[str, Any]:
    snapshot = await container.get_queue_handler.handle(GetQueueQuery())
    return snapshot.to_payload()


@api_router.post("/seek")
async def seek(container: ContainerDep, body: SeekRequest | None = None) -> dict[str, Any]:
    command = SeekCommand(time=(body or SeekRequest()).time)
    result = await container.seek_track_handler.handle(command)
    return SeekResponse(message=result.message, requested_seek_time=result.requested_seek_time).to_wire()


@api_router.post("/reorder-queue")
async def reorder_queue(container: ContainerDep, body: ReorderRequest | None = None) -> dict[str, Any]:
    body = body or ReorderRequest()
    command = ReorderQueueCommand(old_index=body.old_index, new_index=body.new_index)
    result = await container.reorder_queue_handler.handle(command)
    return SuccessResponse(message=result.message, success=result.success).to_wire()


@api_router.post("/remove")
async def remove(container: ContainerDep, body: RemoveRequest | None = None) -> dict[str, Any]:
    command = RemoveTrackCommand(index=(body or RemoveRequest()).index)
    result = await container.remove_track_handler.handle(command)
    return SuccessResponse(message=result.message, success=result.success).to_wire()


# ── Playback controls ───────────────────────────────────────────────


@api_router.post("/stop")
async def stop(container: ContainerDep) -> dict[str, Any]:
    result = await container.stop_playback_handler.handle(StopPlaybackCommand())
    return MessageResponse(message=result.message).to_wire()


@api_router.post("/skip")
async def skip(container: ContainerDep) -> dict[str, Any]:
    result = await container.skip_track_handler.handle(SkipTrackCommand())
    return MessageResponse(message=result.message).to_wire()


@api_router.post("/pause")
async def pause(container: ContainerDep) -> dict[str, Any]:
    result = await container.pause_playback_handler.handle(PausePlaybackCommand())
    return MessageResponse(message=result.message).to_wire()


@api_router.post("/resume")
async def resume(container: ContainerDep) -> dict[str, Any]:
    result = await container.resume_playback_handler.handle(ResumePlaybackCommand())
    return MessageResponse(message=result.message).to_wire()


@api_router.post("/volume")
async def volume(container: ContainerDep, body: VolumeRequest | None = None) -> dict[str, Any]:
    command = SetVolumeCommand(volume=(body or VolumeRequest()).volume)
    result = await container.set_volume_handler.handle(command)
    return MessageResponse(message=result.message).to_wire()


# ── Search ──────────────────────────────────────────────────────────


@api_router.get("/search")
async def search(container: ContainerDep, q: str | None = None) -> dict[str, Any]:
    hits = await container.search_tracks_handler.handle(SearchTracksQuery(query=q))
    return SearchResponse(items=hits).to_wire()


@health_router.get("/health")
async def health() -> dict[str, Any]:
    return HealthResponse().to_wire()
