"""
Unit Tests for the Music Domain

Tests for:
- TrackId and index translation helpers
- format_duration
- Track value object
- GuildQueue aggregate (enqueue, advance, reorder, remove, clock, pause/resume)
"""

import math

import pytest
from pydantic import ValidationError

from conftest import GUILD_ID, make_track
from discord_music_remote.domain.music.entities import GuildQueue, Track, UserRef
from discord_music_remote.domain.music.value_objects import (
    TrackId,
    format_duration,
    queue_to_upcoming_index,
    upcoming_to_queue_index,
)
from discord_music_remote.domain.shared.exceptions import (
    AlreadyInStateError,
    InvalidInputError,
    OutOfBoundsError,
)


def _queue(n: int) -> GuildQueue:
    queue = GuildQueue(guild_id=GUILD_ID)
    for i in range(1, n + 1):
        queue.enqueue(make_track(i))
    return queue


def _titles(queue: GuildQueue) -> list[str]:
    return [t.title for t in queue.songs]


# =============================================================================
# Value objects
# =============================================================================


class TestTrackId:
    def test_extracts_youtube_video_id(self):
        assert TrackId.from_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ").value == "dQw4w9WgXcQ"
        assert TrackId.from_url("https://youtu.be/dQw4w9WgXcQ").value == "dQw4w9WgXcQ"
        assert TrackId.from_url("https://youtube.com/shorts/dQw4w9WgXcQ").value == "dQw4w9WgXcQ"

    def test_falls_back_to_url_hash(self):
        track_id = TrackId.from_url("https://soundcloud.com/artist/song")
        assert len(track_id.value) == 16
        assert track_id == TrackId.from_url("https://soundcloud.com/artist/song")

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            TrackId("  ")


class TestIndexTranslation:
    def test_upcoming_zero_is_queue_one(self):
        assert upcoming_to_queue_index(0) == 1
        assert queue_to_upcoming_index(1) == 0

    def test_current_track_has_no_upcoming_index(self):
        with pytest.raises(ValueError):
            queue_to_upcoming_index(0)


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "0:00"),
            (5, "0:05"),
            (65, "1:05"),
            (4980, "83:00"),
            (59.9, "0:59"),
        ],
    )
    def test_formats_minutes_and_seconds(self, seconds, expected):
        assert format_duration(seconds) == expected

    @pytest.mark.parametrize("value", [None, "90", -1, math.nan, math.inf, True])
    def test_garbage_formats_as_zero(self, value):
        assert format_duration(value) == "0:00"


# =============================================================================
# Track
# =============================================================================


class TestTrack:
    def test_live_or_zero_duration_not_seekable(self):
        assert make_track(1).is_seekable
        assert not make_track(1, duration_seconds=0).is_seekable
        assert not make_track(1, is_live=True).is_seekable

    def test_with_requester_sets_attribution(self, sample_user):
        track = make_track(1).with_requester(sample_user)
        assert track.added_by == sample_user
        assert track.added_at is not None

    def test_url_must_be_http(self):
        with pytest.raises(ValidationError):
            make_track(1, url="ftp://example.com/song.mp3")

    def test_title_length_bounded(self):
        with pytest.raises(ValidationError):
            make_track(1, title="x" * 501)

    def test_unknown_user(self):
        user = UserRef.unknown(42)
        assert user.id == "42"
        assert user.display_name == "Unknown User"

    def test_frozen(self):
        track = make_track(1)
        with pytest.raises(ValidationError):
            track.title = "other"  # type: ignore[misc]

    def test_duration_formatted(self):
        assert make_track(1, duration_seconds=125).duration_formatted == "2:05"


# =============================================================================
# GuildQueue
# =============================================================================


class TestGuildQueueBasics:
    def test_current_and_upcoming(self):
        queue = _queue(3)
        assert queue.current.title == "Song 1"
        assert [t.title for t in queue.upcoming] == ["Song 2", "Song 3"]
        assert queue.upcoming_length == 2

    def test_empty_queue(self):
        queue = GuildQueue(guild_id=GUILD_ID)
        assert queue.current is None
        assert queue.upcoming == []
        assert queue.upcoming_length == 0
        assert queue.is_empty

    def test_enqueue_returns_full_index(self):
        queue = GuildQueue(guild_id=GUILD_ID)
        assert queue.enqueue(make_track(1)) == 0
        assert queue.enqueue(make_track(2)) == 1

    def test_advance_drops_current(self):
        queue = _queue(2)
        queue.paused = True
        assert queue.advance().title == "Song 2"
        assert not queue.paused
        assert queue.advance() is None
        assert queue.is_empty

    def test_clear_counts(self):
        queue = _queue(3)
        assert queue.clear() == 3
        assert queue.is_empty

    def test_volume_bounds(self):
        queue = _queue(1)
        queue.set_volume(200)
        assert queue.volume == 200
        with pytest.raises(InvalidInputError):
            queue.set_volume(201)
        with pytest.raises(InvalidInputError):
            queue.set_volume(-1)


class TestMoveUpcoming:
    def test_move_forward_is_remove_then_insert(self):
        queue = _queue(5)  # current: 1, upcoming: 2 3 4 5
        assert queue.move_upcoming(0, 2)
        assert _titles(queue) == ["Song 1", "Song 3", "Song 4", "Song 2", "Song 5"]

    def test_move_backward(self):
        queue = _queue(5)
        assert queue.move_upcoming(3, 0)
        assert _titles(queue) == ["Song 1", "Song 5", "Song 2", "Song 3", "Song 4"]

    def test_move_to_tail_allowed(self):
        queue = _queue(4)
        assert queue.move_upcoming(0, 3)
        assert _titles(queue) == ["Song 1", "Song 3", "Song 4", "Song 2"]

    def test_same_position_is_noop(self):
        queue = _queue(3)
        assert queue.move_upcoming(1, 1) is False
        assert _titles(queue) == ["Song 1", "Song 2", "Song 3"]

    def test_current_track_never_moves(self):
        queue = _queue(4)
        queue.move_upcoming(2, 0)
        assert queue.current.title == "Song 1"

    @pytest.mark.parametrize("old, new", [(3, 0), (0, 4), (-1, 0), (0, -1)])
    def test_out_of_bounds(self, old, new):
        queue = _queue(4)  # upcoming length 3
        with pytest.raises(OutOfBoundsError):
            queue.move_upcoming(old, new)
        assert _titles(queue) == ["Song 1", "Song 2", "Song 3", "Song 4"]

    def test_bounds_checked_before_noop(self):
        queue = _queue(2)
        with pytest.raises(OutOfBoundsError):
            queue.move_upcoming(5, 5)

    def test_length_preserved(self):
        queue = _queue(6)
        queue.move_upcoming(4, 1)
        assert len(queue.songs) == 6
        assert sorted(_titles(queue)) == sorted(f"Song {i}" for i in range(1, 7))


class TestRemoveUpcoming:
    def test_remove_returns_track(self):
        queue = _queue(3)
        removed = queue.remove_upcoming(1)
        assert removed.title == "Song 3"
        assert _titles(queue) == ["Song 1", "Song 2"]

    def test_cannot_reach_current(self):
        queue = _queue(1)
        with pytest.raises(OutOfBoundsError) as exc_info:
            queue.remove_upcoming(0)
        assert exc_info.value.upcoming_length == 0
        assert queue.current.title == "Song 1"

    def test_negative_index(self):
        with pytest.raises(OutOfBoundsError):
            _queue(3).remove_upcoming(-1)


class TestPlaybackClock:
    def test_time_advances_with_clock(self):
        queue = _queue(1)
        queue.start_clock(10.0, now=100.0)
        assert queue.current_time(now=105.0) == pytest.approx(15.0)

    def test_no_track_reads_zero(self):
        queue = GuildQueue(guild_id=GUILD_ID)
        assert queue.current_time(now=1.0) == 0.0

    def test_pause_freezes_time(self):
        queue = _queue(1)
        queue.start_clock(0.0, now=100.0)
        queue.pause(now=130.0)
        assert queue.paused
        assert queue.current_time(now=500.0) == pytest.approx(30.0)

    def test_resume_continues_from_frozen_offset(self):
        queue = _queue(1)
        queue.start_clock(0.0, now=100.0)
        queue.pause(now=130.0)
        queue.resume(now=200.0)
        assert queue.current_time(now=210.0) == pytest.approx(40.0)

    def test_pause_twice_rejected(self):
        queue = _queue(1)
        queue.pause()
        with pytest.raises(AlreadyInStateError) as exc_info:
            queue.pause()
        assert exc_info.value.state == "paused"

    def test_resume_when_playing_rejected(self):
        with pytest.raises(AlreadyInStateError):
            _queue(1).resume()

    def test_seek_while_paused_stays_frozen(self):
        queue = _queue(1)
        queue.start_clock(0.0, now=100.0)
        queue.pause(now=110.0)
        queue.seek_to(60.0, now=120.0)
        assert queue.current_time(now=999.0) == pytest.approx(60.0)

    def test_seek_while_playing_restarts_clock(self):
        queue = _queue(1)
        queue.start_clock(0.0, now=100.0)
        queue.seek_to(60.0, now=120.0)
        assert queue.current_time(now=125.0) == pytest.approx(65.0)
