# tests/test_clips/test_ranking.py

import pytest

from livecam.core.exceptions import MalformedKey
from livecam.schemas.clips import ClipObject
from livecam.services.clip_service import rank_clips
from tests.fixtures.store import clip_key


def _clips(*keys):
    return [ClipObject(key=k) for k in keys]


def test_orders_newest_first():
    clips = _clips(
        clip_key("2024-01-01_09-00-00", "front"),
        clip_key("2024-01-01_10-00-00", "front"),
        clip_key("2024-01-01_09-30-00", "back"),
    )
    ranked = [c.key for c in rank_clips(clips)]
    assert ranked == [
        clip_key("2024-01-01_10-00-00", "front"),
        clip_key("2024-01-01_09-30-00", "back"),
        clip_key("2024-01-01_09-00-00", "front"),
    ]


def test_ties_keep_listing_order():
    ts = "2024-01-01_10-00-00"
    clips = _clips(clip_key(ts, "right"), clip_key(ts, "front"), clip_key(ts, "left"), clip_key(ts, "back"))
    ranked = rank_clips(clips)
    assert [c.key for c in ranked] == [c.key for c in clips]

    # Re-ranking the result is a no-op.
    assert rank_clips(ranked) == ranked


def test_ties_stay_stable_among_mixed_timestamps():
    clips = _clips(
        clip_key("2024-01-01_10-00-00", "back"),
        clip_key("2024-01-01_10-00-01", "front"),
        clip_key("2024-01-01_10-00-00", "left"),
    )
    ranked = [c.key for c in rank_clips(clips)]
    assert ranked == [
        clip_key("2024-01-01_10-00-01", "front"),
        clip_key("2024-01-01_10-00-00", "back"),
        clip_key("2024-01-01_10-00-00", "left"),
    ]


def test_ranking_ignores_last_modified():
    from datetime import datetime, timezone

    older_key_newer_upload = ClipObject(
        key=clip_key("2024-01-01_09-00-00", "front"),
        last_modified=datetime(2024, 1, 2, tzinfo=timezone.utc),
    )
    newer_key_older_upload = ClipObject(
        key=clip_key("2024-01-01_10-00-00", "front"),
        last_modified=datetime(2023, 1, 1, tzinfo=timezone.utc),
    )
    ranked = rank_clips([older_key_newer_upload, newer_key_older_upload])
    assert ranked[0] is newer_key_older_upload


def test_does_not_mutate_input():
    clips = _clips(clip_key("2024-01-01_09-00-00", "front"), clip_key("2024-01-01_10-00-00", "back"))
    before = list(clips)
    rank_clips(clips)
    assert clips == before


def test_empty_input():
    assert rank_clips([]) == []


def test_one_malformed_key_fails_whole_ranking():
    clips = _clips(clip_key("2024-01-01_10-00-00", "front"), "cams/streams/2024-01-01/garbage.mp4")
    with pytest.raises(MalformedKey):
        rank_clips(clips)
