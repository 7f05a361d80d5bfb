# tests/test_clips/test_selector.py

from livecam.schemas.clips import ClipObject
from livecam.schemas.enums import CameraAngle
from livecam.services.clip_service import match_angle, rank_clips, select_latest_per_camera
from tests.fixtures.store import clip_key


def _ranked(*pairs):
    """pairs of (timestamp, angle) → ranked ClipObjects."""
    return rank_clips([ClipObject(key=clip_key(ts, angle)) for ts, angle in pairs])


def test_picks_newest_per_angle():
    ranked = _ranked(
        ("2024-01-01_10-00-00", "front"),
        ("2024-01-01_09-00-00", "front"),
        ("2024-01-01_10-00-00", "back"),
        ("2024-01-01_09-59-00", "left"),
        ("2024-01-01_09-58-00", "right"),
    )
    winners = select_latest_per_camera(ranked)
    assert winners[CameraAngle.FRONT].key == clip_key("2024-01-01_10-00-00", "front")
    assert winners[CameraAngle.BACK].key == clip_key("2024-01-01_10-00-00", "back")
    assert winners[CameraAngle.LEFT].key == clip_key("2024-01-01_09-59-00", "left")
    assert winners[CameraAngle.RIGHT].key == clip_key("2024-01-01_09-58-00", "right")


def test_at_most_one_winner_per_angle_and_winner_contains_marker():
    ranked = _ranked(*[(f"2024-01-01_10-00-0{i}", "front") for i in range(6)])
    winners = select_latest_per_camera(ranked)
    assert list(winners) == [CameraAngle.FRONT]
    for angle, clip in winners.items():
        assert angle.value in clip.key


def test_missing_angles_are_absent():
    winners = select_latest_per_camera(_ranked(("2024-01-01_10-00-00", "front")))
    assert CameraAngle.RIGHT not in winners
    assert set(winners) == {CameraAngle.FRONT}


def test_entries_beyond_scan_window_are_never_selected():
    # Eight newer non-front clips fill the window; the ninth (front) is out of reach.
    pairs = [(f"2024-01-01_10-00-0{i}", angle) for i, angle in enumerate(["back", "left", "right", "back", "left", "right", "back", "left"])]
    pairs.append(("2024-01-01_09-00-00", "front"))
    ranked = _ranked(*pairs)
    assert len(ranked) == 9
    winners = select_latest_per_camera(ranked, scan_window=8)
    assert CameraAngle.FRONT not in winners

    # Widening the window reaches it.
    assert CameraAngle.FRONT in select_latest_per_camera(ranked, scan_window=9)


def test_scan_continues_to_window_end_once_all_angles_filled():
    ranked = _ranked(
        ("2024-01-01_10-00-04", "front"),
        ("2024-01-01_10-00-03", "back"),
        ("2024-01-01_10-00-02", "left"),
        ("2024-01-01_10-00-01", "right"),
        ("2024-01-01_10-00-00", "front"),
    )
    winners = select_latest_per_camera(ranked)
    assert len(winners) == 4
    assert winners[CameraAngle.FRONT].key == clip_key("2024-01-01_10-00-04", "front")


def test_zero_window_selects_nothing():
    assert select_latest_per_camera(_ranked(("2024-01-01_10-00-00", "front")), scan_window=0) == {}


def test_keys_without_any_marker_are_skipped():
    ranked = rank_clips([
        ClipObject(key="cams/streams/2024-01-01/2024-01-01_10-00-00-top.mp4"),
        ClipObject(key=clip_key("2024-01-01_09-00-00", "left")),
    ])
    assert set(select_latest_per_camera(ranked)) == {CameraAngle.LEFT}


def test_ambiguous_key_goes_to_first_unfilled_angle_in_order():
    key = "cams/streams/2024-01-01/2024-01-01_10-00-00-front-left.mp4"
    assert match_angle(key) == CameraAngle.FRONT
    taken = {CameraAngle.FRONT: ClipObject(key=clip_key("2024-01-01_10-00-01", "front"))}
    assert match_angle(key, taken=taken) == CameraAngle.LEFT


def test_custom_angle_order_changes_priority():
    key = "cams/streams/2024-01-01/2024-01-01_10-00-00-front-left.mp4"
    order = (CameraAngle.LEFT, CameraAngle.FRONT, CameraAngle.BACK, CameraAngle.RIGHT)
    assert match_angle(key, angle_order=order) == CameraAngle.LEFT
