import json

import numpy as np
import pytest

from lyric_stage.effects import NEUTRAL_STATE
from lyric_stage.lyrics import parse_lyrics
from lyric_stage.playback import EnvelopePlayback
from lyric_stage.pointer import PointerSample
from lyric_stage.synchronizer import SceneSynchronizer, format_timestamp, sky_rotation

SONG = {
    "title": "Test Song",
    "artist": "Someone",
    "phrases": [
        {
            "words": [
                {
                    "chars": [
                        {"text": "あ", "start": 1000, "end": 1200},
                        {"text": "い", "start": 1200, "end": 1400},
                    ]
                },
                {"chars": [{"text": "　", "start": 1400, "end": 1500}]},
                {"chars": [{"text": "う", "start": 1500, "end": 1800}]},
            ]
        },
        {"words": [{"chars": [{"text": "え", "start": 2500, "end": 2700}]}]},
    ],
}


def _setup():
    source = EnvelopePlayback(np.full(100, 0.5), hop_ms=100)
    sync = SceneSynchronizer(source, slot_count=4, seed=7)
    sync.load(parse_lyrics(SONG))
    return source, sync


def test_before_first_char_shows_idle_text():
    source, sync = _setup()
    source.seek(500)
    snap = sync.frame(0)
    assert snap.active_index == -1
    assert snap.surfaces["lyrics"].text == "-"
    assert snap.surfaces["title"].text == "Test Song"
    assert all(s.text == "" for s in snap.slots)


def test_placeholder_resolves_to_previous_word():
    source, sync = _setup()
    source.seek(1450)
    snap = sync.frame(0)
    assert snap.active_index == 1
    assert snap.surfaces["lyrics"].text == "あい"
    assert snap.surfaces["phrase"].text == "あい　う"
    assert snap.surfaces["notebook"].text == "あい"
    assert snap.surfaces["timestamp"].text == "0:01"

    source.seek(1600)
    snap = sync.frame(16)
    assert snap.active_index == 3
    assert snap.surfaces["lyrics"].text == "う"


def test_loading_frame():
    source, sync = _setup()
    source.seek(1600)
    sync.begin_load()
    snap = sync.frame(0)
    assert snap.loading
    assert snap.surfaces["lyrics"].text == "loading..."
    assert snap.active_index == -1
    assert snap.floating == ()


def test_stale_load_discarded():
    source, sync = _setup()
    first = sync.begin_load()
    second = sync.begin_load()
    other = parse_lyrics({"title": "Other", "chars": [{"text": "x", "start": 0, "end": 10}]})
    assert not sync.complete_load(first, other)
    assert sync.loading
    assert sync.complete_load(second, parse_lyrics(SONG))
    assert not sync.loading
    assert sync.lyrics.title == "Test Song"


def test_abort_load_shows_message():
    source, sync = _setup()
    gen = sync.begin_load()
    assert sync.abort_load(gen, "no lyrics")
    source.seek(100)
    assert sync.frame(0).surfaces["lyrics"].text == "no lyrics"


def test_load_resets_effects_and_slots():
    source, sync = _setup()
    source.play()
    source.seek(1600)
    sync.frame(0)
    sync.frame(16)
    assert sync.effects.state != NEUTRAL_STATE
    assert any(s.assigned_index is not None for s in sync.slots.views())

    sync.load(parse_lyrics(SONG))
    assert sync.effects.state == NEUTRAL_STATE
    assert all(s.assigned_index is None for s in sync.slots.views())


def test_stop_returns_to_idle():
    source, sync = _setup()
    source.play()
    source.seek(1600)
    sync.frame(0)
    source.stop()
    assert sync.effects.state == NEUTRAL_STATE
    snap = sync.frame(16)
    assert snap.position == 0.0
    assert snap.surfaces["lyrics"].text == "-"


def test_backward_seek_clears_slots():
    source, sync = _setup()
    source.seek(2600)
    sync.frame(0)
    assert any(i is not None for i in sync.slots.assigned)
    source.seek(1000)
    assert sync.slots.assigned == [None] * 4
    snap = sync.frame(16)
    assert [s.assigned_index for s in snap.slots if s.assigned_index is not None] == [0]


def test_stop_clears_slots_ahead_of_playhead():
    source = EnvelopePlayback(np.full(20, 0.5), hop_ms=100)
    sync = SceneSynchronizer(source, slot_count=4)
    chars = [{"text": c, "start": i * 100, "end": i * 100 + 80} for i, c in enumerate("abcdefghij")]
    sync.load(parse_lyrics({"chars": chars}))
    source.seek(950)
    sync.frame(0)
    source.stop()
    snap = sync.frame(16)
    assert snap.active_index == 0
    assert [(s.assigned_index, s.text) for s in snap.slots if s.assigned_index is not None] == [(0, "a")]


def test_floating_visible_only_from_window():
    source, sync = _setup()
    source.seek(1500)
    snap = sync.frame(0)
    assert snap.floating
    assert not any(f.visible for f in snap.floating)
    assert snap.surfaces["lyrics"].visible

    sync.go_to_viewpoint("window", 16)
    snap = sync.frame(32)
    assert any(f.visible for f in snap.floating)
    assert not snap.surfaces["lyrics"].visible
    assert snap.camera.viewpoint == "window"


def test_pointer_ignored_during_transition():
    source, sync = _setup()
    sync.go_right(0)
    snap = sync.frame(100, PointerSample(1.0, 0.0, True))
    assert snap.camera.transition < 1.0
    assert list(sync.camera.state.offset_position) == pytest.approx([0.0, 0.0, 0.0])


def test_snapshot_serializable():
    source, sync = _setup()
    source.seek(1300)
    snap = sync.frame(0)
    data = json.loads(json.dumps(snap.to_dict(), ensure_ascii=False))
    assert data["surfaces"]["lyrics"]["text"] == "あい"
    assert len(data["slots"]) == 4
    assert len(data["sky_rotation"]) == 3


def test_format_timestamp():
    assert format_timestamp(61000) == "1:01"
    assert format_timestamp(999) == "0:00"
    assert format_timestamp(-5) == "0:00"
    assert format_timestamp(float("nan")) == "0:00"


def test_sky_rotation():
    assert sky_rotation(6000) == pytest.approx((-1.0, 1.0, -0.75))
