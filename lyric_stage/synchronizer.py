"""Per-frame orchestration of the lyric scene.

:class:`SceneSynchronizer` owns every piece of mutable scene state.  Once per
render tick :meth:`SceneSynchronizer.frame` pulls the position and amplitude
from the playback source, runs the components in a fixed order and returns a
read-only :class:`FrameSnapshot` for the renderer.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .camera import CameraPose, CameraStateMachine, Viewpoint
from .color import RGB, MoodPalette, sky_color
from .config import IDLE_TEXT, LOADING_TEXT, POLAROID_COUNT, SKY_SPEED
from .effects import (
    EffectGenerator,
    EffectState,
    TextModulation,
    lyric_modulation,
    slot_modulation,
)
from .floating import FloatingTracker, FloatingView, build_floating_elements
from .lyrics import LyricsData
from .notebook import Notebook
from .playback import PlaybackEvent, PlaybackSource
from .pointer import IDLE_POINTER, PointerSample
from .presets import viewpoints_from_config
from .slots import SlotAllocator, SlotView
from .timeline import TimelineIndex


def format_timestamp(position: float) -> str:
    """``m:ss`` for a millisecond position."""
    if not math.isfinite(position) or position < 0:
        position = 0.0
    seconds = int(position // 1000)
    return f"{seconds // 60}:{seconds % 60:02d}"


def sky_rotation(position: float, speed: float = SKY_SPEED) -> Tuple[float, float, float]:
    """Rotation of the inner, coloured and outer sky layers."""
    return (
        -position / 6000 * speed,
        position / 6000 * speed,
        -position / 8000 * speed,
    )


@dataclass(frozen=True)
class TextSurface:
    text: str
    visible: bool = True
    font_size: float = 0.0
    letter_spacing: float = 0.0
    scale: Tuple[float, float] = (1.0, 1.0)
    outline_color: Optional[RGB] = None
    anchor: Optional[Tuple[float, float, float]] = None
    look_at: Optional[Tuple[float, float, float]] = None


@dataclass(frozen=True)
class FrameSnapshot:
    position: float
    generation: int
    loading: bool
    active_index: int
    word_index: int
    phrase_index: int
    surfaces: Dict[str, TextSurface]
    slots: Tuple[SlotView, ...]
    slot_text: TextModulation
    floating: Tuple[FloatingView, ...]
    camera: CameraPose
    mood_color: RGB
    sky_color: RGB
    sky_rotation: Tuple[float, float, float]
    effect: EffectState

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class _SongState:
    """Everything rebuilt on a song change, swapped in as one object."""

    lyrics: LyricsData = field(default_factory=LyricsData)
    chars: TimelineIndex = field(default_factory=TimelineIndex)
    words: TimelineIndex = field(default_factory=TimelineIndex)
    phrases: TimelineIndex = field(default_factory=TimelineIndex)
    floating: FloatingTracker = field(default_factory=FloatingTracker)
    notebook: Notebook = field(default_factory=lambda: Notebook(()))

    @classmethod
    def build(cls, lyrics: LyricsData, seed: int) -> "_SongState":
        return cls(
            lyrics=lyrics,
            chars=TimelineIndex(lyrics.chars),
            words=TimelineIndex(lyrics.words),
            phrases=TimelineIndex(lyrics.phrases),
            floating=FloatingTracker(build_floating_elements(lyrics.floating_chars, seed=seed)),
            notebook=Notebook(lyrics.chars),
        )


class SceneSynchronizer:
    """Drive the timeline, effects, slots, floaters and camera from playback.

    Parameters
    ----------
    source:
        Playback source supplying position, amplitude and valence/arousal.
        The synchronizer subscribes to its events.
    viewpoints:
        Camera viewpoints; defaults to the configured ones.
    slot_count:
        Number of polaroid slots.
    seed:
        Layout seed for floating characters.
    """

    def __init__(
        self,
        source: PlaybackSource,
        viewpoints: Sequence[Viewpoint] | None = None,
        slot_count: int = POLAROID_COUNT,
        seed: int = 0,
        initial_viewpoint: Union[int, str] = 0,
        palette: Dict[Tuple[int, int], str] | None = None,
    ):
        self.source = source
        self.camera = CameraStateMachine(
            viewpoints or viewpoints_from_config(), initial=initial_viewpoint
        )
        self.effects = EffectGenerator()
        self.slots = SlotAllocator(slot_count)
        self.palette = MoodPalette(palette)
        self.seed = seed
        self.generation = 0
        self._pending: Optional[int] = None
        self._status_text = IDLE_TEXT
        self._idle = False
        self._song = _SongState()
        source.add_listener(self._on_playback_event)

    # -- song loading -----------------------------------------------------
    @property
    def lyrics(self) -> LyricsData:
        return self._song.lyrics

    @property
    def loading(self) -> bool:
        return self._pending is not None

    def begin_load(self) -> int:
        """Start a load and return its generation; older loads become stale."""
        self.generation += 1
        self._pending = self.generation
        self._status_text = IDLE_TEXT
        return self.generation

    def complete_load(self, generation: int, lyrics: LyricsData) -> bool:
        """Install ``lyrics`` if ``generation`` is still the current load."""
        if generation != self.generation:
            logging.warning(
                "discarding stale lyrics load %d (current %d)", generation, self.generation
            )
            return False
        song = _SongState.build(lyrics, self.seed)
        self.effects.reset()
        self.slots.clear()
        self._song = song
        self._pending = None
        self._idle = False
        logging.info(
            "song loaded: %r by %r, %d chars, %d floating",
            lyrics.title,
            lyrics.artist,
            len(lyrics.chars),
            len(song.floating.elements),
        )
        return True

    def abort_load(self, generation: int, message: str = IDLE_TEXT) -> bool:
        """Give up on the current load and show ``message`` instead."""
        if generation != self.generation:
            return False
        self._pending = None
        self._status_text = message
        logging.warning("lyrics load %d aborted: %s", generation, message)
        return True

    def load(self, lyrics: LyricsData) -> bool:
        return self.complete_load(self.begin_load(), lyrics)

    # -- navigation -------------------------------------------------------
    def go_to_viewpoint(self, target: Union[int, str], now_ms: float) -> Viewpoint:
        return self.camera.go_to_viewpoint(target, now_ms)

    def go_left(self, now_ms: float) -> bool:
        return self.camera.go_left(now_ms)

    def go_right(self, now_ms: float) -> bool:
        return self.camera.go_right(now_ms)

    # -- events -----------------------------------------------------------
    def _on_playback_event(self, event: PlaybackEvent, position: float, previous: float) -> None:
        if event is PlaybackEvent.STOP:
            self.effects.reset()
            self._idle = True
            if position < previous:
                self.slots.clear()
        elif event is PlaybackEvent.PLAY:
            self._idle = False
        elif event is PlaybackEvent.SEEK:
            self._idle = False
            if position < previous:
                self.slots.clear()

    # -- per frame --------------------------------------------------------
    def _floating_predicate(self) -> bool:
        return self.camera.current.shows_floating

    def frame(self, now_ms: float, pointer: PointerSample | None = None) -> FrameSnapshot:
        pointer = pointer or IDLE_POINTER
        position = float(self.source.position)
        song = self._song
        loading = self._pending is not None

        if loading:
            active = word = phrase = -1
            slot_views = self.slots.views()
            state = self.effects.state
            floating_views = []
        else:
            active = song.chars.find_active_index(position)
            word = song.words.find_active_index(position)
            phrase = song.phrases.find_active_index(position)
            slot_views = self.slots.update(active, position, song.chars.units)
            state = self.effects.step(
                self.source.amplitude(position), self.source.max_amplitude
            )
            floating_views = song.floating.update(position, self._floating_predicate)
            if self.camera.current.shows_floating and not song.floating.elements:
                logging.debug("window view without floating characters")

        pose = self.camera.update(pointer, now_ms)
        valence, arousal = self.source.valence_arousal(position)
        mood = self.palette.blend(valence, arousal)
        surfaces = self._surfaces(song, position, loading, word, phrase, state, mood)

        return FrameSnapshot(
            position=position,
            generation=self.generation,
            loading=loading,
            active_index=active,
            word_index=word,
            phrase_index=phrase,
            surfaces=surfaces,
            slots=tuple(slot_views),
            slot_text=slot_modulation(state),
            floating=tuple(floating_views),
            camera=pose,
            mood_color=mood,
            sky_color=sky_color(mood),
            sky_rotation=sky_rotation(position),
            effect=state,
        )

    def _surfaces(
        self,
        song: _SongState,
        position: float,
        loading: bool,
        word: int,
        phrase: int,
        state: EffectState,
        mood: RGB,
    ) -> Dict[str, TextSurface]:
        vp = self.camera.current
        if loading:
            lyric_text = LOADING_TEXT
        elif self._idle or word < 0:
            lyric_text = self._status_text
        else:
            lyric_text = song.words.units[word].text
        mod = lyric_modulation(state)
        phrase_unit = song.phrases.unit_at(phrase)
        return {
            "lyrics": TextSurface(
                text=lyric_text,
                visible=vp.shows_lyrics,
                font_size=mod.font_size,
                letter_spacing=mod.letter_spacing,
                scale=mod.scale,
                outline_color=mood,
                anchor=vp.text_anchor,
                look_at=vp.position,
            ),
            "phrase": TextSurface(text=phrase_unit.text if phrase_unit else ""),
            "timestamp": TextSurface(text=format_timestamp(position)),
            "notebook": TextSurface(text="" if loading else song.notebook.update(position)),
            "title": TextSurface(text=song.lyrics.title),
        }
