"""Playback sources: the timing cursor and vocal amplitude the scene follows."""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, List, Sequence, Tuple

import librosa
import numpy as np


class PlaybackEvent(Enum):
    READY = "ready"
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    SEEK = "seek"


# listener(event, position, previous_position)
Listener = Callable[[PlaybackEvent, float, float], None]


class PlaybackSource:
    """Interface consumed by the synchronizer.

    Subclasses provide ``position``, ``duration``, ``max_amplitude``,
    ``amplitude`` and ``valence_arousal``; listener handling lives here.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: PlaybackEvent, position: float, previous: float) -> None:
        for listener in list(self._listeners):
            listener(event, position, previous)

    @property
    def position(self) -> float:
        raise NotImplementedError

    @property
    def duration(self) -> float:
        raise NotImplementedError

    @property
    def max_amplitude(self) -> float:
        raise NotImplementedError

    def amplitude(self, position: float) -> float:
        raise NotImplementedError

    def valence_arousal(self, position: float) -> Tuple[float, float]:
        raise NotImplementedError


class EnvelopePlayback(PlaybackSource):
    """Transport over a precomputed amplitude envelope.

    Parameters
    ----------
    envelope:
        One non-negative amplitude value per hop.
    hop_ms:
        Duration covered by each envelope value.
    duration_ms:
        Song length; defaults to ``len(envelope) * hop_ms``.
    mood:
        Optional ``(time_ms, valence, arousal)`` keyframes, interpolated
        linearly and held at the ends.
    """

    def __init__(
        self,
        envelope: Sequence[float],
        hop_ms: float,
        duration_ms: float | None = None,
        mood: Sequence[Tuple[float, float, float]] = (),
    ):
        super().__init__()
        if hop_ms <= 0:
            raise ValueError("hop_ms must be > 0")
        env = np.nan_to_num(np.asarray(envelope, dtype=np.float64), nan=0.0, posinf=0.0, neginf=0.0)
        self._envelope = np.clip(env, 0.0, None)
        self.hop_ms = float(hop_ms)
        self._duration = float(duration_ms) if duration_ms is not None else len(env) * self.hop_ms
        self._max = float(self._envelope.max()) if self._envelope.size else 0.0
        mood_arr = np.asarray(sorted(mood), dtype=np.float64).reshape(-1, 3)
        self._mood_t = mood_arr[:, 0]
        self._mood_v = mood_arr[:, 1]
        self._mood_a = mood_arr[:, 2]
        self._position = 0.0
        self.playing = False

    @classmethod
    def from_audio_file(
        cls,
        audio_path: str,
        hop_length: int = 512,
        mood: Sequence[Tuple[float, float, float]] = (),
    ) -> "EnvelopePlayback":
        """Build a source from the RMS envelope of an audio file."""
        y, sr = librosa.load(audio_path, sr=None, mono=True)
        rms = librosa.feature.rms(y=y, hop_length=hop_length)[0]
        hop_ms = hop_length / sr * 1000.0
        duration = len(y) / sr * 1000.0
        logging.info(
            "envelope extracted: %d frames, hop %.2f ms, duration %.0f ms",
            len(rms),
            hop_ms,
            duration,
        )
        return cls(rms, hop_ms, duration, mood)

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def max_amplitude(self) -> float:
        return self._max

    def amplitude(self, position: float) -> float:
        if not self._envelope.size or not math.isfinite(position) or position < 0:
            return 0.0
        idx = int(position // self.hop_ms)
        if idx >= self._envelope.size:
            return 0.0
        return float(self._envelope[idx])

    def valence_arousal(self, position: float) -> Tuple[float, float]:
        if not self._mood_t.size:
            return 0.0, 0.0
        v = float(np.interp(position, self._mood_t, self._mood_v))
        a = float(np.interp(position, self._mood_t, self._mood_a))
        return v, a

    # -- transport --------------------------------------------------------
    def ready(self) -> None:
        self._emit(PlaybackEvent.READY, self._position, self._position)

    def play(self) -> None:
        self.playing = True
        self._emit(PlaybackEvent.PLAY, self._position, self._position)

    def pause(self) -> None:
        self.playing = False
        self._emit(PlaybackEvent.PAUSE, self._position, self._position)

    def stop(self) -> None:
        previous = self._position
        self.playing = False
        self._position = 0.0
        self._emit(PlaybackEvent.STOP, self._position, previous)

    def seek(self, position: float) -> None:
        previous = self._position
        self._position = max(0.0, min(self._duration, float(position)))
        self._emit(PlaybackEvent.SEEK, self._position, previous)

    def advance(self, dt_ms: float) -> float:
        """Move the cursor forward while playing; pauses at the end."""
        if self.playing and dt_ms > 0:
            self._position = min(self._duration, self._position + dt_ms)
            if self._position >= self._duration:
                self.pause()
        return self._position
