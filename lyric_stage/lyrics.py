"""Lyric data loading.

Lyric files are YAML (or JSON, which YAML reads as well) with either a nested
``phrases -> words -> chars`` layout or a flat ``chars`` list::

    title: Song
    artist: Someone
    phrases:
      - words:
          - chars:
              - {text: "あ", start: 1200, end: 1350}

Every level is flattened into an immutable, validated unit sequence in a
single pass; nothing downstream walks ``next`` pointers at render time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import yaml

from .timeline import TimelineUnit, TimelineValidationError, build_units, is_placeholder


class LyricsValidationError(TimelineValidationError):
    """Raised for structurally invalid lyric data."""


@dataclass(frozen=True)
class LyricsData:
    title: str = ""
    artist: str = ""
    chars: Tuple[TimelineUnit, ...] = ()
    words: Tuple[TimelineUnit, ...] = ()
    phrases: Tuple[TimelineUnit, ...] = ()
    mood: Tuple[Tuple[float, float, float], ...] = field(default=())

    @property
    def floating_chars(self) -> Tuple[TimelineUnit, ...]:
        """Characters that get a floating copy outside the window."""
        return tuple(u for u in self.chars if not is_placeholder(u.text))

    @property
    def first_start(self) -> float | None:
        return self.chars[0].start_time if self.chars else None


def _time(entry: Dict[str, Any], key: str, where: str) -> float:
    if key not in entry:
        raise LyricsValidationError(f"{where}: missing '{key}'")
    try:
        return float(entry[key])
    except (TypeError, ValueError) as e:
        raise LyricsValidationError(f"{where}: '{key}' is not a number") from e


def _char_row(entry: Any, where: str) -> Tuple[str, float, float]:
    if not isinstance(entry, dict):
        raise LyricsValidationError(f"{where}: expected a mapping")
    return (
        str(entry.get("text", "")),
        _time(entry, "start", where),
        _time(entry, "end", where),
    )


def _span(rows: List[Tuple[str, float, float]], entry: Dict[str, Any], where: str) -> Tuple[str, float, float]:
    """Row for a word/phrase: explicit fields win, else derived from its chars."""
    if not rows:
        raise LyricsValidationError(f"{where}: no characters")
    text = entry.get("text")
    if text is None:
        text = "".join(r[0] for r in rows)
    start = _time(entry, "start", where) if "start" in entry else rows[0][1]
    end = _time(entry, "end", where) if "end" in entry else max(r[2] for r in rows)
    return str(text), start, end


def _mood_rows(raw: Any) -> Tuple[Tuple[float, float, float], ...]:
    rows = []
    for i, entry in enumerate(raw or []):
        where = f"mood[{i}]"
        if not isinstance(entry, dict):
            raise LyricsValidationError(f"{where}: expected a mapping")
        rows.append(
            (
                _time(entry, "time", where),
                _time(entry, "valence", where),
                _time(entry, "arousal", where),
            )
        )
    return tuple(sorted(rows))


def parse_lyrics(data: Dict[str, Any]) -> LyricsData:
    """Build :class:`LyricsData` from a decoded lyric document."""
    if not isinstance(data, dict):
        raise LyricsValidationError("lyric document must be a mapping")

    char_rows: List[Tuple[str, float, float]] = []
    word_rows: List[Tuple[str, float, float]] = []
    phrase_rows: List[Tuple[str, float, float]] = []

    if "phrases" in data:
        for p, phrase in enumerate(data["phrases"] or []):
            if not isinstance(phrase, dict):
                raise LyricsValidationError(f"phrases[{p}]: expected a mapping")
            phrase_chars: List[Tuple[str, float, float]] = []
            for w, word in enumerate(phrase.get("words") or []):
                where = f"phrases[{p}].words[{w}]"
                if not isinstance(word, dict):
                    raise LyricsValidationError(f"{where}: expected a mapping")
                rows = [
                    _char_row(c, f"{where}.chars[{k}]")
                    for k, c in enumerate(word.get("chars") or [])
                ]
                word_rows.append(_span(rows, word, where))
                phrase_chars.extend(rows)
            phrase_rows.append(_span(phrase_chars, phrase, f"phrases[{p}]"))
            char_rows.extend(phrase_chars)
    elif "chars" in data:
        char_rows = [_char_row(c, f"chars[{k}]") for k, c in enumerate(data["chars"] or [])]
        word_rows = list(char_rows)
    else:
        raise LyricsValidationError("lyric document needs 'phrases' or 'chars'")

    lyrics = LyricsData(
        title=str(data.get("title", "")),
        artist=str(data.get("artist", "")),
        chars=build_units(char_rows, "char"),
        words=build_units(word_rows, "word"),
        phrases=build_units(phrase_rows, "phrase"),
        mood=_mood_rows(data.get("mood")),
    )
    logging.info(
        "lyrics parsed: %d chars, %d words, %d phrases",
        len(lyrics.chars),
        len(lyrics.words),
        len(lyrics.phrases),
    )
    return lyrics


def load_lyrics(path: str) -> LyricsData:
    """Read and validate a lyric file."""
    with open(path, "r", encoding="utf8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        raise LyricsValidationError(f"{path}: empty lyric file")
    return parse_lyrics(data)
