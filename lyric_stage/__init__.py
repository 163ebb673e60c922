"""Lyric stage package."""

__version__ = "0.1.0"

__all__ = ["load_lyrics", "make_synchronizer"]


def load_lyrics(*args, **kwargs):
    from .lyrics import load_lyrics as _load_lyrics

    return _load_lyrics(*args, **kwargs)


def make_synchronizer(*args, **kwargs):
    from .synchronizer import SceneSynchronizer

    return SceneSynchronizer(*args, **kwargs)
