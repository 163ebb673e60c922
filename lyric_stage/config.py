"""Configuration constants for lyric_stage."""
from __future__ import annotations

import math
import os

# Frame pacing and slot count (can be overridden via environment)
FPS = int(os.environ.get("LYRIC_STAGE_FPS") or 30)
POLAROID_COUNT = int(os.environ.get("LYRIC_STAGE_SLOTS") or 8)

# Text sizes in scene units
BASE_TEXT_SIZE = 0.4
POLAROID_TEXT_SIZE = 0.08
NOTEBOOK_TEXT_SIZE = 0.035
WINDOW_TEXT_SIZE = 0.12

# Amplitude driven text effects
MIN_TEXT_SCALE = 0.8
MAX_TEXT_SCALE = 1.6
STRETCH_GAIN = 5.0
STRETCH_DECAY = 0.9999
STRETCH_LIMIT = 0.7

# Per-millisecond fade factors for the polaroid slots
FILL_DECAY = 0.995
OUTLINE_DECAY = 0.995

# Floating characters crossing the window
FLOAT_LEAD_MS = 200.0
FLOAT_SCALE = 0.001
FLOAT_AXIS = 0
FLOAT_BOUNDS = (0.0, 3.5)
FLOAT_ENTRY_X = -0.2
FLOAT_EXIT_X = 3.7
FLOAT_Y_RANGE = (0.9, 2.1)
FLOAT_Z_RANGE = (-1.4, -0.2)

# Camera
CAMERA_TRANSITION_MS = 1200.0
CAMERA_SMOOTH_MS = 250.0
MOVEMENT_STRENGTH = 0.5
ROTATE_STRENGTH = 0.05
POINTER_SETTLE_MS = 1000.0 / 30

# Notebook page geometry
MAX_CHARS_PER_LINE = 12
MAX_LINES = 10

# Placeholder texts
IDLE_TEXT = "-"
LOADING_TEXT = "loading..."
PLACEHOLDER_GLYPHS = {"", " ", "　"}

# Sky layers
SKY_SPEED = 1.0
SKY_TINT = 0.2

# Mood palette corners keyed by (valence, arousal) sign
MOOD_PALETTE = {
    (-1, -1): "#3a4a8c",
    (1, -1): "#6fcf97",
    (-1, 1): "#d64545",
    (1, 1): "#ffd166",
}

DEFAULT_VIEWPOINTS = [
    {
        "name": "full_view",
        "position": [6.2, 2.4, 0.0],
        "orientation": [math.pi / 2, 1.45],
        "text": [3.2, 1.7, 0.0],
        "shows_lyrics": True,
    },
    {
        "name": "bedroom",
        "position": [4.6, 1.5, 1.3],
        "orientation": [1.2, 1.5],
        "text": [2.6, 1.4, -0.2],
        "shows_lyrics": True,
    },
    {
        "name": "window",
        "position": [1.8, 1.5, 1.1],
        "orientation": [0.0, 1.55],
        "text": [1.8, 1.5, -1.0],
        "shows_floating": True,
    },
    {
        "name": "desk",
        "position": [1.9, 1.1, 0.4],
        "orientation": [math.pi / 2, 0.35],
        "text": [1.65, 0.35, 0.25],
    },
    {
        "name": "tv",
        "position": [1.3, 1.0, 0.6],
        "orientation": [math.pi / 2, 1.6],
        "text": [0.29, 1.0, 0.6],
    },
    {
        "name": "polaroids",
        "position": [2.4, 1.6, -0.8],
        "orientation": [-math.pi / 2, 1.5],
        "text": [3.9, 1.6, -0.8],
    },
]
