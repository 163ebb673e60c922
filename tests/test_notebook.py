import pytest

from lyric_stage.notebook import Notebook
from lyric_stage.timeline import build_units

CHARS = build_units([(c, i * 100, i * 100 + 80) for i, c in enumerate("abcdefg")])


def test_built_lazily():
    nb = Notebook(CHARS, chars_per_line=3, max_lines=2)
    assert not nb.built
    assert nb.update(-10) == ""
    assert nb.built


def test_lines_and_pages():
    nb = Notebook(CHARS, chars_per_line=3, max_lines=2)
    assert nb.update(250) == "abc\n"
    assert nb.update(450) == "abc\nde"
    assert nb.update(650) == "g"
    assert nb.update(150) == "ab"


def test_placeholder_counts_toward_page_but_is_never_last():
    units = build_units([("a", 0, 10), ("b", 10, 20), ("　", 20, 30), ("c", 30, 40)])
    nb = Notebook(units, chars_per_line=2, max_lines=1)
    assert nb.update(15) == "ab\n"
    # page two starts at the placeholder; the active char is still "b" on page one
    assert nb.update(25) == "ab\n"
    assert nb.update(35) == "　c\n"


def test_invalid_geometry():
    with pytest.raises(ValueError):
        Notebook(CHARS, chars_per_line=0)
