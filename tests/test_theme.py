
import pytest
from moodcam.theme import load_theme, save_theme, toggle_theme, palette, DEFAULT_THEME

def test_theme_round_trip(tmp_path):
    path = str(tmp_path / "prefs" / "theme.json")
    assert load_theme(path) == DEFAULT_THEME
    save_theme(path, "light")
    assert load_theme(path) == "light"

def test_corrupt_or_unknown_theme_falls_back(tmp_path):
    bad = tmp_path / "theme.json"
    bad.write_text("{not json")
    assert load_theme(str(bad)) == DEFAULT_THEME
    bad.write_text('{"theme": "neon"}')
    assert load_theme(str(bad)) == DEFAULT_THEME

def test_save_unknown_theme(tmp_path):
    with pytest.raises(ValueError):
        save_theme(str(tmp_path / "t.json"), "neon")

def test_toggle_and_palette():
    assert toggle_theme("dark") == "light"
    assert toggle_theme("light") == "dark"
    assert palette("neon") == palette(DEFAULT_THEME)
    assert set(palette("light")["moods"]) == {"happy", "sad", "stressed"}
