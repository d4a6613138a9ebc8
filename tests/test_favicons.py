from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from ctclsite.errors import ConfigInvalidError
from ctclsite.favicons import decode_hex_color, favicon_url, generate_favicons
from ctclsite.themes import Theme

THEMES = {
    "dark": Theme(color="#202020", fgcolor="#ffffff"),
    "warm": Theme(color="c86432", fgcolor="#000000"),
}


def _pixels(path: Path) -> set[tuple[int, int, int]]:
    with Image.open(path) as image:
        assert image.size == (16, 16)
        rgb = image.convert("RGB")
        return {rgb.getpixel((x, y)) for x in range(16) for y in range(16)}


def test_every_theme_gets_a_solid_favicon(tmp_path: Path) -> None:
    result = generate_favicons(THEMES, tmp_path / "static")

    assert result.generated == ["dark", "warm"]
    assert result.skipped == []
    assert _pixels(tmp_path / "static" / "favicons" / "default_dark.ico") == {(0x20, 0x20, 0x20)}
    assert _pixels(tmp_path / "static" / "favicons" / "default_warm.ico") == {(0xC8, 0x64, 0x32)}


def test_generation_is_idempotent(tmp_path: Path) -> None:
    output = tmp_path / "static"
    generate_favicons(THEMES, output)
    target = output / "favicons" / "default_dark.ico"
    before = target.read_bytes()
    mtime = target.stat().st_mtime_ns

    result = generate_favicons(THEMES, output)

    assert result.generated == []
    assert result.skipped == ["dark", "warm"]
    assert target.read_bytes() == before
    assert target.stat().st_mtime_ns == mtime


def test_existing_check_is_keyed_by_theme_id(tmp_path: Path) -> None:
    output = tmp_path / "static"
    generate_favicons({"dark": THEMES["dark"]}, output)

    result = generate_favicons(THEMES, output)

    assert result.skipped == ["dark"]
    assert result.generated == ["warm"]
    assert (output / "favicons" / "default_warm.ico").exists()


@pytest.mark.parametrize("color", ["#20202", "#zzzzzz", "", "#2020200"])
def test_malformed_color_is_a_config_error(tmp_path: Path, color: str) -> None:
    themes = {"broken": Theme(color=color, fgcolor="#ffffff")}

    with pytest.raises(ConfigInvalidError, match="broken"):
        generate_favicons(themes, tmp_path)
    assert not (tmp_path / "favicons" / "default_broken.ico").exists()


def test_decode_hex_color_accepts_optional_hash() -> None:
    assert decode_hex_color("#0a0B0c") == (10, 11, 12)
    assert decode_hex_color("ffffff") == (255, 255, 255)


def test_favicon_url_is_keyed_by_theme() -> None:
    assert favicon_url("dark") == "static/favicons/default_dark.ico"
