"""
Tests for the summary image renderer and its on-disk artifact.
"""

import io
from datetime import datetime, timezone

import pytest
from PIL import Image

from country_api.core.errors import NotFound
from country_api.models.api_models import TopCountry
from country_api.summary.artifact import read_summary_image, save_summary_image
from country_api.summary.renderer import format_gdp, format_timestamp, render_summary


def test_format_gdp():
    assert format_gdp(1234567.89) == "$1,234,568"
    assert format_gdp(0) == "$0"
    assert format_gdp(None) == "N/A"


def test_format_timestamp_treats_naive_as_utc():
    ts = datetime(2026, 10, 19, 8, 30, 5)
    assert format_timestamp(ts) == "2026-10-19 08:30:05 UTC"
    assert format_timestamp(ts.replace(tzinfo=timezone.utc)) == "2026-10-19 08:30:05 UTC"


def test_render_produces_fixed_size_png():
    top = [
        TopCountry(name="United States of America", estimated_gdp=4.9e11),
        TopCountry(name="Zimbabwe", estimated_gdp=None),
    ]

    data = render_summary(250, top, datetime(2026, 10, 19, tzinfo=timezone.utc))

    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        assert img.size == (800, 600)


def test_render_with_no_countries():
    data = render_summary(0, [], None)
    assert data.startswith(b"\x89PNG")


def test_save_overwrites_previous_image(tmp_path):
    path = tmp_path / "cache" / "summary.png"

    save_summary_image(b"first", path)
    save_summary_image(b"second", path)

    assert read_summary_image(path) == b"second"
    assert list(path.parent.iterdir()) == [path]


def test_read_missing_image_raises_not_found(tmp_path):
    with pytest.raises(NotFound):
        read_summary_image(tmp_path / "summary.png")
