"""Country API - Summary Image Renderer.

Pure function from store figures to PNG bytes. Writing the bytes to disk
lives in ``country_api.summary.artifact``.
"""

import io
from datetime import datetime, timezone
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from country_api.models.api_models import TopCountry

WIDTH = 800
HEIGHT = 600
MAX_ENTRIES = 5

BACKGROUND = "#1a1a2e"
FOREGROUND = "#eeeeee"
MUTED = "#aaaaaa"


def _font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        return ImageFont.load_default(size=size)


def format_gdp(value: Optional[float]) -> str:
    """``$1,234,567`` with no decimals, or ``N/A`` when unknown."""
    if value is None:
        return "N/A"
    return f"${value:,.0f}"


def format_timestamp(ts: Optional[datetime]) -> str:
    if ts is None:
        return "never"
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_summary(
    total_countries: int,
    top_countries: Sequence[TopCountry],
    timestamp: Optional[datetime],
) -> bytes:
    """Draw the 800x600 summary card and return it PNG-encoded."""
    img = Image.new("RGB", (WIDTH, HEIGHT), color=BACKGROUND)
    draw = ImageDraw.Draw(img)

    draw.text((50, 40), "Country Data Summary", fill=FOREGROUND, font=_font(36, bold=True))
    draw.text(
        (50, 110), f"Total Countries: {total_countries}", fill=FOREGROUND, font=_font(24)
    )
    draw.text(
        (50, 150),
        f"Last Refreshed: {format_timestamp(timestamp)}",
        fill=MUTED,
        font=_font(18),
    )

    draw.text((50, 210), "Top 5 Countries by GDP", fill=FOREGROUND, font=_font(28, bold=True))

    body = _font(20)
    y = 260
    for rank, country in enumerate(top_countries[:MAX_ENTRIES], 1):
        line = f"{rank}. {country.name}: {format_gdp(country.estimated_gdp)}"
        draw.text((70, y), line, fill=FOREGROUND, font=body)
        y += 50

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
