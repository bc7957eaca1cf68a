#!/usr/bin/env python3
"""
Generate app icons with a "DEMO" watermark banner.

The banner stays within the icon's alpha silhouette for macOS Tahoe
compatibility; the text is drawn on top afterwards.

Run:
  python3 scripts/generate_demo_icons.py [--project-dir PATH]
"""
from __future__ import annotations

import argparse
import io
import math
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw, ImageFont, UnidentifiedImageError


ASSETS_ROOT = Path("CrosswordStudio") / "Assets.xcassets"
SOURCE_ICONSET = "AppIcon.appiconset"
DEMO_ICONSET = "DemoAppIcon.appiconset"

SOURCE_MARKER = "Default"
DEMO_MARKER = "Demo"

BANNER_HEIGHT_FRACTION = 0.30
BANNER_OFFSET_FRACTION = 0.12  # up from the bottom edge
BANNER_COLOR = (204, 51, 51, 235)  # rgba(0.8, 0.2, 0.2, 0.92)

TEXT = "DEMO"
TEXT_COLOR = (255, 255, 255, 255)
TEXT_HEIGHT_FRACTION = 0.55
MIN_FONT_SIZE = 5
FALLBACK_STROKE_FRACTION = 0.04

BOLD_FONT_CANDIDATES = (
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "arialbd.ttf",
)


class DemoIconError(Exception):
    """A single icon could not be turned into its demo variant."""


def demo_filename(filename: str) -> str:
    return filename.replace(SOURCE_MARKER, DEMO_MARKER, 1)


def is_source_icon(path: Path) -> bool:
    return path.is_file() and path.suffix == ".png" and SOURCE_MARKER in path.name


def find_source_icons(source_dir: Path) -> list[Path]:
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Missing source icon directory: {source_dir}")
    return sorted(p for p in source_dir.iterdir() if is_source_icon(p))


def banner_geometry(height: float) -> tuple[float, float]:
    """Return (banner_y, banner_height), with banner_y measured up from the bottom."""
    return height * BANNER_OFFSET_FRACTION, height * BANNER_HEIGHT_FRACTION


def banner_font_size(banner_height: float) -> float:
    return max(banner_height * TEXT_HEIGHT_FRACTION, MIN_FONT_SIZE)


def banner_rows(height: int) -> tuple[int, int]:
    """Top and bottom pixel rows (inclusive, top-down) touched by the banner."""
    banner_y, banner_height = banner_geometry(height)
    # round() drops float noise such as 0.3 * 100 == 30.000000000000004
    lowest = math.floor(round(banner_y, 6))
    highest = math.ceil(round(banner_y + banner_height, 6)) - 1
    return height - 1 - highest, height - 1 - lowest


def load_banner_font(size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for font_path in BOLD_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def text_stroke_width(font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> int:
    """Stroke that stands in for bold weight when only a regular font loaded."""
    if isinstance(font, ImageFont.FreeTypeFont) and "Bold" in (font.getname()[1] or ""):
        return 0
    size = getattr(font, "size", MIN_FONT_SIZE)
    return max(1, round(size * FALLBACK_STROKE_FRACTION))


def add_demo_banner(image: Image.Image) -> Image.Image:
    source = image.convert("RGBA")
    width, height = source.size
    banner_y, banner_height = banner_geometry(height)

    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    canvas.alpha_composite(source)

    banner = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    top, bottom = banner_rows(height)
    ImageDraw.Draw(banner).rectangle([0, top, width - 1, bottom], fill=BANNER_COLOR)
    canvas.alpha_composite(banner)

    # destination-in: keep the icon and banner only where the source is opaque
    clipped_alpha = ImageChops.multiply(canvas.getchannel("A"), source.getchannel("A"))
    canvas.putalpha(clipped_alpha)

    draw = ImageDraw.Draw(canvas)
    font = load_banner_font(banner_font_size(banner_height))
    stroke_width = text_stroke_width(font)
    bbox = draw.textbbox((0, 0), TEXT, font=font, stroke_width=stroke_width)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]
    text_x = (width - text_w) / 2
    text_top = height - banner_y - (banner_height + text_h) / 2
    draw.text(
        (round(text_x - bbox[0]), round(text_top - bbox[1])),
        TEXT,
        fill=TEXT_COLOR,
        font=font,
        stroke_width=stroke_width,
        stroke_fill=TEXT_COLOR,
    )
    return canvas


def read_icon(source_path: Path, demo_name: str) -> Image.Image:
    try:
        image = Image.open(source_path)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise DemoIconError(f"Could not load {source_path.name}") from exc

    with image:
        try:
            image.load()
        except (Image.DecompressionBombError, OSError) as exc:
            raise DemoIconError(f"Could not load {source_path.name}") from exc
        if image.width == 0 or image.height == 0:
            raise DemoIconError(f"Could not create context for {demo_name}")
        try:
            return image.convert("RGBA")
        except (OSError, ValueError) as exc:
            raise DemoIconError(f"Could not get image data for {source_path.name}") from exc


def generate_demo_icon(source_path: Path, output_path: Path) -> None:
    demo_name = output_path.name
    result = add_demo_banner(read_icon(source_path, demo_name))

    buffer = io.BytesIO()
    try:
        result.save(buffer, format="PNG", optimize=True)
    except (OSError, ValueError) as exc:
        raise DemoIconError(f"Could not create PNG for {demo_name}") from exc

    try:
        output_path.write_bytes(buffer.getvalue())
    except OSError as exc:
        raise DemoIconError(f"Could not write {demo_name}") from exc


def generate_demo_icons(source_dir: Path, output_dir: Path) -> tuple[int, int]:
    """Write a demo variant of every eligible icon; return (created, failed)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    icon_files = find_source_icons(source_dir)

    created = failed = 0
    for icon_file in icon_files:
        demo_name = demo_filename(icon_file.name)
        try:
            generate_demo_icon(icon_file, output_dir / demo_name)
        except DemoIconError as exc:
            print(f"  Error: {exc}")
            failed += 1
            continue
        print(f"  Created: {demo_name}")
        created += 1
    return created, failed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate DEMO-bannered app icons from the default app icon set"
    )
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path(__file__).resolve().parent.parent,
        help="Project root holding CrosswordStudio/Assets.xcassets",
    )
    args = parser.parse_args(argv)

    assets_dir = args.project_dir / ASSETS_ROOT
    source_dir = assets_dir / SOURCE_ICONSET
    output_dir = assets_dir / DEMO_ICONSET

    print("Generating demo icons with DEMO watermark (Tahoe-compatible)...")
    print(f"Source: {source_dir}")
    print(f"Output: {output_dir}")

    created, failed = generate_demo_icons(source_dir, output_dir)

    print()
    if failed:
        print(f"Generated {created} demo icons, {failed} failed")
        return 1
    print("Demo icons generated successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
