"""CLI for logo and headshot preparation.

Commands:
  - logo: Rectangular (5:2), square and favicon logo variants
  - headshot: 73:100 headshot padded on white
  - remove-bg: Color-keyed background removal
  - fit: Print the padded canvas geometry for a given size
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from loguru import logger

from config import CONFIG, LOGO_VARIANTS
from src.logofit.batch import BatchReport, process_batch
from src.logofit.errors import LogoFitError
from src.logofit.fit import fit
from src.logofit.models import AspectRatio, CropBox, parse_hex_color
from src.logofit.variants import (
    prepare_source,
    process_background_removal,
    process_headshot,
    process_logo_variants,
)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    logger.remove()
    # Sink looks up stderr at write time
    logger.add(lambda message: click.echo(message, err=True, nl=False), level=level)


def _parse_crop(crop: Optional[str]) -> Optional[CropBox]:
    if crop is None:
        return None
    try:
        return CropBox.parse(crop)
    except LogoFitError as exc:
        raise click.BadParameter(str(exc), param_hint="--crop") from exc


def _check_color(color: str, hint: str) -> str:
    try:
        parse_hex_color(color)
    except LogoFitError as exc:
        raise click.BadParameter(str(exc), param_hint=hint) from exc
    return color


def _finish(report: BatchReport) -> None:
    if not report.ok:
        names = ", ".join(p.name for p, _ in report.failed)
        raise click.ClickException(f"{len(report.failed)} image(s) failed: {names}")


input_option = click.option(
    "--input-path",
    type=click.Path(path_type=Path, exists=True),
    required=True,
    help="Image file or directory",
)
output_option = click.option(
    "--output-dir",
    type=click.Path(path_type=Path),
    required=True,
    help="Output directory",
)
overwrite_option = click.option(
    "--overwrite/--no-overwrite", default=CONFIG.behavior.overwrite
)
crop_option = click.option(
    "--crop",
    type=str,
    default=None,
    help="Crop rectangle 'x,y,width,height' applied before processing",
)
remove_bg_option = click.option(
    "--remove-bg/--no-remove-bg",
    default=False,
    help="Key out the background color before padding",
)
bg_color_option = click.option(
    "--bg-color",
    type=str,
    default=CONFIG.keying.target_color,
    help="Background color to key out (#RRGGBB)",
)
tolerance_option = click.option(
    "--tolerance",
    type=click.FloatRange(min=0),
    default=CONFIG.keying.tolerance,
    help="Euclidean RGB distance treated as background",
)


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log per-variant geometry")
@click.option("--quiet", is_flag=True, default=False, help="Only log warnings and errors")
def cli(verbose: bool, quiet: bool) -> None:
    """Logo and headshot preparation toolkit."""

    _configure_logging(verbose, quiet)


@cli.command(name="logo")
@input_option
@output_option
@click.option(
    "--transparent/--opaque",
    default=CONFIG.behavior.transparent,
    help="Pad with transparent pixels instead of white",
)
@click.option("--square/--no-square", default=True, help="Also write the 1:1 logo")
@click.option(
    "--favicon/--no-favicon",
    default=True,
    help="Also write the 64x64 favicon PNG (requires --square)",
)
@crop_option
@remove_bg_option
@bg_color_option
@tolerance_option
@overwrite_option
@click.option(
    "--resample",
    type=click.Choice(
        ["nearest", "bilinear", "bicubic", "lanczos"], case_sensitive=False
    ),
    default=CONFIG.behavior.resample,
)
def cmd_logo(
    input_path: Path,
    output_dir: Path,
    transparent: bool,
    square: bool,
    favicon: bool,
    crop: Optional[str],
    remove_bg: bool,
    bg_color: str,
    tolerance: float,
    overwrite: bool,
    resample: str,
) -> None:
    """Pad logos to 5:2 (min 400x160), 1:1 (min 40x40) and a 64x64 favicon."""

    box = _parse_crop(crop)
    _check_color(bg_color, "--bg-color")
    expected = [
        name
        for name in LOGO_VARIANTS
        if name == "rectangular"
        or (name == "square" and square)
        or (name == "favicon" and square and favicon)
    ]

    report = process_batch(
        input_path=input_path,
        output_dir=output_dir,
        processor=lambda bitmap: process_logo_variants(
            bitmap,
            use_transparent_background=transparent,
            include_square=square,
            include_favicon=favicon,
            resample=resample,
        ),
        expected_outputs=expected,
        overwrite=overwrite,
        preprocess=lambda bitmap: prepare_source(
            bitmap,
            crop=box,
            strip_background=remove_bg,
            target_color=bg_color,
            tolerance=tolerance,
        ),
    )
    _finish(report)


@cli.command(name="headshot")
@input_option
@output_option
@crop_option
@remove_bg_option
@bg_color_option
@tolerance_option
@overwrite_option
def cmd_headshot(
    input_path: Path,
    output_dir: Path,
    crop: Optional[str],
    remove_bg: bool,
    bg_color: str,
    tolerance: float,
    overwrite: bool,
) -> None:
    """Pad headshots to 73:100 (min 292x400) on white."""

    box = _parse_crop(crop)
    _check_color(bg_color, "--bg-color")
    report = process_batch(
        input_path=input_path,
        output_dir=output_dir,
        processor=lambda bitmap: {"headshot": process_headshot(bitmap)},
        expected_outputs=["headshot"],
        overwrite=overwrite,
        preprocess=lambda bitmap: prepare_source(
            bitmap,
            crop=box,
            strip_background=remove_bg,
            target_color=bg_color,
            tolerance=tolerance,
        ),
    )
    _finish(report)


@cli.command(name="remove-bg")
@input_option
@output_option
@click.option(
    "--color",
    type=str,
    default=CONFIG.keying.target_color,
    help="Background color to key out (#RRGGBB)",
)
@tolerance_option
@overwrite_option
def cmd_remove_bg(
    input_path: Path,
    output_dir: Path,
    color: str,
    tolerance: float,
    overwrite: bool,
) -> None:
    """Make pixels close to a color transparent, keeping the image size."""

    _check_color(color, "--color")

    report = process_batch(
        input_path=input_path,
        output_dir=output_dir,
        processor=lambda bitmap: {
            "nobg": process_background_removal(
                bitmap, target_color=color, tolerance=tolerance
            )
        },
        expected_outputs=["nobg"],
        overwrite=overwrite,
    )
    _finish(report)


@cli.command(name="fit")
@click.argument("width", type=int)
@click.argument("height", type=int)
@click.option("--ratio", type=str, required=True, help="Target ratio, e.g. 5:2, 73:100")
@click.option("--min-width", type=int, default=0)
@click.option("--min-height", type=int, default=0)
def cmd_fit(width: int, height: int, ratio: str, min_width: int, min_height: int) -> None:
    """Print the padded canvas size and offsets for a WIDTH x HEIGHT source."""

    try:
        result = fit(width, height, AspectRatio.parse(ratio), min_width, min_height)
    except LogoFitError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(
        f"canvas {result.canvas_width}x{result.canvas_height} "
        f"offset {result.offset_x},{result.offset_y}"
    )


if __name__ == "__main__":
    cli()
