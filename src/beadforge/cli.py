"""Command-line interface for BeadForge.

Provides commands for converting images into bead patterns, listing the
bundled palettes, and validating YAML configs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Callable

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from beadforge.color_space import hex_to_rgb, rgb_to_hex
from beadforge.config import load_config, validate_config
from beadforge.editor import GridEditor
from beadforge.errors import BeadForgeError
from beadforge.export import estimate_bead_usage
from beadforge.logging import setup_logging
from beadforge.models import BeadForgeConfig
from beadforge.palette import Palette, preset_names

console = Console()

_TOP_COLORS = 15


def _setup_logging(
    verbose: bool, log_file: Path | None = None, json_logs: bool = False
) -> None:
    """Configure logging based on verbose flag, log file, and format."""
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        verbose=verbose,
        log_file=log_file,
        json_logs=json_logs,
    )


def _logging_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared --verbose/--log-file/--json-logs options."""
    func = click.option(
        "--json-logs",
        is_flag=True,
        help="Emit log records as JSON lines",
    )(func)
    func = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Also write logs to this file",
    )(func)
    return click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable detailed logging",
    )(func)


def _parse_background(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[int, int, int] | None:
    if value is None:
        return None
    try:
        return hex_to_rgb(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.version_option(package_name="beadforge")
def main() -> None:
    """BeadForge — turn images into fuse-bead patterns."""
    pass


@main.command()
@click.argument(
    "image_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config with palette, grid, conversion and output sections",
)
@click.option("--palette", "-p", help="Palette preset (overrides config)")
@click.option("--width", "-W", type=click.IntRange(min=1), help="Grid width in beads")
@click.option("--height", "-H", type=click.IntRange(min=1), help="Grid height in beads")
@click.option(
    "--keep-aspect/--stretch",
    default=None,
    help="Keep the source aspect ratio when resizing (default: keep)",
)
@click.option("--dither/--no-dither", default=None, help="Apply pattern dithering")
@click.option("--brightness", type=float, help="Brightness factor (1.0 = unchanged)")
@click.option("--contrast", type=float, help="Contrast factor (1.0 = unchanged)")
@click.option(
    "--background",
    callback=_parse_background,
    help="Hex color transparent pixels are blended over (e.g. #FFFFFF)",
)
@click.option(
    "--rgb-match",
    is_flag=True,
    help="Match with weighted RGB distance instead of Lab",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Preview image path (.png, .jpg, .webp)",
)
@click.option(
    "--cell-size",
    type=click.IntRange(min=1),
    help="Preview block size in pixels",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write color statistics CSV",
)
@click.option(
    "--json",
    "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the full JSON export",
)
@_logging_options
def convert(
    image_path: Path,
    config_path: Path | None,
    palette: str | None,
    width: int | None,
    height: int | None,
    keep_aspect: bool | None,
    dither: bool | None,
    brightness: float | None,
    contrast: float | None,
    background: tuple[int, int, int] | None,
    rgb_match: bool,
    output: Path | None,
    cell_size: int | None,
    csv_path: Path | None,
    json_path: Path | None,
    verbose: bool,
    log_file: Path | None,
    json_logs: bool,
) -> None:
    """Convert an image into a bead pattern.

    IMAGE_PATH: Source image (any format Pillow can read)

    Command-line options override values from --config.

    Example:

        \b
        beadforge convert cat.png --palette mard -W 48 -H 48 -o cat_preview.png
        beadforge convert cat.png -c configs/cat.yaml --csv colors.csv
    """
    _setup_logging(verbose, log_file, json_logs)

    try:
        config = load_config(config_path) if config_path else BeadForgeConfig()

        overrides: dict[str, Any] = {
            key: value
            for key, value in {
                "palette": palette,
                "width": width,
                "height": height,
                "maintain_aspect_ratio": keep_aspect,
                "dither": dither,
                "brightness": brightness,
                "contrast": contrast,
                "background_color": background,
            }.items()
            if value is not None
        }
        if rgb_match:
            overrides["use_lab"] = False

        editor = GridEditor(config=config.converter, **overrides)

        with console.status(f"[bold blue]Converting {image_path}..."):
            result = editor.convert_image(image_path)

        usage = estimate_bead_usage(result)
        console.print(
            f"[bold green]✓[/] {result.grid.width}×{result.grid.height} pattern, "
            f"{usage.total_beads} beads, {len(usage.breakdown)} colors "
            f"({editor.palette.kind.value} palette)"
        )
        console.print(_usage_table(usage.breakdown[:_TOP_COLORS]))
        if len(usage.breakdown) > _TOP_COLORS:
            console.print(f"  … and {len(usage.breakdown) - _TOP_COLORS} more colors")

        preview_path = output or _as_path(config.output.preview_path)
        if preview_path is not None:
            saved = editor.save_preview(preview_path, cell_size or config.output.cell_size)
            console.print(f"[bold green]✓[/] Preview saved: {saved}")

        csv_target = csv_path or _as_path(config.output.csv_path)
        if csv_target is not None:
            _write_text(csv_target, editor.export_csv())
            console.print(f"[bold green]✓[/] Color statistics saved: {csv_target}")

        json_target = json_path or _as_path(config.output.json_path)
        if json_target is not None:
            _write_text(json_target, editor.export_json())
            console.print(f"[bold green]✓[/] Pattern JSON saved: {json_target}")

    except (BeadForgeError, ValidationError, OSError, ValueError) as e:
        console.print(f"[bold red]✗[/] Conversion failed: {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)


def _as_path(value: str) -> Path | None:
    return Path(value) if value else None


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _usage_table(breakdown: list[Any]) -> Table:
    table = Table(title="Bead usage")
    table.add_column("Color")
    table.add_column("Hex")
    table.add_column("Brand")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right")
    for usage in breakdown:
        color = usage.color
        table.add_row(
            f"[on {rgb_to_hex(color.rgb)}]  [/] {color.name}",
            color.hex,
            color.brand,
            str(usage.count),
            f"{usage.percentage:.2f}",
        )
    return table


@main.command()
@click.argument("preset", required=False)
@click.option(
    "--brand",
    help="Only list colors of this brand",
)
def palettes(preset: str | None, brand: str | None) -> None:
    """List bundled palette presets, or the colors of one preset.

    Example:

        \b
        beadforge palettes
        beadforge palettes mard
    """
    try:
        if preset is None:
            table = Table(title="Palette presets")
            table.add_column("Preset")
            table.add_column("Colors", justify="right")
            table.add_column("Brands")
            for name in preset_names():
                palette = Palette.from_preset(name)
                table.add_row(name, str(len(palette)), ", ".join(palette.list_brands()))
            console.print(table)
            return

        palette = Palette.from_preset(preset)
        colors = palette.filter_by_brand(brand) if brand else palette.colors
        table = Table(title=f"{palette.kind.value} ({len(colors)} colors)")
        table.add_column("Name")
        table.add_column("Hex")
        table.add_column("RGB")
        table.add_column("Brand")
        for color in colors:
            table.add_row(
                color.name, color.hex, f"{color.r},{color.g},{color.b}", color.brand
            )
        console.print(table)

    except BeadForgeError as e:
        console.print(f"[bold red]✗[/] {e}")
        sys.exit(1)


@main.command()
@click.argument(
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@_logging_options
def validate(
    config_path: Path, verbose: bool, log_file: Path | None, json_logs: bool
) -> None:
    """Validate a conversion configuration without converting.

    CONFIG_PATH: Path to the YAML configuration file

    Checks YAML syntax, schema validity, and that the palette resolves;
    suspicious settings are reported as warnings.

    Example:

        \b
        beadforge validate configs/cat.yaml
    """
    _setup_logging(verbose, log_file, json_logs)

    try:
        with console.status(f"[bold blue]Validating {config_path}..."):
            warnings = validate_config(config_path)
            config = load_config(config_path)

        converter = config.converter
        console.print("[bold green]✓[/] Configuration is valid")
        console.print(
            "  Palette: "
            + (
                converter.palette
                if isinstance(converter.palette, str)
                else f"custom ({len(converter.palette)} colors)"
            )
        )
        console.print(f"  Grid: {converter.width}×{converter.height}")

        if warnings:
            console.print()
            console.print(f"[bold yellow]⚠[/] {len(warnings)} warning(s):")
            for warning in warnings:
                console.print(f"  • {warning}")

    except (BeadForgeError, ValidationError, OSError) as e:
        console.print(f"[bold red]✗[/] Validation failed: {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
