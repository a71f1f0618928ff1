"""
    detector-image-tool command
    ===========================
    Reads a raw ``.int`` detector block, calibrates it against its
    reference strips and writes ``normalized_image.bmp``.  The thickness map
    ``thickness_image.bmp`` is written on request.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from . import __app_name__, __version__
from .Bitmap import normalized_rgb, save_bitmap, thickness_rgb
from .CalibrationDataFactory import CalibrationDataFactory
from .ImageDataConfig import ImageDataConfig
from .ImageDataFactory import ImageDataFactory
from .ReferenceCalibrationConfig import ReferenceCalibrationConfig
from .exceptions import DetectorImageError

logger = logging.getLogger(__name__)

NORMALIZED_IMAGE = "normalized_image.bmp"
THICKNESS_IMAGE = "thickness_image.bmp"

app = typer.Typer(add_completion=False)


class DegenerateChoice(str, Enum):
    zero = "zero"
    raise_ = "raise"
    propagate = "propagate"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{__app_name__} version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    input_file: str = typer.Argument("block.int",
                                     help="Raw .int detector block."),
    output_dir: Path = typer.Option(Path("."),
                                    "--output-dir",
                                    "-o",
                                    help="Directory for the bitmaps."),
    thickness: Optional[bool] = typer.Option(
        None,
        "--thickness/--no-thickness",
        help="Write the thickness image without asking."),
    legacy_orientation: bool = typer.Option(
        False,
        "--legacy-orientation",
        help="Store grid row 0 as the first (bottom) scanline."),
    degenerate_reference: DegenerateChoice = typer.Option(
        DegenerateChoice.zero,
        "--degenerate-reference",
        help="Handling of rows with a zero detector reference."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    version: Optional[bool] = typer.Option(None,
                                           "--version",
                                           "-V",
                                           callback=_version_callback,
                                           is_eager=True),
) -> None:
    """
    Calibrate a raw detector block and render it as bitmaps.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        image = ImageDataFactory.create_from_file(
            ImageDataConfig(filename=input_file))
        config = ReferenceCalibrationConfig(
            degenerate_reference=degenerate_reference.value)
        calibration = CalibrationDataFactory.create(config, image)

        output_dir.mkdir(parents=True, exist_ok=True)
        normalized_path = output_dir / NORMALIZED_IMAGE
        save_bitmap(normalized_rgb(calibration), normalized_path,
                    legacy_orientation)
        typer.echo(f"Image '{normalized_path}' generated successfully.")

        if thickness is None:
            thickness = typer.confirm("Generate thickness image?",
                                      default=False)
        if thickness:
            thickness_path = output_dir / THICKNESS_IMAGE
            save_bitmap(thickness_rgb(calibration), thickness_path,
                        legacy_orientation)
            typer.echo(f"Image '{thickness_path}' generated successfully.")

    except (OSError, ValueError, DetectorImageError) as e:
        logger.debug("Run failed", exc_info=True)
        typer.echo(f"An error occurred: {e}", err=True)
        raise typer.Exit(code=1)
