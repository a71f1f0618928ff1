### Bitmap rendering ###
# File : Bitmap.py

import logging

import numpy as np
import PIL.Image

from .CalibrationData import CalibrationData
from .Thickness import Thickness

logger = logging.getLogger(__name__)

# Reference-strip cells are drawn in full red.
CALIBRATED_COLOR = (255, 0, 0)


def normalized_rgb(calibration: CalibrationData) -> np.ndarray:
    """
    Render calibrated values as an RGB image.

    Cells flagged ``is_calibrated`` are drawn as ``CALIBRATED_COLOR``;
    every other cell is grey with each channel ``round(value * 255)``.

    Parameters
    ----------
    calibration : CalibrationData
        Calibrated grid with ``values`` and ``is_calibrated`` populated.

    Returns
    -------
    np.ndarray
        ``uint8`` array of shape ``(rows, cols, 3)``.

    Notes
    -----
    ``NaN`` values (only produced by the ``'propagate'`` degenerate
    reference policy) are drawn black.
    """
    values = np.nan_to_num(calibration.values, nan=0.0, posinf=1.0,
                           neginf=0.0)
    grey = np.floor(np.clip(values * 255.0, 0.0, 255.0) + 0.5)
    rgb = np.repeat(grey.astype(np.uint8)[:, :, np.newaxis], 3, axis=2)
    rgb[calibration.is_calibrated] = CALIBRATED_COLOR
    return rgb


def thickness_rgb(calibration: CalibrationData,
                  thickness: Thickness = None) -> np.ndarray:
    """
    Render the thickness map of a calibrated grid as a grey RGB image.

    The calibration flags are not distinguished.

    Parameters
    ----------
    calibration : CalibrationData
        Calibrated grid.
    thickness : Thickness, optional
        Attenuation model.  Default parameters are used when omitted.

    Returns
    -------
    np.ndarray
        ``uint8`` array of shape ``(rows, cols, 3)``.
    """
    if thickness is None:
        thickness = Thickness()
    grey = thickness.intensity(calibration.values)
    return np.repeat(grey[:, :, np.newaxis], 3, axis=2)


def save_bitmap(rgb, filename, legacy_orientation=False):
    """
    Write an RGB array as a 24-bit uncompressed BMP file.

    The file is a standard bottom-up bitmap: a 14-byte file header, a
    40-byte info header and rows padded to a 4-byte stride.  Row 0 of *rgb*
    is the top of the displayed image.

    Parameters
    ----------
    rgb : np.ndarray
        ``uint8`` array of shape ``(rows, cols, 3)``.
    filename : str or path-like
        Destination path.
    legacy_orientation : bool, optional
        Flip the rows so that row 0 of *rgb* is stored as the first
        scanline in the file, which bottom-up viewers display at the
        bottom.  Default is ``False``.

    Raises
    ------
    ValueError
        If *rgb* is not a ``(rows, cols, 3)`` ``uint8`` array.
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.dtype != np.uint8:
        raise ValueError(
            f"Expected a (rows, cols, 3) uint8 array, got {rgb.shape} "
            f"{rgb.dtype}")
    if legacy_orientation:
        rgb = np.flipud(rgb)

    image = PIL.Image.fromarray(np.ascontiguousarray(rgb))
    image.save(filename, format="BMP")
    logger.info("Wrote %d x %d bitmap to %s", rgb.shape[0], rgb.shape[1],
                filename)
