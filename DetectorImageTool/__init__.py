# DetectorImageTool/__init__.py

__app_name__ = "detector-image-tool"
__version__ = "0.1.0"

from .ImageDataFactory import ImageDataFactory
from .ImageDataConfig import ImageDataConfig
from .ImageData import ImageData
from .IntBlock import IntBlock, write_int_block

from .CalibrationDataFactory import CalibrationDataFactory
from .CalibrationData import CalibrationData
from .ReferenceCalibration import ReferenceCalibration, calibrate
from .ReferenceCalibrationConfig import ReferenceCalibrationConfig
from .Thickness import Thickness
from .Bitmap import normalized_rgb, thickness_rgb, save_bitmap
from .exceptions import (DetectorImageError, GridFormatError,
                         InvalidDimensions, EmptyGrid, DegenerateReference)

__all__ = [
    "ImageDataFactory", "ImageDataConfig", "ImageData", "IntBlock",
    "write_int_block", "CalibrationDataFactory", "CalibrationData",
    "ReferenceCalibration", "calibrate", "ReferenceCalibrationConfig",
    "Thickness", "normalized_rgb", "thickness_rgb", "save_bitmap",
    "DetectorImageError", "GridFormatError", "InvalidDimensions",
    "EmptyGrid", "DegenerateReference"
]
