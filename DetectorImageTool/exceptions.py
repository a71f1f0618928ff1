### Exceptions ###
# File : exceptions.py


class DetectorImageError(Exception):
    """Base class for errors raised by DetectorImageTool."""


class GridFormatError(DetectorImageError):
    """Raised when a block file is truncated or its header is malformed."""


class InvalidDimensions(DetectorImageError, ValueError):
    """Raised when a grid is too small for the reference-strip calibration."""


class EmptyGrid(InvalidDimensions):
    """Raised when a grid declares zero rows or zero columns."""


class DegenerateReference(DetectorImageError, ArithmeticError):
    """Raised when a detector reference average is zero and the
    calibration config asks for it to be treated as an error."""
