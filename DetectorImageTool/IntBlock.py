### IntBlock Class ###
# File : IntBlock.py

import logging

import numpy as np
from pydantic import Field, field_validator

from .ImageData import ImageData
from .ImageDataConfig import HEADER_WORDS
from .exceptions import EmptyGrid, GridFormatError

logger = logging.getLogger(__name__)

# Block files are written little-endian: a uint32 width/height pair, the
# reserved header words, then one 32-bit reading per cell in row-major order.
WORD_DTYPE = np.dtype("<u4")
READING_DTYPE = np.dtype("<i4")


class IntBlock(ImageData):
    """
    ``ImageData`` reader for raw ``.int`` detector block files.

    Parameters
    ----------
    filename : str
        Path to the block file.
    header_words : int, optional
        Number of reserved 32-bit words between the width/height pair and
        the readings.  Default is ``14``.

    Attributes
    ----------
    raw_counts : np.ndarray
        2-D ``int32`` array of raw readings, shape ``(height, width)``.
    metadata : dict
        Populated metadata keys: ``'sensorType'`` (``'INT'``),
        ``'bitDepth'`` (``32``), ``'horizontalRes'``, ``'verticalRes'``,
        ``'bands'`` (``1``) and ``'headerWords'`` (the reserved words as a
        list of ints).

    Raises
    ------
    OSError
        If the file cannot be opened.
    EmptyGrid
        If the declared width or height is zero.
    GridFormatError
        If the header or the pixel data is shorter than declared.

    Examples
    --------
    >>> img = IntBlock("block.int")
    >>> img.raw_counts.dtype
    dtype('int32')
    """

    filename: str = Field(..., exclude=True)
    header_words: int = Field(default=HEADER_WORDS, ge=0, exclude=True)

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str):
        if not v or not isinstance(v, str):
            raise ValueError("Filename must be a non-empty string")
        return v

    def __init__(self, filename: str, header_words: int = HEADER_WORDS):
        super().__init__(filename=filename, header_words=header_words)
        self._read_block(filename, header_words)

    def _read_block(self, filename: str, header_words: int):
        """
        Read the header and raw readings from a block file.

        The readings are stored on disk as unsigned words and reinterpreted
        as signed 32-bit integers.

        Parameters
        ----------
        filename : str
            Path to the ``.int`` file.
        header_words : int
            Number of reserved words to skip after width and height.
        """
        with open(filename, "rb") as f:
            header = np.fromfile(f, dtype=WORD_DTYPE, count=2 + header_words)
            if header.size < 2 + header_words:
                raise GridFormatError(
                    f"Truncated header in {filename}: expected "
                    f"{2 + header_words} words, got {header.size}")

            width, height = int(header[0]), int(header[1])
            if width == 0 or height == 0:
                raise EmptyGrid(
                    f"Image dimensions cannot be zero: {filename} declares "
                    f"{height} rows x {width} columns")

            count = width * height
            data = np.fromfile(f, dtype=READING_DTYPE, count=count)

        if data.size < count:
            raise GridFormatError(
                f"Truncated pixel data in {filename}: expected {count} "
                f"readings, got {data.size}")

        self.raw_counts = data.reshape((height, width)).astype(np.int32)
        self.metadata.update({
            "sensorType": "INT",
            "bitDepth": 32,
            "horizontalRes": width,
            "verticalRes": height,
            "bands": 1,
            "headerWords": [int(w) for w in header[2:]],
        })
        logger.info("Read %d x %d grid from %s", height, width, filename)


def write_int_block(filename, raw_counts, header_words=None):
    """
    Write a 2-D grid of readings in the ``.int`` block layout.

    Parameters
    ----------
    filename : str
        Destination path.
    raw_counts : array_like
        2-D grid of integer readings, shape ``(height, width)``.
    header_words : sequence of int or None, optional
        Reserved header words.  ``None`` writes ``14`` zero words.

    Raises
    ------
    ValueError
        If *raw_counts* is not two-dimensional.
    """
    grid = np.asarray(raw_counts)
    if grid.ndim != 2:
        raise ValueError(f"Expected a 2-D grid, got {grid.ndim} dimension(s)")
    if header_words is None:
        header_words = [0] * HEADER_WORDS

    height, width = grid.shape
    header = np.asarray([width, height, *header_words], dtype=WORD_DTYPE)
    with open(filename, "wb") as f:
        f.write(header.tobytes())
        f.write(grid.astype(READING_DTYPE).tobytes())
    logger.info("Wrote %d x %d grid to %s", height, width, filename)
