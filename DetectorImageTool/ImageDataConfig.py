from pydantic import BaseModel, Field, field_validator
from typing import Literal

ImageFormat = Literal["int"]

HEADER_WORDS = 14


class ImageDataConfig(BaseModel):
    """
    Configuration for loading a single raw detector grid.

    Pass an instance of this class to ``ImageDataFactory.create_from_file()``.

    Parameters
    ----------
    filename : str
        Absolute or relative path to the block file.  Must be a non-empty
        string; validated on construction.
    fileformat : {'int'}, optional
        Raw grid file format.  Default is ``'int'``.
    header_words : int, optional
        Number of reserved 32-bit words following the width/height pair.
        Must be >= 0.  Default is ``14``.
    """
    filename: str = Field(..., description="Path to the block file")
    fileformat: ImageFormat = Field(
        default="int",
        description="Raw grid file format"
    )
    header_words: int = Field(
        default=HEADER_WORDS,
        ge=0,
        description="Reserved 32-bit header words after width and height"
    )

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v):
        if not isinstance(v, str) or len(v) == 0:
            raise ValueError("Filename must be a non-empty string")
        return v
