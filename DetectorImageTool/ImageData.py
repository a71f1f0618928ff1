### ImageData Class ###
# File : ImageData.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
import numpy as np
from typing import Optional


class ImageData(BaseModel):
   """
    Container for a single raw detector grid and its metadata.

    Attributes
    ----------
    raw_counts : np.ndarray or None
        2-D array of raw signed readings, shape ``(rows, cols)``.
        ``None`` until populated by a reader subclass.
    metadata : dict
        Sensor and acquisition metadata with the following keys:

        * ``'sensorType'``    — sensor identifier string.
        * ``'bitDepth'``      — integer bit depth of one reading.
        * ``'horizontalRes'`` — number of columns.
        * ``'verticalRes'``   — number of rows.
        * ``'bands'``         — number of bands (always 1).
        * ``'acquisitionTime'`` — acquisition timestamp or ``None``.

    Examples
    --------
    >>> img = ImageData(raw_counts=np.full((20, 60), 3000, dtype=np.int32))
    >>> img.shape
    (20, 60)
    """
   model_config = ConfigDict(arbitrary_types_allowed=True,
                             validate_assignment=True)

   raw_counts: Optional[np.ndarray] = None
   metadata: dict = Field(
      default_factory=lambda: {
         'sensorType': 'Unknown',
         'bitDepth': None,
         'horizontalRes': None,
         'verticalRes': None,
         'bands': None,
         'acquisitionTime': None
      })

   @field_validator("raw_counts")
   @classmethod
   def validate_raw_counts(cls, v):
      if v is None:
         return v
      v = np.asarray(v)
      if v.ndim != 2:
         raise ValueError(
            f"raw_counts must be a 2-D grid, got {v.ndim} dimension(s)")
      if not np.issubdtype(v.dtype, np.integer):
         raise ValueError(
            f"raw_counts must hold integer readings, got {v.dtype}")
      return v

   @property
   def shape(self):
      """``(height, width)`` of the raw grid, or ``None`` when empty."""
      if self.raw_counts is None:
         return None
      return self.raw_counts.shape

   def display_metadata(self):
      print('METADATA:')
      print('Sensor type: {0}'.format(self.metadata['sensorType']))
      print('Bit depth: {0}'.format(self.metadata['bitDepth']))
      print('Resolution: {0} x {1}'.format(self.metadata['horizontalRes'],
                                           self.metadata['verticalRes']))
      print('Number of bands: {0}'.format(self.metadata['bands']))
