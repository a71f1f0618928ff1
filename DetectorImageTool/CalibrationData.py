### CalibrationData Class ###
# File : CalibrationData.py

from pydantic import BaseModel, ConfigDict
import numpy as np
from typing import Optional


class CalibrationData(BaseModel):
    """
    Base container for calibration results and the configuration that
    produced them.

    Subclasses populate all fields during their own initialisation.
    This class imposes no calibration method.  It provides a common data
    contract and keeps the producing configuration co-located with the
    results for auditing.

    A single calibrated cell is the pair ``(values[i, j], is_calibrated[i, j])``.

    Attributes
    ----------
    values : np.ndarray or None
        2-D ``float64`` array of calibrated intensities, shape
        ``(rows, cols)``.  ``None`` until populated by a subclass.
    is_calibrated : np.ndarray or None
        2-D boolean array, ``True`` where the cell lies in a reference strip
        and was therefore not corrected by the proportion/division steps.
    row_reference : np.ndarray or None
        Beta-thorne reference profile, one average per column.
    overall_row_reference : float or None
        Arithmetic mean of ``row_reference``.
    column_reference : np.ndarray or None
        Detector reference profile, one average per row.
    signal_threshold : int or None
        Background level subtracted from the raw readings.
    beta_thorne_rows : int or None
        Height of the trailing reference-row strip.
    detector_columns : int or None
        Width of the trailing reference-column strip.
    degenerate_reference : str or None
        Policy applied to zero detector references.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    values: Optional[np.ndarray] = None
    is_calibrated: Optional[np.ndarray] = None
    row_reference: Optional[np.ndarray] = None
    overall_row_reference: Optional[float] = None
    column_reference: Optional[np.ndarray] = None
    signal_threshold: Optional[int] = None
    beta_thorne_rows: Optional[int] = None
    detector_columns: Optional[int] = None
    degenerate_reference: Optional[str] = None

    @property
    def shape(self):
        """``(height, width)`` of the calibrated grid, or ``None``."""
        if self.values is None:
            return None
        return self.values.shape

    def cell(self, row: int, col: int):
        """Return ``(value, is_calibrated)`` for a single cell."""
        return float(self.values[row, col]), bool(self.is_calibrated[row, col])
