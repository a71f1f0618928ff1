### ReferenceCalibrationConfig Class ###
# File : ReferenceCalibrationConfig.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Callable, Literal

SIGNAL_THRESHOLD = 2048
BETA_THORNE_ROWS_COUNT = 15
MEDIAN_DETECTOR_COUNT = 50

DegeneratePolicy = Literal["zero", "raise", "propagate"]


class ReferenceCalibrationConfig(BaseModel):
    """
    Configuration for a reference-strip (flat-field) calibration run.

    Pass an instance of this class to ``CalibrationDataFactory.create()``
    together with the raw grid to produce a ``ReferenceCalibration``.

    Parameters
    ----------
    signal_threshold : int, optional
        Background level subtracted from every raw reading.  Readings at or
        below it become ``0``.  Must be >= 0.  Default is ``2048``.
    beta_thorne_rows : int, optional
        Number of trailing rows used as the beta-thorne reference strip.
        Must be > 0.  Default is ``15``.
    detector_columns : int, optional
        Number of trailing columns used as the detector reference strip,
        and the fixed divisor of the detector average.  Must be > 0.
        Default is ``50``.
    degenerate_reference : {'zero', 'raise', 'propagate'}, optional
        What to do with cells whose detector reference average is zero.

        * ``'zero'``      — force the cells to ``0.0``.
        * ``'raise'``     — raise ``DegenerateReference``.
        * ``'propagate'`` — divide anyway; cells become ``inf`` or ``NaN``.

        Default is ``'zero'``.
    progress_cb : callable or None, optional
        Callback for progress updates.  Called as
        ``progress_cb(phase=str, current=int, total=int)`` once per stage.
        Default is ``None``.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    signal_threshold: int = Field(default=SIGNAL_THRESHOLD, ge=0)
    beta_thorne_rows: int = Field(default=BETA_THORNE_ROWS_COUNT, gt=0)
    detector_columns: int = Field(default=MEDIAN_DETECTOR_COUNT, gt=0)

    degenerate_reference: DegeneratePolicy = "zero"

    progress_cb: Optional[Callable] = None
