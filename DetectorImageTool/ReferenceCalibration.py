### Reference Calibration Class ###
# File : ReferenceCalibration.py

import logging

import numpy as np

from .CalibrationData import CalibrationData
from .ImageData import ImageData
from .ReferenceCalibrationConfig import ReferenceCalibrationConfig
from .exceptions import DegenerateReference, EmptyGrid, InvalidDimensions

logger = logging.getLogger(__name__)

STAGES = ("background", "beta_thorne", "detector", "clamp")


class ReferenceCalibration(CalibrationData):
    """
    Flat-field calibration of a raw detector grid against its own
    reference strips.

    The trailing ``beta_thorne_rows`` rows and the trailing
    ``detector_columns`` columns of the grid are reference regions.  The
    calibration runs four ordered stages, each consuming the values and
    flags produced by the previous one:

    1. background subtraction,
    2. beta-thorne (reference-row) correction,
    3. detector (reference-column) correction,
    4. clamping to ``<= 1.0``.

    Parameters
    ----------
    raw : ImageData or np.ndarray
        Raw grid of integer readings, shape ``(rows, cols)``.  Never
        modified.
    config : ReferenceCalibrationConfig, optional
        Calibration constants and policies.  Defaults are used when omitted.

    Raises
    ------
    EmptyGrid
        If the grid has zero rows or columns.
    InvalidDimensions
        If the grid is smaller than either reference strip.
    DegenerateReference
        If a detector reference average is zero and
        ``config.degenerate_reference == 'raise'``.

    Examples
    --------
    >>> cal = ReferenceCalibration(np.full((20, 60), 3000, dtype=np.int32))
    >>> float(cal.values.max())
    1.0
    """

    def __init__(self, raw, config: ReferenceCalibrationConfig = None):
        CalibrationData.__init__(self)
        if config is None:
            config = ReferenceCalibrationConfig()
        raw_counts = raw.raw_counts if isinstance(raw, ImageData) else raw
        if raw_counts is None:
            raise EmptyGrid("Image data holds no raw readings")
        raw_counts = np.asarray(raw_counts)

        self.validate_dimensions(raw_counts, config.beta_thorne_rows,
                                 config.detector_columns)

        self.signal_threshold = config.signal_threshold
        self.beta_thorne_rows = config.beta_thorne_rows
        self.detector_columns = config.detector_columns
        self.degenerate_reference = config.degenerate_reference

        values, flags = self.subtract_background(raw_counts,
                                                 config.signal_threshold)
        self._report(config.progress_cb, 0)

        values, flags, self.row_reference, self.overall_row_reference = \
            self.beta_thorne_calibration(values, flags,
                                         config.beta_thorne_rows)
        self._report(config.progress_cb, 1)

        values, flags, self.column_reference = self.detector_calibration(
            values, flags, config.detector_columns,
            config.degenerate_reference)
        self._report(config.progress_cb, 2)

        values = self.clamp(values)
        self._report(config.progress_cb, 3)

        values.setflags(write=False)
        flags.setflags(write=False)
        self.values = values
        self.is_calibrated = flags

    @staticmethod
    def _report(progress_cb, stage):
        logger.debug("Calibration stage %d/%d: %s", stage + 1, len(STAGES),
                     STAGES[stage])
        if progress_cb:
            progress_cb(phase=STAGES[stage], current=stage + 1,
                        total=len(STAGES))

    @staticmethod
    def validate_dimensions(raw_counts, beta_thorne_rows, detector_columns):
        """
        Check that a grid can hold both reference strips.

        Raises
        ------
        InvalidDimensions
            If the grid is not 2-D, or has fewer rows than
            *beta_thorne_rows*, or fewer columns than *detector_columns*.
        EmptyGrid
            If the grid has zero rows or zero columns.
        """
        if raw_counts.ndim != 2:
            raise InvalidDimensions(
                f"Expected a 2-D grid, got {raw_counts.ndim} dimension(s)")

        height, width = raw_counts.shape
        if height == 0 or width == 0:
            raise EmptyGrid(
                f"Image dimensions cannot be zero: {height} rows x "
                f"{width} columns")
        if height < beta_thorne_rows:
            raise InvalidDimensions(
                f"Not enough rows for beta-thorne calibration: need at least "
                f"{beta_thorne_rows}, got {height}")
        if width < detector_columns:
            raise InvalidDimensions(
                f"Not enough columns for detector calibration: need at least "
                f"{detector_columns}, got {width}")

    @staticmethod
    def subtract_background(raw_counts, signal_threshold):
        """
        Subtract the background level and floor the result at zero.

        Parameters
        ----------
        raw_counts : np.ndarray
            2-D grid of raw integer readings.
        signal_threshold : int
            Background level.

        Returns
        -------
        values : np.ndarray
            ``float64`` grid, ``max(0, raw - signal_threshold)``.
        is_calibrated : np.ndarray
            All-``False`` boolean grid of the same shape.
        """
        values = raw_counts.astype(np.float64) - signal_threshold
        np.maximum(values, 0.0, out=values)
        return values, np.zeros(raw_counts.shape, dtype=bool)

    @staticmethod
    def beta_thorne_calibration(values, is_calibrated, beta_thorne_rows):
        """
        Correct every non-reference cell by its column's reference average.

        The trailing *beta_thorne_rows* rows are averaged per column and then
        flagged as calibrated.  Each remaining cell is scaled by
        ``overall_row_reference / row_reference[col]``; cells in a column
        whose reference average is zero are set to ``0``.

        Returns
        -------
        values : np.ndarray
            Corrected values (new array).
        is_calibrated : np.ndarray
            Flags with the reference rows set (new array).
        row_reference : np.ndarray
            Reference average per column, shape ``(cols,)``.
        overall_row_reference : float
            Mean of *row_reference*.
        """
        is_calibrated = is_calibrated.copy()
        row_reference = values[-beta_thorne_rows:, :].sum(
            axis=0) / beta_thorne_rows
        is_calibrated[-beta_thorne_rows:, :] = True
        overall_row_reference = float(np.mean(row_reference))

        # A zero reference column zeroes its cells instead of dividing.
        zero_columns = row_reference == 0
        proportion = np.divide(overall_row_reference,
                               row_reference,
                               out=np.zeros_like(row_reference),
                               where=~zero_columns)
        if zero_columns.any():
            logger.debug("%d beta-thorne reference column(s) are zero",
                         int(zero_columns.sum()))

        values = np.where(is_calibrated, values,
                          values * proportion[np.newaxis, :])
        return values, is_calibrated, row_reference, overall_row_reference

    @staticmethod
    def detector_calibration(values,
                             is_calibrated,
                             detector_columns,
                             degenerate_reference="zero"):
        """
        Normalise every non-reference cell by its row's detector average.

        Only cells of the trailing *detector_columns* columns that are not
        already calibrated contribute to the average, which is always
        divided by *detector_columns*.  The scanned cells are then flagged.

        Parameters
        ----------
        values : np.ndarray
            Values after the beta-thorne stage.
        is_calibrated : np.ndarray
            Flags after the beta-thorne stage.
        detector_columns : int
            Width of the detector reference strip.
        degenerate_reference : {'zero', 'raise', 'propagate'}
            Handling of rows with a zero detector average.

        Returns
        -------
        values : np.ndarray
            Normalised values (new array).
        is_calibrated : np.ndarray
            Flags with the detector strip set (new array).
        column_reference : np.ndarray
            Detector average per row, shape ``(rows,)``.

        Raises
        ------
        DegenerateReference
            If a row that still has uncalibrated cells has a zero detector
            average and *degenerate_reference* is ``'raise'``.
        """
        scanned = np.zeros_like(is_calibrated)
        scanned[:, -detector_columns:] = True
        scanned &= ~is_calibrated

        column_reference = np.where(scanned, values, 0.0).sum(
            axis=1) / detector_columns
        is_calibrated = is_calibrated | scanned

        pending = ~is_calibrated
        degenerate_rows = np.flatnonzero(pending.any(axis=1) &
                                         (column_reference == 0))
        if degenerate_rows.size:
            logger.warning(
                "Detector reference is zero for %d row(s) (first: %d), "
                "policy '%s'", degenerate_rows.size, degenerate_rows[0],
                degenerate_reference)
            if degenerate_reference == "raise":
                raise DegenerateReference(
                    f"Detector reference average is zero for rows "
                    f"{degenerate_rows.tolist()}")

        divisor = column_reference[:, np.newaxis]
        if degenerate_reference == "propagate":
            with np.errstate(divide="ignore", invalid="ignore"):
                normalised = values / divisor
        else:
            normalised = np.divide(values,
                                   divisor,
                                   out=np.zeros_like(values),
                                   where=divisor != 0)

        values = np.where(pending, normalised, values)
        return values, is_calibrated, column_reference

    @staticmethod
    def clamp(values):
        """Clamp values above ``1.0``; ``NaN`` passes through unchanged."""
        return np.minimum(values, 1.0)


def calibrate(raw, config: ReferenceCalibrationConfig = None):
    """
    Calibrate a raw grid and return the ``ReferenceCalibration`` result.

    Parameters
    ----------
    raw : ImageData or np.ndarray
        Raw grid of integer readings.
    config : ReferenceCalibrationConfig, optional
        Calibration constants.  Defaults are used when omitted.

    Returns
    -------
    ReferenceCalibration
        Calibrated values, flags and reference profiles.
    """
    return ReferenceCalibration(raw, config)
