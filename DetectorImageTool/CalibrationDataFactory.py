from typing import Union
from .ReferenceCalibrationConfig import ReferenceCalibrationConfig


class CalibrationDataFactory(object):
   """
    Factory for creating source-agnostic calibration data objects.

    Dispatches to the correct ``CalibrationData`` subclass based on the
    type of config object provided.  Adding a new calibration method only
    requires adding a new ``isinstance`` branch here.

    Methods
    -------
    create(config, raw)
        Construct and return a ``CalibrationData`` subclass instance.

    Examples
    --------
    >>> config = ReferenceCalibrationConfig(signal_threshold=2048)
    >>> cal = CalibrationDataFactory.create(config, image)
    >>> cal.values.shape
    (480, 640)
   """

   @staticmethod
   def create(config: Union[ReferenceCalibrationConfig], raw):
      """
        Construct a ``CalibrationData`` object from a config and a raw grid.

        Parameters
        ----------
        config : ReferenceCalibrationConfig
            A validated calibration configuration.
        raw : ImageData or np.ndarray
            Raw grid of integer readings.

        Returns
        -------
        CalibrationData
            A fully populated calibration data object (currently always a
            ``ReferenceCalibration`` instance).

        Raises
        ------
        ValueError
            If *config* is not a recognised configuration type.
       """
      from .ReferenceCalibration import ReferenceCalibration
      if isinstance(config, ReferenceCalibrationConfig):
         return ReferenceCalibration(raw, config)

      raise ValueError(f"Unsupported calibration config: {type(config)}")
