from pydantic import BaseModel, Field
import math
import numpy as np


class Thickness(BaseModel):
    """
    Attenuation model mapping calibrated intensities to a thickness scale.

    Under a simple exponential attenuation model the transmitted fraction
    ``v`` relates to material thickness as ``t = -ln(v)``.  Non-positive
    (or undefined) intensities take the fixed ``sentinel`` thickness.  The
    thickness is scaled by ``scale``, rounded half away from zero and
    clamped into an 8-bit grey level.

    Attributes
    ----------
    scale : float
        Grey levels per unit of ``-ln(v)``.  Default is ``25.0``.
    sentinel : float
        Thickness used where ``v <= 0`` or ``v`` is ``NaN``.
        Default is ``10.0``.

    Examples
    --------
    >>> Thickness().to_thickness(1.0)
    0
    >>> Thickness().to_thickness(0.0)
    250
    """

    scale: float = Field(default=25.0, gt=0.0,
                         description="Grey levels per unit of -ln(v)")
    sentinel: float = Field(default=10.0,
                            description="Thickness for non-positive values")

    def to_thickness(self, value: float) -> int:
        """
        Compute the thickness grey level of a single calibrated value.

        Parameters
        ----------
        value : float
            Calibrated intensity of one cell.

        Returns
        -------
        int
            Grey level in ``0..255``.
        """
        t = -math.log(value) if value > 0 else self.sentinel
        scaled = min(max(t * self.scale, 0.0), 255.0)
        return int(math.floor(scaled + 0.5))

    def attenuation(self, values) -> np.ndarray:
        """
        Compute ``-ln(v)`` over a grid, with ``sentinel`` for ``v <= 0``.

        Parameters
        ----------
        values : np.ndarray
            Calibrated intensities.

        Returns
        -------
        np.ndarray
            ``float64`` array of thicknesses, same shape as *values*.
        """
        values = np.asarray(values, dtype=np.float64)
        positive = values > 0
        t = np.full(values.shape, self.sentinel, dtype=np.float64)
        np.log(values, out=t, where=positive)
        t[positive] *= -1.0
        return t

    def intensity(self, values) -> np.ndarray:
        """
        Compute the thickness grey level of every cell in a grid.

        Returns
        -------
        np.ndarray
            ``uint8`` array, same shape as *values*.
        """
        scaled = np.clip(self.attenuation(values) * self.scale, 0.0, 255.0)
        return np.floor(scaled + 0.5).astype(np.uint8)
