"""Tests for the reference-strip calibration stages."""

import math

import numpy as np
import pytest

from DetectorImageTool import (CalibrationDataFactory, DegenerateReference,
                               EmptyGrid, ImageData, InvalidDimensions,
                               ReferenceCalibration,
                               ReferenceCalibrationConfig, calibrate)


def expected_flags(shape, rows=15, cols=50):
    flags = np.zeros(shape, dtype=bool)
    flags[-rows:, :] = True
    flags[:, -cols:] = True
    return flags


def test_constant_grid_calibrates_to_one(constant_grid):
    cal = calibrate(constant_grid)

    assert cal.shape == (20, 60)
    assert cal.overall_row_reference == 952.0
    np.testing.assert_array_equal(cal.row_reference, np.full(60, 952.0))
    np.testing.assert_array_equal(cal.column_reference[:5], np.full(5, 952.0))
    np.testing.assert_array_equal(cal.column_reference[5:], np.zeros(15))
    np.testing.assert_array_equal(cal.values, np.ones((20, 60)))


def test_flags_cover_both_reference_strips(random_grid):
    cal = calibrate(random_grid)

    assert cal.values.shape == random_grid.shape
    np.testing.assert_array_equal(cal.is_calibrated,
                                  expected_flags(random_grid.shape))


def test_values_never_exceed_one(random_grid):
    cal = calibrate(random_grid)

    assert np.all(np.isfinite(cal.values))
    assert cal.values.max() <= 1.0


def test_background_subtraction_floors_at_zero():
    raw = np.array([[0, 2048, 2049, -5], [2000, 3000, 2147483647, 2047]],
                   dtype=np.int32)

    values, flags = ReferenceCalibration.subtract_background(raw, 2048)

    np.testing.assert_array_equal(
        values, [[0.0, 0.0, 1.0, 0.0], [0.0, 952.0, 2147481599.0, 0.0]])
    assert not flags.any()


def test_zero_row_reference_zeroes_column(constant_grid):
    constant_grid[-15:, 3] = 1000
    values, flags = ReferenceCalibration.subtract_background(
        constant_grid, 2048)

    values, flags, row_reference, overall = \
        ReferenceCalibration.beta_thorne_calibration(values, flags, 15)

    assert row_reference[3] == 0.0
    assert overall == pytest.approx(952.0 * 59 / 60)
    np.testing.assert_array_equal(values[:5, 3], np.zeros(5))
    assert calibrate(constant_grid).values[0, 3] == 0.0


def test_detector_normalisation(constant_grid):
    constant_grid[:5, :10] = 2048 + 476

    cal = calibrate(constant_grid)

    np.testing.assert_array_equal(cal.values[:5, :10], np.full((5, 10), 0.5))
    np.testing.assert_array_equal(cal.values[:5, 10:], np.ones((5, 50)))


def test_row_proportion_is_applied(constant_grid):
    # column 0 has half the reference level, so its cells are doubled
    constant_grid[-15:, 0] = 2048 + 476
    constant_grid[0, 0] = 2048 + 238

    cal = calibrate(constant_grid)

    overall = (476.0 + 59 * 952.0) / 60
    assert cal.row_reference[0] == 476.0
    assert cal.overall_row_reference == pytest.approx(overall)
    assert cal.column_reference[0] == pytest.approx(overall)
    assert cal.values[0, 0] == pytest.approx(0.5)


def test_detector_average_skips_reference_rows():
    raw = np.full((20, 60), 3000, dtype=np.int32)
    raw[-15:, -50:] = 9000

    cal = calibrate(raw)

    # reference rows never contribute to the detector average
    np.testing.assert_array_equal(cal.column_reference[-15:], np.zeros(15))


@pytest.mark.parametrize("shape", [(0, 60), (20, 0), (0, 0)])
def test_empty_grid_is_rejected(shape):
    with pytest.raises(EmptyGrid):
        calibrate(np.zeros(shape, dtype=np.int32))


def test_empty_grid_is_invalid_dimensions():
    with pytest.raises(InvalidDimensions):
        calibrate(np.zeros((0, 60), dtype=np.int32))


def test_too_few_rows():
    with pytest.raises(InvalidDimensions, match="rows"):
        calibrate(np.full((10, 60), 3000, dtype=np.int32))


def test_too_few_columns():
    with pytest.raises(InvalidDimensions, match="columns"):
        calibrate(np.full((20, 49), 3000, dtype=np.int32))


def test_image_without_counts_is_rejected():
    with pytest.raises(EmptyGrid):
        calibrate(ImageData())


class TestDegenerateReference:

    @pytest.fixture
    def grid(self, constant_grid):
        constant_grid[0, 10:] = 0
        return constant_grid

    def test_zero_policy(self, grid):
        cal = calibrate(grid)

        assert cal.column_reference[0] == 0.0
        np.testing.assert_array_equal(cal.values[0, :10], np.zeros(10))
        np.testing.assert_array_equal(cal.values[1:5, :10],
                                      np.ones((4, 10)))

    def test_raise_policy(self, grid):
        config = ReferenceCalibrationConfig(degenerate_reference="raise")

        with pytest.raises(DegenerateReference, match=r"\[0\]"):
            calibrate(grid, config)

    def test_propagate_policy(self, grid):
        config = ReferenceCalibrationConfig(degenerate_reference="propagate")
        grid[1, :] = 0

        cal = calibrate(grid, config)

        # 952 / 0 is inf and clamps to 1; 0 / 0 stays NaN
        np.testing.assert_array_equal(cal.values[0, :10], np.ones(10))
        assert np.all(np.isnan(cal.values[1, :10]))

    def test_reference_rows_are_not_degenerate(self, constant_grid):
        config = ReferenceCalibrationConfig(degenerate_reference="raise")

        cal = calibrate(constant_grid, config)

        assert np.all(cal.column_reference[-15:] == 0.0)


def test_input_is_not_modified(random_grid):
    before = random_grid.copy()

    calibrate(random_grid)

    np.testing.assert_array_equal(random_grid, before)


def test_results_are_read_only(constant_grid):
    cal = calibrate(constant_grid)

    with pytest.raises(ValueError):
        cal.values[0, 0] = 0.25
    with pytest.raises(ValueError):
        cal.is_calibrated[0, 0] = True


def test_progress_callback():
    calls = []
    config = ReferenceCalibrationConfig(
        progress_cb=lambda **kw: calls.append(kw))

    calibrate(np.full((20, 60), 3000, dtype=np.int32), config)

    assert [c["phase"] for c in calls] == [
        "background", "beta_thorne", "detector", "clamp"
    ]
    assert calls[-1]["current"] == calls[-1]["total"] == 4


def test_small_reference_strips():
    config = ReferenceCalibrationConfig(signal_threshold=0,
                                        beta_thorne_rows=2,
                                        detector_columns=3)
    raw = np.arange(1, 21, dtype=np.int32).reshape(4, 5)

    cal = calibrate(raw, config)

    np.testing.assert_array_equal(cal.is_calibrated,
                                  expected_flags((4, 5), rows=2, cols=3))
    assert cal.beta_thorne_rows == 2
    assert cal.detector_columns == 3
    # row_reference = mean of rows 2 and 3 = [13.5 .. 17.5], overall 15.5
    overall = 15.5
    scaled = raw[0] * overall / np.array([13.5, 14.5, 15.5, 16.5, 17.5])
    column_reference = scaled[2:].sum() / 3
    assert cal.values[0, 0] == pytest.approx(
        min(scaled[0] / column_reference, 1.0))
    assert cal.values[0, 1] == pytest.approx(
        min(scaled[1] / column_reference, 1.0))


def test_factory_accepts_image_data(constant_grid):
    image = ImageData(raw_counts=constant_grid)

    cal = CalibrationDataFactory.create(ReferenceCalibrationConfig(), image)

    assert isinstance(cal, ReferenceCalibration)
    assert cal.signal_threshold == 2048
    assert cal.degenerate_reference == "zero"
    assert cal.cell(0, 0) == (1.0, False)
    assert cal.cell(19, 0) == (1.0, True)


def test_factory_rejects_unknown_config(constant_grid):
    with pytest.raises(ValueError, match="Unsupported"):
        CalibrationDataFactory.create(object(), constant_grid)


def test_config_validation():
    with pytest.raises(ValueError):
        ReferenceCalibrationConfig(beta_thorne_rows=0)
    with pytest.raises(ValueError):
        ReferenceCalibrationConfig(degenerate_reference="ignore")
    assert math.isclose(ReferenceCalibrationConfig().signal_threshold, 2048)
