"""
Tests for input validators.
"""

import numpy as np
import pytest

from bayesurv.core.exceptions import DimensionError, ValidationError
from bayesurv.core.validation import (
    check_array,
    check_binary,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_positive,
    check_positive_int,
)


class TestCheckArray:

    def test_int_promoted_to_float(self):
        out = check_array([1, 2, 3], "x")
        assert out.dtype == np.float64

    def test_bool_promoted_to_float(self):
        out = check_array([True, False], "event")
        assert out.dtype == np.float64
        assert out.tolist() == [1.0, 0.0]

    def test_float32_kept(self):
        out = check_array(np.ones(3, dtype=np.float32), "x")
        assert out.dtype == np.float32

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(["a", "b"], "x")

    def test_object_rejected(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array(np.array([1, "a", None], dtype=object), "x")


class TestValueChecks:

    def test_finite_reports_counts(self):
        with pytest.raises(ValidationError, match="1 NaN, 1 Inf"):
            check_finite(np.array([1.0, np.nan, np.inf]), "time")

    def test_positive_rejects_zero(self):
        with pytest.raises(ValidationError, match="strictly positive"):
            check_positive(np.array([1.0, 0.0, 2.0]), "time")

    def test_positive_rejects_nan(self):
        with pytest.raises(ValidationError):
            check_positive(np.array([1.0, np.nan]), "time")

    def test_positive_accepts(self):
        check_positive(np.array([1e-12, 3.0]), "time")

    def test_binary_accepts_zero_one(self):
        check_binary(np.array([0.0, 1.0, 1.0]), "event")

    def test_binary_rejects_two(self):
        with pytest.raises(ValidationError, match="only 0 and 1"):
            check_binary(np.array([0.0, 2.0]), "event")


class TestShapeChecks:

    def test_consistent_length(self):
        with pytest.raises(DimensionError, match="time=3, event=2"):
            check_consistent_length(
                np.zeros(3), np.zeros(2), names=("time", "event"),
            )

    def test_consistent_length_name_mismatch(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), names=("a", "b"))

    def test_min_samples(self):
        with pytest.raises(ValidationError, match="at least 1"):
            check_min_samples(np.zeros(0), 1, "time")


class TestCheckPositiveInt:

    def test_returns_int(self):
        assert check_positive_int(np.int64(4), "chains") == 4

    def test_minimum_zero(self):
        assert check_positive_int(0, "n_warmup", minimum=0) == 0

    def test_below_minimum(self):
        with pytest.raises(ValidationError, match=">= 1"):
            check_positive_int(0, "chains")

    def test_float_rejected(self):
        with pytest.raises(ValidationError, match="integer"):
            check_positive_int(2.0, "chains")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            check_positive_int(True, "chains")
