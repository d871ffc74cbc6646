"""Tests for the Ok/Err result envelope."""

import pytest

from symcat.catalog.codes import parse
from symcat.core.errors import MalformedCodeError
from symcat.core.result import Err, Ok, partition_results, try_result


class TestOk:
    def test_unwrap(self):
        ok = Ok(10)
        assert ok.unwrap() == 10
        assert ok.is_ok() and not ok.is_err()


class TestErr:
    def test_unwrap_raises(self):
        with pytest.raises(MalformedCodeError):
            Err(MalformedCodeError("x")).unwrap()

    def test_is_err(self):
        err = Err(ValueError("bad"))
        assert err.is_err() and not err.is_ok()


class TestTryResult:
    def test_success(self):
        assert try_result(lambda: parse("104.1")).unwrap() == parse("104.1")

    def test_catalog_error_is_captured(self):
        result = try_result(lambda: parse("10a"))
        assert result.is_err()
        assert isinstance(result.error, MalformedCodeError)

    def test_other_errors_propagate(self):
        with pytest.raises(ZeroDivisionError):
            try_result(lambda: 1 / 0)


class TestPartition:
    def test_partition(self):
        values, errors = partition_results([Ok(1), Err(ValueError("a")), Ok(2)])
        assert values == [1, 2]
        assert len(errors) == 1
