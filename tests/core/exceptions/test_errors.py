from __future__ import annotations

from aggbench.core.exceptions import (
    AggBenchError,
    DataFormatError,
    ErrorCode,
    ErrorMessageTemplate,
    SourceLoadError,
    format_error_response,
    format_load_failure,
)


def test_source_load_error_carries_path_and_kind() -> None:
    error = SourceLoadError("cannot read", path="/data/quotes.csv", source_kind="csv")

    assert isinstance(error, AggBenchError)
    assert error.error_code == "SOURCE_LOAD_ERROR"
    assert error.details == {"path": "/data/quotes.csv", "source": "csv"}
    assert str(error) == "cannot read"


def test_data_format_error_records_format() -> None:
    error = DataFormatError("bad row", format_name="json", details={"index": 3})

    assert error.details == {"index": 3, "format": "json"}


def test_validation_message_comes_from_template() -> None:
    message = ErrorMessageTemplate.get_message(ErrorCode.VALIDATION_ERROR, details="min_size: unsupported")

    assert message == "Validation failed: min_size: unsupported"
    assert "VALIDATION_ERROR" in ErrorMessageTemplate.get_message(ErrorCode.VALIDATION_ERROR)


def test_codes_without_template_use_the_generic_message() -> None:
    assert ErrorMessageTemplate.get_message(ErrorCode.SOURCE_LOAD_ERROR) == "An unknown error occurred"


def test_format_error_response_fills_message_from_template() -> None:
    payload = format_error_response(ErrorCode.VALIDATION_ERROR, details="chain: unknown")

    assert payload == {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Validation failed: chain: unknown",
            "details": {"details": "chain: unknown"},
        }
    }


def test_format_error_response_keeps_explicit_message() -> None:
    payload = format_error_response(ErrorCode.SOURCE_LOAD_ERROR, "cannot read quotes.csv", path="/data")

    assert payload["error"]["message"] == "cannot read quotes.csv"
    assert payload["error"]["details"] == {"path": "/data"}


def _raised(error: Exception) -> Exception:
    try:
        raise error
    except Exception as caught:
        return caught


def test_load_failure_hides_traceback_outside_development() -> None:
    error = _raised(SourceLoadError("invalid JSON", path="/data/quotes.json", source_kind="json"))

    payload = format_load_failure(error, include_details=False)

    assert payload == {"error": "Failed to load data", "message": "invalid JSON", "code": "SOURCE_LOAD_ERROR"}


def test_load_failure_includes_traceback_in_development() -> None:
    error = _raised(RuntimeError("disk on fire"))

    payload = format_load_failure(error, include_details=True)

    assert payload["message"] == "disk on fire"
    assert "code" not in payload
    assert "RuntimeError: disk on fire" in payload["details"]
    assert "Traceback" in payload["details"]


def test_load_failure_without_message() -> None:
    assert format_load_failure(RuntimeError(), include_details=False)["message"] == "Unknown error"
