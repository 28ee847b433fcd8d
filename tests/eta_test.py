import math
import re

from progress_logger.eta import ETA_PLACEHOLDER, estimate_eta, format_duration

_DURATION_RE = re.compile(r"(\d+h )?(\d+m )?\d+s")


def assert_placeholder_for_zero_value() -> None:
    if estimate_eta(0, 10, 0.0, 100.0) != ETA_PLACEHOLDER:
        raise AssertionError("value=0 should give the placeholder")


def assert_estimates() -> None:
    cases = [
        ((5, 10, 0.0, 50.0), "50s"),
        ((1, 2, 0.0, 100.0), "1m 40s"),
        ((1, 2, 0.0, 3725.0), "1h 2m 5s"),
        ((3, 4, 10.0, 11.5), "1s"),
        ((15, 10, 0.0, 30.0), "0s"),
    ]
    for args, expected in cases:
        eta = estimate_eta(*args)
        if eta != expected:
            raise AssertionError(f"estimate_eta{args} = {eta!r}, expected {expected!r}")


def assert_rounds_at_formatting() -> None:
    cases = [
        (0, "0s"),
        (59.4, "59s"),
        (59.5, "1m 0s"),
        (3599.4, "59m 59s"),
        (3599.5, "1h 0m 0s"),
        (-12.0, "0s"),
        (math.inf, ETA_PLACEHOLDER),
    ]
    for seconds, expected in cases:
        text = format_duration(seconds)
        if text != expected:
            raise AssertionError(f"format_duration({seconds}) = {text!r}")


def assert_field_omission() -> None:
    for seconds in [0, 1, 30, 59, 60, 61, 599, 3599, 3600, 3661, 86399, 90061]:
        text = format_duration(seconds)
        if not _DURATION_RE.fullmatch(text):
            raise AssertionError(f"unexpected duration format {text!r}")
        if seconds < 3600 and "h" in text:
            raise AssertionError(f"{seconds}s should not show hours: {text!r}")
        if seconds < 60 and "m" in text:
            raise AssertionError(f"{seconds}s should not show minutes: {text!r}")


def main() -> None:
    assert_placeholder_for_zero_value()
    assert_estimates()
    assert_rounds_at_formatting()
    assert_field_omission()
    print("eta test passed")


if __name__ == "__main__":
    main()
