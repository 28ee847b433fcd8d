import math

from progress_logger.frames import (
    build_frames,
    format_percentage,
    progress_ratio,
    render_bar,
)

FULL = "█"
EMPTY = "░"


def assert_bounce_sweep() -> None:
    for bar_length in range(2, 13):
        frames = build_frames(bar_length, FULL, EMPTY)
        expected_count = 2 * bar_length - 2
        if len(frames) != expected_count:
            raise AssertionError(
                f"bar_length={bar_length}: expected {expected_count} frames, "
                f"got {len(frames)}"
            )

        positions = []
        for frame in frames:
            if len(frame) != bar_length or frame.count(FULL) != 1:
                raise AssertionError(f"malformed frame {frame!r}")
            positions.append(frame.index(FULL))

        expected = list(range(bar_length)) + list(range(bar_length - 2, 0, -1))
        if positions != expected:
            raise AssertionError(f"expected sweep {expected}, got {positions}")


def assert_degenerate_frames() -> None:
    if build_frames(1, FULL, EMPTY) != (FULL,):
        raise AssertionError("bar_length=1 should give a single full frame")
    for bar_length in (0, -3):
        frames = build_frames(bar_length, FULL, EMPTY)
        if frames != ("",):
            raise AssertionError(f"bar_length={bar_length} gave {frames!r}")


def assert_bar_fill() -> None:
    cases = [
        ((0, 10, 10), EMPTY * 10),
        ((10, 10, 10), FULL * 10),
        ((5, 10, 10), FULL * 5 + EMPTY * 5),
        ((3, 10, 4), FULL + EMPTY * 3),
        ((2, 4, 10), FULL * 5 + EMPTY * 5),
    ]
    for (value, total, bar_length), expected in cases:
        bar = render_bar(value, total, bar_length, FULL, EMPTY)
        if bar != expected:
            raise AssertionError(
                f"render_bar({value}, {total}, {bar_length}) = {bar!r}, "
                f"expected {expected!r}"
            )


def assert_bar_overshoot_and_zero_total() -> None:
    if render_bar(15, 10, 10, FULL, EMPTY) != FULL * 15:
        raise AssertionError("overshoot should overfill the bar")
    if render_bar(0, 0, 10, FULL, EMPTY) != EMPTY * 10:
        raise AssertionError("0/0 should render an empty bar")
    if render_bar(3, 0, 10, FULL, EMPTY) != FULL * 10:
        raise AssertionError("n/0 should render a full bar")
    if render_bar(5, 10, 0, FULL, EMPTY) != "":
        raise AssertionError("zero-length bar should be empty")


def assert_percentage() -> None:
    cases = [
        (0.0, "0"),
        (0.5, "50"),
        (1.0, "100"),
        (0.125, "13"),
        (1.5, "150"),
        (math.inf, "inf"),
        (math.nan, "nan"),
    ]
    for ratio, expected in cases:
        text = format_percentage(ratio)
        if text != expected:
            raise AssertionError(f"format_percentage({ratio}) = {text!r}")

    if progress_ratio(1, 0) != math.inf or progress_ratio(-1, 0) != -math.inf:
        raise AssertionError("division by a zero total should be infinite")
    if not math.isnan(progress_ratio(0, 0)):
        raise AssertionError("0/0 should be nan")


def main() -> None:
    assert_bounce_sweep()
    assert_degenerate_frames()
    assert_bar_fill()
    assert_bar_overshoot_and_zero_total()
    assert_percentage()
    print("frames test passed")


if __name__ == "__main__":
    main()
