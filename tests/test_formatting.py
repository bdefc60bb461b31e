import math

from sweep_inspector.formatting import FREQ_UNITS, FrequencyAxisItem, format_frequency


def test_documented_examples() -> None:
    assert format_frequency(1320) == "1.32 kHz"
    assert format_frequency(15012402) == "15.01 MHz"
    assert format_frequency(45) == "45.00 Hz"


def test_unit_boundaries() -> None:
    vectors = [
        (1.0, "1.00 Hz"),
        (999.0, "999.00 Hz"),
        (1_000.0, "1.00 kHz"),
        (999_000.0, "999.00 kHz"),
        (1_000_000.0, "1.00 MHz"),
        (433_920_000.0, "433.92 MHz"),
        (1_000_000_000.0, "1.00 GHz"),
        (2_437_000_000.0, "2.44 GHz"),
        (9_990_000_000.0, "9.99 GHz"),
    ]
    for value, expected in vectors:
        assert format_frequency(value) == expected


def test_out_of_range_values_are_clamped() -> None:
    assert format_frequency(12_500_000_000.0) == "12.50 GHz"
    assert format_frequency(0.5) == "0.50 Hz"
    assert format_frequency(0) == "0.00 Hz"
    assert format_frequency(-2500) == "-2.50 kHz"


def test_non_finite_values_give_empty_label() -> None:
    assert format_frequency(math.nan) == ""
    assert format_frequency(math.inf) == ""
    assert format_frequency(-math.inf) == ""


def test_formatting_is_stateless() -> None:
    first = [format_frequency(v) for v in (1320, 45, 15012402)]
    second = [format_frequency(v) for v in (1320, 45, 15012402)]
    assert first == second


def test_unit_table_is_ordered_largest_first() -> None:
    exponents = [row[0] for row in FREQ_UNITS]
    assert exponents == sorted(exponents, reverse=True)


def test_axis_tick_strings(qapp) -> None:
    axis = FrequencyAxisItem("bottom")
    labels = axis.tickStrings([2.40e9, 2.42e9, 1320.0], 1.0, 0.02e9)
    assert labels == ["2.40 GHz", "2.42 GHz", "1.32 kHz"]
