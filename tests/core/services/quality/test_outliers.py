from __future__ import annotations

from aggbench.core.config import PipelineConfig
from aggbench.core.models import Quote
from aggbench.core.services.quality.outliers import (
    apply_outlier_filter,
    calculate_outliers,
    filter_outliers,
    iqr_bounds,
)


def _quote(aggregator: str, price: float, efficiency: float = 99.0, latency_ms: float = 100.0) -> Quote:
    return Quote(aggregator=aggregator, price=price, efficiency=efficiency, latency_ms=latency_ms)


def test_fewer_than_four_values_have_no_outliers() -> None:
    assert calculate_outliers([1.0, 2.0, 1_000.0]) == set()


def test_quartiles_are_taken_by_index() -> None:
    bounds = iqr_bounds([100.0, 101.0, 102.0, 500.0])

    assert bounds is not None
    assert (bounds.q1, bounds.q3) == (101.0, 500.0)
    assert calculate_outliers([100.0, 101.0, 102.0, 500.0]) == set()


def test_values_strictly_outside_bounds_are_flagged() -> None:
    values = [10.0, 10.0, 10.0, 10.0, 10.0, 11.0, 12.0, 200.0]

    assert calculate_outliers(values) == {200.0}


def test_value_on_the_bound_is_kept() -> None:
    # q1=10, q3=12, upper bound 12 + 2.5 * 2 = 17
    assert calculate_outliers([10.0, 10.0, 12.0, 12.0, 17.0]) == set()


def test_every_copy_of_a_flagged_value_is_removed() -> None:
    quotes = [_quote(f"agg{index}", 10.0) for index in range(7)]
    quotes += [_quote("dup-a", 50.0), _quote("dup-b", 50.0)]

    assert calculate_outliers([quote.price for quote in quotes]) == {50.0}
    kept = filter_outliers(quotes)

    assert [quote.aggregator for quote in kept] == [f"agg{index}" for index in range(7)]


def test_efficiency_outlier_is_removed() -> None:
    quotes = [_quote("a", 100.0), _quote("b", 100.0), _quote("c", 100.0), _quote("d", 100.0), _quote("e", 100.0, 95.0)]

    kept = filter_outliers(quotes)

    assert [quote.aggregator for quote in kept] == ["a", "b", "c", "d"]


def test_latency_limit_is_exclusive() -> None:
    quotes = [
        _quote("a", 100.0, latency_ms=30_000.0),
        _quote("b", 100.0),
        _quote("c", 100.0),
        _quote("d", 100.0, latency_ms=30_000.5),
    ]

    kept = filter_outliers(quotes)

    assert [quote.aggregator for quote in kept] == ["a", "b", "c"]


def test_small_trades_are_untouched() -> None:
    quotes = [_quote("a", 1.0, latency_ms=90_000.0), _quote("b", 1_000.0), _quote("c", 5.0)]

    assert filter_outliers(quotes) == tuple(quotes)


def test_non_positive_median_disables_deviation_check() -> None:
    quotes = [_quote(name, 0.0) for name in "abcd"]

    assert len(filter_outliers(quotes)) == 4


def test_apply_outlier_filter_falls_back_when_everything_is_removed() -> None:
    quotes = [_quote(name, 100.0, latency_ms=60_000.0) for name in "abcd"]

    result = apply_outlier_filter(quotes)

    assert result.fell_back
    assert result.quotes == tuple(quotes)
    assert result.removed == 0


def test_apply_outlier_filter_counts_removed_quotes() -> None:
    quotes = [_quote("a", 100.0), _quote("b", 101.0), _quote("c", 102.0), _quote("d", 500.0)]

    result = apply_outlier_filter(quotes)

    assert not result.fell_back
    assert result.removed == 1
    assert [quote.aggregator for quote in result.quotes] == ["a", "b", "c"]


def test_config_controls_thresholds() -> None:
    quotes = [_quote("a", 100.0), _quote("b", 101.0), _quote("c", 102.0), _quote("d", 500.0)]
    config = PipelineConfig(max_median_deviation=10.0, min_outlier_sample=5)

    assert len(filter_outliers(quotes, config)) == 4
    assert len(filter_outliers(quotes, config.with_overrides(min_outlier_sample=4))) == 4
    assert len(filter_outliers(quotes, config.with_overrides(min_outlier_sample=4, max_median_deviation=0.1))) == 3
