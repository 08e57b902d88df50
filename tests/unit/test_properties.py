"""
Property-based tests using Hypothesis for the BizPulse analytics core.

These tests check counting and bounds invariants of the summary, the margin
guard, stock banding and lenient coercion over generated inputs.
"""

from collections import Counter

import hypothesis.strategies as st
from hypothesis import given, settings

from bizpulse.engine.aggregation import summarize
from bizpulse.engine.financials import profit_margin_percent, stock_status
from bizpulse.engine.insight_extractor import extract_insights
from bizpulse.engine.recommendation_bucketer import bucket
from bizpulse.models.enums import StockStatus
from bizpulse.models.insights import Recommendation
from bizpulse.utils.coercion import parse_float, parse_int
from tests.conftest import make_insight_record, make_metric_record

finite_floats = st.floats(allow_nan=False, allow_infinity=False, min_value=-1e9, max_value=1e9)

insight_records = st.builds(
    make_insight_record,
    category=st.one_of(st.none(), st.sampled_from(["pricing", "marketing", "ops", "inventory", "hr"])),
    priority=st.one_of(st.none(), st.sampled_from(["high", "medium", "low", "urgent"])),
    actionable=st.booleans(),
)

business_records = st.builds(
    make_metric_record,
    metric_type=st.sampled_from(["revenue", "expenses", "customers", "products"]),
    value=finite_floats,
)

metric_sets = st.lists(st.one_of(insight_records, business_records), max_size=30)


# =============================================================================
# Summary invariants
# =============================================================================


@given(metrics=metric_sets)
@settings(max_examples=100, deadline=None)
def test_prop_total_insights_counts_ai_insight_records(metrics):
    """totalInsights equals the number of ai_insight records."""
    expected = sum(1 for m in metrics if m.metric_type == "ai_insight")
    assert summarize(metrics).total_insights == expected


@given(metrics=metric_sets)
@settings(max_examples=100, deadline=None)
def test_prop_high_priority_and_actionable_bounded_by_total(metrics):
    summary = summarize(metrics)
    assert 0 <= summary.high_priority_count <= summary.total_insights
    assert 0 <= summary.actionable_count <= summary.total_insights


@given(metrics=metric_sets)
@settings(max_examples=100, deadline=None)
def test_prop_top_categories_capped_and_non_increasing(metrics):
    top = summarize(metrics).top_categories
    counts = Counter(m.metadata.category for m in metrics if m.is_ai_insight and m.metadata.category)

    assert len(top) <= 3
    assert len(top) == len(set(top))
    ranked = [counts[c] for c in top]
    assert ranked == sorted(ranked, reverse=True)


@given(metrics=metric_sets)
@settings(max_examples=50, deadline=None)
def test_prop_summary_does_not_mutate_input(metrics):
    before = [m.model_dump() for m in metrics]
    summarize(metrics)
    assert [m.model_dump() for m in metrics] == before


@given(metrics=metric_sets)
@settings(max_examples=50, deadline=None)
def test_prop_one_insight_per_ai_insight_record(metrics):
    assert len(extract_insights(metrics)) == summarize(metrics).total_insights


# =============================================================================
# Financial invariants
# =============================================================================


@given(material_cost=finite_floats)
def test_prop_margin_zero_when_selling_price_zero(material_cost):
    assert profit_margin_percent(material_cost, 0.0) == 0.0


@given(
    material_cost=st.floats(min_value=0.0, max_value=1e6, allow_nan=False),
    selling_price=st.floats(min_value=0.01, max_value=1e6, allow_nan=False),
)
def test_prop_margin_at_most_one_hundred_for_non_negative_cost(material_cost, selling_price):
    assert profit_margin_percent(material_cost, selling_price) <= 100.0


@given(quantity=st.integers(min_value=-1000, max_value=1000))
def test_prop_stock_status_bands_are_monotonic(quantity):
    order = [StockStatus.OUT, StockStatus.LOW, StockStatus.MEDIUM, StockStatus.GOOD]
    assert order.index(stock_status(quantity)) <= order.index(stock_status(quantity + 1))


def test_stock_status_boundaries():
    assert stock_status(0) == StockStatus.OUT
    assert stock_status(5) == StockStatus.LOW
    assert stock_status(6) == StockStatus.MEDIUM
    assert stock_status(10) == StockStatus.MEDIUM
    assert stock_status(11) == StockStatus.GOOD


# =============================================================================
# Coercion and bucketing
# =============================================================================


@given(value=st.one_of(st.none(), st.text(max_size=20), st.integers(min_value=-10**12, max_value=10**12), finite_floats, st.booleans()))
def test_prop_coercion_never_raises(value):
    assert isinstance(parse_int(value), int)
    assert isinstance(parse_float(value), float)


@given(n=st.integers(min_value=-10**6, max_value=10**6))
def test_prop_parse_int_reads_integer_strings(n):
    assert parse_int(str(n)) == n


@given(timeframes=st.lists(st.sampled_from(["immediate", "short_term", "long_term"]), max_size=20))
def test_prop_bucket_preserves_every_recommendation(timeframes):
    recs = [Recommendation(id=str(i), title="r", timeframe=t) for i, t in enumerate(timeframes)]
    buckets = bucket(recs)
    assert len(buckets.immediate) + len(buckets.short_term) + len(buckets.long_term) == len(recs)
