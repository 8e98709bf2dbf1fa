import random

import pytest

from carbonwise.forecast import predict_future_footprint


def test_twelve_months():
    preds = predict_future_footprint(5000)
    assert [p.month for p in preds] == list(range(1, 13))


def test_confidence_non_increasing_and_floored():
    preds = predict_future_footprint(5000, months=24)
    conf = [p.confidence for p in preds]
    assert conf == sorted(conf, reverse=True)
    assert min(conf) == 0.5
    assert conf[0] == 0.95
    assert conf[9] == 0.5


@pytest.mark.parametrize("seed", range(20))
def test_predictions_stay_within_trend_bounds(seed):
    preds = predict_future_footprint(10000, rng=random.Random(seed))
    for p in preds:
        assert 10000 * (1 - 0.1 * p.month / 12) - 1 <= p.predicted <= 10000 * (1 + 0.1 * p.month / 12) + 1


def test_trend_is_linear():
    preds = predict_future_footprint(120000, rng=random.Random(7))
    step = preds[0].predicted - 120000
    assert preds[11].predicted - 120000 == pytest.approx(12 * step, abs=12)


def test_seeded_rng_is_reproducible():
    a = predict_future_footprint(8899, rng=random.Random(42))
    b = predict_future_footprint(8899, rng=random.Random(42))
    assert a == b


def test_zero_total():
    assert all(p.predicted == 0 for p in predict_future_footprint(0))
