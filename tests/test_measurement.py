import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from physconst.core.measurement import Measurement, UncertaintySource, next_tag
from physconst.core.precision import context, is_arbitrary


def _measured(value, std_dev):
    return Measurement(value, UncertaintySource(next_tag(), std_dev))


def test_same_source_cancels_exactly():
    a = _measured(2.0, 0.1)
    assert (a - a).is_zero()
    assert (a / a).is_one()
    assert a == a


def test_same_source_adds_linearly():
    a = _measured(2.0, 0.1)
    assert (a + a).std_dev == 0.2
    assert (3 * a).std_dev == pytest.approx(0.3)


def test_independent_sources_add_in_quadrature():
    a = _measured(2.0, 0.1)
    b = _measured(5.0, 0.3)
    assert (a + b).std_dev == pytest.approx(math.hypot(0.1, 0.3))
    assert (a - b).std_dev == pytest.approx(math.hypot(0.1, 0.3))
    assert (a * b).std_dev == pytest.approx(math.hypot(5.0 * 0.1, 2.0 * 0.3))
    assert a != b


def test_power_and_reciprocal():
    a = _measured(2.0, 0.1)
    assert (a ** 2).nominal_value == 4.0
    assert (a ** 2).std_dev == pytest.approx(0.4)
    assert (1 / a).nominal_value == 0.5
    assert (1 / a).std_dev == pytest.approx(0.025)
    assert (a ** 0).is_one()


def test_correlated_ratio():
    """(a*b)/a depends on b alone."""
    a = _measured(2.0, 0.1)
    b = _measured(5.0, 0.3)
    r = (a * b) / a
    assert r.nominal_value == pytest.approx(5.0)
    assert r.std_dev == pytest.approx(0.3)


def test_exact_values():
    one = Measurement(1.0)
    assert one.std_dev == 0
    assert one.sources == frozenset()
    assert one == 1.0
    assert (one + 1).nominal_value == 2.0


def test_arbitrary_precision_values():
    ctx = context()
    a = Measurement(ctx.mpf(2), UncertaintySource(next_tag(), ctx.mpf("0.1")))
    b = Measurement(ctx.mpf(5), UncertaintySource(next_tag(), ctx.mpf("0.3")))
    assert (a - a).is_zero()
    assert is_arbitrary((a * b).nominal_value)
    assert is_arbitrary((a + b).std_dev)
    assert float((a + b).std_dev) == pytest.approx(math.hypot(0.1, 0.3))


def test_mixed_float_and_mpf_promotes():
    m = Measurement(1.0) + context().mpf(1)
    assert is_arbitrary(m.nominal_value)


def test_source_identity_is_the_tag():
    assert UncertaintySource(5, 0.1) == UncertaintySource(5, 0.2, label="other")
    assert UncertaintySource(5, 0.1) != UncertaintySource(6, 0.1)


def test_measurement_is_unhashable():
    with pytest.raises(TypeError):
        hash(Measurement(1.0))


def test_tags_are_unique_across_threads():
    with ThreadPoolExecutor(max_workers=8) as pool:
        tags = list(pool.map(lambda _: next_tag(), range(1000)))
    assert len(set(tags)) == 1000
