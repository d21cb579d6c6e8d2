import threading
from fractions import Fraction

import pytest

from physconst.core.config import MIN_WORKING_BITS, get_settings
from physconst.core.precision import (
    context,
    get_working_precision,
    is_arbitrary,
    rational,
    to_arbitrary,
    to_fixed,
    working_precision,
)
from physconst.core.units import Q_


def test_working_precision_scopes_and_restores():
    before = get_working_precision()
    with working_precision(512) as ctx:
        assert ctx.prec == 512
        assert get_working_precision() == 512
    assert get_working_precision() == before


def test_working_precision_restored_on_error():
    before = get_working_precision()
    with pytest.raises(RuntimeError):
        with working_precision(1024):
            raise RuntimeError("boom")
    assert get_working_precision() == before


@pytest.mark.parametrize("bits", [52, 54, 55, MIN_WORKING_BITS - 1])
def test_working_precision_never_below_minimum(bits):
    with pytest.raises(ValueError):
        with working_precision(bits):
            pass


def test_working_precision_is_thread_local():
    seen = {}

    def worker():
        seen["prec"] = get_working_precision()

    with working_precision(100):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert get_working_precision() == 100
    assert seen["prec"] == get_settings().default_precision


def test_rational_is_correctly_rounded():
    with working_precision(MIN_WORKING_BITS):
        assert rational(1, 3) == context().mpf(1) / 3
        assert to_fixed(rational(1, 10)) == 0.1


def test_to_fixed_and_to_arbitrary():
    assert to_fixed(3) == 3.0
    assert is_arbitrary(to_arbitrary(1.5))
    assert to_arbitrary(Fraction(1, 4)) == context().mpf("0.25")


def test_is_arbitrary():
    ctx = context()
    assert is_arbitrary(ctx.mpf(1))
    assert not is_arbitrary(1.0)
    assert not is_arbitrary(Q_(ctx.mpf(1), "m"))
