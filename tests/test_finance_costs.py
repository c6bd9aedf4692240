import pytest

from bond_returns.errors import InvalidInput
from bond_returns.finance.costs import cost_summary, monthly_coupon, net_monthly_coupon, total_cost


@pytest.mark.parametrize(
    "F,P,A,B",
    [
        (100000.0, 102.5, 358.63, 0.0),
        (1000.0, 50.0, 0.0, 0.0),
        (250000.0, 99.75, 1200.0, 450.0),
    ],
)
def test_total_cost_formula(F, P, A, B):
    assert total_cost(F, P, A, B) == pytest.approx(F * P / 100 + A + B)


def test_total_cost_reference_bond():
    assert total_cost(100000, 102.5, 358.63, 0) == pytest.approx(102858.63)


def test_brokerage_is_part_of_cost():
    assert total_cost(100000, 100, 0, 250) == pytest.approx(100250.0)


@pytest.mark.parametrize(
    "F,P,A,B",
    [
        (0.0, 100.0, 0.0, 0.0),
        (-1.0, 100.0, 0.0, 0.0),
        (1000.0, 0.0, 0.0, 0.0),
        (1000.0, -5.0, 0.0, 0.0),
        (1000.0, 100.0, -0.01, 0.0),
        (1000.0, 100.0, 0.0, -1.0),
    ],
)
def test_total_cost_rejects_bad_inputs(F, P, A, B):
    with pytest.raises(InvalidInput):
        total_cost(F, P, A, B)


def test_monthly_coupon():
    assert monthly_coupon(100000, 11.9) == pytest.approx(991.6666667)
    assert monthly_coupon(100000, 0) == 0.0


@pytest.mark.parametrize("F,C", [(0, 10), (-100, 10), (1000, -0.5)])
def test_monthly_coupon_rejects_bad_inputs(F, C):
    with pytest.raises(InvalidInput):
        monthly_coupon(F, C)


def test_net_coupon_endpoints():
    mc = 991.67
    assert net_monthly_coupon(mc, 0) == mc
    assert net_monthly_coupon(mc, 100) == 0.0


def test_net_coupon_decreases_with_tds():
    mc = 991.67
    values = [net_monthly_coupon(mc, t) for t in range(0, 101, 5)]
    assert all(a > b for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("mc,tds", [(-1.0, 10), (100.0, -0.1), (100.0, 100.5)])
def test_net_coupon_rejects_bad_inputs(mc, tds):
    with pytest.raises(InvalidInput):
        net_monthly_coupon(mc, tds)


def test_cost_summary(default_terms):
    s = cost_summary(default_terms)
    assert s.total_cost == pytest.approx(102858.63)
    assert s.monthly_coupon == pytest.approx(991.67, abs=0.01)
    assert s.net_monthly_coupon == pytest.approx(892.50, abs=0.01)
