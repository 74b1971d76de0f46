import pytest

from scaling_law.analysis import estimate_win_rate, plot_win_rates, sweep_levels


def test_estimate_win_rate_summary():
    report = estimate_win_rate(0, 60, seed=4)

    assert report.battles == 60
    assert 0.0 <= report.win_rate <= 1.0
    assert report.mean_rounds >= 1.0
    assert report.mean_gold == pytest.approx(10 + 40 * report.win_rate)
    assert report.event_counts["victory"] + report.event_counts["defeat"] == 60
    assert report.to_dict()["level"] == 0


def test_estimate_is_reproducible_with_seed():
    first = estimate_win_rate(1, 30, seed=9)
    second = estimate_win_rate(1, 30, seed=9)
    assert first == second


def test_estimate_requires_battles():
    with pytest.raises(ValueError):
        estimate_win_rate(0, 0)


def test_sweep_and_plot(tmp_path):
    reports = sweep_levels([0, 1, 2], 20, seed=1)
    assert [report.level for report in reports] == [0, 1, 2]

    target = tmp_path / "win_rates.png"
    plot_win_rates(reports, str(target))
    assert target.exists()
