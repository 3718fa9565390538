"""Smoke tests for the table and chart entry points."""

import sys

import pytest
from manoeuvre_sim import ManoeuvreParams, simulate, simulate_baseline
from manoeuvre_sim import chart_cli, charts, cli
from manoeuvre_sim.charts import plot_account_stack, plot_trajectory


@pytest.fixture(autouse=True)
def _no_config(tmp_path, monkeypatch):
    # config.toml is looked up in the working directory
    monkeypatch.chdir(tmp_path)


class TestCli:

    def test_prints_table_and_summary(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["manoeuvre-sim", "--years", "20", "--detail", "1"])
        cli.main()
        out = capsys.readouterr().out
        assert "1,056,249" in out
        assert "334,751" in out
        assert "Manoeuvre payoff:   year 13" in out
        assert "[Year 1 detail]" in out

    def test_invalid_parameter_exits(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["manoeuvre-sim", "--principal", "0"])
        with pytest.raises(SystemExit) as exc:
            cli.main()
        assert exc.value.code == 1
        assert "principal" in capsys.readouterr().err

    def test_unknown_scenario_in_config_exits(self, tmp_path, monkeypatch):
        (tmp_path / "config.toml").write_text('scenario = "crash-1929"\n')
        monkeypatch.setattr(sys, "argv", ["manoeuvre-sim"])
        with pytest.raises(SystemExit):
            cli.main()

    def test_detail_out_of_range(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["manoeuvre-sim", "--years", "20", "--detail", "21"])
        with pytest.raises(SystemExit):
            cli.main()


class TestCharts:

    def setup_method(self):
        self.params = ManoeuvreParams()
        self.ledger = simulate(self.params, 20)

    def test_trajectory(self, tmp_path):
        path = plot_trajectory(self.ledger, tmp_path / "charts", name="20",
                               baseline=simulate_baseline(self.params, 20))
        assert path.name == "trajectory-20.png"
        assert path.exists()

    def test_account_stack(self, tmp_path):
        path = plot_account_stack(self.ledger, tmp_path)
        assert path.name == "accounts.png"
        assert path.exists()

    def test_empty_ledger(self, tmp_path):
        with pytest.raises(ValueError):
            plot_trajectory((), tmp_path)

    def test_payoff_marker_uses_comparison_payoff(self, tmp_path, monkeypatch):
        calls = []
        real = charts.calc_manoeuvre_payoff

        def recording(ledger):
            result = real(ledger)
            calls.append(result)
            return result

        monkeypatch.setattr(charts, "calc_manoeuvre_payoff", recording)
        plot_trajectory(self.ledger, tmp_path)
        assert [c.year for c in calls] == [13]
        assert calls[0].paid_off

    def test_trajectory_before_payoff(self, tmp_path):
        path = plot_trajectory(simulate(self.params, 10), tmp_path, name="10")
        assert path.exists()

    def test_chart_cli(self, tmp_path, monkeypatch):
        out = tmp_path / "out"
        monkeypatch.setattr(sys, "argv", ["manoeuvre-chart", "--output", str(out), "--scenario", "crash-2008"])
        chart_cli.main()
        assert (out / "trajectory.png").exists()
        assert (out / "accounts.png").exists()
