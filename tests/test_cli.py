"""Tests for the command line entry point."""

import logging

import pytest

from dcasweep.cli import build_parser, load_settings, main

WINDOW_ARGS = ["--purchase-period", "2", "--hold-period", "1", "--sell-period", "2"]


class TestMain:
    """Test main()."""

    def test_runs_sweep(self, sample_csv, capsys):
        """Test report is printed for a valid file."""
        assert main([str(sample_csv)] + WINDOW_ARGS) == 0

        out = capsys.readouterr().out
        assert "Worst annualized result:" in out
        assert "Results meeting expectations: 1" in out

    def test_writes_outputs(self, sample_csv, tmp_path):
        """Test report and window CSV files."""
        report = tmp_path / "report.txt"
        windows = tmp_path / "windows.csv"
        args = [str(sample_csv), "--output", str(report), "--windows-csv", str(windows)]

        assert main(args + WINDOW_ARGS) == 0
        assert "Results meeting expectations" in report.read_text(encoding="utf-8")
        assert windows.read_text(encoding="utf-8").startswith("start_index,")

    def test_data_file_from_environment(self, sample_csv, monkeypatch, capsys):
        """Test data file can come from DCA_DATA_FILE_PATH."""
        monkeypatch.setenv("DCA_DATA_FILE_PATH", str(sample_csv))
        assert main(WINDOW_ARGS) == 0

    def test_verbose(self, sample_csv, caplog):
        """Test every trade is logged in verbose mode."""
        caplog.set_level(logging.INFO)
        assert main([str(sample_csv), "--verbose"] + WINDOW_ARGS) == 0
        assert "shares bought at 100.0 per share" in caplog.text
        assert "shares held for 1 months" in caplog.text

    def test_missing_file(self, tmp_path):
        """Test missing data file exits with an error."""
        assert main([str(tmp_path / "missing.csv")] + WINDOW_ARGS) == 1

    def test_insufficient_data(self, sample_csv):
        """Test too short series exits with an error."""
        assert main([str(sample_csv)]) == 1

    def test_bad_record(self, tmp_path, caplog):
        """Test malformed record aborts the run."""
        path = tmp_path / "bad.csv"
        path.write_text("2000-01,100\n2000-02,x\n", encoding="utf-8")

        assert main([str(path)] + WINDOW_ARGS) == 1
        assert "Line 2" in caplog.text

    def test_invalid_settings(self, sample_csv):
        """Test invalid phase length exits with usage error."""
        assert main([str(sample_csv), "--purchase-period", "0"]) == 2

    def test_no_data_file(self):
        """Test data file is required."""
        assert main(WINDOW_ARGS) == 2


def test_load_settings_ignores_unset_arguments(monkeypatch):
    """Test only given arguments override the environment."""
    monkeypatch.setenv("DCA_HOLD_PERIOD", "7")
    args = build_parser().parse_args(["data.csv", "--sell-period", "4"])
    settings = load_settings(args)

    assert settings.data_file_path == "data.csv"
    assert settings.hold_period == 7
    assert settings.sell_period == 4
    assert settings.verbose is False


def test_invalid_utf8_exits_with_error(tmp_path, caplog):
    """Test undecodable input aborts with the line number."""
    path = tmp_path / "bad.csv"
    path.write_bytes(b"2000-01,100\n2000-02,1\xff0\n2000-03,100\n")

    assert main([str(path)] + WINDOW_ARGS) == 1
    assert "Line 2" in caplog.text


def test_overflowing_price_exits_with_error(tmp_path):
    """Test a price overflowing to infinity aborts the run."""
    path = tmp_path / "overflow.csv"
    path.write_text("2000-01,100\n2000-02,1e400\n2000-03,100\n", encoding="utf-8")

    args = ["--purchase-period", "1", "--hold-period", "0", "--sell-period", "1"]
    assert main([str(path)] + args) == 1


def test_invalid_log_level(sample_csv):
    """Test unknown log level is a configuration error."""
    assert main([str(sample_csv), "--log-level", "verbose"] + WINDOW_ARGS) == 2
