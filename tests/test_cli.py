"""
Tests for the portfoliolab command-line interface.
"""

from __future__ import annotations

import importlib.util
import json

import pytest
from portfoliolab.cli import main

plotly_available = importlib.util.find_spec("plotly") is not None


def _run(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    out, err = capsys.readouterr()
    return excinfo.value.code, out, err


@pytest.fixture
def portfolio_file(tmp_path, capsys):
    code, out, _ = _run(["example"], capsys)
    assert code == 0
    path = tmp_path / "portfolio.json"
    path.write_text(out, encoding="utf-8")
    return path


def test_example_is_valid_json(capsys):
    code, out, _ = _run(["example"], capsys)

    assert code == 0
    doc = json.loads(out)
    assert doc["initiatives"][0]["activeStage"] == "l2"


def test_validate(portfolio_file, capsys):
    code, out, _ = _run(["validate", "-i", str(portfolio_file)], capsys)

    assert code == 0
    assert "1 initiatives across 1 workstreams" in out


def test_validate_reports_errors(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"initiatives": [{"id": "x"}]}), encoding="utf-8")

    code, _, err = _run(["validate", "-i", str(bad)], capsys)

    assert code == 1
    assert "missing activeStage" in err


def test_outlook_json(portfolio_file, capsys):
    code, out, _ = _run(
        ["outlook", "-i", str(portfolio_file), "--json", "--today", "2026-10-18"], capsys
    )

    assert code == 0
    view = json.loads(out)
    assert view["months"][0]["key"] == "2026-12"
    assert view["months"][-1]["key"] == "2027-12"
    assert view["totals"]["recurring_benefits"] == 2200.0
    assert view["totals"]["oneoff_costs"] == 2000.0
    assert view["impact"]["2027-01"] == 600.0
    assert view["roi"] == pytest.approx((2200.0 - 400.0 - 2000.0) / 2000.0)


def test_outlook_text_and_filters(portfolio_file, capsys):
    code, out, _ = _run(
        [
            "outlook",
            "-i",
            str(portfolio_file),
            "--exclude-oneoff",
            "--fiscal-start",
            "1",
            "--today",
            "2026-10-18",
        ],
        capsys,
    )

    assert code == 0
    assert "Recurring impact:   1,800" in out
    assert "ROI:                n/a" in out
    assert "FY2028: 1,800" in out


def test_outlook_stage_filter_excludes(portfolio_file, capsys):
    code, out, _ = _run(
        ["outlook", "-i", str(portfolio_file), "--stages", "l3", "--json", "--today", "2026-10-18"],
        capsys,
    )

    assert code == 0
    assert json.loads(out)["totals"]["recurring_benefits"] == 0.0


def test_actuals_to_file(portfolio_file, tmp_path, capsys):
    output = tmp_path / "actuals.json"

    code, out, _ = _run(
        ["actuals", "-i", str(portfolio_file), "-o", str(output), "--today", "2026-10-18"],
        capsys,
    )

    assert code == 0
    assert "Actuals saved" in out
    view = json.loads(output.read_text(encoding="utf-8"))
    assert view["actual"]["totals"]["recurring_benefits"] == 900.0
    assert view["actual"]["roi"] is None
    assert view["roi_delta"] is None


def test_invalid_fiscal_start(portfolio_file, capsys):
    code, _, err = _run(
        ["outlook", "-i", str(portfolio_file), "--fiscal-start", "13"], capsys
    )

    assert code == 1
    assert "fiscal_start_month" in err


@pytest.mark.skipif(not plotly_available, reason="Plotly is required for chart tests")
def test_chart_html(portfolio_file, tmp_path, capsys):
    output = tmp_path / "outlook.html"

    code, _, _ = _run(
        ["chart", "-i", str(portfolio_file), "-o", str(output), "--today", "2026-10-18"],
        capsys,
    )

    assert code == 0
    assert output.exists()
