"""Unit tests for the calc_removal command line entry point."""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "calc_removal.py"


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("calc_removal_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_even_focal_window_is_a_usage_error(cli, tmp_path):
    with patch.object(cli, "BundleRepository") as repository:
        result = CliRunner().invoke(
            cli.app, [str(tmp_path), str(tmp_path / "out"), "--focal-window", "4"]
        )

    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
    repository.assert_not_called()
