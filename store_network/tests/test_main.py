"""Tests for the command-line entry point."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network import main as cli
from store_network.tests.samples import FakeClient


class TestRun:
    """Tests for run()."""

    def test_run_with_export(self, monkeypatch, tmp_path):
        """Test a successful run exports CSV files."""
        client = FakeClient()
        monkeypatch.setattr(cli, "NetworkApiClient", lambda **kwargs: client)

        code = cli.run(export_dir=tmp_path, top=2)

        assert code == 0
        assert (tmp_path / "stores.csv").exists()
        assert client.closed

    def test_run_failure(self, monkeypatch, tmp_path):
        """Test a failed core feed exits with 1 and exports nothing."""
        client = FakeClient(failing=("cities",))
        monkeypatch.setattr(cli, "NetworkApiClient", lambda **kwargs: client)

        code = cli.run(export_dir=tmp_path)

        assert code == 1
        assert not (tmp_path / "stores.csv").exists()
        assert client.closed
