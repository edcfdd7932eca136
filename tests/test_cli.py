"""Tests for the CLI entry point."""

import pytest
from loguru import logger

from minhland_ads.cli import main


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.setenv("MINHLAND_DOCSTORE_PATH", str(tmp_path / "docs.json"))
    monkeypatch.delenv("MINHLAND_LIVE_MODE", raising=False)
    yield
    logger.remove()


class TestCli:
    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage" in capsys.readouterr().out.lower()

    def test_status(self, capsys):
        main(["status"])
        out = capsys.readouterr().out
        assert "Live mode: False" in out
        assert "Zalo:      not configured" in out

    def test_records_empty(self, capsys):
        main(["records"])
        assert "Records: 0" in capsys.readouterr().out

    def test_publish_to_unknown_row_fails(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([
                "publish", "--row", "2", "--ad-id", "AD-1", "--name", "An",
                "--mobile", "0901", "--content", "Bán nhà", "--platforms", "facebook",
            ])
        assert excinfo.value.code == 1
        assert "Failed to update sheet row 2" in capsys.readouterr().err

    def test_audit_after_failed_publish(self, capsys):
        with pytest.raises(SystemExit):
            main([
                "publish", "--row", "2", "--ad-id", "AD-1", "--name", "An",
                "--mobile", "0901", "--content", "Bán nhà", "--platforms", "facebook",
            ])
        capsys.readouterr()
        main(["audit", "--ad-id", "AD-1"])
        out = capsys.readouterr().out
        assert "Audit entries: 1" in out
        assert "AD-1_facebook" in out
