"""CLI tests (``input_spider.cli``) using click.testing.CliRunner.
The crawl itself is replaced by a fake ``start_scan``.
"""
import asyncio
import importlib
import json
import logging

import pytest
from click.testing import CliRunner

from input_spider.cli import cli
from input_spider.crawler.models import InputRecord
from input_spider.report.text_report import TextReport

# the package re-exports the click command under the module name
cli_module = importlib.import_module("input_spider.cli")


@pytest.fixture(autouse=True)
def fake_scan(monkeypatch):
    """Patch start_scan so no network is touched; the config it got is recorded."""
    calls = []

    async def _fake(cfg):
        calls.append(cfg)
        report = TextReport()
        report.emit(InputRecord(cfg.seeds[0], [{"name": "q", "type": "text"}]))
        return report.records

    monkeypatch.setattr(cli_module, "start_scan", _fake)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "InputSpider" in result.output


def test_no_seed_prints_usage_and_exits_1(fake_scan):
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 1
    assert "Usage:" in result.output
    assert "At least one seed URL is required" in result.output
    assert fake_scan == []


def test_invalid_seed_exits_1(fake_scan):
    result = CliRunner().invoke(cli, ["--urls", "www.example.com"])
    assert result.exit_code == 1
    assert "Invalid URL provided" in result.output
    assert fake_scan == []


def test_missing_url_file_exits_1(tmp_path, fake_scan):
    result = CliRunner().invoke(cli, ["--url-file", str(tmp_path / "missing.txt")])
    assert result.exit_code == 1
    assert "Unable to open the file" in result.output
    assert fake_scan == []


def test_urls_and_url_file_are_combined(tmp_path, fake_scan):
    seed_file = tmp_path / "urls.txt"
    seed_file.write_text("http://c.com/\n", encoding="utf-8")
    result = CliRunner().invoke(
        cli, ["-u", "http://a.com/,http://b.com/#top", "-f", str(seed_file), "-n", "0"]
    )
    assert result.exit_code == 0, result.output
    (cfg,) = fake_scan
    assert cfg.seeds == ["http://a.com/", "http://b.com/", "http://c.com/"]
    assert cfg.limit == 1
    assert cfg.verify_tls is False


def test_results_printed_to_stdout(fake_scan):
    result = CliRunner().invoke(cli, ["--urls", "http://example.com/"])
    assert result.exit_code == 0
    assert result.output == '[http://example.com/]\n\t<input name="q" type="text"></input>\n\n'


def test_config_file_and_overrides(tmp_path, fake_scan):
    cfg_file = tmp_path / "spider.json"
    cfg_file.write_text(
        json.dumps({"seeds": ["http://example.com/"], "concurrency": 4, "timeout": 2.0}),
        encoding="utf-8",
    )
    result = CliRunner().invoke(
        cli, ["--config", str(cfg_file), "--timeout", "7", "--user-agent", "Probe/2", "--verify-tls"]
    )
    assert result.exit_code == 0, result.output
    (cfg,) = fake_scan
    assert cfg.seeds == ["http://example.com/"]
    assert cfg.limit == 50
    assert cfg.timeout == 7.0
    assert cfg.user_agent == "Probe/2"
    assert cfg.verify_tls is True


@pytest.mark.parametrize("flags,level", [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)])
def test_verbosity_levels(flags, level):
    result = CliRunner().invoke(cli, [*flags, "--urls", "http://example.com/"])
    assert result.exit_code == 0
    assert logging.getLogger("InputSpider").level == level


def test_scan_timeout(monkeypatch):
    async def never_ends(cfg):
        await asyncio.sleep(10)

    monkeypatch.setattr(cli_module, "start_scan", never_ends)
    result = CliRunner().invoke(cli, ["--urls", "http://example.com/", "--scan-timeout", "0.1"])
    assert result.exit_code == 1
    assert "did not finish within 0.1 seconds" in result.output
