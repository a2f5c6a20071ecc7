import logging

import pytest

from speakercleaner import __version__, cli


def test_cli_parse_args():
    args = cli.parse_args(
        ["--headless", "--max-runtime", "2", "--size", "480x800", "--fps", "60"]
    )
    assert args.headless is True
    assert args.max_runtime == 2.0
    assert args.size == (480, 800)
    assert args.fps == 60.0
    assert args.log_level is None


def test_cli_defaults():
    args = cli.parse_args([])
    assert args.headless is False
    assert args.max_runtime is None
    assert args.size is None


@pytest.mark.parametrize(
    "argv",
    [["--size", "big"], ["--max-runtime", "0"], ["--max-runtime", "soon"]],
)
def test_cli_rejects_bad_arguments(argv):
    with pytest.raises(SystemExit):
        cli.parse_args(argv)


def test_cli_version(capsys):
    cli.main(["--version"])
    assert capsys.readouterr().out.strip() == f"Speaker Cleaner {__version__}"


def test_cli_invalid_config_exits_with_2(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--headless", "--size", "10x10"])
    assert exc.value.code == 2
    assert "invalid configuration" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_cli_headless_run(capsys):
    # Real clock, cut short so the test stays fast
    await cli.run_async(["--headless", "--max-runtime", "0.05"])
    out = capsys.readouterr().out
    assert "Cleaning started (30s)" in out
    assert "Cleaning stopped (app left the foreground)" in out


def test_cli_max_runtime_requires_headless(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(["--max-runtime", "5"])
    assert exc.value.code == 2
    assert "--max-runtime requires --headless" in capsys.readouterr().err


def test_cli_configures_logging_with_numeric_level(monkeypatch):
    levels = []
    ran = []

    async def fake_run_async(argv=None, *, rc=None):
        ran.append(rc.settings.log_level)

    monkeypatch.delenv("SPEAKERCLEANER_LOG_LEVEL", raising=False)
    monkeypatch.setattr(cli, "configure_logging", levels.append)
    monkeypatch.setattr(cli, "run_async", fake_run_async)
    cli.main(["--headless", "--log-level", "debug"])
    assert levels == [logging.DEBUG]
    assert ran == ["DEBUG"]
