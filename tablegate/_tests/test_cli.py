from typer.testing import CliRunner

from .. import __version__
from ..commandline._serve import _setup_log_config
from ..commandline.main import cli_app
from ..server.logging_config import LOGGING_CONFIG

runner = CliRunner()


def test_version():
    result = runner.invoke(cli_app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_serve_config_missing_file(tmpdir):
    result = runner.invoke(cli_app, ["serve", "config", str(tmpdir / "nope.yml")])
    assert result.exit_code != 0


def test_log_timestamps():
    log_config = _setup_log_config(None, True)
    assert log_config["formatters"]["default"]["format"].startswith("[%(asctime)s")
    # The default configuration is left alone.
    assert "asctime" not in LOGGING_CONFIG["formatters"]["default"]["format"]
    assert _setup_log_config(None, False) is LOGGING_CONFIG
