from click.testing import CliRunner

from uploads_api.cli import cli
from uploads_api.config.settings import get_settings


def test_show_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "files"))
    monkeypatch.delenv("S3_BUCKET_NAME", raising=False)
    get_settings.cache_clear()
    try:
        result = CliRunner().invoke(cli, ["show-config"])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 0, result.output
    assert "backend_mode: local" in result.output
    assert f"upload_dir: {tmp_path / 'files'}" in result.output
