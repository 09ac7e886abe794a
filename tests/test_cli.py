from typer.testing import CliRunner

from popsim.cli import app

runner = CliRunner()


def test_run_command(config_dir, tmp_path):
    result = runner.invoke(
        app,
        [
            "run",
            str(config_dir / "malthusian.yaml"),
            "simulation.time.t1=2",
            "-o",
            str(tmp_path),
            "--quiet",
        ],
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "malthusian.svg").exists()
    assert (tmp_path / "trace.npz").exists()


def test_missing_config_fails(tmp_path):
    result = runner.invoke(app, ["run", str(tmp_path / "missing.yaml"), "--quiet"])
    assert result.exit_code == 1


def test_invalid_resolution_fails(config_dir, tmp_path):
    result = runner.invoke(
        app,
        [
            "run",
            str(config_dir / "malthusian.yaml"),
            "simulation.time.min_resolution=0",
            "-o",
            str(tmp_path),
            "--quiet",
        ],
    )
    assert result.exit_code == 1
    assert "must be positive" in result.output


def test_models_command():
    result = runner.invoke(app, ["models"])
    assert result.exit_code == 0
    assert "logistic" in result.output
    assert "allee" in result.output
