"""End-to-end tests via main.py."""

import os
import shutil
import subprocess
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
MAIN = ROOT / "main.py"


def _run(args, cwd):
    return subprocess.run(
        [sys.executable, str(MAIN), *args],
        cwd=cwd,
        env={**os.environ, "SKIP_MLFLOW": "1"},
        capture_output=True,
        text=True,
        timeout=120,
    )


def test_direct_render(tmp_path):
    result = _run(["render", "--chunk-size=8", "--", "mandel.npy", "40x30", "-1.20,0.35", "-1,0.20"], tmp_path)
    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"

    image = np.load(tmp_path / "mandel.npy")
    assert image.shape == (30, 40)
    assert image.dtype == np.uint8


def test_direct_render_png(tmp_path):
    result = _run(["render", "--backend", "baseline", "--", "mandel.png", "20x15", "-2,1", "1,-1"], tmp_path)
    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"
    assert (tmp_path / "mandel.png").exists()


def test_bad_dimensions_are_reported(tmp_path):
    result = _run(["render", "--", "mandel.png", "40by30", "-1.20,0.35", "-1,0.20"], tmp_path)
    assert result.returncode == 1
    assert "error parsing image dimensions" in result.stderr
    assert not (tmp_path / "mandel.png").exists()


def test_bad_corner_is_reported(tmp_path):
    result = _run(["render", "--", "mandel.png", "40x30", "-1.20;0.35", "-1,0.20"], tmp_path)
    assert result.returncode == 1
    assert "upper left corner" in result.stderr


def test_missing_arguments(tmp_path):
    result = _run(["render", "mandel.png"], tmp_path)
    assert result.returncode == 2
    assert "required" in result.stderr


def test_task_id_requires_suite(tmp_path):
    result = _run(["sweep", str(ROOT / "tests" / "test_configs.yaml"), "--task-id", "0"], tmp_path)
    assert result.returncode == 1
    assert "--task-id requires --suite" in result.stderr


def test_tests_suite(tmp_path):
    """Run TESTS suite end-to-end - should complete without errors."""
    shutil.copy(ROOT / "tests" / "test_configs.yaml", tmp_path)
    result = _run(["sweep", "test_configs.yaml", "--suite", "TESTS"], tmp_path)

    assert result.returncode == 0, f"Suite failed:\n{result.stdout}\n{result.stderr}"
    assert "Successful: 4" in result.stdout
    assert (tmp_path / "out" / "tests.npy").exists()


def test_list_suites(tmp_path):
    result = _run(["sweep", str(ROOT / "tests" / "test_configs.yaml"), "--list-suites"], tmp_path)
    assert result.returncode == 0
    assert "TESTS: 4 configurations" in result.stdout
    assert "window: 2 configurations" in result.stdout


def test_repository_sweep_file_loads(tmp_path):
    result = _run(["sweep", str(ROOT / "configs" / "sweeps.yaml"), "--list-suites"], tmp_path)
    assert result.returncode == 0, result.stderr
    assert "chunks: 4 configurations" in result.stdout
