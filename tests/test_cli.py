import logging

import pytest

from voxland import cli
from voxland.config import BLOCK_SIZE, CHUNK_WIDTH, DEFAULT_CHUNK_COUNT, DEFAULT_SEED
from voxland.world.chunk_grid import GenerationParams


def test_defaults_map_to_generation_params():
    params = cli.build_params(cli._parse_args([]))
    assert params == GenerationParams()
    assert params.seed == DEFAULT_SEED
    assert params.chunk_count == DEFAULT_CHUNK_COUNT
    assert params.chunk_width == CHUNK_WIDTH
    assert params.block_size == BLOCK_SIZE


def test_flags_override_every_field():
    args = cli._parse_args([
        "--seed", "9", "--chunks", "2", "--chunk-width", "8", "--chunk-height", "16",
        "--chunk-depth", "4", "--block-size", "1.5", "--noise-scale", "20",
        "--height-min", "1", "--height-max", "9", "--noise", "fast",
    ])
    assert cli.build_params(args) == GenerationParams(
        chunk_count=2, chunk_width=8, chunk_height=16, chunk_depth=4, block_size=1.5,
        seed=9, noise_scale=20.0, height_min=1.0, height_max=9.0, noise="fast",
    )


def test_random_seed():
    params = cli.build_params(cli._parse_args(["--seed", "random"]))
    assert 0 <= params.seed < 2**32


def test_unknown_noise_is_rejected():
    with pytest.raises(SystemExit):
        cli._parse_args(["--noise", "perlin"])


def test_headless_run_logs_summary(caplog, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kw: None)
    called = []
    monkeypatch.setattr(cli, "run_app", lambda *a, **kw: called.append(a))
    with caplog.at_level(logging.INFO, logger="voxland"):
        cli.main(["--chunks", "1", "--chunk-width", "8", "--chunk-height", "8", "--chunk-depth", "8"])
    assert not called
    assert any("chunks=1" in r.getMessage() for r in caplog.records)


def test_view_flag_starts_viewer(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kw: None)
    called = []
    monkeypatch.setattr(cli, "run_app", lambda grid, **kw: called.append((grid, kw)))
    cli.main(["--chunks", "1", "--chunk-width", "4", "--chunk-height", "4", "--chunk-depth", "4", "--view", "--seed", "3"])
    assert len(called) == 1
    grid, kw = called[0]
    assert len(grid) == 1
    assert kw["seed"] == 3
