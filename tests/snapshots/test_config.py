from pathlib import Path

import pytest

from sync.config import SyncConfig, pool_size_from_env
from sync.resources import RESOURCES, ResourceSpec, get_resource


def test_pool_size_defaults_to_five():
    assert pool_size_from_env("ABILITIES_POOL", {}) == 5


def test_pool_size_read_from_resource_env_var():
    config = SyncConfig.for_resource(get_resource("moves"), environ={"MOVES_POOL": "12"})

    assert config.pool_size == 12
    assert config.base_dir == Path("public")


@pytest.mark.parametrize("raw", ["abc", "0", "-3", "  "])
def test_invalid_pool_size_falls_back_to_default(raw):
    assert pool_size_from_env("POKEMON_POOL", {"POKEMON_POOL": raw}) == 5


def test_explicit_pool_size_wins_over_env():
    config = SyncConfig.for_resource(
        get_resource("pokemon"),
        base_dir=Path("out"),
        pool_size=2,
        environ={"POKEMON_POOL": "9"},
    )

    assert config.pool_size == 2
    assert config.base_dir == Path("out")


def test_sync_config_rejects_non_positive_width():
    with pytest.raises(ValueError):
        SyncConfig(pool_size=0)


def test_resource_table_matches_published_layout():
    abilities = get_resource("abilities")

    assert abilities.manifest_path == "abilities/manifest.json"
    assert abilities.snapshot_file("2026-02-21") == "ability_map.2026-02-21.json"
    assert abilities.snapshot_url("ability_map.2026-02-21.json") == "/abilities/ability_map.2026-02-21.json"
    assert RESOURCES["moves"].url_key == "moves_url"
    assert RESOURCES["moves"].file_prefix == "move_es_map"
    assert RESOURCES["pokemon"].endpoint == "pokemon"


def test_file_name_from_url_takes_last_segment():
    assert ResourceSpec.file_name_from_url("/abilities/ability_map.2026-02-21.json") == (
        "ability_map.2026-02-21.json"
    )


def test_unknown_resource_is_rejected():
    with pytest.raises(KeyError):
        get_resource("berries")
