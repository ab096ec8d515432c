import logging
from pathlib import Path

import pytest

from sync.store import BlobFormatError, BlobNotFoundError, BlobReadError, JsonBlobStore


def test_write_is_pretty_printed_with_trailing_newline(tmp_path):
    store = JsonBlobStore(tmp_path)

    store.write("abilities/ability_map.2026-02-21.json", {"overgrow": {"display": "Espesura"}})

    text = (tmp_path / "abilities" / "ability_map.2026-02-21.json").read_text(encoding="utf-8")
    assert text == '{\n  "overgrow": {\n    "display": "Espesura"\n  }\n}\n'


def test_write_keeps_non_ascii_and_reads_back(tmp_path):
    store = JsonBlobStore(tmp_path)

    store.write("/moves/manifest.json", {"display": "Golpe Cabeza ñ"})

    assert "ñ" in (tmp_path / "moves" / "manifest.json").read_text(encoding="utf-8")
    assert store.read("moves/manifest.json") == {"display": "Golpe Cabeza ñ"}
    assert store.exists("moves/manifest.json")


def test_write_overwrites_whole_document_and_leaves_no_temp_file(tmp_path):
    store = JsonBlobStore(tmp_path)
    store.write("pokemon/manifest.json", {"version": "2026-01-01", "pokemon_url": "/pokemon/a.json"})

    store.write("pokemon/manifest.json", {"version": "2026-02-21"})

    assert store.read("pokemon/manifest.json") == {"version": "2026-02-21"}
    assert sorted(p.name for p in (tmp_path / "pokemon").iterdir()) == ["manifest.json"]


def test_read_missing_raises_not_found(tmp_path):
    store = JsonBlobStore(tmp_path)

    with pytest.raises(BlobNotFoundError):
        store.read("abilities/manifest.json")
    assert not store.exists("abilities/manifest.json")


def test_read_invalid_json_raises_format_error(tmp_path):
    (tmp_path / "manifest.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(BlobFormatError):
        JsonBlobStore(tmp_path).read("manifest.json")


def test_read_undecodable_bytes_raises_format_error(tmp_path):
    (tmp_path / "manifest.json").write_bytes(b'{"a": "\xff\xfe"}')

    with pytest.raises(BlobFormatError):
        JsonBlobStore(tmp_path).read("manifest.json")


def test_read_directory_raises_read_error(tmp_path):
    (tmp_path / "manifest.json").mkdir()

    with pytest.raises(BlobReadError):
        JsonBlobStore(tmp_path).read("manifest.json")


def test_failed_write_leaves_no_temp_file_and_no_target(tmp_path):
    store = JsonBlobStore(tmp_path)

    with pytest.raises(TypeError):
        store.write("abilities/ability_map.2026-02-21.json", {"stench": object()})

    assert list((tmp_path / "abilities").iterdir()) == []


def test_delete_missing_is_a_no_op(tmp_path):
    assert JsonBlobStore(tmp_path).delete("abilities/gone.json") is False


def test_delete_removes_file(tmp_path):
    store = JsonBlobStore(tmp_path)
    store.write("abilities/old.json", {})

    assert store.delete("abilities/old.json") is True
    assert not store.exists("abilities/old.json")


def test_delete_failure_is_logged_not_raised(tmp_path, monkeypatch, caplog):
    store = JsonBlobStore(tmp_path)
    store.write("abilities/old.json", {})

    def refuse(self, missing_ok=False):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(Path, "unlink", refuse)

    with caplog.at_level(logging.WARNING):
        assert store.delete("abilities/old.json") is False

    assert "read-only filesystem" in caplog.text


def test_paths_cannot_escape_the_base_dir(tmp_path):
    with pytest.raises(ValueError):
        JsonBlobStore(tmp_path / "public").write("../outside.json", {})
