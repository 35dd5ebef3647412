import json

import pytest

from gambiteditor.session import EditingSession
from gambiteditor.storage import FileSurface, atomic_write_text, read_text


def test_atomic_write_creates_file_and_parent(tmp_path):
    target = tmp_path / "packs" / "sprites.json"
    assert atomic_write_text(str(target), "{}", backup=True) is None
    assert target.read_text(encoding="utf-8") == "{}"
    assert [p.name for p in target.parent.iterdir()] == ["sprites.json"]


def test_atomic_write_backs_up_existing_file(tmp_path):
    target = tmp_path / "sprites.json"
    target.write_text("old", encoding="utf-8")

    backup = atomic_write_text(str(target), "new", backup=True)

    assert backup == str(target) + ".bak"
    assert read_text(backup) == "old"
    assert read_text(str(target)) == "new"


def test_atomic_write_without_backup(tmp_path):
    target = tmp_path / "sprites.json"
    target.write_text("old", encoding="utf-8")
    assert atomic_write_text(str(target), "new", backup=False) is None
    assert not (tmp_path / "sprites.json.bak").exists()


def test_atomic_write_failure_raises_runtime_error(tmp_path):
    target = tmp_path / "dir_in_the_way"
    target.mkdir()
    with pytest.raises(RuntimeError):
        atomic_write_text(str(target), "text", backup=False)
    assert [p.name for p in tmp_path.iterdir()] == ["dir_in_the_way"]


def test_file_surface_session_edit_and_save(tmp_path, pack_text, catalog):
    path = tmp_path / "sprites.json"
    path.write_text(pack_text, encoding="utf-8")
    surface = FileSurface(str(path))
    session = EditingSession(surface, catalog)
    session.load()
    assert not surface.dirty

    session.toggle_enabled(session.monster("Wind Sprite").handles[1])
    assert surface.dirty
    assert path.read_text(encoding="utf-8") == pack_text

    surface.save(backup=False)
    assert not surface.dirty
    saved = json.loads(path.read_text(encoding="utf-8"))
    restored = saved["sprites"]["Wind Sprite"]["gambitPack"]["timeLines"][1]
    assert restored["condition"] == "TopHateTarget"
    assert restored["actionId"] == 13
    assert "originalCondition" not in restored


def test_sync_without_changes_keeps_surface_clean(tmp_path, pack_text):
    path = tmp_path / "sprites.json"
    path.write_text(pack_text, encoding="utf-8")
    surface = FileSurface(str(path))
    session = EditingSession(surface)
    session.load()
    session.sync()
    assert not surface.dirty


def test_export_writes_elsewhere(tmp_path, pack_text):
    path = tmp_path / "sprites.json"
    path.write_text(pack_text, encoding="utf-8")
    surface = FileSurface(str(path))
    surface.set_current_text("{}")

    out = tmp_path / "export" / "copy.json"
    surface.export(str(out))

    assert out.read_text(encoding="utf-8") == "{}"
    assert surface.path == str(path)
    assert surface.dirty
