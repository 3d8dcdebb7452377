import json
import os

import pytest

from sitecms.errors import ConflictError, NotFoundError, PathTraversalError, StorageError
from sitecms.infra import content_repo


@pytest.mark.parametrize(
    "item_id",
    ["../../etc/passwd", "/etc/passwd", "a/../../escape", "../x", "../skills-evil", "x\x00y", ""],
)
def test_traversal_ids_are_rejected(tmp_path, item_id):
    root = tmp_path / "skills"
    with pytest.raises(PathTraversalError):
        content_repo.create_item(root, item_id, ".json", "{}")
    assert not root.exists()


def test_resolve_keeps_nested_ids_inside(tmp_path):
    root = tmp_path / "skills"
    p = content_repo.resolve_item_path(root, "lang/python", ".json")
    assert p == os.path.join(str(root), "lang", "python.json")
    assert content_repo.resolve_item_path(root, "a/../b", ".json") == os.path.join(str(root), "b.json")


def test_sibling_directory_with_same_prefix_is_outside(tmp_path):
    root = tmp_path / "posts"
    with pytest.raises(PathTraversalError):
        content_repo.resolve_item_path(root, "../posts2/x", ".md")


def test_create_update_delete(tmp_path):
    root = tmp_path / "skills"
    content_repo.create_item(root, "lang/python", ".json", content_repo.dump_json({"level": 3}))
    assert json.loads((root / "lang" / "python.json").read_text(encoding="utf-8")) == {"level": 3}

    with pytest.raises(ConflictError):
        content_repo.create_item(root, "lang/python", ".json", "{}")

    content_repo.update_item(root, "lang/python", ".json", content_repo.dump_json({"level": 5}))
    assert content_repo.read_item(root, "lang/python", ".json", json.loads) == {"level": 5}

    content_repo.delete_item(root, "lang/python", ".json")
    assert not (root / "lang" / "python.json").exists()
    # parent directories are left in place
    assert (root / "lang").is_dir()


def test_update_and_delete_require_existing_file(tmp_path):
    root = tmp_path / "skills"
    with pytest.raises(NotFoundError):
        content_repo.update_item(root, "nope", ".json", "{}")
    with pytest.raises(NotFoundError):
        content_repo.delete_item(root, "nope", ".json")
    with pytest.raises(NotFoundError):
        content_repo.read_item(root, "nope", ".json", json.loads)
    assert not (root / "nope.json").exists()


def test_list_recursive_tolerates_bad_files(tmp_path):
    root = tmp_path / "projects"
    (root / "web" / "2024").mkdir(parents=True)
    (root / "a.json").write_text('{"name": "a"}', encoding="utf-8")
    (root / "web" / "b.json").write_text('{"name": "b"}', encoding="utf-8")
    (root / "web" / "2024" / "broken.json").write_text("{oops", encoding="utf-8")
    (root / "notes.txt").write_text("ignored", encoding="utf-8")

    items = content_repo.list_recursive(root, ".json", json.loads)
    assert items == [
        ("a", {"name": "a"}),
        ("web/2024/broken", None),
        ("web/b", {"name": "b"}),
    ]


def test_list_recursive_missing_root(tmp_path):
    assert content_repo.list_recursive(tmp_path / "missing", ".json", json.loads) == []


@pytest.mark.parametrize("raw", ['{"v": NaN}', '{"v": Infinity}', "[-Infinity]"])
def test_load_json_rejects_non_finite(raw):
    with pytest.raises(ValueError):
        content_repo.load_json(raw)


def test_dump_json_rejects_non_finite():
    with pytest.raises(ValueError):
        content_repo.dump_json({"v": float("nan")})


def test_non_finite_file_lists_as_none(tmp_path):
    root = tmp_path / "skills"
    root.mkdir()
    (root / "bad.json").write_text('{"v": NaN}', encoding="utf-8")
    (root / "ok.json").write_text('{"v": 1}', encoding="utf-8")
    assert content_repo.list_recursive(root, ".json", content_repo.load_json) == [
        ("bad", None),
        ("ok", {"v": 1}),
    ]


def test_list_recursive_skips_symlinks(tmp_path):
    root = tmp_path / "projects"
    root.mkdir()
    (root / "a.json").write_text('{"n": 1}', encoding="utf-8")
    outside = tmp_path / "secret.json"
    outside.write_text('{"leak": true}', encoding="utf-8")
    try:
        os.symlink(root, root / "loop")
        os.symlink(outside, root / "linked.json")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not available")

    assert content_repo.list_recursive(root, ".json", content_repo.load_json) == [("a", {"n": 1})]


def test_read_item_non_utf8_is_storage_error(tmp_path):
    root = tmp_path / "diary"
    root.mkdir()
    (root / "latin1.json").write_bytes(b'{"t": "caf\xe9"}')
    with pytest.raises(StorageError):
        content_repo.read_item(root, "latin1", ".json", content_repo.load_json)


def test_services_map_non_finite_writes_to_validation_error(tmp_path):
    from sitecms.errors import ValidationError
    from sitecms.services import content_service

    with pytest.raises(ValidationError):
        content_service.create_content(content_dir=tmp_path, content_type="skills", item_id="x", data={"v": float("nan")})
    with pytest.raises(ValidationError):
        content_service.create_post(content_dir=tmp_path, item_id="x", frontmatter={"v": float("inf")}, content="")
    assert list(tmp_path.iterdir()) == []
