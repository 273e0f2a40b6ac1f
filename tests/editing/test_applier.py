"""Tests for the ActionApplier."""

import os
import threading
from unittest.mock import patch

import pytest

from live_editor.editing.actions import (
    CreateAction,
    DeleteAction,
    UnknownAction,
    UpdateAction,
)
from live_editor.editing.applier import ActionApplier, ApplyStatus
from live_editor.editing.paths import PathNormalizer


@pytest.fixture
def root(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "components").mkdir()
    (src / "components" / "SidePanel.tsx").write_text("panel", encoding="utf-8")
    (src / "App.tsx").write_text("old app", encoding="utf-8")
    return src


@pytest.fixture
def applier(root):
    return ActionApplier(PathNormalizer(str(root), ["SidePanel.tsx"]))


class TestCreateUpdate:
    def test_update_replaces_whole_file(self, applier, root):
        results = applier.apply([UpdateAction(path="src/App.tsx", content="X")])
        assert [r.status for r in results] == [ApplyStatus.APPLIED]
        assert (root / "App.tsx").read_text(encoding="utf-8") == "X"

    def test_create_makes_parent_dirs(self, applier, root):
        applier.apply([CreateAction(path="pages/admin/Users.tsx", content="users")])
        assert (root / "pages" / "admin" / "Users.tsx").read_text(encoding="utf-8") == "users"

    def test_update_is_idempotent(self, applier, root):
        action = UpdateAction(path="App.tsx", content="same\ncontent\n")
        applier.apply([action])
        first = (root / "App.tsx").read_bytes()
        applier.apply([action])
        assert (root / "App.tsx").read_bytes() == first

    def test_no_temp_file_left_behind(self, applier, root):
        applier.apply([UpdateAction(path="App.tsx", content="new")])
        assert sorted(os.listdir(root)) == ["App.tsx", "components"]

    def test_write_failure_recorded(self, applier, root):
        with patch("live_editor.editing.applier.os.replace",
                   side_effect=PermissionError("read-only")):
            results = applier.apply([UpdateAction(path="App.tsx", content="new")])
        assert results[0].status == ApplyStatus.FAILED
        assert "read-only" in results[0].reason
        assert (root / "App.tsx").read_text(encoding="utf-8") == "old app"
        assert not (root / "App.tsx.live_editor_tmp").exists()

    def test_unencodable_content_fails_only_that_action(self, applier, root):
        results = applier.apply([
            CreateAction(path="a.ts", content="\ud800"),
            CreateAction(path="b.ts", content="ok"),
        ])
        assert [r.status for r in results] == [ApplyStatus.FAILED, ApplyStatus.APPLIED]
        assert (root / "b.ts").read_text(encoding="utf-8") == "ok"
        assert not (root / "a.ts").exists()
        assert not (root / "a.ts.live_editor_tmp").exists()


class TestDelete:
    def test_delete_existing(self, applier, root):
        results = applier.apply([DeleteAction(path="App.tsx")])
        assert results[0].status == ApplyStatus.APPLIED
        assert not (root / "App.tsx").exists()

    def test_delete_missing_is_applied(self, applier):
        results = applier.apply([DeleteAction(path="never/existed.ts")])
        assert results[0].status == ApplyStatus.APPLIED
        assert results[0].reason == "already absent"

    def test_delete_directory_fails(self, applier, root):
        (root / "pages").mkdir()
        results = applier.apply([DeleteAction(path="pages")])
        assert results[0].status == ApplyStatus.FAILED
        assert (root / "pages").is_dir()


class TestGuards:
    @pytest.mark.parametrize("action", [
        UpdateAction(path="components/SidePanel.tsx", content="hacked"),
        CreateAction(path="src/components/SidePanel.tsx", content="hacked"),
        DeleteAction(path="components/SidePanel.tsx"),
    ])
    def test_protected_file_untouched(self, applier, root, action):
        results = applier.apply([action])
        assert results[0].status == ApplyStatus.SKIPPED
        assert "protected" in results[0].reason
        assert (root / "components" / "SidePanel.tsx").read_text(encoding="utf-8") == "panel"

    def test_escape_skipped_without_filesystem_call(self, applier, tmp_path):
        with patch("live_editor.editing.applier.os.makedirs") as makedirs, \
                patch("live_editor.editing.applier.open", create=True) as fake_open, \
                patch("live_editor.editing.applier.os.remove") as remove:
            results = applier.apply([
                UpdateAction(path="../../etc/passwd", content="root::0:0"),
                DeleteAction(path="/etc/passwd"),
            ])
        assert [r.status for r in results] == [ApplyStatus.SKIPPED, ApplyStatus.SKIPPED]
        makedirs.assert_not_called()
        fake_open.assert_not_called()
        remove.assert_not_called()
        assert not (tmp_path / "etc").exists()

    def test_nul_byte_path_skipped_rest_of_batch_applied(self, applier, root):
        results = applier.apply([
            UpdateAction(path="a\x00b.ts", content="x"),
            UpdateAction(path="c.ts", content="c"),
        ])
        assert [r.status for r in results] == [ApplyStatus.SKIPPED, ApplyStatus.APPLIED]
        assert (root / "c.ts").read_text(encoding="utf-8") == "c"

    def test_symlink_to_protected_file_untouched(self, applier, root):
        try:
            os.symlink(root / "components" / "SidePanel.tsx", root / "alias.tsx")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        results = applier.apply([UpdateAction(path="alias.tsx", content="hacked")])
        assert results[0].status == ApplyStatus.SKIPPED
        assert "protected" in results[0].reason
        assert (root / "components" / "SidePanel.tsx").read_text(encoding="utf-8") == "panel"

    def test_mixed_batch_preserves_order(self, applier, root):
        actions = [
            CreateAction(path="a.ts", content="a"),
            UnknownAction(kind="rename", path="b.ts"),
            UpdateAction(path="App.tsx", content="new"),
            DeleteAction(path="gone.ts"),
        ]
        results = applier.apply(actions)
        assert len(results) == 4
        assert [r.action for r in results] == actions
        assert [r.status for r in results] == [
            ApplyStatus.APPLIED, ApplyStatus.SKIPPED,
            ApplyStatus.APPLIED, ApplyStatus.APPLIED,
        ]
        assert results[1].reason == "unrecognized action type"
        assert not (root / "b.ts").exists()

    def test_write_requires_normalized_path(self):
        with pytest.raises(TypeError):
            ActionApplier.write_file("/tmp/anything.ts", "x")
        with pytest.raises(TypeError):
            ActionApplier.delete_file("/tmp/anything.ts")


class TestConcurrency:
    def test_appliers_for_same_root_share_lock(self, root):
        first = ActionApplier(PathNormalizer(str(root)))
        second = ActionApplier(PathNormalizer(str(root)))
        assert first._lock is second._lock

    def test_concurrent_batches_do_not_interleave(self, root):
        applier = ActionApplier(PathNormalizer(str(root)))
        batches = [
            [UpdateAction(path=f"f{i}.ts", content=tag) for i in range(20)]
            for tag in ("A", "B")
        ]
        threads = [threading.Thread(target=applier.apply, args=(b,)) for b in batches]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        contents = {(root / f"f{i}.ts").read_text(encoding="utf-8") for i in range(20)}
        assert contents in ({"A"}, {"B"})
