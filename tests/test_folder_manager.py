import unittest

from fakes import FakeBlobStore, FakeRepository, make_file, make_folder, repository_error

from drivekeeper.managers import FolderManager
from drivekeeper.models import ErrorKind


def build_tree() -> tuple[FakeRepository, FakeRepository]:
    """
    A
    ├── B
    │   ├── C
    │   │   └── c1.txt
    │   └── b1.txt
    └── a1.txt
    D
    """
    folders = FakeRepository(
        [
            make_folder("A", minutes=0),
            make_folder("B", parent="A", minutes=1),
            make_folder("C", parent="B", minutes=2),
            make_folder("D", minutes=3),
        ]
    )
    files = FakeRepository(
        [
            make_file("a1", parent="A"),
            make_file("b1", parent="B"),
            make_file("c1", parent="C"),
            make_file("root1"),
        ]
    )
    return folders, files


class TestFolderManagerReads(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.folder_repo, self.file_repo = build_tree()
        self.manager = FolderManager(self.folder_repo, self.file_repo, FakeBlobStore())
        await self.manager.fetch("u1")

    def test_fetch_loads_all_non_trashed_newest_first(self) -> None:
        self.assertEqual([f.id for f in self.manager.folders], ["D", "C", "B", "A"])

    def test_get_child_folders(self) -> None:
        self.assertEqual(
            sorted(f.id for f in self.manager.get_child_folders(None)), ["A", "D"]
        )
        self.assertEqual([f.id for f in self.manager.get_child_folders("A")], ["B"])
        self.assertEqual(self.manager.get_child_folders("C"), [])

    def test_resolve_path_root_first(self) -> None:
        self.assertEqual([f.id for f in self.manager.resolve_path("C")], ["A", "B", "C"])
        self.assertEqual([f.id for f in self.manager.resolve_path("A")], ["A"])
        self.assertEqual(self.manager.resolve_path(None), [])
        self.assertEqual(self.manager.resolve_path("unknown"), [])

    async def test_resolve_path_truncates_at_missing_ancestor(self) -> None:
        await self.manager.fetch_starred("u1")
        self.assertEqual(self.manager.resolve_path("C"), [])

        self.folder_repo.rows["C"].starred = True
        await self.manager.fetch_starred("u1")
        self.assertEqual([f.id for f in self.manager.resolve_path("C")], ["C"])


class TestFolderManagerMutations(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.folder_repo, self.file_repo = build_tree()
        self.manager = FolderManager(self.folder_repo, self.file_repo, FakeBlobStore())
        await self.manager.fetch("u1")

    async def test_create_nested_folders_builds_breadcrumbs(self) -> None:
        work = await self.manager.create("Work", None, "u1")
        self.assertTrue(work.ok)
        reports = await self.manager.create("  Reports ", work.item_id, "u1")
        self.assertTrue(reports.ok)

        self.assertEqual(reports.record.name, "Reports")
        self.assertEqual(reports.record.parent_folder_id, work.item_id)
        self.assertFalse(reports.record.starred)
        self.assertFalse(reports.record.trashed)
        self.assertEqual(
            [f.name for f in self.manager.resolve_path(reports.item_id)], ["Work", "Reports"]
        )
        self.assertIn(reports.item_id, self.folder_repo.rows)

    async def test_create_blank_name_is_rejected(self) -> None:
        result = await self.manager.create("   ", None, "u1")
        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertEqual(self.manager.error, "Folder name must not be empty")
        self.assertNotIn("insert", [c[0] for c in self.folder_repo.calls])

    async def test_create_repository_failure(self) -> None:
        self.folder_repo.fail_ops["insert"] = repository_error("insert failed")
        result = await self.manager.create("Work", None, "u1")
        self.assertEqual(result.kind, ErrorKind.REPOSITORY)
        self.assertEqual(len(self.manager.folders), 4)

    async def test_rename(self) -> None:
        result = await self.manager.rename("B", "Budget")
        self.assertTrue(result.ok)
        self.assertEqual(self.manager.get("B").name, "Budget")
        self.assertEqual(self.folder_repo.rows["B"].name, "Budget")

    async def test_move_to_new_parent(self) -> None:
        result = await self.manager.move("C", "D")
        self.assertTrue(result.ok)
        self.assertEqual(self.folder_repo.rows["C"].parent_folder_id, "D")
        self.assertEqual([f.id for f in self.manager.resolve_path("C")], ["D", "C"])

    async def test_move_into_itself_is_rejected(self) -> None:
        result = await self.manager.move("A", "A")
        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertEqual(self.folder_repo.rows["A"].parent_folder_id, None)

    async def test_move_into_descendant_is_rejected(self) -> None:
        result = await self.manager.move("A", "C")
        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertEqual(result.message, "Cannot move a folder into one of its subfolders")
        self.assertNotIn("update", [c[0] for c in self.folder_repo.calls])

    async def test_toggle_star_and_trash(self) -> None:
        starred = await self.manager.toggle_star("D")
        self.assertTrue(starred.ok)
        self.assertTrue(self.folder_repo.rows["D"].starred)

        trashed = await self.manager.move_or_restore_trash("D")
        self.assertTrue(trashed.ok)
        self.assertTrue(self.folder_repo.rows["D"].trashed)
        self.assertIsNone(self.manager.get("D"))

        await self.manager.fetch_trashed("u1")
        self.assertEqual([f.id for f in self.manager.folders], ["D"])


class TestFolderManagerPermanentDelete(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.folder_repo, self.file_repo = build_tree()
        self.blobs = FakeBlobStore()
        self.manager = FolderManager(self.folder_repo, self.file_repo, self.blobs)
        await self.manager.fetch("u1")

    async def test_recursive_delete_removes_subtree_only(self) -> None:
        result = await self.manager.permanently_delete("A")

        self.assertTrue(result.ok)
        self.assertEqual(sorted(self.folder_repo.rows), ["D"])
        self.assertEqual(sorted(self.file_repo.rows), ["root1"])
        self.assertEqual(len(self.blobs.removed), 3)
        self.assertEqual([f.id for f in self.manager.folders], ["D"])

    async def test_children_are_deleted_before_parent(self) -> None:
        await self.manager.permanently_delete("A")

        deletes = [c[1] for c in self.folder_repo.calls if c[0] == "delete"]
        self.assertEqual(deletes, ["C", "B", "A"])

    async def test_blob_failure_keeps_ancestors_and_failing_file(self) -> None:
        c1 = self.file_repo.rows["c1"]
        self.blobs.fail_remove_urls.add(c1.url)

        result = await self.manager.permanently_delete("A")

        self.assertEqual(result.status, "error")
        self.assertEqual(result.kind, ErrorKind.DELETE_FAILED)
        self.assertIn("c1", self.file_repo.rows)
        for folder_id in ("A", "B", "C"):
            self.assertIn(folder_id, self.folder_repo.rows)
        self.assertIsNotNone(self.manager.get("A"))
        # Siblings that were not blocked still complete.
        self.assertNotIn("a1", self.file_repo.rows)
        self.assertNotIn("b1", self.file_repo.rows)

    async def test_single_file_blob_failure_deletes_nothing(self) -> None:
        folder_repo = FakeRepository([make_folder("R", "Reports")])
        file_repo = FakeRepository([make_file("only", parent="R")])
        blobs = FakeBlobStore()
        blobs.fail_remove_urls.add(file_repo.rows["only"].url)
        manager = FolderManager(folder_repo, file_repo, blobs)
        await manager.fetch("u1")

        result = await manager.permanently_delete("R")

        self.assertEqual(result.kind, ErrorKind.DELETE_FAILED)
        self.assertIn("R", folder_repo.rows)
        self.assertIn("only", file_repo.rows)
        self.assertNotIn("delete", [c[0] for c in folder_repo.calls + file_repo.calls])
        self.assertEqual(manager.error, "An error occurred when deleting file only")

    async def test_delete_unknown_folder_is_not_found(self) -> None:
        result = await self.manager.permanently_delete("missing")
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(self.blobs.removed, [])

    async def test_empty_trash_deletes_trashed_trees(self) -> None:
        self.folder_repo.rows["A"].trashed = True
        self.folder_repo.rows["B"].trashed = True

        await self.manager.fetch_trashed("u1")
        result = await self.manager.empty_trash("u1")

        self.assertTrue(result.ok)
        self.assertEqual(result.message, "Folders deleted successfully")
        self.assertEqual(sorted(self.folder_repo.rows), ["D"])
        self.assertEqual(self.manager.folders, [])

    async def test_empty_trash_with_nothing_trashed(self) -> None:
        result = await self.manager.empty_trash("u1")
        self.assertTrue(result.ok)
        self.assertEqual(result.message, "No folders to delete")
        self.assertEqual(self.manager.folders, [])


if __name__ == "__main__":
    unittest.main()
