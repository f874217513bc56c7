import unittest

from fake_controller import DT, FakeController

from digipostefs.errors import (
    ApiError,
    AuthError,
    DirectoryNotFoundError,
    InvalidStateError,
    NotFoundError,
)
from digipostefs.models import Folder
from digipostefs.tree import TreeCache, documents_total_count


class TestTreeCache(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = FakeController()
        self.a = self.controller.add_folder("a")
        self.ab = self.controller.add_folder("b", self.a)
        self.controller.add_document("root.pdf")
        self.controller.add_document("x", self.a)
        self.controller.add_document("y", self.ab)
        self.controller.add_document("z", self.ab)
        self.tree = TreeCache(self.controller)

    def test_root_requires_build(self) -> None:
        self.assertFalse(self.tree.is_built)
        with self.assertRaises(InvalidStateError):
            _ = self.tree.root

    def test_ensure_built_reads_once(self) -> None:
        root = self.tree.ensure_built()

        self.assertIs(self.tree.ensure_built(), root)
        self.assertEqual(
            self.controller.call_names(),
            ["list_folders", "list_documents", "get_profile"],
        )
        self.assertEqual(root.id, "")
        self.assertEqual(root.updated_at, DT)
        self.assertEqual(root.document_count, 1)

    def test_build_failure_keeps_error_type(self) -> None:
        self.controller.fail["list_documents"] = AuthError("expired")

        with self.assertRaises(AuthError) as ctx:
            self.tree.ensure_built()

        self.assertEqual(ctx.exception.details["step"], "list documents")
        self.assertTrue(str(ctx.exception).startswith("build tree: list documents"))
        self.assertFalse(self.tree.is_built)

    def test_build_failure_wraps_non_remote_errors(self) -> None:
        self.controller.fail["list_folders"] = NotFoundError("gone")

        with self.assertRaises(ApiError):
            self.tree.ensure_built()

    def test_resolve_folder(self) -> None:
        self.tree.ensure_built()

        self.assertIs(self.tree.resolve_folder(""), self.tree.root)
        self.assertIs(self.tree.resolve_folder("/"), self.tree.root)
        node = self.tree.resolve_folder("a/b")
        self.assertEqual(node.id, self.ab)
        self.assertIs(self.tree.resolve_folder("/a/b/"), node)

    def test_resolve_missing_segment(self) -> None:
        self.tree.ensure_built()

        with self.assertRaises(DirectoryNotFoundError) as ctx:
            self.tree.resolve_folder("a/c/d")
        self.assertEqual(ctx.exception.details["segment"], "c")

    def test_resolve_prefers_first_duplicate(self) -> None:
        first = self.controller.add_folder("dup")
        self.controller.add_folder("dup")
        self.tree.ensure_built()

        self.assertEqual(self.tree.resolve_folder("dup").id, first)

    def test_resolve_decodes_segments(self) -> None:
        folder_id = self.controller.add_folder("2023/2024")
        self.tree.ensure_built()

        self.assertEqual(self.tree.resolve_folder("2023／2024").id, folder_id)
        with self.assertRaises(DirectoryNotFoundError):
            self.tree.resolve_folder("2023/2024")

    def test_flush(self) -> None:
        self.tree.ensure_built()
        self.tree.flush()

        self.assertFalse(self.tree.is_built)
        self.tree.ensure_built()
        self.assertEqual(self.controller.call_names().count("list_folders"), 2)

    def test_documents_total_count(self) -> None:
        root = self.tree.ensure_built()

        self.assertEqual(documents_total_count(root), 4)
        self.assertEqual(documents_total_count(self.tree.resolve_folder("a")), 3)

    def test_remove_child(self) -> None:
        parent = Folder(id="p", name="p")
        parent.folders = [Folder(id="1", name="x"), Folder(id="2", name="x"), Folder(id="1", name="y")]

        removed = TreeCache.remove_child(parent, "1")

        self.assertEqual(removed, 2)
        self.assertEqual([f.id for f in parent.folders], ["2"])


if __name__ == "__main__":
    unittest.main()
