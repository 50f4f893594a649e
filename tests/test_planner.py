"""
Tests for the uploader, the remote clean and the deployment planner.
"""
import tempfile
import unittest
from pathlib import Path

from fake_remote import FakeRemote
from sftpdeploy.config import Target
from sftpdeploy.core.planner import SyncPlanner
from sftpdeploy.errors import DeployCancelled, DeployConnectionError
from sftpdeploy.operations.clean import clean_remote_directory
from sftpdeploy.operations.collector import collect_files
from sftpdeploy.operations.transfer import upload_files

ROOT = "/var/www"


def _target():
    return Target(host="h", username="u", password="p", remote_path=ROOT)


class _Prompt:
    """Scripted answers for confirm(); records every question."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        return self.answers.pop(0)


class _LocalTree(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        for rel in ("index.html", "css/site.css", "js/app.js"):
            p = self.root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(rel, encoding="utf-8")
        self.entries = sorted(collect_files(self.root, []), key=lambda e: e.relative_path)

    def tearDown(self):
        self.tmpdir.cleanup()


class TestUploadFiles(_LocalTree):

    def test_uploads_in_order_and_creates_parents(self):
        remote = FakeRemote()
        result = upload_files(remote, ROOT, self.entries)
        self.assertEqual((result.uploaded, result.failed), (3, 0))
        self.assertEqual(remote.transferred(),
                         [f"{ROOT}/css/site.css", f"{ROOT}/index.html", f"{ROOT}/js/app.js"])
        self.assertEqual(remote.files[f"{ROOT}/js/app.js"], b"js/app.js")

    def test_each_transfer_finishes_before_the_next_starts(self):
        remote = FakeRemote()
        upload_files(remote, ROOT, self.entries)
        local = {e.relative_path: str(e.local_path) for e in self.entries}
        self.assertEqual(remote.calls, [
            ("ensure_directory", f"{ROOT}/css"),
            ("transfer", local["css/site.css"], f"{ROOT}/css/site.css"),
            ("ensure_directory", ROOT),
            ("transfer", local["index.html"], f"{ROOT}/index.html"),
            ("ensure_directory", f"{ROOT}/js"),
            ("transfer", local["js/app.js"], f"{ROOT}/js/app.js"),
        ])

    def test_known_parent_is_not_created_twice(self):
        (self.root / "css" / "print.css").write_text("print", encoding="utf-8")
        entries = sorted(collect_files(self.root, []), key=lambda e: e.relative_path)
        remote = FakeRemote()
        upload_files(remote, ROOT, entries)
        self.assertEqual([c[0] for c in remote.calls[:4]],
                         ["ensure_directory", "transfer", "transfer", "ensure_directory"])
        self.assertEqual(remote.calls[2][2], f"{ROOT}/css/site.css")

    def test_lost_connection_stops_the_queue(self):
        remote = FakeRemote(drop_on={f"{ROOT}/index.html"})
        with self.assertRaises(DeployConnectionError):
            upload_files(remote, ROOT, self.entries)
        self.assertEqual(remote.transferred(), [f"{ROOT}/css/site.css", f"{ROOT}/index.html"])

    def test_failure_is_isolated(self):
        remote = FakeRemote(fail_on={f"{ROOT}/index.html"})
        result = upload_files(remote, ROOT, self.entries)
        self.assertEqual((result.uploaded, result.failed), (2, 1))
        self.assertEqual(result.failed_paths, ["index.html"])
        self.assertFalse(result.ok)
        self.assertIn(f"{ROOT}/js/app.js", remote.files)

    def test_mkdir_failure_is_tolerated(self):
        remote = FakeRemote(dirs=[f"{ROOT}/css", f"{ROOT}/js"])

        def broken_mkdir(path):
            raise IOError("mkdir not permitted")

        remote.ensure_directory = broken_mkdir
        result = upload_files(remote, ROOT, self.entries)
        self.assertEqual((result.uploaded, result.failed), (3, 0))

    def test_empty_list(self):
        result = upload_files(FakeRemote(), ROOT, [])
        self.assertEqual((result.uploaded, result.failed), (0, 0))


class TestCleanRemoteDirectory(unittest.TestCase):

    def test_removes_everything_below_root(self):
        remote = FakeRemote(files={
            f"{ROOT}/old.html": b"1",
            f"{ROOT}/a/b/c.txt": b"2",
            f"{ROOT}/a/d.txt": b"3",
            "/elsewhere/keep.txt": b"4",
        }, dirs=[f"{ROOT}/empty"])
        removed = clean_remote_directory(remote, ROOT)
        self.assertEqual(removed, 3)
        self.assertEqual(remote.files, {"/elsewhere/keep.txt": b"4"})
        self.assertIn(ROOT, remote.dirs)
        self.assertNotIn(f"{ROOT}/a", remote.dirs)
        self.assertNotIn(f"{ROOT}/empty", remote.dirs)

    def test_missing_root_is_already_clean(self):
        remote = FakeRemote()
        self.assertEqual(clean_remote_directory(remote, "/does/not/exist"), 0)

    def test_other_listing_errors_propagate(self):
        remote = FakeRemote()

        def denied(path):
            raise PermissionError(path)

        remote.list_dir = denied
        with self.assertRaises(PermissionError):
            clean_remote_directory(remote, ROOT)


class TestSyncPlanner(_LocalTree):

    def test_no_existing_files_no_prompt(self):
        remote = FakeRemote()
        prompt = _Prompt()
        result = SyncPlanner(_target(), remote.factory, confirm=prompt).run(self.entries)
        self.assertEqual(result.uploaded, 3)
        self.assertEqual(prompt.questions, [])
        self.assertTrue(remote.closed)

    def test_existing_files_ask_and_proceed(self):
        remote = FakeRemote(files={f"{ROOT}/index.html": b"old"})
        prompt = _Prompt(True)
        result = SyncPlanner(_target(), remote.factory, confirm=prompt).run(self.entries)
        self.assertEqual(len(prompt.questions), 1)
        self.assertEqual(result.uploaded, 3)
        self.assertEqual(remote.files[f"{ROOT}/index.html"], b"index.html")

    def test_declined_overwrite_transfers_nothing(self):
        remote = FakeRemote(files={f"{ROOT}/index.html": b"old"})
        planner = SyncPlanner(_target(), remote.factory, confirm=_Prompt(False))
        with self.assertRaises(DeployCancelled):
            planner.run(self.entries)
        self.assertEqual(remote.transferred(), [])
        self.assertEqual(remote.files[f"{ROOT}/index.html"], b"old")
        self.assertTrue(remote.closed)

    def test_unattended_skips_confirmation_and_overwrites(self):
        remote = FakeRemote(files={f"{ROOT}/index.html": b"old", f"{ROOT}/js/app.js": b"old"})
        prompt = _Prompt()
        result = SyncPlanner(_target(), remote.factory, unattended=True,
                             confirm=prompt).run(self.entries)
        self.assertEqual(prompt.questions, [])
        self.assertEqual(result.uploaded, 3)
        self.assertEqual(remote.files[f"{ROOT}/index.html"], b"index.html")
        self.assertEqual(remote.files[f"{ROOT}/js/app.js"], b"js/app.js")

    def test_clean_then_upload_leaves_exactly_uploaded_set(self):
        remote = FakeRemote(files={f"{ROOT}/stale.html": b"x", f"{ROOT}/old/dir/y.js": b"y",
                                   f"{ROOT}/index.html": b"old"})
        result = SyncPlanner(_target(), remote.factory, unattended=True,
                             clean=True).run(self.entries)
        self.assertEqual(result.uploaded, 3)
        self.assertEqual(sorted(remote.files),
                         [f"{ROOT}/css/site.css", f"{ROOT}/index.html", f"{ROOT}/js/app.js"])

    def test_clean_skips_existing_discovery(self):
        remote = FakeRemote(files={f"{ROOT}/index.html": b"old"})
        SyncPlanner(_target(), remote.factory, unattended=True, clean=True).run(self.entries)
        self.assertNotIn("exists", [c[0] for c in remote.calls])

    def test_clean_asks_first_when_attended(self):
        remote = FakeRemote(files={f"{ROOT}/index.html": b"old"})
        planner = SyncPlanner(_target(), remote.factory, clean=True, confirm=_Prompt(False))
        with self.assertRaises(DeployCancelled):
            planner.run(self.entries)
        self.assertEqual(remote.files, {f"{ROOT}/index.html": b"old"})

    def test_connection_error_propagates(self):
        def refuse(target):
            raise DeployConnectionError("auth failed")

        with self.assertRaises(DeployConnectionError):
            SyncPlanner(_target(), refuse, unattended=True).run(self.entries)

    def test_session_closed_when_discovery_fails(self):
        remote = FakeRemote()

        def broken_exists(path):
            raise IOError("channel closed")

        remote.exists = broken_exists
        with self.assertRaises(IOError):
            SyncPlanner(_target(), remote.factory).run(self.entries)
        self.assertTrue(remote.closed)


if __name__ == "__main__":
    unittest.main()
