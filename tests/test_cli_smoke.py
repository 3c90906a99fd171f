"""
CLI smoke tests.

Tests CLI command wiring end to end against a temporary work tree selected
through MINIGIT_WORK_TREE. Validates output formats and exit codes.
"""
from __future__ import annotations

import os
import sys
import tarfile
import zlib

import pytest
from typer.testing import CliRunner

from minigit.cli import app
from tests.helpers.seed import seed_tree

from .conftest import EMPTY_TREE_ID, HELLO_BLOB_ID

HELLO_TREE_ID = "aaa96ced2d9a1c8e72c56b253a0e2fe78393feb7"


class TestCLISmokeTests:
    """Smoke tests for CLI commands."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def invoke(self, *args):
        return self.runner.invoke(app, list(args))

    def test_init_creates_layout(self, work_tree):
        result = self.invoke("init")

        assert result.exit_code == 0
        assert "Initialized" in result.output
        assert (work_tree / ".git" / "objects").is_dir()
        assert (work_tree / ".git" / "refs").is_dir()
        assert (work_tree / ".git" / "HEAD").read_text() == "ref: refs/heads/main\n"

    def test_init_is_idempotent(self, work_tree):
        assert self.invoke("init").exit_code == 0
        (work_tree / ".git" / "HEAD").write_text("ref: refs/heads/dev\n")
        assert self.invoke("init").exit_code == 0
        assert (work_tree / ".git" / "HEAD").read_text() == "ref: refs/heads/dev\n"

    def test_hash_object_without_write(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        result = self.invoke("hash-object", str(work_tree / "hello.txt"))

        assert result.exit_code == 0
        assert result.stdout.strip() == HELLO_BLOB_ID
        assert not (work_tree / ".git" / "objects" / "ce").exists()

    def test_hash_object_with_write(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        self.invoke("init")
        result = self.invoke("hash-object", "-w", str(work_tree / "hello.txt"))

        assert result.exit_code == 0
        assert result.stdout.strip() == HELLO_BLOB_ID
        stored = work_tree / ".git" / "objects" / HELLO_BLOB_ID[:2] / HELLO_BLOB_ID[2:]
        assert zlib.decompress(stored.read_bytes()) == b"blob 6\x00hello\n"

    def test_hash_object_missing_file(self, work_tree):
        result = self.invoke("hash-object", str(work_tree / "nope.txt"))
        assert result.exit_code == 5
        assert "error:" in result.output

    def test_cat_file_modes(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        self.invoke("hash-object", "-w", str(work_tree / "hello.txt"))

        result = self.invoke("cat-file", "-t", HELLO_BLOB_ID)
        assert result.exit_code == 0
        assert result.stdout == "blob\n"

        result = self.invoke("cat-file", "-s", HELLO_BLOB_ID)
        assert result.exit_code == 0
        assert result.stdout == "6\n"

        result = self.invoke("cat-file", "-p", HELLO_BLOB_ID)
        assert result.exit_code == 0
        assert result.stdout == "hello\n"

    def test_cat_file_requires_exactly_one_flag(self):
        assert self.invoke("cat-file", HELLO_BLOB_ID).exit_code == 2
        assert self.invoke("cat-file", "-t", "-s", HELLO_BLOB_ID).exit_code == 2

    def test_cat_file_missing_object(self):
        self.invoke("init")
        result = self.invoke("cat-file", "-p", HELLO_BLOB_ID)
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_cat_file_invalid_id(self):
        result = self.invoke("cat-file", "-p", "not-a-hash")
        assert result.exit_code == 2

    def test_cat_file_corrupt_object(self, work_tree):
        path = work_tree / ".git" / "objects" / HELLO_BLOB_ID[:2] / HELLO_BLOB_ID[2:]
        path.parent.mkdir(parents=True)
        path.write_bytes(b"garbage")
        assert self.invoke("cat-file", "-p", HELLO_BLOB_ID).exit_code == 4

    def test_write_tree_and_ls_tree(self, work_tree):
        self.invoke("init")
        seed_tree(work_tree, {"hello.txt": "hello\n"})

        result = self.invoke("write-tree")
        assert result.exit_code == 0
        assert result.stdout.strip() == HELLO_TREE_ID

        result = self.invoke("ls-tree", HELLO_TREE_ID)
        assert result.exit_code == 0
        assert result.stdout == f"100644 blob {HELLO_BLOB_ID}\thello.txt\n"

        result = self.invoke("ls-tree", "--name-only", HELLO_TREE_ID)
        assert result.stdout == "hello.txt\n"

    def test_write_tree_empty_work_tree(self):
        self.invoke("init")
        result = self.invoke("write-tree")
        assert result.exit_code == 0
        assert result.stdout.strip() == EMPTY_TREE_ID

    def test_ls_tree_recursive(self, work_tree):
        seed_tree(work_tree, {"b": "b", "a/x": "x", "a/y/z": "z"})
        tree_id = self.invoke("write-tree").stdout.strip()

        result = self.invoke("ls-tree", "--name-only", tree_id)
        assert result.stdout.splitlines() == ["a", "b"]

        result = self.invoke("ls-tree", "-r", "--name-only", tree_id)
        assert result.stdout.splitlines() == ["a/x", "a/y/z", "b"]

    def test_ls_tree_directory_entry_format(self, work_tree):
        seed_tree(work_tree, {"d/f": "x"})
        tree_id = self.invoke("write-tree").stdout.strip()
        line = self.invoke("ls-tree", tree_id).stdout.strip()
        assert line.startswith("040000 tree ")
        assert line.endswith("\td")

    def test_cat_file_pretty_prints_tree(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        tree_id = self.invoke("write-tree").stdout.strip()
        result = self.invoke("cat-file", "-p", tree_id)
        assert result.stdout == f"100644 blob {HELLO_BLOB_ID}\thello.txt\n"

    def test_ls_tree_on_blob_fails(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        self.invoke("hash-object", "-w", str(work_tree / "hello.txt"))
        assert self.invoke("ls-tree", HELLO_BLOB_ID).exit_code == 3

    @pytest.mark.parametrize("suffix", [".tar", ".tar.zst"])
    def test_export(self, work_tree, tmp_path, suffix):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        tree_id = self.invoke("write-tree").stdout.strip()
        out = tmp_path / f"snapshot{suffix}"

        result = self.invoke("export", tree_id, str(out))
        assert result.exit_code == 0
        assert out.exists()
        if suffix == ".tar":
            with tarfile.open(out) as tar:
                assert tar.getnames() == ["hello.txt"]

    def test_export_rejects_unknown_extension(self, tmp_path):
        result = self.invoke("export", EMPTY_TREE_ID, str(tmp_path / "out.zip"))
        assert result.exit_code == 2

    def test_custom_git_dir_name(self, work_tree, monkeypatch):
        monkeypatch.setenv("MINIGIT_DIR", ".store")
        self.invoke("init")
        seed_tree(work_tree, {"hello.txt": "hello\n"})

        result = self.invoke("write-tree")
        assert result.stdout.strip() == HELLO_TREE_ID
        assert (work_tree / ".store" / "objects" / HELLO_TREE_ID[:2]).is_dir()

    def test_verbose_flag_accepted(self, work_tree):
        seed_tree(work_tree, {"hello.txt": "hello\n"})
        result = self.invoke("--verbose", "hash-object", str(work_tree / "hello.txt"))
        assert result.exit_code == 0

    @pytest.mark.skipif(sys.platform == "darwin", reason="filesystem requires UTF-8 names")
    def test_write_tree_non_utf8_name(self, work_tree):
        (work_tree / os.fsdecode(b"caf\xe9.txt")).write_bytes(b"x")
        result = self.invoke("write-tree")
        assert result.exit_code == 5
        assert "error:" in result.output
