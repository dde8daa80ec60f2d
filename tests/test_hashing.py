"""Tests for hashing module."""

import hashlib
import os
import sys
import pytest

from artifact_fetch.hashing import (
    EMPTY_TREE_HASH,
    blob_hash,
    git_mode,
    hash_file,
    hash_tree,
)

# Values reported by `git hash-object`
EMPTY_BLOB = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
HELLO_BLOB = "ce013625030ba8dba906f756967f9e9ca394464a"  # "hello\n"

needs_posix = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions/symlinks")


def _tree_of(*entries):
    """Build a git tree digest from (mode, name, hex digest) tuples in git order."""
    body = b"".join(
        mode.encode() + b" " + name.encode() + b"\x00" + bytes.fromhex(digest)
        for mode, name, digest in entries
    )
    return hashlib.sha1(b"tree %d\x00" % len(body) + body).hexdigest()


class TestFileHashing:
    """Test SHA2-256 file hashing."""

    def test_matches_hashlib(self, tmp_path):
        data = os.urandom(100_000)
        file1 = tmp_path / "data.bin"
        file1.write_bytes(data)

        assert hash_file(file1) == hashlib.sha256(data).hexdigest()

    def test_empty_file(self, tmp_path):
        empty = tmp_path / "empty"
        empty.write_bytes(b"")
        assert hash_file(empty) == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_lowercase_hex(self, tmp_path):
        file1 = tmp_path / "f.txt"
        file1.write_text("content")
        digest = hash_file(file1)
        assert len(digest) == 64
        assert digest == digest.lower()

    def test_accepts_str_path(self, tmp_path):
        file1 = tmp_path / "f.txt"
        file1.write_text("content")
        assert hash_file(str(file1)) == hash_file(file1)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            hash_file(tmp_path / "missing")


class TestBlobHash:
    """Test git blob hashing."""

    def test_known_blobs(self, tmp_path):
        (tmp_path / "empty").write_bytes(b"")
        (tmp_path / "hello").write_bytes(b"hello\n")

        assert blob_hash(tmp_path / "empty") == EMPTY_BLOB
        assert blob_hash(tmp_path / "hello") == HELLO_BLOB

    @needs_posix
    def test_symlink_hashes_target_text(self, tmp_path):
        (tmp_path / "hello").write_bytes(b"hello\n")
        link = tmp_path / "link"
        link.symlink_to("hello")

        expected = hashlib.sha1(b"blob 5\x00hello").hexdigest()
        assert blob_hash(link) == expected


class TestGitMode:
    """Test git mode detection."""

    @needs_posix
    def test_modes(self, tmp_path):
        plain = tmp_path / "plain"
        plain.write_text("x")
        plain.chmod(0o644)
        exe = tmp_path / "exe"
        exe.write_text("x")
        exe.chmod(0o755)
        link = tmp_path / "link"
        link.symlink_to("plain")
        sub = tmp_path / "sub"
        sub.mkdir()

        assert git_mode(plain) == "100644"
        assert git_mode(exe) == "100755"
        assert git_mode(link) == "120000"
        assert git_mode(sub) == "40000"

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs FIFOs")
    def test_fifo_has_no_mode(self, tmp_path):
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)

        assert git_mode(fifo) is None


class TestTreeHashing:
    """Test git tree hashing."""

    def test_empty_directory(self, tmp_path):
        assert hash_tree(tmp_path) == EMPTY_TREE_HASH

    @needs_posix
    def test_single_file(self, tmp_path):
        f = tmp_path / "hello.txt"
        f.write_bytes(b"hello\n")
        f.chmod(0o644)

        assert hash_tree(tmp_path) == _tree_of(("100644", "hello.txt", HELLO_BLOB))

    @needs_posix
    def test_nested_tree(self, tmp_path):
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "hello").write_bytes(b"hello\n")
        (sub / "hello").chmod(0o644)
        (tmp_path / "empty").write_bytes(b"")
        (tmp_path / "empty").chmod(0o644)

        sub_tree = _tree_of(("100644", "hello", HELLO_BLOB))
        expected = _tree_of(
            ("100644", "empty", EMPTY_BLOB),
            ("40000", "sub", sub_tree),
        )
        assert hash_tree(tmp_path) == expected

    @needs_posix
    def test_directories_sort_with_trailing_slash(self, tmp_path):
        # "a.txt" < "a/" < "a0" in git order, while plain sorting puts "a" first
        (tmp_path / "a.txt").write_bytes(b"")
        (tmp_path / "a0").write_bytes(b"")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "x").write_bytes(b"")
        for p in (tmp_path / "a.txt", tmp_path / "a0", tmp_path / "a" / "x"):
            p.chmod(0o644)

        sub_tree = _tree_of(("100644", "x", EMPTY_BLOB))
        expected = _tree_of(
            ("100644", "a.txt", EMPTY_BLOB),
            ("40000", "a", sub_tree),
            ("100644", "a0", EMPTY_BLOB),
        )
        assert hash_tree(tmp_path) == expected

    def test_same_content_same_hash(self, tmp_path, tree):
        members = {"b/c.txt": b"c", "a.txt": b"a", "z/y/x.bin": b"\x00\x01"}
        first = tree(tmp_path / "one", members)
        second = tree(tmp_path / "two", dict(reversed(list(members.items()))))

        assert hash_tree(first) == hash_tree(second)

    def test_content_change_changes_hash(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a.txt": b"a"})
        before = hash_tree(root)
        (root / "a.txt").write_bytes(b"b")
        assert hash_tree(root) != before

    def test_rename_changes_hash(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a.txt": b"a"})
        before = hash_tree(root)
        (root / "a.txt").rename(root / "b.txt")
        assert hash_tree(root) != before

    @needs_posix
    def test_executable_bit_changes_hash(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"run.sh": b"#!/bin/sh\n"})
        before = hash_tree(root)
        (root / "run.sh").chmod(0o755)
        assert hash_tree(root) != before

    @needs_posix
    def test_group_bits_do_not_change_hash(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"data": b"x"})
        before = hash_tree(root)
        (root / "data").chmod(0o600)
        assert hash_tree(root) == before

    @needs_posix
    def test_symlink_target_changes_hash(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a": b"a", "b": b"b"})
        (root / "link").symlink_to("a")
        before = hash_tree(root)
        (root / "link").unlink()
        (root / "link").symlink_to("b")
        assert hash_tree(root) != before

    def test_empty_directories_ignored(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a.txt": b"a"})
        before = hash_tree(root)
        (root / "empty" / "nested").mkdir(parents=True)
        assert hash_tree(root) == before

    def test_git_directory_ignored(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a.txt": b"a"})
        before = hash_tree(root)
        tree(root, {".git/HEAD": b"ref: refs/heads/main\n"})
        assert hash_tree(root) == before

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            hash_tree(tmp_path / "missing")

    def test_file_instead_of_directory_raises(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("x")
        with pytest.raises(OSError):
            hash_tree(f)

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs FIFOs")
    def test_special_files_ignored(self, tmp_path, tree):
        root = tree(tmp_path / "root", {"a.txt": b"a"})
        before = hash_tree(root)
        os.mkfifo(root / "pipe")
        (root / "sub").mkdir()
        os.mkfifo(root / "sub" / "pipe")

        assert hash_tree(root) == before
