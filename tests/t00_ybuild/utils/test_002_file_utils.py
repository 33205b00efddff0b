import os
import threading

import pytest

from ybuild.utils.file_utils import read_dir_links
from ybuild.utils.rwlock import RWLock


def __test_read_dir_links_sorted__(tmp_path):
    links = tmp_path / "cmds"
    links.mkdir()
    (tmp_path / "real").mkdir()
    for name in ("zeta", "alpha", "mid"):
        os.symlink(tmp_path / "real", links / name)
    (links / "beta").mkdir()

    assert read_dir_links(links) == ["alpha", "beta", "mid", "zeta"]


def __test_read_dir_links_missing_dir__(tmp_path):
    with pytest.raises(OSError):
        read_dir_links(tmp_path / "nope")

def __test_rwlock_readers_share_writers_exclude__():
    lock = RWLock()
    inside = threading.Event()
    release = threading.Event()

    def reader():
        with lock.read():
            inside.set()
            release.wait(5)

    t = threading.Thread(target=reader)
    t.start()
    assert inside.wait(5)

    # A second reader gets in while the first one holds the lock
    got_read = threading.Event()

    def second_reader():
        with lock.read():
            got_read.set()

    t2 = threading.Thread(target=second_reader)
    t2.start()
    assert got_read.wait(5)
    t2.join(5)

    # A writer has to wait for the first reader
    got_write = threading.Event()

    def writer():
        with lock.write():
            got_write.set()

    t3 = threading.Thread(target=writer)
    t3.start()
    assert not got_write.wait(0.2)
    release.set()
    assert got_write.wait(5)
    t.join(5)
    t3.join(5)
