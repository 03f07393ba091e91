"""
Unit tests for the store's readers/writer lock.
"""

import threading
import time

from appfs.core.locks import ReadWriteLock


class TestReadWriteLock:

    def test_readers_share(self):
        lock = ReadWriteLock()
        with lock.read():
            with lock.read():
                assert lock.readers == 2
        assert lock.readers == 0

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        events = []

        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), events.append("write"), lock.release_write()))
        writer.start()
        time.sleep(0.05)
        events.append("read-done")
        lock.release_read()
        writer.join(timeout=2)

        assert events == ["read-done", "write"]

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        events = []

        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), events.append("write"), lock.release_write()))
        writer.start()
        time.sleep(0.05)

        reader = threading.Thread(target=lambda: (lock.acquire_read(), events.append("read"), lock.release_read()))
        reader.start()
        time.sleep(0.05)
        assert events == []

        lock.release_read()
        writer.join(timeout=2)
        reader.join(timeout=2)
        assert events == ["write", "read"]

    def test_concurrent_store_writes(self, store):
        def worker(n):
            for i in range(50):
                store.write(f"/w{n}/f{i}.js", None, str(i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 200
        assert store.generation == 200
