import threading
import time
import unittest

from rolling_stats.rwlock import RWLock


class TestRWLock(unittest.TestCase):
    def test_readers_share(self):
        lock = RWLock()
        inside = threading.Barrier(3, timeout=2)

        def reader():
            with lock.read_locked():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(2)
        self.assertFalse(any(t.is_alive() for t in threads))
        self.assertFalse(inside.broken)

    def test_writer_waits_for_reader(self):
        lock = RWLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.acquire_read()
        t = threading.Thread(target=writer)
        t.start()
        self.assertFalse(acquired.wait(0.1))
        lock.release_read()
        self.assertTrue(acquired.wait(2))
        t.join(2)

    def test_waiting_writer_blocks_new_readers(self):
        lock = RWLock()
        order = []
        writer_started = threading.Event()

        def writer():
            writer_started.set()
            with lock.write_locked():
                order.append("writer")

        def reader():
            with lock.read_locked():
                order.append("reader")

        lock.acquire_read()
        w = threading.Thread(target=writer)
        w.start()
        writer_started.wait(2)
        # 等待写者进入等待状态
        for _ in range(200):
            with lock._cond:
                if lock._writers_waiting:
                    break
            time.sleep(0.005)
        r = threading.Thread(target=reader)
        r.start()
        time.sleep(0.05)
        self.assertEqual(order, [])
        lock.release_read()
        w.join(2)
        r.join(2)
        self.assertEqual(order, ["writer", "reader"])

    def test_release_on_exception(self):
        lock = RWLock()
        with self.assertRaises(RuntimeError):
            with lock.write_locked():
                raise RuntimeError("boom")
        # 锁已释放，可以再次获取
        with lock.read_locked():
            pass
        with lock.write_locked():
            pass


if __name__ == "__main__":
    unittest.main()
