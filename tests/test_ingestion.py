# ========================
# tests/test_ingestion.py
# ========================

import unittest
import tempfile
import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.climate_stats.ingestion import TDVReader

class TestDataIngestion(unittest.TestCase):
    """Test the TDV ingestion module."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write(self, name, content):
        path = os.path.join(self.temp_dir.name, name)
        with open(path, 'w', newline='', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_reader_streams_lines_in_order(self):
        """Test that the reader yields every line with its terminator."""
        path = self._write('data.tdv', "CA\t1\nTX\t2\nWA\t3\n")

        reader = TDVReader(path)
        with reader.open() as stream:
            lines = list(stream)

        self.assertEqual(lines, ["CA\t1\n", "TX\t2\n", "WA\t3\n"])

    def test_reader_keeps_unterminated_tail(self):
        """Test that a truncated last line is still yielded, without terminator."""
        path = self._write('truncated.tdv', "CA\t1\nTX\t2")

        with TDVReader(path).open() as stream:
            lines = list(stream)

        self.assertEqual(lines[-1], "TX\t2")

    def test_reader_releases_handle(self):
        """Test that the file is closed after the pass, even on error."""
        path = self._write('data.tdv', "CA\t1\n")

        with TDVReader(path).open() as stream:
            pass
        self.assertTrue(stream.closed)

        with self.assertRaises(RuntimeError):
            with TDVReader(path).open() as stream:
                raise RuntimeError("boom")
        self.assertTrue(stream.closed)

    def test_reader_file_not_found(self):
        """Test TDVReader behavior with non-existent file."""
        reader = TDVReader(os.path.join(self.temp_dir.name, "missing.tdv"))

        with self.assertRaises(FileNotFoundError):
            with reader.open():
                pass

    def test_reader_rejects_directory(self):
        """Test that a directory path is reported as an OSError."""
        reader = TDVReader(self.temp_dir.name)

        with self.assertRaises(OSError):
            with reader.open():
                pass

    def test_reader_empty_file(self):
        """Test TDVReader behavior with an empty file."""
        path = self._write('empty.tdv', "")

        with TDVReader(path).open() as stream:
            self.assertEqual(list(stream), [])

if __name__ == '__main__':
    unittest.main()
