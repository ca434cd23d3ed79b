import os
import tempfile
import unittest
import pandas as pd
from mkbs.loader import load_column, load_sorted, parse_value
from mkbs.engine import multi_search_exhaustive
from mkbs.models import Found


class TestLoader(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="mkbs_loader_")

    def _write(self, name, text):
        path = os.path.join(self.tmpdir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_csv_first_column(self):
        path = self._write("data.csv", "value,label\n1,a\n3,b\n5,c\n")
        values = load_column(path)
        assert values == [1, 3, 5]
        assert all(type(v) is int for v in values)

    def test_csv_named_column_loose_match(self):
        path = self._write("data.csv", "Id,Key Value\n1,10\n2,20\n3,\n")
        assert load_column(path, "key_value") == [10.0, 20.0]

    def test_missing_column(self):
        path = self._write("data.csv", "a,b\n1,2\n")
        with self.assertRaises(KeyError):
            load_column(path, "zzz")

    def test_text_file(self):
        path = self._write("keys.txt", "apple\nbanana\n\ncherry\n")
        assert load_column(path) == ["apple", "banana", "cherry"]

    def test_excel(self):
        path = os.path.join(self.tmpdir, "data.xlsx")
        pd.DataFrame({"n": [2, 4, 6]}).to_excel(path, index=False, engine="openpyxl")
        assert load_column(path, "n") == [2, 4, 6]

    def test_load_sorted(self):
        path = self._write("data.txt", "9\n1\n5\n")
        assert load_sorted(path) == [9, 1, 5]
        assert load_sorted(path, sort=True) == [1, 5, 9]

    def test_parse_value(self):
        assert parse_value("12") == 12
        assert parse_value("1.5") == 1.5
        assert parse_value("abc") == "abc"

    def test_non_finite_tokens_stay_text(self):
        for token in ("nan", "NaN", "inf", "-inf", "Infinity"):
            assert parse_value(token) == token
        assert multi_search_exhaustive([1, 3, 5, 7], [parse_value("5")]) == [Found(2)]
        # text never compares with ints, so "nan" can't come back as a hit
        with self.assertRaises(TypeError):
            multi_search_exhaustive([1, 3, 5, 7], [parse_value("nan")])

    def test_xls_rejected(self):
        path = os.path.join(self.tmpdir, "legacy.xls")
        with open(path, "wb") as f:
            f.write(bytes.fromhex("d0cf11e0a1b11ae1") + bytes(504))
        with self.assertRaises(ValueError):
            load_column(path)

    def test_text_lines_kept_whole(self):
        path = self._write("names.txt", "Doe, Jane\nRoe, Richard\n")
        assert load_column(path) == ["Doe, Jane", "Roe, Richard"]

    def test_text_leading_zeros_stay_text(self):
        path = self._write("ids.txt", "00123\n00456\n789\n")
        assert load_column(path) == ["00123", "00456", "789"]
        path = self._write("nums.txt", "0\n0.5\n12\n")
        assert load_column(path) == [0, 0.5, 12]


if __name__ == '__main__':
    unittest.main()
