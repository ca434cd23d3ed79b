import random
import unittest
from bisect import bisect_left
from mkbs.engine import multi_search, multi_search_exhaustive, search
from mkbs.dsa import default_cmp, CountingComparator, naive_multi_search
from mkbs.models import Found, NotFound, InvalidKeyOrder


def random_case(rng, n, m, spread, unique_data=True):
    if unique_data:
        data = sorted(rng.sample(range(spread), n))
    else:
        data = sorted(rng.randrange(spread) for _ in range(n))
    keys = sorted(rng.randrange(-5, spread + 5) for _ in range(m))
    return data, keys


def assert_valid(data, keys, results, exhaustive):
    assert len(results) == len(keys)
    for k, r in zip(keys, results):
        if r.found:
            assert 0 <= r.index < len(data)
            assert data[r.index] == k
        else:
            assert k not in data
            if exhaustive:
                assert r.hint is not None
            if r.hint is not None:
                i = r.hint
                assert 0 <= i <= len(data)
                assert i == 0 or data[i - 1] < k
                assert i == len(data) or k < data[i]


class TestScenarios(unittest.TestCase):
    def test_two_keys_in_range(self):
        data = list(range(4123))
        keys = [123, 3131]
        assert multi_search(data, keys) == [Found(123), Found(3131)]
        assert multi_search_exhaustive(data, keys) == [Found(123), Found(3131)]

    def test_exhaustive_hints(self):
        res = multi_search_exhaustive([1, 3, 5, 7], [0, 4, 8])
        assert res == [NotFound(0), NotFound(2), NotFound(4)]

    def test_empty_data(self):
        assert multi_search_exhaustive([], [5]) == [NotFound(0)]
        assert multi_search([], [5]) == [NotFound(None)]
        assert multi_search_exhaustive([], [1, 2, 3]) == [NotFound(0)] * 3

    def test_empty_keys(self):
        assert multi_search([1, 2, 3], []) == []
        assert multi_search_exhaustive([1, 2, 3], []) == []

    def test_descending_keys_rejected(self):
        for fn in (multi_search, multi_search_exhaustive):
            with self.assertRaises(InvalidKeyOrder):
                fn([1, 2, 3], [2, 1])

    def test_duplicate_data(self):
        first = multi_search_exhaustive([5, 5, 5], [5])
        assert first[0].found and first[0].index in (0, 1, 2)
        for _ in range(3):
            assert multi_search_exhaustive([5, 5, 5], [5]) == first
            assert multi_search([5, 5, 5], [5]) == first

    def test_duplicate_keys(self):
        data = [1, 3, 5, 7]
        keys = [3, 3, 3, 4, 4, 7, 7]
        res = multi_search_exhaustive(data, keys)
        assert res == [Found(1)] * 3 + [NotFound(2)] * 2 + [Found(3)] * 2
        fast = multi_search(data, keys)
        assert [r for r in fast if r.found] == [Found(1)] * 3 + [Found(3)] * 2

    def test_fast_mode_out_of_window_keys(self):
        data = [10, 20, 30]
        res = multi_search(data, [1, 2, 3, 20, 40, 50])
        assert res[3] == Found(1)
        assert all(r == NotFound(None) for r in res[:3])
        assert all(r == NotFound(None) for r in res[4:])

    def test_fast_mode_searched_miss_has_hint(self):
        # the only key is the pivot and lies inside the window bounds
        assert multi_search([1, 3, 5, 7], [4]) == [NotFound(2)]

    def test_search_dispatch(self):
        assert search([1, 2], [2], "exhaustive") == [Found(1)]
        assert search([1, 2], [2]) == [Found(1)]
        with self.assertRaises(ValueError):
            search([1, 2], [2], "slow")


class TestProperties(unittest.TestCase):
    def test_exhaustive_equals_independent_search(self):
        rng = random.Random(1234)
        for _ in range(200):
            data, keys = random_case(rng, rng.randrange(0, 60), rng.randrange(0, 40), 100)
            res = multi_search_exhaustive(data, keys)
            assert res == naive_multi_search(data, keys)
            for k, r in zip(keys, res):
                if not r.found:
                    assert r.hint == bisect_left(data, k)

    def test_fast_results_are_valid(self):
        rng = random.Random(99)
        for _ in range(200):
            data, keys = random_case(rng, rng.randrange(0, 60), rng.randrange(0, 40), 100)
            assert_valid(data, keys, multi_search(data, keys), exhaustive=False)
            assert_valid(data, keys, multi_search_exhaustive(data, keys), exhaustive=True)

    def test_duplicate_data_is_valid(self):
        rng = random.Random(5)
        for _ in range(200):
            data, keys = random_case(rng, rng.randrange(0, 80), rng.randrange(0, 40), 30, unique_data=False)
            fast = multi_search(data, keys)
            full = multi_search_exhaustive(data, keys)
            assert_valid(data, keys, fast, exhaustive=False)
            assert_valid(data, keys, full, exhaustive=True)
            assert [r.found for r in full] == [k in data for k in keys]

    def test_fast_and_exhaustive_agree_on_hits(self):
        rng = random.Random(42)
        for _ in range(200):
            data, keys = random_case(rng, rng.randrange(0, 40), rng.randrange(0, 40), 40,
                                     unique_data=rng.random() < 0.5)
            fast = multi_search(data, keys)
            full = multi_search_exhaustive(data, keys)
            assert [(i, r) for i, r in enumerate(fast) if r.found] == \
                [(i, r) for i, r in enumerate(full) if r.found]

    def test_deterministic(self):
        rng = random.Random(3)
        data, keys = random_case(rng, 500, 100, 300, unique_data=False)
        assert multi_search(data, keys) == multi_search(data, keys)
        assert multi_search_exhaustive(data, keys) == multi_search_exhaustive(data, keys)

    def test_fewer_comparisons_than_naive(self):
        data = list(range(0, 200000, 2))
        keys = list(range(0, 200000, 50))
        naive = CountingComparator()
        naive_multi_search(data, keys, naive)
        multi = CountingComparator()
        multi_search_exhaustive(data, keys, multi)
        assert multi.calls < naive.calls


class TestComparatorAndKey(unittest.TestCase):
    def test_key_extraction(self):
        records = [{"id": i, "name": f"r{i}"} for i in range(0, 50, 5)]
        res = multi_search_exhaustive(records, [5, 6, 45], key=lambda r: r["id"])
        assert res == [Found(1), NotFound(2), Found(9)]

    def test_descending_comparator(self):
        rev = lambda a, b: default_cmp(b, a)
        data = [9, 7, 5, 3, 1]
        res = multi_search_exhaustive(data, [8, 5, 0], rev)
        assert res == [NotFound(1), Found(2), NotFound(5)]
        with self.assertRaises(InvalidKeyOrder):
            multi_search(data, [0, 5], rev)

    def test_case_insensitive_strings(self):
        ci = lambda a, b: default_cmp(a.lower(), b.lower())
        data = ["apple", "Banana", "cherry"]
        res = multi_search(data, ["BANANA", "Cherry"], ci)
        assert res == [Found(1), Found(2)]


class TestParallel(unittest.TestCase):
    def test_parallel_matches_sequential(self):
        rng = random.Random(11)
        for workers in (2, 4):
            for _ in range(30):
                data, keys = random_case(rng, rng.randrange(0, 400), rng.randrange(0, 200), 1000)
                assert multi_search(data, keys, workers=workers) == multi_search(data, keys)
                assert multi_search_exhaustive(data, keys, workers=workers) == \
                    multi_search_exhaustive(data, keys)

    def test_parallel_edge_cases(self):
        assert multi_search_exhaustive([], [1, 2], workers=4) == [NotFound(0)] * 2
        assert multi_search([1, 2], [], workers=4) == []
        with self.assertRaises(InvalidKeyOrder):
            multi_search([1, 2], [2, 1], workers=4)


if __name__ == '__main__':
    unittest.main()
