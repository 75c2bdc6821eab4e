import unittest

from recycleme.services.bins import column_width, group_by_bin


class TestGroupByBin(unittest.TestCase):
    def test_same_bin(self):
        bins = group_by_bin({"bottle": "plastic", "cap": "plastic"})
        self.assertEqual(bins, {"plastic": ["bottle", "cap"]})
        self.assertEqual(column_width(len(bins)), 12)

    def test_first_seen_order(self):
        throw_away = {
            "box": "paper",
            "jar": "glass",
            "lid": "metal",
            "sleeve": "paper",
            "label": "glass",
        }
        bins = group_by_bin(throw_away)

        self.assertEqual(list(bins.keys()), ["paper", "glass", "metal"])
        self.assertEqual(bins["paper"], ["box", "sleeve"])
        self.assertEqual(bins["glass"], ["jar", "label"])
        self.assertEqual(bins["metal"], ["lid"])

    def test_counts_match_input(self):
        throw_away = {f"material-{i}": f"bin-{i % 4}" for i in range(23)}
        bins = group_by_bin(throw_away)

        self.assertEqual(sum(len(m) for m in bins.values()), len(throw_away))
        self.assertEqual(set(bins.keys()), set(throw_away.values()))

    def test_duplicates_preserved(self):
        # Pairs can repeat a material name when they come from several sources
        pairs = [("film", "plastic"), ("tray", "plastic"), ("film", "plastic")]
        self.assertEqual(group_by_bin(pairs), {"plastic": ["film", "tray", "film"]})

    def test_no_sorting(self):
        bins = group_by_bin({"zinc": "b", "apple": "a", "mango": "b"})
        self.assertEqual(list(bins.keys()), ["b", "a"])
        self.assertEqual(bins["b"], ["zinc", "mango"])

    def test_empty(self):
        self.assertEqual(group_by_bin({}), {})


class TestColumnWidth(unittest.TestCase):
    def test_integer_division(self):
        self.assertEqual(column_width(1), 12)
        self.assertEqual(column_width(2), 6)
        self.assertEqual(column_width(3), 4)
        self.assertEqual(column_width(5), 2)
        self.assertEqual(column_width(7), 1)

    def test_zero_bins_rejected(self):
        with self.assertRaises(ValueError):
            column_width(0)


if __name__ == '__main__':
    unittest.main()
