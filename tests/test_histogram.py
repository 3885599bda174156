import unittest

from rolling_stats.histogram import (
    DEFAULT_HEIGHT,
    NO_DATA,
    HistogramOption,
    label_interval,
    render_histogram,
)


class TestRenderHistogram(unittest.TestCase):
    def test_exact_layout(self):
        text = render_histogram([3.0, 0.0, 1.0], 1, HistogramOption(height=3))
        expected = (
            "\nTime Window Histogram:\n\n"
            "▇     \n"
            "▇     \n"
            "▇   ▇ \n"
            "──────\n"
            "3   1 \n"
            "0 -1-2s\n"
        )
        self.assertEqual(text, expected)

    def test_no_data_when_nothing_positive(self):
        self.assertEqual(render_histogram([0.0, 0.0], 1), NO_DATA)
        self.assertEqual(render_histogram([-1.0, -5.0], 1), NO_DATA)
        self.assertEqual(render_histogram([], 1), NO_DATA)

    def test_negative_values_have_no_bar_or_label(self):
        text = render_histogram([-5.0, 2.0], 1, HistogramOption(height=2))
        lines = text.split("\n")
        self.assertEqual(lines[3], "  ▇ ")
        self.assertEqual(lines[4], "  ▇ ")
        self.assertEqual(lines[6], "  2 ")

    def test_default_height(self):
        text = render_histogram([1.0], 1)
        lines = text.split("\n")
        bar_rows = [line for line in lines if "▇" in line]
        self.assertEqual(len(bar_rows), DEFAULT_HEIGHT)

    def test_non_positive_height_falls_back_to_default(self):
        self.assertEqual(HistogramOption(height=0).effective_height(), DEFAULT_HEIGHT)
        self.assertEqual(HistogramOption(height=-3).effective_height(), DEFAULT_HEIGHT)
        text = render_histogram([1.0], 1, HistogramOption(height=0))
        self.assertEqual(text, render_histogram([1.0], 1))

    def test_bucket_seconds_scale_time_labels(self):
        text = render_histogram([1.0, 1.0], 5, HistogramOption(height=1))
        self.assertTrue(text.endswith("0 -5s\n"))

    def test_deterministic(self):
        values = [float(v % 7) for v in range(40)]
        opt = HistogramOption(height=10)
        self.assertEqual(render_histogram(values, 1, opt), render_histogram(values, 1, opt))


class TestLabelInterval(unittest.TestCase):
    def test_small_windows_label_every_bucket(self):
        self.assertEqual(label_interval(1), 1)
        self.assertEqual(label_interval(20), 1)

    def test_large_windows_sample_labels(self):
        self.assertEqual(label_interval(21), 2)
        self.assertEqual(label_interval(60), 6)
        self.assertEqual(label_interval(100), 10)

    def test_sampled_labels_in_output(self):
        values = [1.0] * 30
        text = render_histogram(values, 1, HistogramOption(height=1))
        time_row = text.split("\n")[-2]
        self.assertTrue(time_row.startswith("0     -3    -6"))
        self.assertNotIn("-1 ", time_row)
        self.assertIn("-27", time_row)


if __name__ == "__main__":
    unittest.main()
