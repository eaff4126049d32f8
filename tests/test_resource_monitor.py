from __future__ import annotations

import unittest

from helpers.resource_monitor import ResourceMonitor, ResourceSample


class ResourceMonitorTests(unittest.TestCase):
    def test_snapshot_reports_process_metrics(self) -> None:
        sample = ResourceMonitor().snapshot()
        self.assertGreater(sample.rss_mb, 0.0)
        self.assertGreaterEqual(sample.cpu_total, 0.0)

    def test_delta_and_describe(self) -> None:
        monitor = ResourceMonitor()
        before = ResourceSample(taken_at=10.0, rss_mb=100.0, cpu_total=1.0, load_avg=None)
        after = ResourceSample(taken_at=12.0, rss_mb=112.5, cpu_total=2.0, load_avg=(0.5, 0.25, 0.1))
        delta = monitor.delta(before, after)
        self.assertEqual(delta.duration_sec, 2.0)
        self.assertEqual(delta.rss_delta_mb, 12.5)
        self.assertIsNotNone(delta.cpu_percent)
        text = monitor.describe(delta)
        self.assertIn("rss=112.5MB(Δ+12.5)", text)
        self.assertIn("load=0.50,0.25,0.10", text)

    def test_zero_duration_has_no_cpu_percent(self) -> None:
        monitor = ResourceMonitor()
        sample = ResourceSample(taken_at=1.0, rss_mb=1.0, cpu_total=1.0, load_avg=None)
        self.assertIsNone(monitor.delta(sample, sample).cpu_percent)


if __name__ == "__main__":
    unittest.main()
