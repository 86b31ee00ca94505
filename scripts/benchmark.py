#!/usr/bin/env python3
"""Performance benchmark script for tickwatch."""

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from tickwatch.config.defaults import HistoryParams
from tickwatch.data.models import Sample
from tickwatch.logging.config import configure_logging
from tickwatch.ticker import Ticker


def generate_sample_data(count: int) -> List[Sample]:
    """Generate a noisy sine wave of one-second samples."""
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    return [
        Sample(
            price=2000.0 + 15.0 * math.sin(i / 25.0) + (i % 7) * 0.3,
            timestamp=base_time + timedelta(seconds=i),
        )
        for i in range(count)
    ]


def benchmark_ticker(data_points: int = 1000, capacity: int = 100) -> Dict[str, float]:
    """Benchmark accept_sample throughput."""
    print(f"🏃 Benchmarking ticker with {data_points} samples (capacity {capacity})...")

    ticker = Ticker("BENCH", history=HistoryParams(capacity=capacity))
    test_data = generate_sample_data(data_points)

    start_time = time.time()

    for sample in test_data:
        ticker.accept_sample(sample.price, sample.timestamp)

    total_time = time.time() - start_time

    return {
        "total_time": total_time,
        "avg_time_per_sample": total_time / data_points,
        "samples_per_second": data_points / total_time if total_time else float("inf"),
        "data_points": data_points,
    }


def main():
    """Main benchmark function."""
    configure_logging(level="WARNING")

    print("⚡ tickwatch Performance Benchmark")
    print("=" * 40)

    for size in [100, 1000, 10000]:
        results = benchmark_ticker(size)

        print(f"\n📊 Results for {size} samples:")
        print(f"   Total time: {results['total_time']:.3f}s")
        print(f"   Avg per sample: {results['avg_time_per_sample']*1000:.3f}ms")
        print(f"   Samples/second: {results['samples_per_second']:.1f}")

        # A sample must be applied well inside the one-minute poll interval
        if results['avg_time_per_sample'] <= 1.0:
            print("   ✅ Meets 1-second sample requirement")
        else:
            print("   ❌ Exceeds 1-second sample requirement")


if __name__ == "__main__":
    main()
