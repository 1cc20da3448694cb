#!/usr/bin/env python3
"""
Benchmark suite comparing whole-file and chunked parallel encryption.

The placeholder cipher sleeps in proportion to its input, so the chunked
strategy gains from running chunks on several workers while the whole-file
strategy pays for the entire file in one call.
"""

import os
import statistics
import tempfile
from pathlib import Path
from typing import Any, Dict
from parallel_chunks import FileCryptor, ChunkLayout


MB = 1024 * 1024


class BenchmarkSuite:
    """Benchmark suite for Parallel Chunks."""

    def __init__(self, delay_divisor: int = 2000, iterations: int = 3):
        """Initialize the benchmark suite."""
        self.delay_divisor = delay_divisor
        self.iterations = iterations

    @staticmethod
    def create_source_file(directory: Path, size_mb: int) -> Path:
        """Create a pseudo-random source file of the given size."""
        path = directory / f"source_{size_mb}mb.bin"
        path.write_bytes(os.urandom(size_mb * MB))
        return path

    def _run(self, cryptor: FileCryptor, source: Path, operation: str) -> Dict[str, float]:
        durations = []
        for _ in range(self.iterations):
            result = getattr(cryptor, operation)(source)
            durations.append(result.duration)
            # the chunked writer never reuses an existing chunk set
            self._remove_outputs(source)
        return {
            "avg_time": statistics.mean(durations),
            "std_time": statistics.stdev(durations) if len(durations) > 1 else 0.0,
            "throughput_mbps": (source.stat().st_size / MB) / statistics.mean(durations)
        }

    @staticmethod
    def _remove_outputs(source: Path):
        whole = FileCryptor.whole_target(source)
        if whole.exists():
            whole.unlink()
        chunked = FileCryptor.chunked_target(source)
        if chunked.exists():
            for path in chunked.iterdir():
                path.unlink()
            chunked.rmdir()

    def benchmark_strategies(self, size_mb: int = 32) -> Dict[str, Any]:
        """Compare whole-file and chunked encryption on one file."""
        print("🔬 Benchmarking strategies...")
        results = {}

        with tempfile.TemporaryDirectory() as temp_dir:
            source = self.create_source_file(Path(temp_dir), size_mb)
            cryptor = FileCryptor(layout=ChunkLayout(chunk_size_bytes=2 * MB),
                                  delay_divisor=self.delay_divisor)

            for operation in ["encrypt_whole", "encrypt_chunked"]:
                print(f"   Testing {operation}...")
                results[operation] = self._run(cryptor, source, operation)

        return results

    def benchmark_chunk_sizes(self, size_mb: int = 32) -> Dict[str, Any]:
        """Benchmark chunked encryption across chunk sizes."""
        print("📊 Benchmarking chunk sizes...")
        results = {}

        with tempfile.TemporaryDirectory() as temp_dir:
            source = self.create_source_file(Path(temp_dir), size_mb)

            for chunk_mb in [1, 2, 4, 10, 16]:
                label = f"{chunk_mb}MB"
                print(f"   Testing {label} chunks...")
                cryptor = FileCryptor(layout=ChunkLayout(chunk_size_bytes=chunk_mb * MB),
                                      delay_divisor=self.delay_divisor)
                results[label] = self._run(cryptor, source, "encrypt_chunked")
                results[label]["chunk_count"] = cryptor.layout.chunk_count_for(size_mb * MB)

        return results

    def benchmark_workers(self, size_mb: int = 32) -> Dict[str, Any]:
        """Benchmark chunked encryption across worker pool sizes."""
        print("⚙️  Benchmarking worker counts...")
        results = {}

        with tempfile.TemporaryDirectory() as temp_dir:
            source = self.create_source_file(Path(temp_dir), size_mb)

            for workers in [1, 2, 4, 8]:
                label = f"{workers} workers"
                print(f"   Testing {label}...")
                cryptor = FileCryptor(layout=ChunkLayout(chunk_size_bytes=2 * MB),
                                      max_workers=workers, delay_divisor=self.delay_divisor)
                results[label] = self._run(cryptor, source, "encrypt_chunked")

        return results

    def print_results(self, results: Dict[str, Any], title: str):
        """Print benchmark results in a formatted table."""
        print(f"\n📈 {title}")
        print("=" * 80)

        if not results:
            print("No results to display.")
            return

        first_key = next(iter(results.keys()))
        columns = list(results[first_key].keys())

        header = f"{'Config':<18}"
        for col in columns:
            header += f"{col:<18}"
        print(header)
        print("-" * len(header))

        for config, data in results.items():
            row = f"{config:<18}"
            for col in columns:
                value = data.get(col, 0)
                if isinstance(value, float):
                    row += f"{value:<18.3f}"
                else:
                    row += f"{value:<18}"
            print(row)

    def run_comprehensive_benchmark(self):
        """Run the complete benchmark suite."""
        print("🚀 Parallel Chunks Benchmark Suite")
        print("=" * 60)
        print(f"Simulated cipher speed: {self.delay_divisor} bytes/ms, {self.iterations} iterations")
        print()

        strategy_results = self.benchmark_strategies()
        self.print_results(strategy_results, "Whole-file vs chunked")

        if len(strategy_results) == 2:
            speedup = (strategy_results["encrypt_whole"]["avg_time"]
                       / strategy_results["encrypt_chunked"]["avg_time"])
            print(f"\n🎯 Chunked speedup: {speedup:.1f}x on {os.cpu_count()} CPUs")

        self.print_results(self.benchmark_chunk_sizes(), "Chunk size comparison")
        self.print_results(self.benchmark_workers(), "Worker count scaling")


def main():
    """Run the benchmark suite."""
    BenchmarkSuite().run_comprehensive_benchmark()


if __name__ == "__main__":
    main()
