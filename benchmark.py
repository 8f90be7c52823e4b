#!/usr/bin/env python3
"""
Benchmarking script for the chunkmr engine.
Generates synthetic click data, runs the total-clicks job under several
pool/chunk configurations and collects per-phase metrics.
"""

import argparse
import csv
import json
import random
import shutil
import sys
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

from chunkmr.config import EngineConfig
from chunkmr.data_manager import CSVDataManager
from chunkmr.engine import MapReduce
from chunkmr.function_loader import FunctionLoader

RESULTS_DIR = Path("benchmark_results")
JOB_FILE = Path(__file__).parent / "examples" / "total_clicks.py"

BENCHMARKS = [
    # Experiment 1: map pool scaling
    {"name": "map_scaling_1", "map_workers": 1, "reduce_workers": 4, "chunk_size": 8,
     "description": "1 map worker"},
    {"name": "map_scaling_2", "map_workers": 2, "reduce_workers": 4, "chunk_size": 8,
     "description": "2 map workers"},
    {"name": "map_scaling_4", "map_workers": 4, "reduce_workers": 4, "chunk_size": 8,
     "description": "4 map workers"},
    {"name": "map_scaling_8", "map_workers": 8, "reduce_workers": 4, "chunk_size": 8,
     "description": "8 map workers"},

    # Experiment 2: reduce pool scaling
    {"name": "reduce_scaling_1", "map_workers": 4, "reduce_workers": 1, "chunk_size": 8,
     "description": "1 reduce worker"},
    {"name": "reduce_scaling_2", "map_workers": 4, "reduce_workers": 2, "chunk_size": 8,
     "description": "2 reduce workers"},
    {"name": "reduce_scaling_8", "map_workers": 4, "reduce_workers": 8, "chunk_size": 8,
     "description": "8 reduce workers"},

    # Experiment 3: chunk size
    {"name": "chunk_size_1", "map_workers": 4, "reduce_workers": 4, "chunk_size": 1,
     "description": "One group per chunk"},
    {"name": "chunk_size_64", "map_workers": 4, "reduce_workers": 4, "chunk_size": 64,
     "description": "64 groups per chunk"},
]


def generate_clicks(data_root: Path, num_files: int, rows_per_file: int, num_days: int, seed: int = 42):
    """Write num_files click CSVs under data_root/clicks."""
    rng = random.Random(seed)
    clicks_dir = data_root / "clicks"
    clicks_dir.mkdir(parents=True, exist_ok=True)
    first_day = date(2024, 1, 1)

    for file_index in range(num_files):
        with open(clicks_dir / f"clicks-{file_index:03d}.csv", 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(["date", "user_id", "click_target"])
            for _ in range(rows_per_file):
                day = first_day + timedelta(days=rng.randrange(num_days))
                writer.writerow([day.isoformat(), rng.randrange(10000), f"/page/{rng.randrange(50)}"])


def run_benchmark(config, data_root: Path, output_root: Path, run_number=1):
    """Run a single benchmark configuration."""
    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Description: {config['description']}")
    print(f"{'='*70}")

    loader = FunctionLoader(str(JOB_FILE))
    engine = MapReduce(
        config["chunk_size"],
        CSVDataManager(loader.get_serialize_function()),
        sort_key=loader.get_sort_key(),
        config=EngineConfig(map_workers=config["map_workers"],
                            reduce_workers=config["reduce_workers"]),
    )

    output_path = output_root / f"{config['name']}-{run_number}"
    job_result = engine.run(loader.get_sources(str(data_root)), loader.get_reduce_function(), output_path)
    metrics = job_result.metrics

    print(f"  {job_result.message}")
    print(f"  Total {metrics.total_time_seconds:.3f}s "
          f"(map {metrics.map_phase_time_seconds:.3f}s, "
          f"shuffle {metrics.shuffle_phase_time_seconds:.3f}s, "
          f"reduce {metrics.reduce_phase_time_seconds:.3f}s)")

    result = {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "map_workers": config["map_workers"],
        "reduce_workers": config["reduce_workers"],
        "chunk_size": config["chunk_size"],
        "success": job_result.succeeded,
        "num_entries": job_result.num_entries,
        "num_groups": job_result.num_groups,
        "num_chunks": job_result.num_chunks,
        "chunks_written": len(job_result.chunks_written),
    }
    result.update({k: round(v, 4) if isinstance(v, float) else v
                   for k, v in metrics.to_dict().items()
                   if k.endswith("_seconds") or k == "peak_rss_bytes"})
    return result


def save_results(results, timestamp):
    """Save results to JSON and CSV files."""
    RESULTS_DIR.mkdir(exist_ok=True)

    json_file = RESULTS_DIR / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    csv_file = RESULTS_DIR / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = list(results[0].keys())
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<20} {'Maps':>5} {'Reduces':>7} {'Chunk':>6} {'Runtime':>10} {'Status':>8}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<20} {r['map_workers']:>5} {r['reduce_workers']:>7} "
              f"{r['chunk_size']:>6} {r['total_time_seconds']:>9.3f}s "
              f"{'✓' if r['success'] else '✗':>8}")

    print(f"{'='*70}")
    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} benchmarks, {successful} successful, "
          f"{len(results) - successful} failed")


def main():
    parser = argparse.ArgumentParser(description="chunkmr performance benchmark suite")
    parser.add_argument("--files", type=int, default=16, help="Number of click files")
    parser.add_argument("--rows", type=int, default=20000, help="Rows per click file")
    parser.add_argument("--days", type=int, default=365, help="Distinct dates")
    parser.add_argument("--runs", type=int, default=3, help="Runs per configuration")
    args = parser.parse_args()

    work_dir = Path(tempfile.mkdtemp(prefix="chunkmr-bench-"))
    try:
        print(f"Generating {args.files} files x {args.rows} rows under {work_dir}")
        generate_clicks(work_dir / "data", args.files, args.rows, args.days)

        results = []
        for config in BENCHMARKS:
            for run_number in range(1, args.runs + 1):
                results.append(run_benchmark(config, work_dir / "data", work_dir / "output", run_number))

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        save_results(results, timestamp)
        print_summary(results)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)

    return 0 if all(r['success'] for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
