#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from pathlib import Path
import matplotlib.pyplot as plt
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import numpy as np
from collections import defaultdict

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")
PHASES = ['map_phase_time_seconds', 'shuffle_phase_time_seconds', 'reduce_phase_time_seconds']


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same benchmark.
    Returns dict: benchmark_name -> {avg_runtime, std_runtime, config, ...}
    """
    by_benchmark = defaultdict(list)

    for r in results:
        if r['success']:  # Only include successful runs
            by_benchmark[r['benchmark_name']].append(r)

    aggregated = {}
    for name, runs in by_benchmark.items():
        runtimes = [r['total_time_seconds'] for r in runs]
        first = runs[0]

        aggregated[name] = {
            'benchmark_name': name,
            'description': first['description'],
            'map_workers': first['map_workers'],
            'reduce_workers': first['reduce_workers'],
            'chunk_size': first['chunk_size'],
            'avg_runtime': np.mean(runtimes),
            'std_runtime': np.std(runtimes),
            'min_runtime': np.min(runtimes),
            'max_runtime': np.max(runtimes),
            'num_runs': len(runs),
        }
        for phase in PHASES:
            aggregated[name][phase] = np.mean([r[phase] for r in runs])

    return aggregated


def plot_worker_scaling(aggregated, prefix, worker_field, label, color, output_file):
    """Plot runtime vs pool size for one experiment."""
    data = [(v[worker_field], v['avg_runtime'], v['std_runtime'])
            for k, v in aggregated.items()
            if k.startswith(prefix)]

    if not data:
        print(f"⚠️  No {prefix} data found")
        return

    data.sort()
    workers, runtimes, stds = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.errorbar(workers, runtimes, yerr=stds, marker='o', capsize=5,
                 linewidth=2, markersize=8, color=color)
    plt.xlabel(label, fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title(f'chunkmr Performance: {label}', fontsize=14, fontweight='bold')
    plt.xticks(workers)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_phase_breakdown(aggregated, output_file):
    """Stacked bar chart of map/shuffle/reduce time per benchmark."""
    if not aggregated:
        print("⚠️  No data for phase breakdown")
        return

    names = sorted(aggregated.keys())
    x = np.arange(len(names))
    bottom = np.zeros(len(names))

    plt.figure(figsize=(12, 6))
    for phase, color in zip(PHASES, ['steelblue', 'orange', 'green']):
        heights = np.array([aggregated[name][phase] for name in names])
        plt.bar(x, heights, bottom=bottom, label=phase.split('_')[0], color=color)
        bottom += heights

    plt.xticks(x, names, rotation=45, ha='right')
    plt.ylabel('Time (seconds)', fontsize=12)
    plt.title('Phase Breakdown per Benchmark', fontsize=14, fontweight='bold')
    plt.legend(fontsize=11)
    plt.grid(True, axis='y', alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Benchmark | Maps | Reduces | Chunk | Avg Runtime (s) | Std Dev |",
        "|-----------|------|---------|-------|-----------------|---------|"
    ]

    for name in sorted(aggregated.keys()):
        v = aggregated[name]
        lines.append(
            f"| {v['benchmark_name']:<18} | {v['map_workers']:>4} | "
            f"{v['reduce_workers']:>7} | {v['chunk_size']:>5} | "
            f"{v['avg_runtime']:>15.3f} | {v['std_runtime']:>7.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines))

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        sys.exit(1)

    json_file = sys.argv[1]

    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        sys.exit(1)

    print(f"Loading results from: {json_file}")
    results = load_results(json_file)
    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated {len(results)} runs into {len(aggregated)} benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)

    plot_worker_scaling(aggregated, 'map_scaling_', 'map_workers', 'Map Pool Size',
                        'orangered', PLOTS_DIR / "1_map_pool_scaling.png")
    plot_worker_scaling(aggregated, 'reduce_scaling_', 'reduce_workers', 'Reduce Pool Size',
                        'green', PLOTS_DIR / "2_reduce_pool_scaling.png")
    plot_phase_breakdown(aggregated, PLOTS_DIR / "3_phase_breakdown.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"\nAll plots saved to: {PLOTS_DIR}/")


if __name__ == "__main__":
    main()
