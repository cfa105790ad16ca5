#!/usr/bin/env python3
"""
Algorithm Benchmark

Runs every selected upscaler on one image and records, per algorithm:
- wall-clock duration
- output size
- fidelity: mean absolute error between the source and the output
  block-averaged back down to the source size (lower is better)

Failures are recorded and the run continues with the next algorithm.
Optionally writes each output image, a markdown comparison table and the raw
statistics as JSON.
"""

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
from tqdm import tqdm

from .config import BENCHMARK_REPORT_NAME, BENCHMARK_STATS_NAME
from .image import Image
from .io import save_image
from .upsampling import (
    CostTier,
    canonical_name,
    get_upscaler,
    get_upscaler_spec,
    list_upscalers,
    names_by_tier,
    simulate_downsample,
)


def fidelity_error(source: Image, upscaled: Image) -> float:
    """Mean absolute channel error of ``upscaled`` downsampled back to ``source``."""
    restored = simulate_downsample(upscaled.array, source.width, source.height)
    diff = source.array.astype(np.float64) - restored.astype(np.float64)
    return float(np.abs(diff).mean())


def select_algorithms(
    algorithms: Optional[List[str]] = None,
    tier: Optional[Union[str, CostTier]] = None
) -> List[str]:
    """Resolve the benchmark's algorithm list to canonical registry keys.

    Raises:
        UnknownAlgorithm: an explicit name is not registered
    """
    if isinstance(tier, str):
        tier = CostTier.parse(tier)

    if not algorithms:
        return list_upscalers() if tier is None else names_by_tier(tier)

    names = []
    for name in algorithms:
        key = canonical_name(name)
        if key not in names:
            names.append(key)

    if tier is not None:
        names = [n for n in names if get_upscaler_spec(n).tier == tier]
    return names


def run_benchmark(
    image: Image,
    scale_factor: float = 2.0,
    output_dir: Optional[Union[str, Path]] = None,
    algorithms: Optional[List[str]] = None,
    tier: Optional[Union[str, CostTier]] = None,
    verbose: bool = True
) -> Dict[str, Any]:
    """Upscale ``image`` with each selected algorithm and collect statistics.

    Args:
        image: Source image
        scale_factor: Scale passed to every upscaler
        output_dir: Directory for output images and reports (None = no files)
        algorithms: Registry keys to run (None = all, or all in ``tier``)
        tier: Restrict to one cost tier
        verbose: Show a progress bar and print a summary

    Returns:
        Statistics dictionary
    """
    names = select_algorithms(algorithms, tier)

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    stats = {
        'input_size': list(image.size),
        'scale_factor': scale_factor,
        'total': len(names),
        'completed': 0,
        'failed': 0,
        'results': [],
        'errors': []
    }

    pbar = tqdm(names, desc="Benchmarking", disable=not verbose)

    for name in pbar:
        spec = get_upscaler_spec(name)
        pbar.set_postfix(algo=name)

        try:
            upscaler = get_upscaler(name)
            start = time.perf_counter()
            result = upscaler.upscale(image, scale_factor)
            duration = time.perf_counter() - start

            entry = {
                'algorithm': name,
                'display_name': upscaler.name,
                'tier': spec.tier.name.lower(),
                'duration_s': duration,
                'output_size': list(result.size),
                'fidelity_mae': fidelity_error(image, result),
            }

            if output_dir is not None:
                entry['output_path'] = str(save_image(result, output_dir / f"{name}.png"))

            stats['results'].append(entry)
            stats['completed'] += 1

        except Exception as e:
            stats['failed'] += 1
            stats['errors'].append({
                'algorithm': name,
                'error': str(e)
            })
            if verbose:
                tqdm.write(f"   {name} failed: {e}")

    if output_dir is not None:
        report_path = generate_benchmark_report(stats, output_dir)
        stats_path = output_dir / BENCHMARK_STATS_NAME
        with open(stats_path, 'w') as f:
            json.dump(stats, f, indent=2)
        if verbose:
            print(f"Report: {report_path}")
            print(f"Stats: {stats_path}")

    if verbose:
        print(f"\nCompleted: {stats['completed']}")
        print(f"Failed: {stats['failed']}")

    return stats


def generate_benchmark_report(stats: Dict[str, Any], output_dir: Path) -> Path:
    """Write the markdown comparison table for a benchmark run.

    Args:
        stats: Output of :func:`run_benchmark`
        output_dir: Output directory

    Returns:
        Path to generated document
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    doc_path = output_dir / BENCHMARK_REPORT_NAME

    width, height = stats['input_size']
    ranked = sorted(stats['results'], key=lambda r: r['fidelity_mae'])

    with open(doc_path, 'w', encoding='utf-8') as f:
        f.write("# Upscaling Benchmark\n\n")
        f.write(f"**Generated**: {datetime.now().isoformat()}\n\n")

        f.write("## Summary\n\n")
        f.write(f"- **Input**: {width}x{height}\n")
        f.write(f"- **Scale factor**: {stats['scale_factor']}\n")
        f.write(f"- **Algorithms**: {stats['total']}\n")
        f.write(f"- **Failed**: {stats['failed']}\n\n")

        f.write("## Results\n\n")
        f.write("Sorted by fidelity error (source vs. output downsampled back; lower is better).\n\n")
        f.write("| Algorithm | Tier | Output | Time (s) | Fidelity MAE |\n")
        f.write("|---|---|---|---|---|\n")
        for r in ranked:
            out_w, out_h = r['output_size']
            f.write(
                f"| {r['algorithm']} | {r['tier']} | {out_w}x{out_h} "
                f"| {r['duration_s']:.3f} | {r['fidelity_mae']:.2f} |\n"
            )

        if stats['errors']:
            f.write("\n## Failures\n\n")
            for err in stats['errors']:
                f.write(f"- `{err['algorithm']}`: {err['error']}\n")

        f.write("\n---\n")
        f.write("\n*Document generated by image-upscaling benchmark*\n")

    return doc_path
