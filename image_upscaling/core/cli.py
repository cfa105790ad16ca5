#!/usr/bin/env python3
"""
Image Upscaling CLI

Provides commands for:
- upscale: Upscale an image (content-aware pipeline, a fixed algorithm, or both
  compared)
- analyze: Classify image content and report quality issues
- algorithms: List registered algorithms by cost tier
- benchmark: Run several algorithms on one image and compare them
"""

import argparse
import json
import sys
from pathlib import Path

from .analysis import analyze_content
from .benchmark import run_benchmark
from .config import DEFAULT_ALGORITHM, DEFAULT_SCALE_FACTOR, PipelineConfig
from .errors import ImageUpscalingError
from .io import load_image, save_image
from .pipeline import UpscalePipeline, compare_modes, process_traditional
from .preprocessing import detect_quality_issues
from .upsampling import CostTier, get_upscaler_spec, list_aliases, list_upscalers, names_by_tier


def cmd_upscale(args):
    """Upscale one image file."""
    verbose = not args.quiet

    try:
        if args.mode in ('compare', 'comparison'):
            stats = compare_modes(args.input, args.output, args.scale, args.algorithm, verbose)
            failed = [mode for mode, r in stats['modes'].items() if r['error'] is not None]
            for mode in failed:
                print(f"Error: {mode} mode failed: {stats['modes'][mode]['error']}")
            return 1 if failed else 0
        elif args.mode == 'traditional':
            image = load_image(args.input)
            algorithm = args.algorithm or DEFAULT_ALGORITHM
            if verbose:
                print(f"Loaded input: {image.width}x{image.height}")
                print(f"Algorithm: {algorithm}")
            result = process_traditional(image, algorithm, args.scale)
            save_image(result, args.output)
        else:
            config = PipelineConfig(
                scale_factor=args.scale,
                force_algorithm=args.algorithm,
                enable_preprocessing=not args.no_preprocess,
                enable_postprocessing=not args.no_postprocess,
                verbose=verbose,
            )
            context = UpscalePipeline(config).run(args.input, args.output)
            result = context.result
    except (ImageUpscalingError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if verbose:
        print(f"Output: {args.output} ({result.width}x{result.height})")
    return 0


def cmd_analyze(args):
    """Print the content profile of an image."""
    try:
        image = load_image(args.input)
    except ImageUpscalingError as e:
        print(f"Error: {e}")
        return 1

    profile = analyze_content(image)
    report = detect_quality_issues(profile)

    if args.json:
        data = profile.to_dict()
        data['size'] = list(image.size)
        data['issues'] = report.issues
        print(json.dumps(data, indent=2))
        return 0

    print(f"Image: {args.input} ({image.width}x{image.height})")
    print(profile.summary())
    print(f"  Description:       {profile.content_type.description}")
    if report.issues:
        print("\nQuality issues:")
        for issue in report.issues:
            print(f"  - {issue}")
    return 0


def cmd_algorithms(args):
    """List registered algorithms grouped by cost tier."""
    if args.tier:
        try:
            tiers = [CostTier.parse(args.tier)]
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    else:
        tiers = list(CostTier)

    aliases = {}
    for alias, key in list_aliases().items():
        aliases.setdefault(key, []).append(alias)

    for tier in tiers:
        print(f"\n{tier.description}:")
        for name in names_by_tier(tier):
            spec = get_upscaler_spec(name)
            line = f"  {name:<16} {spec.description}"
            if aliases.get(name):
                line += f" (aliases: {', '.join(aliases[name])})"
            print(line)

            if args.verbose:
                if spec.preserves:
                    print(f"      preserves:  {spec.preserves}")
                if spec.introduces:
                    print(f"      introduces: {spec.introduces}")
                if spec.default_params:
                    print(f"      params:     {spec.default_params}")

    if not args.tier:
        print(f"\nTotal: {len(list_upscalers())} algorithms")
    return 0


def cmd_benchmark(args):
    """Compare algorithms on one image."""
    try:
        image = load_image(args.input)
        print(f"Loaded input: {image.width}x{image.height}")
        stats = run_benchmark(
            image,
            scale_factor=args.scale,
            output_dir=Path(args.output) if args.output else None,
            algorithms=args.algorithms,
            tier=args.tier,
        )
    except (ImageUpscalingError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print()
    for r in sorted(stats['results'], key=lambda r: r['fidelity_mae']):
        print(f"  {r['algorithm']:<16} {r['duration_s']:8.3f}s   MAE {r['fidelity_mae']:.2f}")

    return 0 if stats['failed'] == 0 else 1


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Image Upscaling - content-aware image upscaling',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  image-upscaling upscale in.png out.png -s 2          Content-aware upscale
  image-upscaling upscale in.png out.png -a xbr        Force an algorithm
  image-upscaling upscale in.png out.png --mode compare Time pipeline vs direct
  image-upscaling analyze in.png                       Classify content
  image-upscaling algorithms -v                        List algorithms
  image-upscaling benchmark in.png -o ./bench -t fast  Compare fast tier
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # upscale command
    p_up = subparsers.add_parser('upscale', help='Upscale an image')
    p_up.add_argument('input', type=str, help='Input image file')
    p_up.add_argument('output', type=str, help='Output image file')
    p_up.add_argument('-s', '--scale', type=float, default=DEFAULT_SCALE_FACTOR,
                      help='Scale factor (default: 2.0)')
    p_up.add_argument('-a', '--algorithm', type=str, default=None,
                      help='Force an algorithm instead of the recommendation')
    p_up.add_argument('--mode', choices=['pipeline', 'traditional', 'compare', 'comparison'],
                      default='pipeline',
                      help='pipeline: analyze first; traditional: upscale directly; '
                           'compare: run both and report the pipeline overhead')
    p_up.add_argument('--no-preprocess', action='store_true',
                      help='Skip denoise/sharpen')
    p_up.add_argument('--no-postprocess', action='store_true',
                      help='Skip post-processing')
    p_up.add_argument('-q', '--quiet', action='store_true',
                      help='Suppress progress output')

    # analyze command
    p_an = subparsers.add_parser('analyze', help='Classify image content')
    p_an.add_argument('input', type=str, help='Input image file')
    p_an.add_argument('--json', action='store_true',
                      help='Print the profile as JSON')

    # algorithms command
    p_alg = subparsers.add_parser('algorithms', help='List available algorithms')
    p_alg.add_argument('-t', '--tier', type=str, default=None,
                       help='Only this tier (instant, fast, medium, slow)')
    p_alg.add_argument('-v', '--verbose', action='store_true',
                       help='Show parameters and trade-offs')

    # benchmark command
    p_bench = subparsers.add_parser('benchmark', help='Compare algorithms on one image')
    p_bench.add_argument('input', type=str, help='Input image file')
    p_bench.add_argument('-s', '--scale', type=float, default=DEFAULT_SCALE_FACTOR,
                         help='Scale factor (default: 2.0)')
    p_bench.add_argument('-o', '--output', type=str, default=None,
                         help='Directory for outputs and BENCHMARK.md')
    p_bench.add_argument('-a', '--algorithms', type=str, nargs='+', default=None,
                         help='Algorithms to run (default: all)')
    p_bench.add_argument('-t', '--tier', type=str, default=None,
                         help='Only this tier')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    commands = {
        'upscale': cmd_upscale,
        'analyze': cmd_analyze,
        'algorithms': cmd_algorithms,
        'benchmark': cmd_benchmark,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
