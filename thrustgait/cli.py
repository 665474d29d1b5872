"""Command-line interface for thrustgait.

Provides subcommands for lateral-thrust gait analysis of landmark files:

    thrustgait analyze frames.json --output result.json --csv
    thrustgait batch trial1.json trial2.json --output-dir ./results
    thrustgait compare before_result.json after_result.json
    thrustgait info result.json
"""

import argparse
import copy
import logging
import sys
import time
from pathlib import Path
from importlib.metadata import version as pkg_version, PackageNotFoundError


def _get_version() -> str:
    """Return package version without importing the full thrustgait package."""
    try:
        return pkg_version("thrustgait")
    except PackageNotFoundError:
        return "0.0.0+local"


def _setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_cfg(args) -> dict:
    from .config import DEFAULT_CONFIG, load_config

    if getattr(args, "config", None):
        return load_config(args.config)
    return copy.deepcopy(DEFAULT_CONFIG)


def _print_result(result: dict):
    lt = result["lateral_thrust"]
    stance = result["stance_phases"]
    n_left = sum(1 for p in stance if p["side"] == "left")
    print(f"  {result['total_frames']} frames, {result['duration']:.2f}s")
    print(f"  Stance phases: L={n_left}, R={len(stance) - n_left}")
    print(f"  Gait cycles: {len(result['gait_cycles'])}")
    for label, key in (("Left", "left_knee"), ("Right", "right_knee")):
        m = lt[key]
        print(f"  {label} knee thrust: {m['amplitude']} cm "
              f"(max {m['max_displacement']} cm, {m['severity']})")
    print(f"  Asymmetry: {lt['asymmetry_percent']}%")


def cmd_analyze(args):
    """Analyze one frame file: stance → cycles → lateral thrust."""
    from . import analyze_gait, load_frames, save_json
    from .export import export_csv, export_summary_json

    cfg = _load_cfg(args)
    export_cfg = cfg.get("export", {})

    t0 = time.time()
    frames = load_frames(args.frames)
    result = analyze_gait(frames)
    elapsed = time.time() - t0

    if result is None:
        print(f"Insufficient data: {len(frames)} frames (at least 30 required)")
        sys.exit(2)

    print(f"Analyzed {args.frames} in {elapsed:.2f}s")
    _print_result(result)

    output = args.output or str(Path(args.frames).with_name(Path(args.frames).stem + "_result.json"))
    save_json(result, output)
    print(f"Saved to {output}")

    out_dir = args.output_dir or str(Path(output).parent)
    prefix = export_cfg.get("prefix", "")
    if args.csv or export_cfg.get("csv"):
        files = export_csv(
            result, out_dir, prefix=prefix,
            include_waveforms=export_cfg.get("include_waveforms", True),
        )
        print(f"  CSV: {len(files)} files exported")
    if export_cfg.get("summary_json"):
        path = export_summary_json(
            result, str(Path(out_dir) / f"{prefix}summary.json"), source=args.frames,
        )
        print(f"  Summary: {path}")


def cmd_batch(args):
    """Analyze several trial files and summarize them."""
    from . import analyze_gait, load_frames, save_json, summarize_trials
    from .export import export_csv

    import glob as globmod

    cfg = _load_cfg(args)
    batch_cfg = cfg.get("batch", {})
    export_cfg = cfg.get("export", {})

    files = []
    for pattern in args.inputs:
        if Path(pattern).is_dir():
            pattern = str(Path(pattern) / batch_cfg.get("pattern", "*.json"))
        files.extend(globmod.glob(pattern))

    files = sorted(set(files))
    if not files:
        print("No files matched.")
        sys.exit(1)

    print(f"Batch processing {len(files)} files...")
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    results = []
    analyses = []
    for i, filepath in enumerate(files):
        name = Path(filepath).stem
        print(f"\n[{i+1}/{len(files)}] {name}")

        try:
            frames = load_frames(filepath)
            result = analyze_gait(frames)
            if result is None:
                print(f"  SKIPPED: insufficient data ({len(frames)} frames)")
                results.append({"file": name, "status": "insufficient_data"})
                analyses.append(None)
                continue

            save_json(result, str(out_dir / f"{name}_result.json"))
            if args.csv or export_cfg.get("csv"):
                export_csv(
                    result, str(out_dir), prefix=f"{name}_",
                    include_waveforms=export_cfg.get("include_waveforms", True),
                )

            lt = result["lateral_thrust"]
            print(f"  OK: L={lt['left_knee']['amplitude']} cm, "
                  f"R={lt['right_knee']['amplitude']} cm, "
                  f"asymmetry={lt['asymmetry_percent']}%")
            results.append({"file": name, "status": "ok"})
            analyses.append(result)

        except Exception as e:
            if not batch_cfg.get("continue_on_error", True):
                raise
            print(f"  ERROR: {e}")
            results.append({"file": name, "status": "error", "error": str(e)})
            analyses.append(None)

    ok = sum(1 for r in results if r["status"] == "ok")
    print(f"\nBatch complete: {ok}/{len(results)} succeeded")

    if ok:
        summary = summarize_trials(analyses)
        avg = summary["averages"]
        summary["best_trial"] = results[summary["best_trial_index"]]["file"]
        save_json(summary, str(out_dir / "batch_summary.json"))
        print(f"Best trial: {summary['best_trial']}")
        print(f"Average thrust: L={avg['left_amplitude']:.2f} cm, "
              f"R={avg['right_amplitude']:.2f} cm, "
              f"asymmetry={avg['asymmetry_percent']:.1f}%")
    return results


def cmd_compare(args):
    """Compare two saved analysis results (oldest first)."""
    from . import compare_sessions, load_json

    before = load_json(args.before)
    after = load_json(args.after)
    comparison = compare_sessions(before, after)

    for label, key in (("Right", "right_knee"), ("Left", "left_knee")):
        diff = comparison[f"{key}_diff"]
        pct = comparison[f"{key}_change_percent"]
        print(f"{label} knee: {diff:+.1f} cm ({pct:+.1f}%), "
              f"{comparison[f'{key}_trend'].replace('_', ' ')}")
    flag = " (significant)" if comparison["asymmetry_changed"] else ""
    print(f"Asymmetry: {comparison['asymmetry_diff']:+d}%{flag}")


def cmd_info(args):
    """Display info about a saved analysis result."""
    from . import load_json

    result = load_json(args.json_file)
    print(f"Result: {args.json_file}")
    _print_result(result)


def main():
    parser = argparse.ArgumentParser(
        prog="thrustgait",
        description="Stance, gait-cycle and lateral knee thrust analysis from pose landmarks",
    )
    parser.add_argument("--version", action="version", version=f"thrustgait {_get_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # analyze
    p_analyze = sub.add_parser("analyze", help="Analyze a landmark frame JSON file")
    p_analyze.add_argument("frames", help="Path to frame JSON file")
    p_analyze.add_argument("-o", "--output", help="Output result JSON (default: <frames>_result.json)")
    p_analyze.add_argument("--output-dir", help="Directory for CSV/summary exports (default: next to output)")
    p_analyze.add_argument("--csv", action="store_true", help="Export CSV files")
    p_analyze.add_argument("--config", help="Config file (JSON/YAML)")
    p_analyze.set_defaults(func=cmd_analyze)

    # batch
    p_batch = sub.add_parser("batch", help="Analyze multiple trial files and summarize them")
    p_batch.add_argument("inputs", nargs="+", help="Frame JSON paths, glob patterns or directories")
    p_batch.add_argument("-o", "--output-dir", default="./batch_output", help="Output directory")
    p_batch.add_argument("--config", help="Config file (JSON/YAML)")
    p_batch.add_argument("--csv", action="store_true", help="Also export CSV files")
    p_batch.set_defaults(func=cmd_batch)

    # compare
    p_compare = sub.add_parser("compare", help="Compare two analysis results")
    p_compare.add_argument("before", help="Earlier result JSON")
    p_compare.add_argument("after", help="Later result JSON")
    p_compare.set_defaults(func=cmd_compare)

    # info
    p_info = sub.add_parser("info", help="Show a saved analysis result")
    p_info.add_argument("json_file", help="Path to result JSON file")
    p_info.set_defaults(func=cmd_info)

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
