"""
CLI entry point for the shot tracker.
"""
import argparse
import sys
from pathlib import Path

from shot_tracker.pipeline import Pipeline, load_detection_log
import config


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Basketball shot detection from video or a detection log",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input", "-i",
        help="Path to input video file"
    )
    source.add_argument(
        "--detections", "-d",
        help="Path to a recorded detection log (JSON)"
    )

    parser.add_argument(
        "--output", "-o",
        default=str(config.RESULTS_DIR),
        help="Output directory for results"
    )

    parser.add_argument(
        "--name", "-n",
        default=None,
        help="Base name for output files (default: input filename)"
    )

    parser.add_argument(
        "--calibration", "-c",
        default=None,
        help="Court calibration JSON (enables court-space three-point calls)"
    )

    parser.add_argument(
        "--rim",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="Rim position in screen pixels"
    )

    parser.add_argument(
        "--skip", "-s",
        type=int,
        default=config.DEFAULT_SKIP,
        help="Frames to skip between processing (0 = process all)"
    )

    parser.add_argument(
        "--max-frames", "-m",
        type=int,
        default=None,
        help="Maximum frames to process (default: all)"
    )

    parser.add_argument(
        "--no-video",
        action="store_true",
        help="Don't save annotated output video"
    )

    parser.add_argument(
        "--no-json",
        action="store_true",
        help="Don't save JSON shot data"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress bar"
    )

    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()

    source = Path(args.input or args.detections)
    if not source.exists():
        print(f"Error: Input file not found: {source}")
        sys.exit(1)

    pipeline = Pipeline(
        output_dir=args.output,
        calibration_path=args.calibration,
        rim_position=tuple(args.rim) if args.rim else None,
        frame_skip=args.skip,
        save_video=not args.no_video,
        save_json=not args.no_json,
        show_progress=not args.quiet,
    )

    print(f"Processing: {source}")
    print(f"Output directory: {args.output}")

    try:
        if args.detections:
            shots = pipeline.replay(load_detection_log(source),
                                    output_name=args.name or source.stem)
        else:
            shots = pipeline.process(str(source), max_frames=args.max_frames,
                                     output_name=args.name)
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user.")
        sys.exit(0)
    except (IOError, ValueError, RuntimeError) as e:
        print(f"Error during processing: {e}")
        sys.exit(1)

    stats = pipeline.session.stats()
    print("\n--- Processing Complete ---")
    print(f"Shots detected: {len(shots)}")
    print(f"  Made:   {stats.made_shots}  ({stats.shot_percentage:.1f}%)")
    print(f"  2PT:    {stats.two_point_made}/{stats.two_point_attempts}")
    print(f"  3PT:    {stats.three_point_made}/{stats.three_point_attempts}")
    print(f"Points: {stats.points_scored}")


if __name__ == "__main__":
    main()
