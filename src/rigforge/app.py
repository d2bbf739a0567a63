"""RigForge command-line entry point.

Single-file mode processes ``--input-files`` into ``--output-files`` (or
back over the input).  Bulk mode walks the input directory recursively and
mirrors every scene document into the output directory.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rigforge.core.config_loader import ConfigError, ProcessingConfig, load_processing_config
from rigforge.coordination.pipeline import ProcessingPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rigforge",
        description="Batch post-processor for rigged character scenes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-i", "--input-files", default="",
                        help="path to the input file(s)")
    parser.add_argument("-o", "--output-files", default="",
                        help="path for the output file(s)")
    parser.add_argument("-b", "--bulk", action="store_true",
                        help="Bulk process more than one file?")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Output verbose information")
    parser.add_argument("-j", "--joints", default="",
                        help="Joint meta file (JSON)")
    parser.add_argument("-k", "--add-ik", action="store_true",
                        help="Add standard IK bones to the model")
    parser.add_argument("-f", "--fixamo", action="store_true",
                        help="Apply fixes to Mixamo model")
    parser.add_argument("--scale", type=float, default=1.0,
                        help="Apply uniform scale")
    parser.add_argument("--proxies", action="store_true",
                        help="Create physics/ragdoll proxy placeholders from the joint file")
    return parser


def build_config(args: argparse.Namespace) -> ProcessingConfig:
    """Load the joint file (if any) and fold in the command-line flags."""
    config = load_processing_config(Path(args.joints)) if args.joints else ProcessingConfig()
    config.scale = args.scale
    config.add_ik = args.add_ik
    config.apply_mixamo_fixes = args.fixamo
    config.create_proxies = args.proxies
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """Run the tool; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigError as e:
        logger.error("Joint file was mal-formed JSON: %s", e)
        return 1

    pipeline = ProcessingPipeline(config)

    if not args.bulk:
        if not args.input_files:
            parser.print_usage(sys.stderr)
            logger.error("An input file is required (-i)")
            return 1
        in_path = Path(args.input_files)
        # Default output is to the same file as the input.
        out_path = Path(args.output_files) if args.output_files else in_path
        ok = pipeline.process_file(in_path, out_path)
    else:
        if not args.output_files:
            parser.print_usage(sys.stderr)
            logger.error("You must supply an output path for bulk conversions.")
            return 1
        input_root = Path(args.input_files or ".")
        ok = pipeline.process_directory(input_root, Path(args.output_files))

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
