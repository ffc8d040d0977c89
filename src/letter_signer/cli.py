"""
Command line entry point for letter-signer.

Example:
    letter-signer letter.docx signature.png -x 60 -y 8 -w 25 --pages last
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from letter_signer import __version__
from letter_signer.core.errors import SignerError
from letter_signer.core.models import PageSelectionMode
from letter_signer.stamping import SignerConfig, sign_document

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="letter-signer",
        description="Stamp a signature image onto pages of a document and save it as PDF.",
    )
    parser.add_argument("document", type=Path, help="Source document (.docx, .odt, .rtf, .pdf)")
    parser.add_argument("signature", type=Path, help="Signature image (PNG, JPEG, ...)")
    parser.add_argument("-x", "--x-percent", type=float, help="Offset from left edge, %% of page width")
    parser.add_argument("-y", "--y-percent", type=float, help="Offset from bottom edge, %% of page height")
    parser.add_argument("-w", "--width-percent", type=float, help="Signature width, %% of page width")
    parser.add_argument(
        "--pages",
        dest="page_mode",
        choices=[m.value for m in PageSelectionMode],
        help="Pages to sign (default: last)",
    )
    parser.add_argument("--from", dest="range_from", type=int, help="First page of --pages range")
    parser.add_argument("--to", dest="range_to", type=int, help="Last page of --pages range")
    parser.add_argument("--scale", dest="raster_scale", type=float, help="Capture resolution multiplier (default: 2)")
    parser.add_argument("--media-type", dest="overlay_media_type", help="Signature media type (default: inferred)")
    parser.add_argument("--name", dest="output_base_name", help="Output file base name")
    parser.add_argument("-o", "--output-dir", type=Path, help="Output directory (default: next to document)")
    parser.add_argument("--config", type=Path, help="JSON config file; command line options override it")
    parser.add_argument("--metadata", action="store_true", help="Also write a JSON metadata file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> SignerConfig:
    """
    Build a SignerConfig from parsed arguments.

    Values from --config are the base; options given on the command
    line override them.

    Raises:
        ValueError: If the config file is invalid
    """
    overrides = {
        "x_percent": args.x_percent,
        "y_percent": args.y_percent,
        "width_percent": args.width_percent,
        "page_mode": args.page_mode,
        "range_from": args.range_from,
        "range_to": args.range_to,
        "raster_scale": args.raster_scale,
        "overlay_media_type": args.overlay_media_type,
        "output_base_name": args.output_base_name,
        "output_dir": args.output_dir,
        "write_metadata": True if args.metadata else None,
    }

    if args.config is not None:
        try:
            data = json.loads(args.config.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Could not read config {args.config}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config {args.config} must contain a JSON object")
        data["document_path"] = str(args.document)
        data["overlay_path"] = str(args.signature)
        base = SignerConfig.from_dict(data)
    else:
        base = SignerConfig(document_path=args.document, overlay_path=args.signature)

    return base.with_overrides(**overrides)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        result = sign_document(config)
    except SignerError as e:
        logger.error(str(e))
        return 1

    print(result.output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
