#!/usr/bin/env python3
"""
Convert an LP or MPS file with mpexport.

HiGHS reads the input file; mpexport writes it back out in the requested
format, with sanitized (or obfuscated) names.

Usage:
    python scripts/convert_model.py model.mps --format lp
    python scripts/convert_model.py model.lp --format mps --fixed -o out.mps
    python scripts/convert_model.py model.mps --format lp --obfuscate --verbose
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from mpexport import ModelExporter, setup_logging
from mpexport.config import ExportConfig
from mpexport.io.highs import HIGHS_AVAILABLE, model_from_highs


def main() -> int:
    parser = argparse.ArgumentParser(description="Convert LP/MPS models with mpexport")
    parser.add_argument("input", type=Path, help="LP or MPS file readable by HiGHS")
    parser.add_argument("--format", choices=["lp", "mps"], default="lp",
                        help="Output format (default: lp)")
    parser.add_argument("--fixed", action="store_true",
                        help="Use fixed MPS format when names allow it")
    parser.add_argument("--obfuscate", action="store_true",
                        help="Replace names by V<i> / C<i>")
    parser.add_argument("--show-unused", action="store_true",
                        help="Keep unused variables in LP output")
    parser.add_argument("--config", type=Path, default=None,
                        help="mpexport.toml configuration file")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output file (default: stdout)")
    parser.add_argument("--verbose", action="store_true",
                        help="Debug logging")
    args = parser.parse_args()

    cfg = ExportConfig.load(args.config)
    logger = setup_logging(cfg.log_level, verbose=args.verbose)

    if not HIGHS_AVAILABLE:
        logger.error("HiGHS is not available. Install it with: pip install highspy")
        return 1

    import highspy

    highs = highspy.Highs()
    highs.setOptionValue('output_flag', False)
    if highs.readModel(str(args.input)) == highspy.HighsStatus.kError:
        logger.error("HiGHS could not read %s", args.input)
        return 1

    model = model_from_highs(highs, name=args.input.stem)
    logger.info(model.summary().replace("\n", " |"))

    exporter = ModelExporter(model, cfg)
    options = cfg.default_options(
        obfuscate=args.obfuscate,
        fixed_format=args.fixed,
        show_unused_variables=args.show_unused or cfg.show_unused_variables,
    )
    if args.format == "lp":
        result = exporter.export_as_lp_format(options=options)
    else:
        result = exporter.export_as_mps_format(options=options)

    if not result.is_ok:
        logger.error(result.summary())
        return 1

    logger.info(result.summary())
    if args.output is None:
        sys.stdout.write(result.text)
    else:
        args.output.write_text(result.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
