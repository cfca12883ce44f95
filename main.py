#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Sales Metrics Pipeline

Usage: python main.py [input_file] [output_dir]

Reads a sales log, prints the five reports to stdout and writes them to the
output directory. Defaults come from Config (SALES_INPUT_FILE, SALES_OUTPUT_DIR).
"""

import sys
import logging
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from src.sales_metrics import SalesPipeline, ConsoleReportSink, SalesMetricsError
from src.utils import Config, setup_logging

USAGE = "Usage: python main.py [input_file] [output_dir]"

def main(argv=None, config=None) -> int:
    """Main execution function. Returns the process exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 2 or any(a in ('-h', '--help') for a in args):
        print(USAGE)
        return 2

    config = config or Config()
    input_file = args[0] if len(args) > 0 else config.DEFAULT_INPUT_FILE
    output_dir = args[1] if len(args) > 1 else config.DEFAULT_OUTPUT_DIR

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="sales_metrics.log",
        log_dir=config.LOG_DIR
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("SALES METRICS PIPELINE - MAIN EXECUTION")
    logger.info("=" * 60)

    logger.debug(str(config))

    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration values: {', '.join(invalid)}")
        return 1

    try:
        pipeline = SalesPipeline(
            input_file=input_file,
            output_dir=output_dir,
            config=config,
            sinks=[ConsoleReportSink(sys.stdout)]
        )
        result = pipeline.run()

    except SalesMetricsError as e:
        logger.error(f"Pipeline execution failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1

    _print_execution_summary(result)
    return 0

def _print_execution_summary(result) -> None:
    """Print final execution summary."""
    stats = result.parse_stats

    print("=" * 70)
    print("PIPELINE EXECUTION SUMMARY")
    print("=" * 70)
    print(f"   • Lines read: {stats['lines_seen']:,}")
    print(f"   • Records parsed: {stats['records_parsed']:,}")
    print(f"   • Rows dropped: {stats['rows_dropped']:,}")
    print(f"   • Parse success rate: {stats['success_rate']:.1f}%")

    if result.saved_files:
        print("\n📁 Generated Outputs:")
        for report_name, file_path in result.saved_files.items():
            print(f"   • {report_name.replace('_', ' ').title()}: {Path(file_path).name}")

    print("=" * 70)

if __name__ == '__main__':
    sys.exit(main())
