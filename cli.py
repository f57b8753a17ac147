import os
import sys
import logging
import argparse

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import (
    RESULTS_DIR, ALLURE_RESULTS_DIR, RENDER_TIMEOUT_SECONDS, LOG_LEVEL, LOG_FORMAT
)

logger = logging.getLogger(__name__)


class K6AllureCLI:
    """CLI converting k6 result files into Allure test results."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            description='Convert k6 JSON results into Allure test results with response time charts',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Convert every results/*.json written by `k6 run --out json=...`
  python cli.py

  # Custom locations
  python cli.py --results-dir performance-tests/results --output-dir allure-results

  # Give up on a chart that takes longer than 60 seconds to render
  python cli.py --render-timeout 60
            """
        )
        parser.add_argument('--results-dir', type=str, default=RESULTS_DIR,
                            help=f'Directory containing k6 result files (default: {RESULTS_DIR})')
        parser.add_argument('--output-dir', type=str, default=ALLURE_RESULTS_DIR,
                            help=f'Directory for Allure results and charts (default: {ALLURE_RESULTS_DIR})')
        parser.add_argument('--render-timeout', type=float, default=RENDER_TIMEOUT_SECONDS,
                            help=f'Seconds to wait for one chart, 0 waits forever '
                                 f'(default: {RENDER_TIMEOUT_SECONDS})')
        parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                            help=f'Logging level (default: {LOG_LEVEL})')
        return parser

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        # Set up logging (only if not already configured)
        if not logging.root.handlers:
            logging.basicConfig(level=parsed_args.log_level, format=LOG_FORMAT)

        try:
            from converter.batch import run_conversion

            logger.info("=== K6 to Allure Conversion ===")
            return run_conversion(
                results_dir=parsed_args.results_dir,
                output_dir=parsed_args.output_dir,
                render_timeout=parsed_args.render_timeout,
            )

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return 1


def main():
    """Main entry point."""
    cli = K6AllureCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
