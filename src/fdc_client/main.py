"""
Command Line Entry Point

Runs a single FoodData Central request from the shell:

    fdc-client search "cheddar cheese" --data-type Branded --sort-by score --sort-order desc
    fdc-client foods 534358 373052

The HTTP status code is printed first, followed by the raw response body.
The API key is read from FDC_API_KEY unless --api-key is given.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import config
from .api import FoodDataClient, FoodDataResponse, SearchField, SortOrder
from .exceptions import ConfigurationError, FoodDataError


# Configure logging
def setup_logging(log_level: str = "INFO", log_to_file: bool = False) -> logging.Logger:
    """Set up logging for the application."""
    logger = logging.getLogger("fdc_client")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # Console handler; stdout is reserved for response output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_format = logging.Formatter(
        config.log.console_format,
        datefmt=config.log.console_date_format
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if log_to_file:
        config.log.log_directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            config.log.log_file_path,
            mode='a',
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(config.log.log_format))
        logger.addHandler(file_handler)

    return logger


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the fdc-client command."""
    parser = argparse.ArgumentParser(
        prog="fdc-client",
        description="Query the USDA FoodData Central API and print the raw response."
    )
    parser.add_argument("--api-key", help=f"API key (default: ${config.api.api_key_env})")
    parser.add_argument("--log-level", default=config.log.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Console log level")
    parser.add_argument("--log-file", action="store_true",
                        help=f"Also log to {config.log.log_file_path}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search foods by keyword")
    search.add_argument("search_terms", help="What to search for")
    search.add_argument("--data-type", help="Foundation, SR Legacy, Branded, Experimental")
    search.add_argument("--page-size", type=int)
    search.add_argument("--page-number", type=int)
    search.add_argument("--sort-by", choices=[field.value for field in SearchField])
    search.add_argument("--sort-order", choices=[order.value for order in SortOrder])
    search.add_argument("--brand-owner", help="Brand filter (Branded foods only)")

    foods = subparsers.add_parser("foods", help="Fetch foods by FDC ID")
    foods.add_argument("fdc_ids", nargs="+", help="One or more FDC IDs")

    return parser


async def run_command(args: argparse.Namespace, client: FoodDataClient) -> FoodDataResponse:
    """Dispatch the parsed command to the client."""
    async with client:
        if args.command == "search":
            return await client.search(
                args.search_terms,
                data_type=args.data_type,
                page_size=args.page_size,
                page_number=args.page_number,
                sort_by=args.sort_by,
                sort_order=args.sort_order,
                brand_owner=args.brand_owner
            )
        return await client.get_foods(args.fdc_ids)


def print_response(response: FoodDataResponse) -> None:
    """Write a response to stdout (or the error to stderr)."""
    if response.error is not None:
        print(f"Request failed: {response.error}", file=sys.stderr)
        return
    print(response.status_code)
    print(response.body)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the fdc-client command."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger("fdc_client")

    try:
        logger = setup_logging(args.log_level, log_to_file=args.log_file)

        if args.api_key:
            client = FoodDataClient(args.api_key)
        else:
            client = FoodDataClient.from_env()

        response = asyncio.run(run_command(args, client))
        print_response(response)
        return 0 if response.ok else 1

    except (ConfigurationError, ValueError) as e:
        logger.error(str(e))
        return 2

    except FoodDataError as e:
        logger.error(f"Fatal error: {e}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
