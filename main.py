# TempTerminal - Command Line Entry Point
# Prints aggregate reports as JSON or starts the API server.

# Load environment variables FIRST (before any other imports)
from dotenv import load_dotenv
load_dotenv()

import asyncio
import json
import logging
import sys

import config
from core.aggregator import Aggregator
from core.errors import UnknownCityError


async def run_report(city: str, day: int) -> dict:
    async with Aggregator() as aggregator:
        report = await aggregator.aggregate(city, day)
        return report.to_dict()


async def run_all(day: int) -> dict:
    async with Aggregator() as aggregator:
        reports = await aggregator.aggregate_all(day)
        return {key: report.to_dict() for key, report in reports.items()}


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="TempTerminal multi-source high temperature aggregator")
    parser.add_argument("city", nargs="?", help="City key (e.g. london, dallas)")
    parser.add_argument("-d", "--day", type=int, choices=range(config.MAX_DAY_OFFSET + 1), default=0,
                        help="Day offset: 0=today, 1=tomorrow, 2=day after")
    parser.add_argument("--all", action="store_true", help="Aggregate every configured city")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP API")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if args.serve:
        import uvicorn
        from web_server import app

        uvicorn.run(app, host=config.HOST, port=config.PORT)
        return 0

    if args.all:
        result = asyncio.run(run_all(args.day))
    elif args.city:
        try:
            result = asyncio.run(run_report(args.city, args.day))
        except UnknownCityError as e:
            print(f"{e}. Known cities: {', '.join(config.STATIONS)}", file=sys.stderr)
            return 2
    else:
        parser.error("a city or --all is required")

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
