import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .builder import USER, Builder
from .errors import TwitterStreamError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="twitter_stream",
        description="Print messages from the Twitter Streaming API. "
        "Credentials are read from TWITTER_* environment variables or a .env file.",
    )
    parser.add_argument("--track", help="comma separated phrases to filter Tweets by")
    parser.add_argument("--follow", type=int, nargs="*", default=[], help="user IDs to follow")
    parser.add_argument("--language", default="", help="comma separated language codes")
    parser.add_argument("--stall-warnings", action="store_true")
    parser.add_argument("--user", action="store_true", help="connect to the User Stream")
    parser.add_argument("--parse", action="store_true", help="print parsed messages instead of raw JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def build(args: argparse.Namespace) -> Builder:
    builder = Builder.from_env()
    if args.user:
        builder.endpoint(("GET", USER))
    if args.track:
        builder.track(args.track)
    return builder.follow(args.follow).language(args.language).stall_warnings(args.stall_warnings)


async def main(args: argparse.Namespace) -> None:
    async with await build(args).listen() as stream:
        if args.parse:
            async for message in stream.messages():
                print(type(message).__name__, message)
        else:
            async for json_str in stream:
                print(json_str)


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(main(args))
    except TwitterStreamError as e:
        logging.getLogger("twitter_stream").error("%s", e)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(run())
