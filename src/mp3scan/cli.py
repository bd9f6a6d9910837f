import argparse
import json
import logging
import sys
from typing import List, Optional

from .analysis import analyze_file
from .config import Settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mp3scan", description="Count MPEG-1 Layer III frames")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    count = sub.add_parser("count", help="Count frames in MP3 files")
    count.add_argument("paths", metavar="PATH", nargs="+", help="MP3 file(s) to scan")
    count.add_argument("--json", action="store_true", help="Print one JSON object per file")
    count.add_argument(
        "--verify",
        action="store_true",
        help="Also decode each file (needs ffmpeg) and report the decoder's duration",
    )

    serve = sub.add_parser("serve", help="Run the HTTP upload service")
    serve.add_argument("--host", metavar="HOST", default=settings.host, help="Interface to bind")
    serve.add_argument("--port", metavar="PORT", type=int, default=settings.port, help="Port to listen on")
    return parser


def _count(paths: List[str], as_json: bool, verify: bool) -> int:
    status = 0
    for p in paths:
        try:
            st = analyze_file(p, verify=verify)
        except OSError as e:
            logger.error("Cannot read %s: %s", p, e)
            status = 1
            continue
        if as_json:
            print(json.dumps(st, sort_keys=True))
            continue
        line = f"{p}: {st['frame_count']} frames ({st['duration_sec']:.2f} s)"
        if verify:
            dec = st.get("decoded_duration_sec")
            line += " decoder: " + ("unavailable" if dec is None else f"{dec:.2f} s")
        print(line)
    return status


def _serve(settings: Settings, host: str, port: int) -> int:
    import uvicorn

    from .service import create_app

    logger.info("Server is running on port %d", port)
    logger.info("Upload endpoint: http://%s:%d/file-upload", host, port)
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    _configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "count":
        return _count(args.paths, args.json, args.verify)
    return _serve(settings, args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
