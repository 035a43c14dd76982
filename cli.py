import argparse
import logging
import sys
import time
from datetime import datetime, timedelta
from typing import Optional

from collector import CollectorError, PowerShellCollector, format_time
from config import Config, ConfigError, load_config
from cycle import CycleResult, run_cycle
from sink import ConsoleSink, HttpLogSink, LogSink, SinkError, send_all
from store import SeenSet
from winevt.detect import detect_layout
from winevt.errors import EventParseError
from winevt.types import Variant


logger = logging.getLogger("winevt.cli")

VARIANTS = {
    "win-event": Variant.WIN_EVENT,
    "event-log": Variant.EVENT_LOG,
}


# ---------------- CLI ----------------

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Forward Windows Security events to a remote log sink"
    )
    parser.add_argument("--env-file", help="dotenv file with WINEVT_* settings")
    parser.add_argument("--duration", type=int, help="seconds between polls")
    parser.add_argument("--ids", help="comma separated event IDs to forward")
    parser.add_argument("--send-url", help="HTTP endpoint of the log sink")
    parser.add_argument("--app", help="application name sent with each record")
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="abort the cycle on the first unparseable record",
    )
    parser.add_argument("--once", action="store_true", help="run a single cycle")

    parser.add_argument(
        "--input-file",
        help="parse a captured query dump instead of polling",
    )
    parser.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        help="layout of --input-file (guessed when omitted)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    return parser.parse_args(argv)


# ---------------- Helpers ----------------

def build_sink(cfg: Config) -> LogSink:
    if cfg.send_url:
        return HttpLogSink(cfg.send_url, cfg.app, timeout=cfg.timeout)
    return ConsoleSink()


def print_summary(result: CycleResult, sent: int):
    print("\nCycle summary", file=sys.stderr)
    print(f"  Parsed records : {result.parsed}", file=sys.stderr)
    print(f"  Duplicates     : {result.duplicates}", file=sys.stderr)
    print(f"  Filtered out   : {result.filtered}", file=sys.stderr)
    print(f"  Sent           : {sent}", file=sys.stderr)

    if result.malformed or result.failures:
        print("  Skipped:", file=sys.stderr)
        print(f"    malformed_chunk: {result.malformed}", file=sys.stderr)
        print(f"    field_error    : {len(result.failures)}", file=sys.stderr)


def parse_file(path: str, variant: Optional[Variant], cfg: Config, sink: LogSink) -> int:
    # newline="" keeps the \r\n line breaks of the dump
    with open(path, encoding=cfg.encoding, newline="") as f:
        text = f.read()

    variant = variant or detect_layout(text)
    if variant is None:
        print("Cannot tell the record layout, pass --variant.", file=sys.stderr)
        return 1

    result = run_cycle(text, variant, None, cfg.event_ids, cfg.strict)
    sent = send_all(sink, result.records)
    print_summary(result, sent)
    return 0


def poll(
    collector: PowerShellCollector,
    variant: Variant,
    cfg: Config,
    sink: LogSink,
    once: bool = False,
) -> int:
    """
    Poll loop. Each window starts where the last completed one ended.

    A failed cycle keeps both the window start and the seen set, so the
    same window is retried on the next tick.
    """
    seen: Optional[SeenSet] = None
    period = timedelta(seconds=cfg.duration)
    start = datetime.now() - period if once else datetime.now()

    while True:
        if not once:
            time.sleep(cfg.duration)

        end = datetime.now()
        print(f"\n{format_time(start)}  - - -  {format_time(end)}", file=sys.stderr)

        try:
            text = collector.query(variant, start, end)
            result = run_cycle(text, variant, seen, cfg.event_ids, cfg.strict)
            sent = send_all(sink, result.records)
        except (CollectorError, EventParseError, SinkError) as e:
            logger.error("cycle failed, retrying window next tick: %s", e)
            if once:
                return 1
            continue

        print_summary(result, sent)

        seen = result.seen
        start = end

        if once:
            return 0


# ---------------- Main ----------------

def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] (%(name)s) %(levelname)s %(message)s",
    )

    try:
        cfg = load_config(
            args.env_file,
            duration=args.duration,
            event_ids=args.ids,
            send_url=args.send_url,
            app=args.app,
            strict=args.strict,
        )
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    sink = build_sink(cfg)

    if args.input_file:
        return parse_file(args.input_file, VARIANTS.get(args.variant), cfg, sink)

    if sys.platform != "win32":
        print("Only supports windows operating system!", file=sys.stderr)
        return 1

    collector = PowerShellCollector(encoding=cfg.encoding)
    try:
        variant = collector.detect_variant()
    except CollectorError as e:
        print(f"PowerShell version check failed: {e}", file=sys.stderr)
        return 1

    try:
        return poll(collector, variant, cfg, sink, once=args.once)
    except KeyboardInterrupt:
        print("\nStopped.", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
