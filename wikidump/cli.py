import argparse
import cProfile
from dataclasses import replace
from typing import Sequence

from wikidump import __version__
from wikidump.config.logger_config import configure_logging, logger
from wikidump.config.settings import EXECUTOR_KINDS, ConvertSettings
from wikidump.convert import run_convert
from wikidump.conversion.infrastructure.xml_source import DumpFormatError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wikidump",
        usage="wikidump [OPTIONS] WIKIPEDIA-DUMP-XML",
        description="Convert a Wikidata XML dump into line-delimited JSON on stdout.",
    )
    parser.add_argument("dump", nargs="?", help="path to the XML dump (.xml, .xml.bz2 or .xml.gz)")
    parser.add_argument("--filter", dest="skip_pattern", default=None, help="regex for pages to skip")
    parser.add_argument("-w", "--workers", dest="worker_count", type=int, default=None, help="number of workers")
    parser.add_argument("--executor", choices=EXECUTOR_KINDS, default=None, help="where transforms run")
    parser.add_argument("--queue-size", type=int, default=None, help="capacity of each handoff queue")
    parser.add_argument("-o", "--output", default=None, help="write lines to this file instead of stdout")
    parser.add_argument("--report", default=None, help="write a JSON run summary to this file")
    parser.add_argument("--recover", action="store_true", help="skip damaged XML instead of aborting")
    parser.add_argument("--progress", action="store_true", help="show a progress bar on stderr")
    parser.add_argument("--log-level", default=None, help="stderr log level (default INFO)")
    parser.add_argument("--log-file", default=None, help="also write DEBUG logs to this file")
    parser.add_argument("--cpuprofile", default=None, help="write cpu profile to file")
    parser.add_argument("-v", "--version", action="store_true", help="prints current program version")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if args.dump is None:
        parser.error("exactly one dump file is required")

    try:
        settings = _settings_from_args(args)
        configure_logging(settings.log_level, args.log_file)
    except ValueError as exc:
        logger.error("Invalid configuration: {}", exc)
        return 1

    profiler = None
    if args.cpuprofile:
        profiler = cProfile.Profile()
        profiler.enable()
    try:
        run_convert(
            input_path=args.dump,
            settings=settings,
            output_path=args.output,
            report_path=args.report,
        )
    except DumpFormatError as exc:
        logger.error("Malformed dump: {}", exc)
        return 1
    except FileNotFoundError as exc:
        logger.error("Input not found: {}", exc)
        return 1
    except OSError as exc:
        logger.error("Output failed: {}", exc)
        return 1
    except ValueError as exc:
        # Settings were validated above, anything left is a run-time failure.
        logger.error("Conversion failed: {}", exc)
        return 1
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats(args.cpuprofile)
            logger.info("CPU profile written: path={}", args.cpuprofile)
    return 0


def _settings_from_args(args: argparse.Namespace) -> ConvertSettings:
    settings = ConvertSettings.from_env()
    overrides = {
        "skip_pattern": args.skip_pattern,
        "worker_count": args.worker_count,
        "queue_size": args.queue_size,
        "executor": args.executor,
        "log_level": args.log_level,
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    if args.recover:
        settings = replace(settings, strict=False)
    if args.progress:
        settings = replace(settings, show_progress=True)
    return settings
