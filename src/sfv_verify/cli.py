"""Command line interface for SFV verification."""

import logging
import argparse
from pathlib import Path
import sys
from typing import List, Optional, Sequence

from .config import SFVVerifyConfig
from .config_loader import APP_NAME, ConfigLoader
from .errors import ConfigurationError, ManifestWriteError
from .logging import LogContext, setup_logging
from .manifest import save_manifest
from .models import VerificationResult
from .path_utils import default_manifest_path
from .verifier import VerificationRun, split_manifest_paths, verify_paths

# Exit codes
EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2

logger = logging.getLogger(__package__ or __name__)


def progress_callback(logger: logging.Logger, current: int, total: int, path: Path) -> None:
    """Log hashing progress.

    Args:
        logger: Logger instance
        current: Current file number (1-based)
        total: Total number of files
        path: Path of current file
    """
    percent = (current / total) * 100 if total > 0 else 0
    logger.debug(f"Hashing: {{'current': {current}, 'total': {total}, 'percent': {percent:.1f}, 'file': {path.name!r}}}")


def format_result(result: VerificationResult) -> str:
    """Render one result as a report line."""
    line = f"{result.filename} {result.computed_hex}"
    if result.expected_crc32 is not None:
        line += f" expected={result.expected_hex}"
    return f"{line} [{result.status.value}]"


def print_report(run: VerificationRun, out=None) -> None:
    """Print results and summary to out (stdout by default)."""
    out = out or sys.stdout
    for result in run.results:
        print(format_result(result), file=out)

    summary = run.summary
    print(
        f"Total files: {summary.total}  "
        f"Successful: {summary.matched}  "
        f"Failed: {summary.mismatched}",
        file=out,
    )


def _save(path: Path, results: Sequence[VerificationResult], config: SFVVerifyConfig) -> bool:
    try:
        save_manifest(path, results, encoding=config.verifier.encoding)
    except ManifestWriteError as e:
        logger.error(e.message)
        return False
    logger.info(f"Wrote manifest: {path}")
    return True


def verify_command(
    config: SFVVerifyConfig,
    paths: List[Path],
    save_path: Optional[Path] = None,
) -> int:
    """Verify files against an optional manifest among paths.

    Returns:
        EXIT_OK when nothing mismatched, EXIT_MISMATCH on any mismatch,
        EXIT_ERROR when no file could be checksummed or saving failed
    """
    with LogContext(logger, command="verify"):
        run = verify_paths(
            paths,
            config=config.verifier,
            progress_callback=lambda c, t, p: progress_callback(logger, c, t, p),
        )

        if run.manifest_error is not None:
            logger.warning(f"Manifest ignored: {run.manifest_path}")

        if not run.results:
            logger.error("No files could be checksummed")
            return EXIT_ERROR

        print_report(run)

        if save_path and not _save(save_path, run.results, config):
            return EXIT_ERROR

        return EXIT_OK if run.summary.all_matched else EXIT_MISMATCH


def create_command(
    config: SFVVerifyConfig,
    paths: List[Path],
    output_path: Optional[Path] = None,
) -> int:
    """Compute checksums for paths and write a new manifest.

    Returns:
        EXIT_OK on success, EXIT_ERROR when nothing was written
    """
    with LogContext(logger, command="create"):
        manifest_path, data_paths = split_manifest_paths(paths, config.verifier.manifest_extension)
        if manifest_path is not None:
            logger.warning(f"Ignoring manifest input when creating a manifest: {manifest_path}")

        target = output_path or default_manifest_path(data_paths, config.verifier.default_manifest_name)
        if target is None:
            logger.error("No data files given")
            return EXIT_ERROR

        run = verify_paths(
            data_paths,
            config=config.verifier,
            progress_callback=lambda c, t, p: progress_callback(logger, c, t, p),
        )
        if not run.results:
            logger.error("No files could be checksummed")
            return EXIT_ERROR

        return EXIT_OK if _save(target, run.results, config) else EXIT_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Verify files against SFV (CRC32) manifests"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (overrides config)"
    )
    parser.add_argument(
        "--log-format",
        choices=["simple", "detailed", "json"],
        type=str.lower,
        help="Log format (overrides config)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser(
        "verify",
        help="Checksum files and compare with an .sfv among the inputs"
    )
    verify.add_argument("paths", nargs="+", type=Path, help="Files to check, optionally one .sfv")
    verify.add_argument(
        "--workers",
        type=int,
        help="Number of hashing threads (overrides config)"
    )
    verify.add_argument(
        "--save",
        type=Path,
        help="Write computed checksums to this .sfv file"
    )

    create = subparsers.add_parser(
        "create",
        help="Checksum files and write a new .sfv"
    )
    create.add_argument("paths", nargs="+", type=Path, help="Files to include")
    create.add_argument(
        "-o", "--output",
        type=Path,
        help="Manifest path (default: checksums.sfv next to the first file)"
    )
    create.add_argument(
        "--workers",
        type=int,
        help="Number of hashing threads (overrides config)"
    )

    return parser


def _apply_overrides(config: SFVVerifyConfig, args: argparse.Namespace) -> SFVVerifyConfig:
    logging_updates = {}
    if args.log_level:
        logging_updates["level"] = args.log_level
    if args.log_format:
        logging_updates["format"] = args.log_format

    verifier_updates = {}
    if getattr(args, "workers", None) is not None:
        if args.workers < 1:
            raise ConfigurationError("--workers must be at least 1", workers=args.workers)
        verifier_updates["max_workers"] = args.workers

    return config.model_copy(update={
        "logging": config.logging.model_copy(update=logging_updates),
        "verifier": config.verifier.model_copy(update=verifier_updates),
    })


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for sfv-verify."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        loader = ConfigLoader(app_name=APP_NAME, config_class=SFVVerifyConfig)
        config = _apply_overrides(loader.load(defaults_path=args.config), args)
    except ConfigurationError as e:
        print(f"{APP_NAME}: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(config.logging)

    if args.command == "verify":
        return verify_command(config, args.paths, save_path=args.save)
    return create_command(config, args.paths, output_path=args.output)


if __name__ == "__main__":
    sys.exit(main())
