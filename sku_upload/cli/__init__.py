from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..clients.base import CartContextProvider, StaticCartProvider
from ..clients.http import HttpCartProvider, HttpSubmissionClient, HttpValidationClient
from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, UploadConfig, load_config
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.upload import UploadedFile
from ..models.workflow_result import RunStatus, WorkflowResult
from ..services.orchestrator import run_local_validation
from ..services.progress import ProgressTracker
from ..services.report import render_error_table, render_row_table
from ..services.session import UploadSession, log_notifier
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (environment overrides win)
- Process each given file as one upload run through a shared session
- Print the error report per file, write the JSON Lines error log once
- Print the SUMMARY line and exit with 0 / 2 / 1
"""

__all__ = [
    "EXIT_FATAL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_SUCCESS_ALL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="sku-upload", description="Validate SKU,Quantity CSV files and add them to a cart"
    )
    p.add_argument("files", nargs="+", help="CSV files to upload")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML config path")
    p.add_argument("--cart-id", help="Target cart id (overrides config and cart lookup)")
    p.add_argument(
        "--local-only", action="store_true", help="Run the offline checks only, no service calls"
    )
    p.add_argument("--show-rows", action="store_true", help="Print the parsed rows of each file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_env_file(path: Path) -> None:
    # .env は既存の環境変数より優先
    if path.exists():
        load_dotenv(dotenv_path=path, override=True)


def _build_session(cfg: UploadConfig, cart_id: str | None) -> UploadSession:
    svc = cfg.service
    common = {"timeout": svc.timeout_seconds, "api_token": svc.api_token}
    cart_provider: CartContextProvider | None
    if cart_id or cfg.cart_id:
        cart_provider = StaticCartProvider(cart_id or cfg.cart_id)
    elif svc.cart_path:
        cart_provider = HttpCartProvider(svc.base_url, cart_path=svc.cart_path, **common)
    else:
        cart_provider = None
    return UploadSession(
        HttpValidationClient(svc.base_url, validate_path=svc.validate_path, **common),
        HttpSubmissionClient(svc.base_url, submit_path=svc.submit_path, **common),
        cart_provider=cart_provider,
    )


def _print_report(name: str, result: WorkflowResult, show_rows: bool) -> None:
    print(f"FILE: {name} status={result.status.value}")
    if show_rows:
        for line in render_row_table(result.parsed_rows):
            print(f"  {line}")
    for line in render_error_table(result.errors):
        print(f"  {line}")


def main(argv: list[str] | None = None) -> int:
    # 空リスト [] を渡された場合に sys.argv を読まないよう None のときだけ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _load_env_file(Path(".env"))

    cfg: UploadConfig | None
    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        if not args.local_only:
            logger.error(f"config: {e}")
            return EXIT_FATAL
        logger.debug(f"config not used in local-only mode: {e}")
        cfg = None

    session = None if args.local_only else _build_session(cfg, args.cart_id)
    error_log = ErrorLogBuffer(Path(cfg.error_log_directory) if cfg else None)

    paths = [Path(f) for f in args.files]
    logger.info(f"Processing {len(paths)} file(s){' (local only)' if args.local_only else ''}")

    results: list[WorkflowResult] = []
    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path.name)
            upload = UploadedFile.from_path(path)
            if session is None:
                result = run_local_validation(upload)
                log_notifier(result.completion_notice())
            else:
                result = session.process(upload)
            results.append(result)
            error_log.extend_from_result(upload.name, result)
            _print_report(upload.name, result, args.show_rows)
            progress.finish_file(errors=sum(len(r.errors) for r in results))

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    # log_summary が "SUMMARY " を付与するため接頭辞を除去
    log_summary(render_summary_line(results)[len("SUMMARY "):])

    if all(r.status is RunStatus.COMPLETED for r in results):
        return EXIT_SUCCESS_ALL
    return EXIT_PARTIAL_FAILURE
