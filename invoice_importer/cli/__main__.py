from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import pandas as pd

from invoice_importer.api.client import ExportProClient, NetworkError, RequestMetrics, ResponseContractError
from invoice_importer.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    apply_env_overrides,
    load_config,
    load_env_file,
)
from invoice_importer.excel.reader import FileFormatError, MissingColumnsError
from invoice_importer.excel.template import write_template
from invoice_importer.logging.error_log import ErrorLogBuffer
from invoice_importer.logging.init import enable_debug, log_summary, setup_logging
from invoice_importer.models.config_models import ImportConfig
from invoice_importer.models.import_outcome import ImportOutcome
from invoice_importer.services.refresh import InvoiceList
from invoice_importer.services.session import ImportSession, today_in
from invoice_importer.services.submitter import ImportSubmitter
from invoice_importer.services.summary import render_result_message, render_summary_line

"""CLI entrypoint: ``invoice-import``.

Commands:
    import FILE [--yes]       parse, preview, confirm, submit, refresh
    inspect FILE              parse and print the preview only
    template [OUT] [--local]  download (or write) the import template
    list                      print the server's invoice list

Exit codes:
    0  every row imported, nothing to import, or cancelled by the user
    1  fatal: config, unreadable file, network or response contract error
    2  server refused some rows (partial) or the whole batch (success=false)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="invoice-import", description="Bulk invoice import for the export backend")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import invoices from an Excel workbook")
    imp.add_argument("file", type=Path)
    imp.add_argument("-y", "--yes", action="store_true", help="Submit without asking for confirmation")

    ins = sub.add_parser("inspect", help="Show the import preview without submitting")
    ins.add_argument("file", type=Path)

    tpl = sub.add_parser("template", help="Save the import template workbook")
    tpl.add_argument("output", type=Path, nargs="?", default=Path("invoice-import-template.xlsx"))
    tpl.add_argument("--local", action="store_true", help="Generate the template locally instead of downloading it")

    sub.add_parser("list", help="List invoices stored on the server")
    return p.parse_args(argv)


def _resolve_config(config_path: Path | None, logger: logging.Logger) -> ImportConfig:
    """.env first, then the YAML file (built-in defaults when the default path is absent)."""
    load_env_file(Path(".env"), override=True)
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        logger.debug(f"no {DEFAULT_CONFIG_PATH}, using built-in defaults")
        cfg = ImportConfig()
    else:
        cfg = load_config(config_path or DEFAULT_CONFIG_PATH)
    return apply_env_overrides(cfg)


def _build_client(cfg: ImportConfig, logger: logging.Logger) -> ExportProClient:
    def log_metrics(m: RequestMetrics) -> None:
        logger.debug(f"HTTP {m.method} {m.path} -> {m.status_code} in {m.elapsed_seconds:.3f}s")

    return ExportProClient.from_config(cfg.api, metrics_callback=log_metrics)


def _ask(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _new_session(cfg: ImportConfig, client: ExportProClient, show_progress: bool) -> ImportSession:
    submitter = ImportSubmitter(client, ErrorLogBuffer(Path(cfg.error_log_dir)))
    return ImportSession(
        submitter,
        InvoiceList(client),
        today=today_in(cfg.timezone),
        keep_na_strings=cfg.options.keep_na_strings,
        strict_header=cfg.options.strict_header,
        show_progress=show_progress,
    )


def _report(outcome: ImportOutcome, elapsed: float, logger: logging.Logger) -> None:
    if outcome.success:
        logger.info(render_result_message(outcome))
    else:
        logger.error(render_result_message(outcome))
    for failure in outcome.errors:
        logger.warning(f"row {failure.row}: {failure.field}: {failure.message}")
    log_summary(render_summary_line(outcome, elapsed, prefix=False))


def _run_import(cfg: ImportConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    client = _build_client(cfg, logger)
    session = _new_session(cfg, client, show_progress=not args.yes)
    try:
        session.open(args.file)
    except (FileFormatError, MissingColumnsError) as e:
        logger.error(f"file: {e}")
        return EXIT_FATAL

    print(session.render_preview())
    if not session.candidates:
        logger.info("nothing to import")
        session.cancel()
        return EXIT_SUCCESS_ALL
    if not args.yes and not _ask("Confirm import? [y/N] "):
        session.cancel()
        logger.info("import cancelled")
        return EXIT_SUCCESS_ALL

    while True:
        start = time.monotonic()
        try:
            outcome = session.confirm()
        except (NetworkError, ResponseContractError) as e:
            logger.error(f"import: {e}")
            if args.yes or not _ask("Retry import? [y/N] "):
                session.cancel()
                return EXIT_FATAL
            continue
        if outcome is None:  # pragma: no cover - only reachable re-entrantly
            continue
        _report(outcome, time.monotonic() - start, logger)
        if outcome.success:
            break
        # the preview is still open; the user may send it again
        if args.yes or not _ask("Retry import? [y/N] "):
            session.cancel()
            return EXIT_PARTIAL_FAILURE

    logger.info(f"invoice list reloaded: {len(session.invoice_list.invoices)} invoices")
    return EXIT_PARTIAL_FAILURE if outcome.is_partial else EXIT_SUCCESS_ALL


def _run_inspect(cfg: ImportConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    session = _new_session(cfg, _build_client(cfg, logger), show_progress=False)
    try:
        session.open(args.file)
    except (FileFormatError, MissingColumnsError) as e:
        logger.error(f"file: {e}")
        return EXIT_FATAL
    print(session.render_preview())
    session.cancel()
    return EXIT_SUCCESS_ALL


def _run_template(cfg: ImportConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if args.local:
        path = write_template(args.output)
    else:
        try:
            path = _build_client(cfg, logger).download_template(args.output)
        except (NetworkError, ResponseContractError) as e:
            logger.error(f"template: {e}")
            return EXIT_FATAL
    logger.info(f"template saved to {path}")
    return EXIT_SUCCESS_ALL


def _run_list(cfg: ImportConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    invoice_list = InvoiceList(_build_client(cfg, logger))
    try:
        invoices = invoice_list.refresh()
    except (NetworkError, ResponseContractError) as e:
        logger.error(f"list: {e}")
        return EXIT_FATAL
    if invoices:
        frame = pd.DataFrame(
            [
                [inv.invoice_number, inv.invoice_type, inv.customer_name, inv.invoice_date,
                 inv.total_amount, inv.currency, inv.status]
                for inv in invoices
            ],
            columns=["Invoice #", "Type", "Customer", "Date", "Amount", "Currency", "Status"],
        )
        print(frame.to_string(index=False))
    logger.info(f"{len(invoices)} invoices")
    return EXIT_SUCCESS_ALL


_COMMANDS = {
    "import": _run_import,
    "inspect": _run_inspect,
    "template": _run_template,
    "list": _run_list,
}


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()
    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args.config, logger)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.debug(f"api={cfg.api.base_url} timezone={cfg.timezone}")
    return _COMMANDS[args.command](cfg, args, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
