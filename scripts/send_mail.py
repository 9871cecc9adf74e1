"""Entry point that sends one plain-text message through Microsoft Graph."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from graph_mailer.config import Settings
from graph_mailer.mailer import GraphMailer, build_payload
from graph_mailer.models import EmailMessage

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a mail through Microsoft Graph.")
    parser.add_argument("--to", action="append", required=True, help="Recipient address (repeatable)")
    parser.add_argument("--cc", action="append", default=[], help="CC address (repeatable)")
    parser.add_argument("--bcc", action="append", default=[], help="BCC address (repeatable)")
    parser.add_argument("--subject", default="", help="Message subject")
    body = parser.add_mutually_exclusive_group()
    body.add_argument("--body", default="", help="Plain-text message body")
    body.add_argument("--body-file", type=Path, help="Read the plain-text body from a file")
    parser.add_argument(
        "--attach", action="append", default=[], type=Path, help="File to attach (repeatable)"
    )
    parser.add_argument(
        "--interactive",
        choices=["browser", "device_code", "none"],
        help="Override GRAPH_INTERACTIVE_MODE for this run",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the request body without signing in or sending"
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_message(args: argparse.Namespace) -> EmailMessage:
    body = args.body_file.read_text(encoding="utf-8") if args.body_file else args.body
    return EmailMessage(
        to=args.to,
        subject=args.subject,
        body=body,
        cc=args.cc,
        bcc=args.bcc,
        attachment_paths=args.attach,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    message = build_message(args)

    if args.dry_run:
        configure_logging("INFO")
        print(json.dumps(build_payload(message), indent=2))
        return 0

    settings = Settings()
    if args.interactive:
        settings = settings.model_copy(update={"graph_interactive_mode": args.interactive})
    configure_logging(settings.log_level)

    mailer = GraphMailer.from_settings(settings)
    result = mailer.send(message)
    if not result.is_success:
        logging.error("Send failed [%s]: %s", result.status.value, result.error_message)
        return 1

    logging.info("Send complete: refreshed_token=%s", result.token_refreshed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
