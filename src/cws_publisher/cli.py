"""cws-publisher command-line entry point.

Thin presentation layer over :mod:`cws_publisher.store_client`: parse
arguments, load credentials, call one client operation and print the result.
All validation that can happen locally happens before any network call, and
``--dry`` stops right after it.

Example
-------
    cws-publisher upload <item-id> dist/extension.zip --auto-publish -d 20
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any, Callable, Sequence

from cws_publisher import __version__
from cws_publisher.store_client.client import RemoteStoreClient
from cws_publisher.store_client.errors import StoreError
from cws_publisher.store_client.models import (
    Credentials,
    ItemStatusSnapshot,
    PublishRequest,
    PublishType,
    RevisionStatus,
    UploadState,
)
from cws_publisher.store_client.poller import UploadCompletionPoller
from cws_publisher.store_client.validation import (
    validate_deploy_percentage,
    validate_max_wait,
    validate_upload_file,
    validate_watch_interval,
)
from cws_publisher.store_client.watch import StatusWatcher
from cws_publisher.utils.config import (
    ConfigError,
    Endpoints,
    load_credentials,
    save_credentials,
)
from cws_publisher.utils.formatting import format_file_size
from cws_publisher.utils.logging import configure_logging, mask_sensitive

logger = logging.getLogger("cws-publisher.cli")


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #
def _out(message: str = "") -> None:
    print(message)


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _verbose(args: argparse.Namespace, message: str) -> None:
    if args.verbose:
        _out(message)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _state_label(state: Any) -> str:
    if state is None:
        return "Unknown"
    return getattr(state, "value", str(state))


def _build_client(args: argparse.Namespace) -> RemoteStoreClient:
    credentials = load_credentials(args.config)
    endpoints = Endpoints.from_env()
    return RemoteStoreClient(
        credentials,
        base_url=endpoints.base_url,
        token_url=endpoints.token_url,
        correlation_id=uuid.uuid4().hex[:12],
    )


# --------------------------------------------------------------------------- #
# configure
# --------------------------------------------------------------------------- #
def _prompt(label: str, *, secret: bool = False) -> str:
    while True:
        value = (getpass.getpass(f"{label}: ") if secret else input(f"{label}: ")).strip()
        if value:
            return value
        _err(f"{label} is required")


def cmd_configure(args: argparse.Namespace) -> int:
    values = {
        "clientId": args.client_id,
        "clientSecret": args.client_secret,
        "refreshToken": args.refresh_token,
        "publisherId": args.publisher_id,
    }
    if not all(values.values()):
        _out("CWS CLI Configuration")
        _out("Credentials come from an OAuth2 client with the Chrome Web Store API enabled;")
        _out("the publisher ID is shown in the Chrome Web Store Developer Dashboard.")
        labels = {
            "clientId": ("Google OAuth2 Client ID", False),
            "clientSecret": ("Google OAuth2 Client Secret", True),
            "refreshToken": ("OAuth2 Refresh Token", True),
            "publisherId": ("Chrome Web Store Publisher ID", False),
        }
        for key, (label, secret) in labels.items():
            if not values[key]:
                values[key] = _prompt(label, secret=secret)

    credentials = Credentials.from_mapping(values)
    path = save_credentials(credentials, args.config)
    _out("✔ Configuration saved successfully!")
    _verbose(args, f"Config saved to: {path}")
    _verbose(args, f"Client ID: {mask_sensitive(credentials.client_id, 8)}")
    return 0


# --------------------------------------------------------------------------- #
# upload
# --------------------------------------------------------------------------- #
def _wait_for_processing(
    client: RemoteStoreClient, item_id: str, max_wait_seconds: float
) -> bool:
    _out(f"Processing upload... (max wait: {round(max_wait_seconds)}s)")
    state = UploadCompletionPoller(client).wait_for_completion(item_id, max_wait_seconds)
    if state == UploadState.SUCCEEDED:
        _out("✔ Upload processing completed")
        return True
    _err(f"✖ Upload processing failed: {_state_label(state)}")
    return False


def _publish(
    args: argparse.Namespace, client: RemoteStoreClient, request: PublishRequest
) -> None:
    _out("Publishing item...")
    response = client.publish(args.item_id, request)
    _verbose(args, f"Publish response: {_dump(dict(response.raw))}")
    _out("✔ Publish completed!")
    _out(f"Status: {_state_label(response.state)}")
    if response.item_id:
        _out(f"Item ID: {response.item_id}")


def _publish_request_from_args(args: argparse.Namespace) -> PublishRequest:
    return PublishRequest.for_rollout(
        skip_review=True if args.skip_review else None,
        publish_type=PublishType.from_option(args.publish_type),
        deploy_percentage=validate_deploy_percentage(args.deploy_percentage),
    )


def cmd_upload(args: argparse.Namespace) -> int:
    path = validate_upload_file(args.file)
    max_wait = validate_max_wait(args.max_wait_time)
    publish_request = _publish_request_from_args(args) if args.auto_publish else None

    _out("Chrome Web Store Upload")
    _out(f"Item ID: {args.item_id}")
    _out(f"File: {path} ({format_file_size(path.stat().st_size)})")

    if args.dry:
        _out("Dry run mode - no actual upload will be performed")
        return 0

    client = _build_client(args)
    _out("Uploading package...")
    response = client.upload(args.item_id, path)
    _out("✔ Package uploaded successfully")
    _verbose(args, f"Upload response: {_dump(dict(response.raw))}")

    if response.in_progress and not _wait_for_processing(client, args.item_id, max_wait):
        return 1

    _out("✔ Upload completed successfully!")
    if response.crx_version:
        _out(f"Package version: {response.crx_version}")

    if publish_request is not None:
        _out("Auto-publishing...")
        _publish(args, client, publish_request)
    return 0


# --------------------------------------------------------------------------- #
# publish
# --------------------------------------------------------------------------- #
def cmd_publish(args: argparse.Namespace) -> int:
    request = _publish_request_from_args(args)
    _out("Chrome Web Store Publish")
    _verbose(args, f"Item ID: {args.item_id}")
    if args.dry:
        _out("Dry run mode - no actual publish will be performed")
        return 0
    _publish(args, _build_client(args), request)
    return 0


# --------------------------------------------------------------------------- #
# status
# --------------------------------------------------------------------------- #
def _print_revision(title: str, revision: RevisionStatus) -> None:
    _out(f"\n{title}")
    _out(f"  State: {_state_label(revision.state)}")
    for index, channel in enumerate(revision.distribution_channels, start=1):
        _out(f"  Channel {index}:")
        if channel.crx_version:
            _out(f"    Version: {channel.crx_version}")
        if channel.deploy_percentage is not None:
            _out(f"    Deploy %: {channel.deploy_percentage}%")


def render_status(snapshot: ItemStatusSnapshot, *, verbose: bool = False) -> None:
    _out("Status Information:")
    if verbose and snapshot.item_id:
        _out(f"  Item ID: {snapshot.item_id}")
    if verbose and snapshot.public_key:
        _out(f"  Public Key: {snapshot.public_key[:20]}...")
    if snapshot.published_revision:
        _print_revision("Published Version:", snapshot.published_revision)
    if snapshot.submitted_revision:
        _print_revision("Submitted Version:", snapshot.submitted_revision)
    if snapshot.last_async_upload_state:
        _out("\nLast Upload:")
        _out(f"  State: {_state_label(snapshot.last_async_upload_state)}")
    if snapshot.warned:
        _out("\nWarning: Item has policy violation warnings")
    if snapshot.taken_down:
        _out("\nItem has been taken down for policy violations")


def cmd_status(args: argparse.Namespace) -> int:
    interval = validate_watch_interval(args.interval) if args.watch else None
    _out("Chrome Web Store Status")
    _out(f"Item ID: {args.item_id}\n")
    if args.dry:
        _out("Dry run mode - no status request will be performed")
        return 0

    client = _build_client(args)

    def _show(snapshot: ItemStatusSnapshot) -> None:
        render_status(snapshot, verbose=args.verbose)
        _verbose(args, f"\nRaw response: {_dump(dict(snapshot.raw))}")

    if interval is None:
        _show(client.fetch_status(args.item_id))
        return 0

    _out(f"Watching for changes (polling every {int(interval)} seconds)...")
    _out("Press Ctrl+C to stop watching\n")
    watcher = StatusWatcher(client, interval_seconds=interval)
    try:
        watcher.run(
            args.item_id,
            _show,
            on_error=lambda exc: _err(f"✖ Status check failed: {exc}"),
        )
    except KeyboardInterrupt:
        watcher.stop()
        _out("\nStopped watching.")
    return 0


# --------------------------------------------------------------------------- #
# cancel / deploy
# --------------------------------------------------------------------------- #
def cmd_cancel(args: argparse.Namespace) -> int:
    _out("Chrome Web Store Cancel Submission")
    _out(f"Item ID: {args.item_id}")
    if args.dry:
        _out("Dry run mode - no actual cancellation will be performed")
        return 0
    _build_client(args).cancel_submission(args.item_id)
    _out("✔ Submission cancelled!")
    _out("The current active submission has been cancelled and is no longer in review.")
    return 0


def cmd_deploy(args: argparse.Namespace) -> int:
    percentage = validate_deploy_percentage(args.percentage)
    _out("Chrome Web Store Deploy Percentage")
    _out(f"Item ID: {args.item_id}")
    _out(f"Deploy Percentage: {percentage}%")
    if args.dry:
        _out("Dry run mode - no actual deployment change will be performed")
        return 0
    _build_client(args).set_deploy_percentage(args.item_id, percentage)
    _out("✔ Deploy percentage updated!")
    _out(f"The published revision will now be deployed to {percentage}% of users.")
    _verbose(args, "Note: Changes may take some time to propagate to all users.")
    return 0


# --------------------------------------------------------------------------- #
# Main
# --------------------------------------------------------------------------- #
_TITLES: dict[str, str] = {
    "configure": "Configuration",
    "upload": "Upload",
    "publish": "Publish",
    "status": "Status check",
    "cancel": "Cancellation",
    "deploy": "Deploy percentage update",
}


def _add_publish_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-s", "--skip-review", action="store_true", help="Skip review process if possible")
    parser.add_argument(
        "-p",
        "--publish-type",
        default="default",
        choices=("default", "staged"),
        help="Publish type (default: %(default)s)",
    )
    parser.add_argument(
        "-d",
        "--deploy-percentage",
        default="100",
        help="Initial deploy percentage 0-100 (default: %(default)s)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cws-publisher",
        description="Manage Chrome extensions in the Chrome Web Store.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-c", "--config", type=Path, help="Path to config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--dry", action="store_true", help="Dry run mode (no API calls)")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("configure", help="Configure Chrome Web Store API credentials")
    p.add_argument("--client-id", help="Google OAuth2 client ID")
    p.add_argument("--client-secret", help="Google OAuth2 client secret")
    p.add_argument("--refresh-token", help="OAuth2 refresh token")
    p.add_argument("--publisher-id", help="Chrome Web Store publisher ID")
    p.set_defaults(func=cmd_configure)

    p = sub.add_parser("upload", help="Upload a package to the Chrome Web Store")
    p.add_argument("item_id", help="Chrome Web Store item (extension) ID")
    p.add_argument("file", type=Path, help="Path to the .zip or .crx file to upload")
    _add_publish_options(p)
    p.add_argument("-a", "--auto-publish", action="store_true", help="Publish after a successful upload")
    p.add_argument(
        "-w",
        "--max-wait-time",
        type=float,
        default=300,
        help="Maximum seconds to wait for upload processing (default: %(default)s)",
    )
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser("publish", help="Publish an item")
    p.add_argument("item_id", help="Chrome Web Store item (extension) ID")
    _add_publish_options(p)
    p.set_defaults(func=cmd_publish)

    p = sub.add_parser("status", help="Get the status of an item")
    p.add_argument("item_id", help="Chrome Web Store item (extension) ID")
    p.add_argument("-w", "--watch", action="store_true", help="Keep polling for status changes")
    p.add_argument(
        "-i",
        "--interval",
        type=float,
        default=30,
        help="Poll interval in seconds when watching (default: %(default)s)",
    )
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("cancel", help="Cancel the current submission of an item")
    p.add_argument("item_id", help="Chrome Web Store item (extension) ID")
    p.set_defaults(func=cmd_cancel)

    p = sub.add_parser("deploy", help="Set the deployment percentage for a published item")
    p.add_argument("item_id", help="Chrome Web Store item (extension) ID")
    p.add_argument("percentage", help="Deployment percentage (0-100)")
    p.set_defaults(func=cmd_deploy)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    handler: Callable[[argparse.Namespace], int] = args.func
    title = _TITLES.get(args.command, args.command)
    try:
        return handler(args)
    except (StoreError, ConfigError) as exc:
        logger.debug("%s failed", title, exc_info=True)
        _err(f"✖ {title} failed: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
