"""Command-line front end: upload, list, copy and delete pastes."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .composition_root import AppServices, configure_logging, create_services
from .domain.app_constants import APP_NAME, APP_VERSION
from .domain.errors import PasteClientError
from .domain.events import ShareReceived, SharedFile, SharedText
from .domain.listing import format_expiry, format_file_size
from .domain.result import split_results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Upload text, files and URLs to a rustypaste server and manage your uploads."
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload text, a file, or a URL.")
    upload.add_argument("kind", choices=["text", "file", "url", "remote"])
    upload.add_argument(
        "value",
        nargs="?",
        help="Text, file path, or URL. Text is read from stdin when omitted or '-'.",
    )
    upload.add_argument("--expiry", help="Server expiry such as 10min, 1h or 1d.")
    oneshot = upload.add_mutually_exclusive_group()
    oneshot.add_argument("--oneshot", dest="oneshot", action="store_true", default=None,
                         help="Delete the upload after its first retrieval.")
    oneshot.add_argument("--no-oneshot", dest="oneshot", action="store_false")

    share = sub.add_parser("share", help="Upload several items in order, like a share from another app.")
    share.add_argument("items", nargs="+", help="Existing paths are uploaded as files, anything else as text/URL.")

    listing = sub.add_parser("list", help="List uploads (server must expose the list).")
    listing.add_argument("--sort", choices=["name", "size", "expiration"], default="name")
    listing.add_argument("--desc", action="store_true", help="Sort descending.")

    delete = sub.add_parser("delete", help="Delete an upload using the delete token.")
    delete.add_argument("file_name")

    copy = sub.add_parser("copy", help="Copy the URL of an upload to the clipboard.")
    copy.add_argument("file_name")

    config = sub.add_parser("config", help="Show or change the server settings.")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show")
    config_set = config_sub.add_parser("set")
    config_set.add_argument("--server-url")
    config_set.add_argument("--auth-token")
    config_set.add_argument("--delete-token")
    config_set.add_argument("--default-expiry")
    config_set.add_argument("--default-oneshot", choices=["true", "false"])
    return parser


async def _upload(services: AppServices, args: argparse.Namespace) -> int:
    config = await services.load_config()
    value = args.value
    if args.kind == "text" and (value is None or value == "-"):
        value = sys.stdin.read()
    if args.kind == "text":
        # Typed text is trimmed like the upload form does; shared text is not.
        value = value.strip()
    elif not value:
        print(f"error: {args.kind} upload needs a value", file=sys.stderr)
        return 2
    url = await services.uploads.upload(config, args.kind, value, expiry=args.expiry, oneshot=args.oneshot)
    print(url.strip())
    return 0


async def _share(services: AppServices, args: argparse.Namespace) -> int:
    items = tuple(
        SharedFile(path=item) if Path(item).is_file() else SharedText(text=item)
        for item in args.items
    )
    dispatcher = services.create_dispatcher()
    services.channel.publish(ShareReceived(items=items))
    services.channel.close()
    results = await dispatcher.run()

    urls, errors = split_results(results)
    for url in urls:
        print(url.strip())
    for error in errors:
        print(f"failed: {error}", file=sys.stderr)
    return 1 if errors else 0


async def _list(services: AppServices, args: argparse.Namespace) -> int:
    config = await services.load_config()
    records = await services.uploads.list_uploads(config, args.sort, "desc" if args.desc else "asc")
    if not records:
        print("No uploads found")
        return 0
    width = max(len(r.file_name) for r in records)
    for r in records:
        print(f"{r.file_name:<{width}}  {format_file_size(r.file_size):>10}  {format_expiry(r.expires_at_utc)}")
    return 0


async def _delete(services: AppServices, args: argparse.Namespace) -> int:
    config = await services.load_config()
    await services.uploads.delete(config, args.file_name)
    print("File deleted successfully")
    return 0


async def _copy(services: AppServices, args: argparse.Namespace) -> int:
    config = await services.load_config()
    if not config.server_url:
        print("Please configure server URL first", file=sys.stderr)
        return 1
    url = services.uploads.copy_url(config, args.file_name)
    print(url)
    return 0


async def _config(services: AppServices, args: argparse.Namespace) -> int:
    if args.config_command == "show":
        config = await services.load_config()
        for key, value in config.redacted().items():
            print(f"{key}: {value if value not in (None, '') else '-'}")
        return 0

    config = await services.settings_repo.load_stored()
    update = {
        "server_url": args.server_url,
        "auth_token": args.auth_token,
        "delete_token": args.delete_token,
        "default_expiry": args.default_expiry,
    }
    update = {k: v for k, v in update.items() if v is not None}
    if args.default_oneshot is not None:
        update["default_oneshot"] = args.default_oneshot == "true"
    await services.settings_repo.save(config.model_copy(update=update))
    print("Settings saved successfully")
    return 0


_COMMANDS = {
    "upload": _upload,
    "share": _share,
    "list": _list,
    "delete": _delete,
    "copy": _copy,
    "config": _config,
}


def main(argv: Optional[list[str]] = None, services: Optional[AppServices] = None) -> int:
    args = build_parser().parse_args(argv)
    if services is None:
        services = create_services()
        configure_logging(services.settings)

    try:
        return asyncio.run(_COMMANDS[args.command](services, args))
    except (PasteClientError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
