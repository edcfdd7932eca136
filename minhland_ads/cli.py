"""CLI entry point for minhland-ads.

Usage:
    minhland-ads serve [--host HOST] [--port PORT]
    minhland-ads publish --row N --ad-id ID --name NAME --mobile MOBILE --content TEXT
                         [--platforms zalo_article,facebook] [--zalo-id ID] [--subpage]
    minhland-ads records [--email EMAIL]
    minhland-ads audit [--ad-id ID] [--failures]
    minhland-ads status
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from minhland_ads.config import AdsConfig, load_config
from minhland_ads.errors import AdsError
from minhland_ads.factory import build_services
from minhland_ads.logging_setup import configure_logging
from minhland_ads.publisher import PublishRequest


def cmd_serve(cfg: AdsConfig, host: str, port: int) -> None:
    import uvicorn

    from minhland_ads.api import create_app

    uvicorn.run(create_app(cfg), host=host, port=port, log_config=None)


def cmd_publish(cfg: AdsConfig, args: argparse.Namespace) -> None:
    services = build_services(cfg)
    request = PublishRequest(
        name=args.name,
        mobile=args.mobile,
        content=args.content,
        platforms=[p.strip() for p in args.platforms.split(",")],
        ad_id=args.ad_id,
        row_position=args.row,
        address=args.address,
        zalo_id=args.zalo_id,
        subpage="1" if args.subpage else "",
    )
    result = services.publisher.publish(request)
    for outcome in result.outcomes:
        status = outcome.status.value
        print(f"  [{status.upper()}] {outcome.channel.label}: "
              f"{outcome.external_id or outcome.error or 'N/A'}")


def cmd_records(cfg: AdsConfig, email: str | None) -> None:
    store = build_services(cfg).record_store
    records = store.find_by_email(email) if email else store.list_records()
    print(f"Records: {len(records)}")
    for r in records:
        print(f"  row {r['row_position']}: {r['name']} / {r['mobile']} [{r['ad_id'] or '-'}]")


def cmd_audit(cfg: AdsConfig, ad_id: str | None, failures_only: bool) -> None:
    audit = build_services(cfg).audit
    entries = audit.failures() if failures_only else audit.all_entries
    if ad_id:
        entries = [e for e in entries if e.record_id == ad_id]
    print(f"{'Failures' if failures_only else 'Audit entries'}: {len(entries)}")
    for e in entries:
        print(f"  [{e.status}] {e.key} at {e.timestamp}")


def cmd_status(cfg: AdsConfig) -> None:
    print(f"Live mode: {cfg.live_mode}")
    print(f"Sheet:     {cfg.sheet_name} "
          f"({'configured' if cfg.spreadsheet_id else 'not configured'})")
    print(f"Zalo:      {'configured' if cfg.zalo_access_token else 'not configured'}")
    print(f"Facebook:  {'configured' if cfg.facebook_page_id else 'not configured'}")
    print(f"Documents: {cfg.docstore_path or 'in memory'}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="minhland-ads", description="Ad listing publisher")
    parser.add_argument("--config", type=Path, default=None, help="Config YAML file")
    sub = parser.add_subparsers(dest="command")

    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8080)

    publish_p = sub.add_parser("publish", help="Publish a listing row to channels")
    publish_p.add_argument("--row", type=int, required=True, help="Sheet row number")
    publish_p.add_argument("--ad-id", required=True)
    publish_p.add_argument("--name", required=True)
    publish_p.add_argument("--mobile", required=True)
    publish_p.add_argument("--content", required=True)
    publish_p.add_argument("--address", default="")
    publish_p.add_argument("--platforms", default="zalo_article,facebook",
                           help="Comma-separated channel list")
    publish_p.add_argument("--zalo-id", default="")
    publish_p.add_argument("--subpage", action="store_true", help="Also publish a website page")

    records_p = sub.add_parser("records", help="List sheet records")
    records_p.add_argument("--email", default=None)

    audit_p = sub.add_parser("audit", help="View channel responses")
    audit_p.add_argument("--ad-id", default=None)
    audit_p.add_argument("--failures", action="store_true")

    sub.add_parser("status", help="Show configuration status")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    cfg = load_config(args.config)
    configure_logging(cfg)

    try:
        if args.command == "serve":
            cmd_serve(cfg, args.host, args.port)
        elif args.command == "publish":
            cmd_publish(cfg, args)
        elif args.command == "records":
            cmd_records(cfg, args.email)
        elif args.command == "audit":
            cmd_audit(cfg, args.ad_id, args.failures)
        elif args.command == "status":
            cmd_status(cfg)
    except AdsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
