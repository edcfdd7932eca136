"""Factory for building the store, channel clients and publisher from AdsConfig.

Shared by the HTTP app and the CLI to avoid duplicated client construction
logic. Everything is built once at process start and passed explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from minhland_ads.adcopy import AdCopyClient, AdCopyConfig
from minhland_ads.audit import AuditRecorder
from minhland_ads.config import AdsConfig
from minhland_ads.docstore import DocumentStore
from minhland_ads.facebook import FacebookClient, FacebookConfig
from minhland_ads.publisher import Publisher
from minhland_ads.record_store import RecordStore
from minhland_ads.sheets import SheetsClient
from minhland_ads.website import WebsiteClient
from minhland_ads.zalo import ZaloClient, ZaloConfig


@dataclass
class Services:
    """Handles shared by every request."""
    config: AdsConfig
    record_store: RecordStore
    documents: DocumentStore
    audit: AuditRecorder
    website: WebsiteClient
    publisher: Publisher
    adcopy: AdCopyClient


def build_record_store(cfg: AdsConfig, client: SheetsClient | None = None) -> RecordStore:
    """Build a RecordStore; live mode fails fast on bad sheet credentials."""
    if client is None:
        client = SheetsClient(cfg.sheets_config(), live=cfg.live_mode)
    return RecordStore(client, sheet_name=cfg.sheet_name)


def build_document_store(cfg: AdsConfig) -> DocumentStore:
    path = Path(cfg.docstore_path) if cfg.docstore_path else None
    return DocumentStore(path)


def build_publisher(
    cfg: AdsConfig,
    record_store: RecordStore,
    documents: DocumentStore,
    audit: AuditRecorder | None = None,
) -> Publisher:
    """Build a Publisher from an AdsConfig.

    In live mode a channel is only wired when its credentials are set; a
    publish that asks for an unwired channel is rejected as misconfigured.
    Mock mode wires every channel.

    Args:
        cfg: Configuration with channel credentials and live_mode.
        record_store: Store that receives the publish summary.
        documents: Document store backing the website channel.
        audit: Optional pre-built audit recorder. If None, one is built
            on top of documents.
    """
    zalo = None
    if cfg.zalo_access_token or not cfg.live_mode:
        zalo = ZaloClient(
            ZaloConfig(
                access_token=cfg.zalo_access_token,
                api_url=cfg.zalo_api_url,
                timeout=cfg.channel_timeout,
            ),
            live=cfg.live_mode,
        )

    facebook = None
    if (cfg.facebook_page_id and cfg.facebook_access_token) or not cfg.live_mode:
        facebook = FacebookClient(
            FacebookConfig(
                page_id=cfg.facebook_page_id,
                access_token=cfg.facebook_access_token,
                api_version=cfg.facebook_api_version,
                timeout=cfg.channel_timeout,
            ),
            live=cfg.live_mode,
        )

    return Publisher(
        record_store,
        zalo_client=zalo,
        facebook_client=facebook,
        website_client=WebsiteClient(documents),
        audit=audit or AuditRecorder(documents),
        max_workers=cfg.max_parallel_channels,
        channel_timeout=cfg.channel_timeout,
    )


def build_services(cfg: AdsConfig, sheets_client: SheetsClient | None = None) -> Services:
    record_store = build_record_store(cfg, sheets_client)
    documents = build_document_store(cfg)
    audit = AuditRecorder(documents)
    return Services(
        config=cfg,
        record_store=record_store,
        documents=documents,
        audit=audit,
        website=WebsiteClient(documents),
        publisher=build_publisher(cfg, record_store, documents, audit),
        adcopy=AdCopyClient(
            AdCopyConfig(endpoint=cfg.adcopy_endpoint, timeout=cfg.channel_timeout),
            live=cfg.live_mode,
        ),
    )
