"""minhland-ads: listing sheet storage and multi-channel ad publishing."""

__version__ = "0.1.0"

from minhland_ads.audit import AuditEntry, AuditRecorder
from minhland_ads.channels import Channel
from minhland_ads.config import AdsConfig, load_config
from minhland_ads.factory import Services, build_publisher, build_services
from minhland_ads.publisher import PublishRequest, PublishResult, Publisher
from minhland_ads.record_store import RecordStore

__all__ = [
    "AdsConfig",
    "AuditEntry",
    "AuditRecorder",
    "Channel",
    "PublishRequest",
    "PublishResult",
    "Publisher",
    "RecordStore",
    "Services",
    "build_publisher",
    "build_services",
    "load_config",
]
