"""Multi-channel publishing of one ad listing.

A publish request names the channels to use. Each requested channel is tried
independently; a failure is captured on that channel's outcome and never
stops the others. Every channel response, success or failure body, is kept
untruncated in the audit trail. When all channels are done, a truncated
summary of the outcomes is merged into the listing's sheet row.

Only the final sheet write can fail the whole call. By then the remote posts
already exist and are not rolled back; publishing again creates duplicates.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

from minhland_ads.channels import Channel, contact_text, join_labels, parse_channels
from minhland_ads.errors import (
    AdsError,
    ChannelUnavailable,
    ConfigurationError,
    PersistenceFailure,
    ValidationError,
)
from minhland_ads.schema import STATUS_ERROR
from minhland_ads.truncation import CONTENT_MAX, ERROR_MAX, PHOTO_MAX, STATUS_MAX, truncate
from minhland_ads.website import WebsiteAd

if TYPE_CHECKING:
    from minhland_ads.audit import AuditRecorder
    from minhland_ads.facebook import FacebookClient
    from minhland_ads.record_store import RecordStore
    from minhland_ads.website import WebsiteClient
    from minhland_ads.zalo import ZaloClient


class OutcomeStatus(Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    FAILED = "failed"
    SKIPPED = "skipped"


_ID_LABELS = {
    Channel.ARTICLE: "Article ID",
    Channel.MESSAGE: "Message ID",
    Channel.FEED: "Post ID",
    Channel.DOCUMENT: "Ad ID",
}


@dataclass
class ChannelOutcome:
    channel: Channel
    status: OutcomeStatus = OutcomeStatus.PENDING
    payload: dict[str, Any] | None = None
    external_id: str | None = None
    error: str | None = None

    def mark_published(self, payload: dict[str, Any], external_id: str) -> None:
        self.status = OutcomeStatus.PUBLISHED
        self.payload = payload
        self.external_id = external_id

    def mark_failed(self, error: str, payload: dict[str, Any] | None = None) -> None:
        self.status = OutcomeStatus.FAILED
        self.error = error
        self.payload = payload

    def mark_skipped(self, reason: str) -> None:
        self.status = OutcomeStatus.SKIPPED
        self.error = reason

    @property
    def status_text(self) -> str:
        """Value for the channel's status column."""
        if self.status == OutcomeStatus.PUBLISHED:
            return f"{_ID_LABELS[self.channel]}: {self.external_id}"
        if self.status == OutcomeStatus.FAILED:
            return STATUS_ERROR
        return ""


@dataclass
class PublishRequest:
    name: str = ""
    mobile: str = ""
    content: str = ""
    platforms: list[str] = field(default_factory=list)
    ad_id: str = ""
    row_position: int | None = None
    address: str = ""
    photo: str = ""
    zalo_id: str = ""
    subpage: str = ""
    email: str = ""
    purpose: str = ""

    def validate(self) -> list[Channel]:
        """Check required fields and return the requested channels in publish order."""
        missing = [
            name for name in ("name", "mobile", "content", "ad_id")
            if not str(getattr(self, name) or "").strip()
        ]
        if self.row_position is None:
            missing.append("row_position")
        if not self.platforms:
            missing.append("platforms")
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        channels = parse_channels(self.platforms)
        if not channels:
            raise ValidationError("At least one channel must be requested")
        return channels


@dataclass
class PublishResult:
    ad_id: str
    row_position: int
    outcomes: list[ChannelOutcome]
    summary: dict[str, str]
    persisted: bool = False

    @property
    def results(self) -> dict[str, dict[str, Any]]:
        return {
            o.channel.value: o.payload or {}
            for o in self.outcomes if o.status == OutcomeStatus.PUBLISHED
        }

    @property
    def errors(self) -> dict[str, str]:
        return {
            o.channel.value: o.error or ""
            for o in self.outcomes if o.status == OutcomeStatus.FAILED
        }

    def get_outcome(self, channel: Channel) -> ChannelOutcome | None:
        return next((o for o in self.outcomes if o.channel == channel), None)


class Publisher:
    """Publishes a listing to the requested channels and records the summary.

    Channel calls run on a bounded thread pool (max_workers=1 runs them one
    after another). A channel that has not answered within channel_timeout
    seconds of starting is recorded as failed; its worker thread is left to
    finish on its own.
    """

    def __init__(
        self,
        record_store: RecordStore,
        zalo_client: ZaloClient | None = None,
        facebook_client: FacebookClient | None = None,
        website_client: WebsiteClient | None = None,
        audit: AuditRecorder | None = None,
        max_workers: int = 4,
        channel_timeout: float = 30.0,
    ) -> None:
        self._store = record_store
        self._zalo = zalo_client
        self._facebook = facebook_client
        self._website = website_client
        self._audit = audit
        self._max_workers = max(1, max_workers)
        self._channel_timeout = channel_timeout

    def _client_for(self, channel: Channel) -> Any:
        if channel in (Channel.ARTICLE, Channel.MESSAGE):
            return self._zalo
        if channel == Channel.FEED:
            return self._facebook
        return self._website

    def _skip_reason(self, channel: Channel, request: PublishRequest) -> str | None:
        if channel == Channel.MESSAGE and not request.zalo_id:
            return "No recipient id supplied"
        if channel == Channel.DOCUMENT and not request.subpage:
            return "No subpage requested"
        return None

    # ---- channel attempts -------------------------------------------------

    def _publish_article(self, request: PublishRequest) -> tuple[dict[str, Any], str]:
        article = self._zalo.format_article(
            request.name, request.address, request.content, request.mobile, request.photo,
        )
        result = self._zalo.create_article(article)
        return result, self._zalo.article_id(result)

    def _publish_message(self, request: PublishRequest) -> tuple[dict[str, Any], str]:
        result = self._zalo.send_message(
            request.zalo_id, contact_text(request.content, request.mobile),
        )
        return result, self._zalo.message_id(result)

    def _publish_feed(self, request: PublishRequest) -> tuple[dict[str, Any], str]:
        message = self._facebook.format_for_feed(request.content, request.mobile, request.address)
        result = self._facebook.post_to_feed(message)
        return result, self._facebook.post_id(result)

    def _publish_document(self, request: PublishRequest) -> tuple[dict[str, Any], str]:
        result = self._website.publish_ad(WebsiteAd(
            ad_id=request.ad_id,
            name=request.name,
            mobile=request.mobile,
            content=request.content,
            address=request.address,
            photo=request.photo,
            row_position=request.row_position,
            email=request.email,
            purpose=request.purpose,
        ))
        return result, self._website.page_id(result)

    def _attempt(self, channel: Channel, request: PublishRequest) -> ChannelOutcome:
        handlers: dict[Channel, Callable[[PublishRequest], tuple[dict[str, Any], str]]] = {
            Channel.ARTICLE: self._publish_article,
            Channel.MESSAGE: self._publish_message,
            Channel.FEED: self._publish_feed,
            Channel.DOCUMENT: self._publish_document,
        }
        outcome = ChannelOutcome(channel=channel)
        try:
            payload, external_id = handlers[channel](request)
            outcome.mark_published(payload, external_id)
        except ChannelUnavailable as exc:
            outcome.mark_failed(str(exc), exc.payload)
        except Exception as exc:
            outcome.mark_failed(str(exc) or exc.__class__.__name__)
        return outcome

    def _run_channels(
        self, channels: list[Channel], request: PublishRequest,
    ) -> dict[Channel, ChannelOutcome]:
        if not channels:
            return {}
        started = {c: threading.Event() for c in channels}
        started_at: dict[Channel, float] = {}

        def run(channel: Channel) -> ChannelOutcome:
            started_at[channel] = time.monotonic()
            started[channel].set()
            return self._attempt(channel, request)

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(channels)),
            thread_name_prefix="publish",
        )
        futures: dict[Channel, Future[ChannelOutcome]] = {
            c: executor.submit(run, c) for c in channels
        }
        outcomes: dict[Channel, ChannelOutcome] = {}
        try:
            for channel, future in futures.items():
                # A queued channel's deadline starts once a worker picks it up.
                started[channel].wait()
                remaining = started_at[channel] + self._channel_timeout - time.monotonic()
                try:
                    outcomes[channel] = future.result(timeout=max(remaining, 0))
                except FutureTimeoutError:
                    outcome = ChannelOutcome(channel=channel)
                    outcome.mark_failed(f"Timed out after {self._channel_timeout:g}s")
                    outcomes[channel] = outcome
        finally:
            executor.shutdown(wait=False)
        return outcomes

    def _record_audit(self, request: PublishRequest, outcome: ChannelOutcome) -> str | None:
        if not self._audit or outcome.payload is None:
            return None
        status = "success" if outcome.status == OutcomeStatus.PUBLISHED else "failure"
        try:
            self._audit.record(request.ad_id, outcome.channel.value, outcome.payload, status)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(
                "Audit write failed for {}_{}: {}", request.ad_id, outcome.channel.value, exc,
            )
            return f"Audit {outcome.channel.label}: {exc}"
        return None

    # ---- orchestration ----------------------------------------------------

    def build_summary(
        self,
        request: PublishRequest,
        channels: list[Channel],
        outcomes: list[ChannelOutcome],
        notes: list[str] | None = None,
    ) -> dict[str, str]:
        """Sheet fields describing this publish attempt, each within its cell cap."""
        by_channel = {o.channel: o for o in outcomes}
        summary: dict[str, str] = {
            "name": request.name,
            "mobile": request.mobile,
            "ad_id": request.ad_id,
            "ad_content": truncate(request.content, CONTENT_MAX),
            "platforms": join_labels(channels),
        }
        if request.photo:
            summary["photo_url"] = truncate(request.photo, PHOTO_MAX)
        if request.email:
            summary["email"] = request.email
        if request.purpose:
            summary["purpose"] = request.purpose
        for channel in Channel:
            outcome = by_channel.get(channel)
            text = outcome.status_text if outcome else ""
            summary[channel.status_field] = truncate(text, STATUS_MAX)
        errors = [
            f"{o.channel.label}: {o.error}"
            for o in outcomes if o.status == OutcomeStatus.FAILED
        ]
        errors.extend(notes or [])
        summary["error_message"] = truncate("; ".join(errors), ERROR_MAX)
        return summary

    def publish(self, request: PublishRequest) -> PublishResult:
        channels = self.validate(request)
        logger.info(
            "Publishing ad {} (row {}) to {}",
            request.ad_id, request.row_position, [c.value for c in channels],
        )

        attempted: list[Channel] = []
        outcomes: dict[Channel, ChannelOutcome] = {}
        for channel in channels:
            reason = self._skip_reason(channel, request)
            if reason:
                skipped = ChannelOutcome(channel=channel)
                skipped.mark_skipped(reason)
                outcomes[channel] = skipped
                logger.info("Skipping {} for ad {}: {}", channel.label, request.ad_id, reason)
            else:
                attempted.append(channel)
        outcomes.update(self._run_channels(attempted, request))
        ordered = [outcomes[c] for c in channels]

        notes: list[str] = []
        for outcome in ordered:
            if outcome.status == OutcomeStatus.FAILED:
                logger.warning(
                    "{} failed for ad {}: {}", outcome.channel.label, request.ad_id, outcome.error,
                )
            note = self._record_audit(request, outcome)
            if note:
                notes.append(note)

        summary = self.build_summary(request, channels, ordered, notes)
        result = PublishResult(
            ad_id=request.ad_id,
            row_position=int(request.row_position),
            outcomes=ordered,
            summary=summary,
        )
        try:
            self._store.update(int(request.row_position), summary)
        except AdsError as exc:
            logger.error(
                "Could not persist publish summary for ad {} at row {}: {}",
                request.ad_id, request.row_position, exc,
            )
            raise PersistenceFailure(
                f"Failed to update sheet row {request.row_position}: {exc}",
                results=result.results,
            ) from exc
        result.persisted = True
        return result

    def validate(self, request: PublishRequest) -> list[Channel]:
        """Validate the request and check every channel that will run has a client."""
        channels = request.validate()
        unconfigured = [
            c.label for c in channels
            if self._skip_reason(c, request) is None and self._client_for(c) is None
        ]
        if unconfigured:
            raise ConfigurationError(
                f"No client configured for: {', '.join(unconfigured)}"
            )
        return channels
