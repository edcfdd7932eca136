"""HTTP API for the listing sheet, publishing and ad pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from minhland_ads import __version__
from minhland_ads.config import AdsConfig, load_config
from minhland_ads.errors import AdsError, ChannelUnavailable, PersistenceFailure, ValidationError
from minhland_ads.factory import Services, build_services
from minhland_ads.publisher import PublishRequest

# Camel-case names sent by the web form, mapped to record fields.
FIELD_ALIASES = {
    "transactionStatus": "transaction_status",
    "adId": "ad_id",
    "adContent": "ad_content",
    "photoUrl": "photo_url",
    "noteHistory": "note_history",
    "rowIndex": "row_position",
}

# Keys the listing table reads back in camel case.
RESPONSE_ALIASES = {
    "row_position": "rowIndex",
    "transaction_status": "transactionStatus",
}

_FAILURE_MESSAGES = {
    "/api/publish": "Error publishing",
}

POSITION_ALIASES = AliasChoices("row_position", "rowIndex", "rowPosition")


# ==================== Request models ====================


class RecordBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    name: str = ""
    mobile: str = ""
    source: str = ""
    type: str = ""
    demand: str = ""
    area: str = ""
    price: str = ""
    product: str = ""
    transaction_status: str = Field(
        "", validation_alias=AliasChoices("transaction_status", "transactionStatus"),
    )
    note: str = ""
    ad_id: str = Field("", validation_alias=AliasChoices("ad_id", "adId"))
    ad_content: str = ""
    photo_url: str = Field("", validation_alias=AliasChoices("photo_url", "photoUrl"))
    zalo_article_status: str = ""
    zalo_message_status: str = ""
    facebook_post_status: str = ""
    website_status: str = ""
    email: str = ""
    platforms: list[str] | str = ""
    purpose: str = ""


class UpdateBody(BaseModel):
    row_position: int = Field(validation_alias=POSITION_ALIASES)
    data: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("data", "partial_fields", "partialFields"),
    )


class DeleteBody(BaseModel):
    row_position: int = Field(validation_alias=POSITION_ALIASES)


class PublishBody(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = ""
    mobile: str = ""
    address: str = ""
    content: str = ""
    platforms: list[str] | str = Field(default_factory=list)
    photo: str = ""
    row_position: int | None = Field(None, validation_alias=POSITION_ALIASES)
    ad_id: str = Field("", validation_alias=AliasChoices("ad_id", "adId"))
    zalo_id: str = Field("", validation_alias=AliasChoices("zalo_id", "zaloid", "zaloId"))
    subpage: bool = False
    email: str = ""
    purpose: str = ""

    def to_request(self) -> PublishRequest:
        platforms = self.platforms
        if isinstance(platforms, str):
            platforms = [p for p in platforms.split(",") if p.strip()]
        return PublishRequest(
            name=self.name,
            mobile=self.mobile,
            content=self.content,
            platforms=platforms,
            ad_id=self.ad_id,
            row_position=self.row_position,
            address=self.address,
            photo=self.photo,
            zalo_id=self.zalo_id,
            subpage="1" if self.subpage else "",
            email=self.email,
            purpose=self.purpose,
        )


class AdCopyBody(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = ""
    mobile: str = ""
    source: str = ""
    type: str = ""
    demand: str = ""
    area: str = ""
    price: str = ""
    product: str = ""
    transaction_status: str = Field(
        "", validation_alias=AliasChoices("transaction_status", "transactionStatus"),
    )
    note: str = ""


def normalize_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def present_record(record: dict[str, Any]) -> dict[str, Any]:
    return {RESPONSE_ALIASES.get(key, key): value for key, value in record.items()}


def get_services(request: Request) -> Services:
    return request.app.state.services


# ==================== Sheet routes ====================

sheets_router = APIRouter(prefix="/api/sheets", tags=["sheets"])


@sheets_router.get("/get")
def list_records(
    email: str | None = Query(None),
    services: Services = Depends(get_services),
) -> list[dict[str, Any]]:
    if not email:
        raise ValidationError("Missing email")
    return [present_record(r) for r in services.record_store.find_by_email(email)]


@sheets_router.post("")
def append_record(body: RecordBody, services: Services = Depends(get_services)) -> dict[str, Any]:
    position = services.record_store.append(body.model_dump())
    return {"message": "Data successfully added to Google Sheet", "row_position": position}


@sheets_router.put("")
def update_record(body: UpdateBody, services: Services = Depends(get_services)) -> dict[str, Any]:
    record = services.record_store.update(body.row_position, normalize_fields(body.data))
    return {"message": "Row updated successfully", "record": record}


@sheets_router.delete("")
def delete_record(body: DeleteBody, services: Services = Depends(get_services)) -> dict[str, Any]:
    services.record_store.delete(body.row_position)
    return {"message": "Row deleted successfully", "row_position": body.row_position}


# ==================== Publish routes ====================

publish_router = APIRouter(prefix="/api", tags=["publish"])


@publish_router.post("/publish")
def publish(body: PublishBody, services: Services = Depends(get_services)) -> dict[str, Any]:
    result = services.publisher.publish(body.to_request())
    return {
        "message": "Published successfully",
        "results": result.results,
        "errors": result.errors,
        "row_position": result.row_position,
    }


@publish_router.post("/ad-copy")
def generate_ad_copy(body: AdCopyBody, services: Services = Depends(get_services)) -> Any:
    try:
        text = services.adcopy.generate(body.model_dump())
    except ChannelUnavailable as exc:
        logger.warning("Ad copy generation failed: {}", exc)
        return JSONResponse(status_code=502, content={"error": str(exc)})
    return {"ad_content": text}


# ==================== Ad page routes ====================

ads_router = APIRouter(prefix="/api/ads", tags=["ads"])


@ads_router.get("")
def get_ad(
    ad_id: str | None = Query(None, alias="adId"),
    services: Services = Depends(get_services),
) -> Any:
    if not ad_id:
        raise ValidationError("Missing adId")
    ad = services.website.get_ad(ad_id)
    if ad is None:
        return JSONResponse(status_code=404, content={"error": "Ad not found"})
    return ad


@ads_router.post("")
def save_ad(
    document: dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    ad_id = document.get("adId") or document.get("ad_id")
    if not ad_id:
        raise ValidationError("Missing adId")
    services.website.save_document(str(ad_id), document)
    return {"message": "Ad saved successfully", "adId": ad_id}


@ads_router.get("/{ad_id}/audit")
def get_audit(ad_id: str, services: Services = Depends(get_services)) -> dict[str, Any]:
    entries = services.audit.for_record(ad_id)
    return {
        "ad_id": ad_id,
        "entries": [
            {
                "channel": e.channel,
                "status": e.status,
                "response": e.response,
                "timestamp": e.timestamp,
            }
            for e in entries
        ],
    }


# ==================== App ====================


def create_app(cfg: AdsConfig | None = None, services: Services | None = None) -> FastAPI:
    """Build the FastAPI app with all handles constructed up front."""
    if services is None:
        services = build_services(cfg or load_config())
    app = FastAPI(title="minhland-ads", version=__version__)
    app.state.services = services

    app.include_router(sheets_router)
    app.include_router(publish_router)
    app.include_router(ads_router)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": __version__,
            "live_mode": services.config.live_mode,
        }

    @app.exception_handler(AdsError)
    async def ads_error_handler(request: Request, exc: AdsError) -> JSONResponse:
        content: dict[str, Any] = {"error": str(exc)}
        if exc.status_code >= 500:
            logger.error("{} {} failed: {}", request.method, request.url.path, exc)
            content["message"] = _FAILURE_MESSAGES.get(request.url.path, "Request failed")
        if isinstance(exc, PersistenceFailure):
            content["results"] = exc.results
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        problems = [
            f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "; ".join(problems)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error("{} {} failed", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "message": _FAILURE_MESSAGES.get(request.url.path, "Request failed"),
                "error": str(exc) or exc.__class__.__name__,
            },
        )

    return app
