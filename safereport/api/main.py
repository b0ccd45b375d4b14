"""
SafeReport - REST API

FastAPI application for anonymous incident reporting, photo-assisted
classification, and operator triage.

Run with: uvicorn safereport.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from safereport import __version__
from safereport.auth.operators import Operator, OperatorService, require_operator
from safereport.core.config import settings
from safereport.core.constants import (
    Category,
    ReportStatus,
    Urgency,
    parse_category,
    parse_status,
    parse_urgency,
)
from safereport.core.exceptions import (
    ClassificationError,
    GeolocationError,
    NotFound,
    SafeReportError,
    StoreError,
    ValidationError,
)
from safereport.core.logging import setup_logging
from safereport.crowdsource.draft import ReportDraft, parse_data_uri
from safereport.crowdsource.identifiers import is_valid_report_id
from safereport.crowdsource.photo_analyzer import ImageClassifier
from safereport.crowdsource.queries import ReportDetail, ReportFilter, ReportQueryService
from safereport.crowdsource.report_handler import IntakeReceipt, ReportIntake
from safereport.crowdsource.triage import TriageWorkflow, allowed_transitions
from safereport.crowdsource.validation import image_errors
from safereport.database.connection import get_db, get_session
from safereport.database.store import ReportStore
from safereport.ingestion.gemini_client import GeminiClient
from safereport.ingestion.geocoding_client import GeocodingClient

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_db().create_tables()
    yield


# FastAPI app
app = FastAPI(
    title="SafeReport",
    description="Anonymous incident reporting with AI-assisted classification and operator triage",
    version=__version__,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ReportCreatedResponse(CamelModel):
    """Receipt for an accepted report."""
    success: bool
    report_id: str
    message: str


class ReportSummaryResponse(CamelModel):
    """Report as shown in operator listings."""
    report_id: str
    urgency: Urgency
    category: Category
    title: str
    description: str
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    has_image: bool
    status: ReportStatus
    created_at: datetime
    updated_at: datetime


class ReportDetailResponse(ReportSummaryResponse):
    """Full report record."""
    version: int
    image_url: Optional[str] = None
    allowed_statuses: List[ReportStatus] = []


class StatusUpdateRequest(BaseModel):
    """Triage action."""
    status: str
    version: Optional[int] = Field(default=None, ge=1, description="Version the operator last saw")


class ReportStatsResponse(BaseModel):
    """Report statistics."""
    total_reports: int
    pending_count: int
    by_status: dict
    by_category: dict
    by_urgency: dict
    resolution_rate: float


class ClassifyRequest(BaseModel):
    """Image to classify."""
    image: str = Field(..., description="Base64 data URI")


class ClassifyResponse(BaseModel):
    """Suggested report fields; empty strings when the model gave none."""
    title: str
    reportType: str
    description: str


class ReverseGeocodeRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class AddressSearchRequest(BaseModel):
    address: str = Field(..., min_length=1)


class GeoLocationResponse(BaseModel):
    latitude: float
    longitude: float
    formatted_address: str


class SignupRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class OperatorResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: OperatorResponse


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    modules: dict


# ============================================================================
# Dependencies
# ============================================================================

def get_current_operator(authorization: Optional[str] = Header(None)) -> Optional[Operator]:
    """Operator from a "Bearer <token>" header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return Operator.from_token(token.strip())


def get_classifier() -> Generator[ImageClassifier, None, None]:
    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.gemini_timeout_seconds,
    )
    try:
        yield ImageClassifier(client)
    finally:
        client.close()


def get_geocoder() -> Generator[GeocodingClient, None, None]:
    client = GeocodingClient(
        api_key=settings.google_maps_api_key,
        timeout=settings.geocoding_timeout_seconds,
    )
    try:
        yield client
    finally:
        client.close()


def _detail_response(detail: ReportDetail) -> ReportDetailResponse:
    response = ReportDetailResponse.model_validate(detail)
    if detail.has_image:
        response.image_url = f"/reports/{detail.report_id}/image"
    response.allowed_statuses = sorted(
        allowed_transitions(detail.status, settings.strict_transitions),
        key=lambda s: list(ReportStatus).index(s),
    )
    return response


def _check_report_id(report_id: str) -> None:
    """Malformed ids cannot name a stored report."""
    if not is_valid_report_id(report_id, settings.report_id_length):
        raise NotFound()


def _parse_filter(
    status: Optional[str],
    report_type: Optional[str],
    urgency: Optional[str],
) -> ReportFilter:
    """Build a list filter; `type` takes a category or a legacy urgency value."""
    report_filter = ReportFilter()

    if status:
        report_filter.status = parse_status(status)
        if report_filter.status is None:
            raise ValidationError(f"Unknown status: {status}")

    if urgency:
        report_filter.urgency = parse_urgency(urgency)
        if report_filter.urgency is None:
            raise ValidationError(f"Unknown urgency: {urgency}")

    if report_type:
        legacy_urgency = parse_urgency(report_type)
        if legacy_urgency is not None:
            report_filter.urgency = legacy_urgency
        else:
            report_filter.category = parse_category(report_type)
            if report_filter.category is None:
                raise ValidationError(f"Unknown type: {report_type}")

    return report_filter


# ============================================================================
# Error Handling
# ============================================================================

@app.exception_handler(SafeReportError)
async def safereport_error_handler(request, exc: SafeReportError):
    """Map domain errors to JSON responses without leaking store details."""
    if isinstance(exc, (StoreError, ClassificationError, GeolocationError)):
        message = exc.public_message
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc: RequestValidationError):
    """Report submissions answer malformed bodies with the intake envelope."""
    if request.method == "POST" and request.url.path == "/reports":
        logger.info(f"Rejected malformed report body: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content=IntakeReceipt.rejected("Request body must be a JSON object").to_dict(),
        )
    return await request_validation_exception_handler(request, exc)


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
def health_check():
    """Check API health status and collaborator configuration."""
    modules = {
        "database": get_db().check_connection(),
        "image_classifier": bool(settings.gemini_api_key),
        "geocoding": bool(settings.google_maps_api_key),
    }

    return HealthResponse(
        status="healthy" if modules["database"] else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        modules=modules,
    )


# ============================================================================
# Report Routes
# ============================================================================

@app.post("/reports", response_model=ReportCreatedResponse, tags=["Reports"])
def create_report(
    payload: Dict[str, Any] = Body(..., description="Report fields; legacy keys are accepted"),
    session: Session = Depends(get_session),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    """
    Submit an incident report.

    No account is needed. The server assigns the report id and sets the
    status to PENDING.
    """
    try:
        draft = ReportDraft.from_payload(payload)
        intake = ReportIntake(
            ReportStore(session),
            geocoder=geocoder if geocoder.is_configured else None,
        )
        report = intake.submit(draft)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=IntakeReceipt.rejected(e.message).to_dict())
    except Exception as e:
        logger.error(f"Error creating report: {e}")
        return JSONResponse(
            status_code=500,
            content=IntakeReceipt.rejected("Failed to submit report").to_dict(),
        )

    return IntakeReceipt.accepted(report).to_dict()


@app.get("/reports", response_model=List[ReportSummaryResponse], tags=["Reports"])
def list_reports(
    status: Optional[str] = Query(None, description="Filter by status"),
    type: Optional[str] = Query(None, description="Filter by category (or legacy urgency)"),
    urgency: Optional[str] = Query(None, description="Filter by urgency"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    operator: Optional[Operator] = Depends(get_current_operator),
    session: Session = Depends(get_session),
):
    """List reports for review, most recent first. Requires an operator session."""
    require_operator(operator)
    report_filter = _parse_filter(status, type, urgency)

    summaries = ReportQueryService(ReportStore(session)).list(
        operator, report_filter, limit=limit, offset=offset
    )
    return [ReportSummaryResponse.model_validate(s) for s in summaries]


@app.get("/reports/stats/summary", response_model=ReportStatsResponse, tags=["Reports"])
def get_report_stats(
    operator: Optional[Operator] = Depends(get_current_operator),
    session: Session = Depends(get_session),
):
    """Get report counts by status, category and urgency."""
    stats = ReportQueryService(ReportStore(session)).statistics(operator)
    return ReportStatsResponse(**stats)


@app.get("/reports/{report_id}", response_model=ReportDetailResponse, tags=["Reports"])
def get_report(report_id: str, session: Session = Depends(get_session)):
    """Get a report by its external id."""
    _check_report_id(report_id)
    detail = ReportQueryService(ReportStore(session)).get(report_id)
    return _detail_response(detail)


@app.get("/reports/{report_id}/image", tags=["Reports"])
def get_report_image(report_id: str, session: Session = Depends(get_session)):
    """Get the photo attached to a report."""
    _check_report_id(report_id)
    image = ReportQueryService(ReportStore(session)).get_image(report_id)
    return Response(content=image.data, media_type=image.mime_type)


@app.patch("/reports/{report_id}", response_model=ReportDetailResponse, tags=["Reports"])
def update_report_status(
    report_id: str,
    request: StatusUpdateRequest,
    operator: Optional[Operator] = Depends(get_current_operator),
    session: Session = Depends(get_session),
):
    """Change a report's status. Requires an operator session."""
    require_operator(operator)
    _check_report_id(report_id)

    new_status = parse_status(request.status)
    if new_status is None:
        raise ValidationError(f"Invalid status: {request.status}")

    workflow = TriageWorkflow(ReportStore(session), strict=settings.strict_transitions)
    detail = workflow.transition(
        report_id,
        operator,
        new_status,
        expected_version=request.version,
    )
    return _detail_response(detail)


# ============================================================================
# Assist Routes
# ============================================================================

@app.post("/images/classify", response_model=ClassifyResponse, tags=["Assist"])
def classify_image(
    request: ClassifyRequest,
    classifier: ImageClassifier = Depends(get_classifier),
):
    """
    Suggest title, category and description for a photo.

    Fields the model does not answer come back as empty strings.
    """
    mime_type, image_data = parse_data_uri(request.image)
    errors = image_errors(image_data, mime_type, settings.max_image_bytes)
    if errors:
        raise ValidationError("; ".join(errors))

    result = classifier.classify(image_data, mime_type)
    return ClassifyResponse(**result.to_dict())


@app.post("/geocode/reverse", response_model=GeoLocationResponse, tags=["Assist"])
def reverse_geocode(
    request: ReverseGeocodeRequest,
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    """Find the address for the reporter's current coordinates."""
    location = geocoder.reverse(request.latitude, request.longitude)
    return GeoLocationResponse(**location.to_dict())


@app.post("/geocode/search", response_model=GeoLocationResponse, tags=["Assist"])
def search_address(
    request: AddressSearchRequest,
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    """Find coordinates for a typed address."""
    location = geocoder.resolve_address(request.address)
    return GeoLocationResponse(**location.to_dict())


# ============================================================================
# Auth Routes
# ============================================================================

@app.post("/auth/signup", response_model=OperatorResponse, status_code=201, tags=["Auth"])
def signup(request: SignupRequest, session: Session = Depends(get_session)):
    """Register an operator account."""
    if not settings.allow_signup:
        raise HTTPException(status_code=403, detail="Signup is disabled")

    operator = OperatorService(session).register(request.email, request.password, request.name)
    return OperatorResponse(**operator.to_dict())


@app.post("/auth/login", response_model=LoginResponse, tags=["Auth"])
def login(request: LoginRequest, session: Session = Depends(get_session)):
    """Exchange operator credentials for a bearer token."""
    service = OperatorService(session)
    operator = service.authenticate(request.email, request.password)
    return LoginResponse(
        access_token=service.issue_token(operator),
        user=OperatorResponse(**operator.to_dict()),
    )


@app.get("/auth/me", response_model=OperatorResponse, tags=["Auth"])
def current_operator(operator: Optional[Operator] = Depends(get_current_operator)):
    """Get the operator behind the current session."""
    require_operator(operator)
    return OperatorResponse(**operator.to_dict())


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
