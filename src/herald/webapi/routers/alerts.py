"""Alert lifecycle API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...config.logging import get_logger
from ...services import AlertService
from ..dependencies import get_alert_service, verify_auth_token
from ..models.requests import (
    AcknowledgeRequest,
    AlertCancelRequest,
    AlertCreateRequest,
    AlertFilterParams,
    AlertUpdateRequest,
)
from ..models.responses import (
    AcknowledgeResponse,
    AcknowledgeResultData,
    AcknowledgmentData,
    AcknowledgmentListData,
    AcknowledgmentListResponse,
    AlertData,
    AlertDispatchResponse,
    AlertListResponse,
    AlertResponse,
    AlertWithDispatchData,
    DispatchData,
    MessageResponse,
    StatusResponse,
)

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_auth_token)])


@router.post(
    "/alerts",
    response_model=AlertDispatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Alert",
    description="Create an alert and dispatch it unless send is false",
)
async def create_alert(
    alert_request: AlertCreateRequest,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertDispatchResponse:
    """
    Create an alert.

    - **title**, **message**: alert content
    - **severity**: low, medium, high or critical
    - **channels**: any of email, sms, push
    - **targeting**: `all`, `roles` and/or `specific` user ids
    - **send**: dispatch right away (default true)

    Delivery failures never fail the request; they are reported in
    `delivery_stats` and the dispatch summary.
    """
    request_id = getattr(request.state, "request_id", None)

    logger.info(
        "Create alert requested",
        severity=alert_request.severity,
        channels=alert_request.channels,
        created_by=alert_request.created_by,
        request_id=request_id,
    )

    alert, report = await alert_service.create_alert(
        title=alert_request.title,
        message=alert_request.message,
        created_by=alert_request.created_by,
        severity=alert_request.severity,
        channels=alert_request.channels,
        targeting=alert_request.targeting.model_dump(),
        send=alert_request.send,
    )

    return AlertDispatchResponse(
        data=AlertWithDispatchData(
            alert=AlertData.model_validate(alert),
            dispatch=DispatchData.from_report(report) if report else None,
        ),
        message="Alert created",
        request_id=request_id,
    )


@router.get("/alerts", response_model=AlertListResponse, summary="List Alerts")
async def list_alerts(
    request: Request,
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=500),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertListResponse:
    """List alerts, newest first by default."""
    params = AlertFilterParams(
        status=status_filter, limit=limit, sort_by=sort_by, sort_order=sort_order
    )
    alerts = alert_service.list_alerts(
        status=params.status,
        limit=params.limit,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return AlertListResponse(
        data=[AlertData.model_validate(a) for a in alerts],
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/alerts/analytics", response_model=StatusResponse, summary="Alert Analytics")
async def alert_analytics(
    request: Request, alert_service: AlertService = Depends(get_alert_service)
) -> StatusResponse:
    """Status, delivery, severity and channel counts across all alerts."""
    return StatusResponse.create(
        data=alert_service.analytics(),
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/alerts/{alert_id}", response_model=AlertResponse, summary="Get Alert")
async def get_alert(
    alert_id: int,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertResponse:
    alert = alert_service.get_alert(alert_id)
    return AlertResponse(
        data=AlertData.model_validate(alert),
        request_id=getattr(request.state, "request_id", None),
    )


@router.patch("/alerts/{alert_id}", response_model=AlertResponse, summary="Update Alert")
async def update_alert(
    alert_id: int,
    update_request: AlertUpdateRequest,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertResponse:
    """Edit a pending alert. Sent, failed and cancelled alerts are read-only."""
    changes = update_request.model_dump(exclude_none=True)
    alert = alert_service.update_alert(alert_id, changes)
    return AlertResponse(
        data=AlertData.model_validate(alert),
        message="Alert updated",
        request_id=getattr(request.state, "request_id", None),
    )


@router.delete("/alerts/{alert_id}", response_model=MessageResponse, summary="Delete Alert")
async def delete_alert(
    alert_id: int,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> MessageResponse:
    alert_service.delete_alert(alert_id)
    return MessageResponse.create(
        message=f"Alert {alert_id} deleted",
        request_id=getattr(request.state, "request_id", None),
    )


@router.post(
    "/alerts/{alert_id}/send", response_model=AlertDispatchResponse, summary="Send Alert"
)
async def send_alert(
    alert_id: int,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertDispatchResponse:
    """Dispatch a pending alert that was created with send=false."""
    report = await alert_service.send_alert(alert_id)
    alert = alert_service.get_alert(alert_id)
    return AlertDispatchResponse(
        data=AlertWithDispatchData(
            alert=AlertData.model_validate(alert),
            dispatch=DispatchData.from_report(report),
        ),
        message="Alert sent",
        request_id=getattr(request.state, "request_id", None),
    )


@router.post(
    "/alerts/{alert_id}/cancel", response_model=AlertResponse, summary="Cancel Alert"
)
async def cancel_alert(
    alert_id: int,
    request: Request,
    cancel_request: Optional[AlertCancelRequest] = None,
    alert_service: AlertService = Depends(get_alert_service),
) -> AlertResponse:
    """Cancel a pending alert, or a sent one within the cancel window."""
    cancelled_by = cancel_request.user_id if cancel_request else None
    alert = await alert_service.cancel_alert(alert_id, cancelled_by=cancelled_by)
    return AlertResponse(
        data=AlertData.model_validate(alert),
        message="Alert cancelled",
        request_id=getattr(request.state, "request_id", None),
    )


@router.post(
    "/alerts/{alert_id}/acknowledge",
    response_model=AcknowledgeResponse,
    summary="Acknowledge Alert",
)
async def acknowledge_alert(
    alert_id: int,
    ack_request: AcknowledgeRequest,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AcknowledgeResponse:
    """
    Acknowledge a sent alert.

    Acknowledging twice is not an error: the second call returns the
    original acknowledgment with `created` false.
    """
    result = await alert_service.acknowledge(alert_id, ack_request.user_id, ack_request.notes)
    return AcknowledgeResponse(
        data=AcknowledgeResultData(
            created=result.created,
            total_acknowledgments=result.total,
            acknowledgment=AcknowledgmentData.model_validate(result.record),
        ),
        message="Alert acknowledged" if result.created else "Alert already acknowledged",
        request_id=getattr(request.state, "request_id", None),
    )


@router.get(
    "/alerts/{alert_id}/acknowledgments",
    response_model=AcknowledgmentListResponse,
    summary="List Acknowledgments",
)
async def list_acknowledgments(
    alert_id: int,
    request: Request,
    alert_service: AlertService = Depends(get_alert_service),
) -> AcknowledgmentListResponse:
    acknowledgments = alert_service.list_acknowledgments(alert_id)
    return AcknowledgmentListResponse(
        data=AcknowledgmentListData(
            total=alert_service.acknowledgment_stats(alert_id)["total"],
            acknowledgments=[AcknowledgmentData.model_validate(a) for a in acknowledgments],
        ),
        request_id=getattr(request.state, "request_id", None),
    )
