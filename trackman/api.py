import asyncio

from fastapi import APIRouter, HTTPException, Request

from trackman.exceptions import PermissionMissing, RegistrationFailure, SignalError
from trackman.logging_config import get_logger
from trackman.notifications import status_text
from trackman.permissions import Capability

router = APIRouter()
logger = get_logger("api", "api.log")


def _status(service) -> dict:
    snap = service.store.snapshot()
    return {
        "state": service.controller.state.value,
        "tracking_enabled": snap.tracking_enabled,
        "current_activity": snap.current_activity.name if snap.current_activity else None,
        "label": status_text(snap.current_activity),
        "update_count": snap.update_count,
        "is_in_vehicle": snap.is_in_vehicle,
        "is_on_bicycle": snap.is_on_bicycle,
    }


# ---------------------------------------------------
#            ACTIVITY TRANSITION WEBHOOK
# ---------------------------------------------------
@router.post("/transitions")
async def transitions_hook(payload: dict, request: Request):
    service = request.app.state.service

    try:
        # store subscribers shell out; keep them off the event loop
        recorded = await asyncio.get_event_loop().run_in_executor(
            None, service.source.deliver, payload
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if recorded is None:
        return {"ok": False, "reason": "not-registered"}
    if recorded == 0:
        return {"ok": False, "reason": "ignored"}

    logger.info(f"Recorded {recorded} transition event(s)")
    return {"ok": True, "events": recorded}


@router.post("/transitions/registration-lost")
async def registration_lost(payload: dict, request: Request):
    """The bridge lost its activity-recognition subscription; end the session."""
    service = request.app.state.service
    reason = str(payload.get("reason") or "unspecified")

    await asyncio.get_event_loop().run_in_executor(
        None, service.controller.registration_lost, reason
    )
    return _status(service)


# ---------------------------------------------------
#               MANUAL CONTROL SURFACE
# ---------------------------------------------------
@router.get("/status")
async def get_status(request: Request):
    return _status(request.app.state.service)


@router.post("/tracking/start")
async def start_tracking(request: Request):
    service = request.app.state.service

    missing = service.permissions.missing()
    try:
        if missing:
            raise PermissionMissing([c.value for c in missing])
        await asyncio.get_event_loop().run_in_executor(None, service.controller.start)
    except PermissionMissing as e:
        logger.warning(f"Start refused: {e}")
        raise HTTPException(status_code=403, detail={
            "error": "permission-missing",
            "missing": e.missing,
            "retry": "/tracking/start",
            "settings": service.permissions.settings_uri(),
        })
    except RegistrationFailure as e:
        raise HTTPException(status_code=503, detail={"error": "registration-failed", "message": str(e)})

    return _status(service)


@router.post("/tracking/stop")
async def stop_tracking(request: Request):
    service = request.app.state.service
    await asyncio.get_event_loop().run_in_executor(None, service.controller.stop)
    return _status(service)


@router.put("/permissions")
async def report_permissions(payload: dict, request: Request):
    """Grant state as reported by the platform bridge, keyed by capability name."""
    service = request.app.state.service

    # validate everything before applying anything
    grants = {}
    for name, granted in payload.items():
        try:
            capability = Capability[name]
        except KeyError:
            raise HTTPException(status_code=400, detail=f"unknown capability '{name}'")
        if not isinstance(granted, bool):
            raise HTTPException(status_code=400, detail=f"grant for '{name}' must be true or false")
        grants[capability] = granted

    for capability, granted in grants.items():
        service.permissions.grant(capability, granted)

    missing = service.permissions.missing()
    return {"missing": [c.value for c in missing]}


@router.post("/permissions/settings")
async def open_settings(request: Request):
    service = request.app.state.service
    try:
        await asyncio.get_event_loop().run_in_executor(
            None, service.dispatcher.start_activity, "settings", service.permissions.settings_intent()
        )
    except SignalError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True}
