import argparse
from contextlib import asynccontextmanager
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI

from trackman import config
from trackman.api import router
from trackman.controller import SessionController
from trackman.geotracker import GeoTrackerSignaler
from trackman.intents import ActivityManager
from trackman.logging_config import get_logger
from trackman.notifications import make_notifier
from trackman.opentracks import OpenTracksSignaler
from trackman.permissions import PermissionChecker
from trackman.policy import GEOTRACKER, OPENTRACKS, Verb
from trackman.store import StatusStore
from trackman.transitions import WebhookTransitionSource

logger = get_logger("main", "service.log")


@dataclass
class Service:
    store: StatusStore
    permissions: PermissionChecker
    source: WebhookTransitionSource
    dispatcher: ActivityManager
    notifier: object
    controller: SessionController


def build_service(dispatcher=None, notifier=None, permissions=None, executor=None) -> Service:
    store = StatusStore()
    dispatcher = dispatcher or ActivityManager()
    notifier = notifier or make_notifier()
    permissions = permissions or PermissionChecker()
    source = WebhookTransitionSource(permissions)

    signalers = {
        OPENTRACKS: OpenTracksSignaler(dispatcher, notifier),
        GEOTRACKER: GeoTrackerSignaler(dispatcher, notifier),
    }
    controller = SessionController(store, source, signalers, notifier, permissions, executor=executor)
    return Service(store, permissions, source, dispatcher, notifier, controller)


def create_app(service: Service = None) -> FastAPI:
    service = service or build_service()

    @asynccontextmanager
    async def lifespan(app):
        yield
        logger.info("Shutting down, closing tracking session...")
        service.controller.close()

    app = FastAPI(title="Trackman", lifespan=lifespan)
    app.state.service = service
    app.include_router(router)
    return app


# ---------------------------------------------------
#                      CLI
# ---------------------------------------------------
def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="trackman", description="Start/stop OpenTracks and Geo Tracker from activity transitions.")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the webhook + control API")
    serve.add_argument("--host", default=config.HOST)
    serve.add_argument("--port", type=int, default=config.PORT)

    sig = sub.add_parser("signal", help="Send one control signal to a tracker app")
    sig.add_argument("target", choices=[OPENTRACKS, GEOTRACKER])
    sig.add_argument("verb", choices=[v.value for v in Verb])
    sig.add_argument("--name", help="Track name (OpenTracks start only)")
    sig.add_argument("--description", help="Track description (OpenTracks start only)")
    sig.add_argument("--category", help="Track category (OpenTracks start only)")
    sig.add_argument("--icon", help="Track icon id, e.g. activity_run (OpenTracks start only)")
    return p.parse_args(argv)


def send_signal(args, dispatcher=None, notifier=None) -> int:
    dispatcher = dispatcher or ActivityManager()
    notifier = notifier or make_notifier("log")
    verb = Verb(args.verb)

    if args.target == OPENTRACKS:
        signaler = OpenTracksSignaler(dispatcher, notifier)
        extras = {k: getattr(args, k) for k in ("name", "description", "category", "icon")}
    else:
        signaler = GeoTrackerSignaler(dispatcher, notifier)
        extras = {}

    if verb is not Verb.START:
        extras = {}
    extras = {k: v for k, v in extras.items() if v is not None}

    try:
        error = signaler.signal(verb, **extras)
    except ValueError as e:
        raise SystemExit(str(e))
    return 1 if error else 0


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.command == "serve":
        uvicorn.run(create_app(), host=args.host, port=args.port, reload=False)
        return 0
    return send_signal(args)


if __name__ == "__main__":
    raise SystemExit(main())
