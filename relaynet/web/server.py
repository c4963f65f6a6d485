import base64
import dataclasses
import logging
import os
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv
from flask import Flask, jsonify, request

from ..clients.factory import build_client
from ..clients.http import NetworkingClient
from ..clients.proxy import RelayProxyNetworkingClient
from ..config.config import ClientConfig, load_config
from ..core.models import (
    ContentType,
    ErrorResponse,
    Failure,
    JsonResponse,
    PlainTextResponse,
    Request,
    Result,
)
from ..core.resolver import is_absolute, resolve_uri
from .events import InvalidRequestEvent, RelayProxyRequestEvent, RequestEvent, parse_event

load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
log = logging.getLogger("relaynet")

TEXT_CONTENT_TYPES = {ContentType.JSON, ContentType.PLAIN_TEXT}


def describe_result(result: Result) -> Dict[str, Any]:
    """Render a send result as JSON-safe data for the console."""
    if isinstance(result, Failure):
        return {
            "outcome": "error",
            "variant": type(result.error).__name__,
            "cause": result.error.cause,
        }

    response = result.response
    content_type = response.content_type
    if isinstance(response, (JsonResponse, PlainTextResponse)) or (
        isinstance(response, ErrorResponse) and content_type in TEXT_CONTENT_TYPES
    ):
        body = response.text
    else:
        body = base64.b64encode(response.body).decode("ascii")

    return {
        "outcome": "response",
        "variant": type(response).__name__,
        "status_code": response.status_code,
        "headers": dict(response.headers),
        "content_type": content_type.mime,
        "body": body,
    }


def create_app(config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None) -> Flask:
    """Build the request console.

    Args:
        config: Client configuration. Loaded from the environment when omitted.
        session: Transport shared by every console request.
    """
    cfg = config or load_config()
    transport = session if session is not None else requests.Session()

    # Requests carry absolute URIs, so one client per relay setting serves every event.
    direct_client = build_client(dataclasses.replace(cfg, relay_url=None), session=transport)
    default_client = build_client(cfg, session=transport) if cfg.relay_url else direct_client

    app = Flask(__name__)

    def client_for(event: RequestEvent) -> NetworkingClient:
        if not isinstance(event, RelayProxyRequestEvent) or event.relay_proxy_url == cfg.relay_url:
            return default_client
        # Shares the console's transport and owns nothing, so it is never closed.
        return RelayProxyNetworkingClient(
            client=direct_client,
            uri=event.relay_proxy_url,
            bypass_body_delete=cfg.bypass_body_delete,
            bypass_expose_headers=cfg.bypass_expose_headers,
        )

    def send_event(event: RequestEvent) -> Result:
        target = event.url if is_absolute(event.url) else resolve_uri(cfg.base_url, event.url)
        content_type = event.content_type
        if content_type is None and event.payload is not None:
            content_type = ContentType.JSON

        return client_for(event).send(
            Request(
                verb=event.verb,
                uri=target,
                headers=event.headers,
                content_type=content_type,
                body=event.payload,
            )
        )

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.post("/requests")
    def send_request():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "request body must be a JSON object"}), 400
        try:
            event = parse_event(payload)
        except InvalidRequestEvent as e:
            return jsonify({"error": str(e)}), 400

        log.info("Console %s %s", event.verb.value, event.url)
        return jsonify(describe_result(send_event(event)))

    return app


if __name__ == "__main__":
    port = int(os.getenv("SERVER_PORT", "8080"))
    create_app().run(host="0.0.0.0", port=port)
