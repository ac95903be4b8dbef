"""Helpers for requests issued by htmx."""

import json


def is_htmx(request) -> bool:
    return request.headers.get("HX-Request") == "true"


def hx_target(request) -> str:
    return request.headers.get("HX-Target", "")


def hx_redirect(response, url: str):
    response["HX-Redirect"] = url
    return response


def hx_trigger(response, events: dict):
    response["HX-Trigger"] = json.dumps(events)
    return response


def hx_reswap(response, swap: str):
    response["HX-Reswap"] = swap
    return response
