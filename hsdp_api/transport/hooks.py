"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Transport observer hook registry.

Observers are invoked at two fixed points of every call:
- on_before_send: the prepared request, right before it is handed to the session
- on_after_receive: the raw response, whenever one was received (any status)

Observer failures are logged and discarded; they never change the outcome
of the call they observe.
"""

from __future__ import annotations

from typing import Callable, List

import requests

from hsdp_api.logging_config import get_logger

logger = get_logger(__name__)


BeforeSendCallback = Callable[[requests.PreparedRequest], None]
AfterReceiveCallback = Callable[[requests.Response], None]


class HookRegistry:
    """
    Ordered registry of transport observers.

    Multiple callbacks per hook are supported and executed in registration
    order. An empty registry makes firing a no-op.
    """

    def __init__(self) -> None:
        self._before_send_callbacks: List[BeforeSendCallback] = []
        self._after_receive_callbacks: List[AfterReceiveCallback] = []

    # -- Registration methods ------------------------------------------------

    def on_before_send(self, callback: BeforeSendCallback) -> None:
        """Register a callback fired before every outbound request."""
        self._before_send_callbacks.append(callback)
        logger.debug("Registered on_before_send hook")

    def on_after_receive(self, callback: AfterReceiveCallback) -> None:
        """Register a callback fired after every received response."""
        self._after_receive_callbacks.append(callback)
        logger.debug("Registered on_after_receive hook")

    def clear(self) -> None:
        self._before_send_callbacks.clear()
        self._after_receive_callbacks.clear()

    @property
    def is_empty(self) -> bool:
        return not (self._before_send_callbacks or self._after_receive_callbacks)

    # -- Firing methods (called by the transport) ---------------------------

    def fire_before_send(self, request: requests.PreparedRequest) -> None:
        for cb in self._before_send_callbacks:
            try:
                cb(request)
            except Exception as exc:
                logger.debug(f"on_before_send hook error: {exc}")

    def fire_after_receive(self, response: requests.Response) -> None:
        for cb in self._after_receive_callbacks:
            try:
                cb(response)
            except Exception as exc:
                logger.debug(f"on_after_receive hook error: {exc}")
