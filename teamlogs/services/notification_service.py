# teamlogs/services/notification_service.py
# -*- coding: utf-8 -*-
"""
Notification Service
Relays new manager feedback to the external automation webhook.

Delivery is fire-and-forget: requests run on a worker pool owned by the notifier,
so a slow or failing webhook can never delay or fail the request that saved the feedback.
Failures are logged and otherwise dropped.
"""
import atexit
import logging
import threading
from concurrent import futures

import httpx

from teamlogs.utils.exceptions import NotificationFailure


class FeedbackNotifier:
    """
    Flask extension owning the webhook HTTP client and its worker pool.

    Both are created on first use and live for the rest of the process;
    `shutdown()` releases them and runs automatically at interpreter exit.
    """

    def __init__(self, app=None):
        self.webhook_url = None
        self.timeout = 10.0
        self.max_workers = 4
        self.transport = None
        self.logger = logging.getLogger(__name__)

        self._client: httpx.Client | None = None
        self._executor: futures.ThreadPoolExecutor | None = None
        self._pending: set[futures.Future] = set()
        self._lock = threading.Lock()
        self._exit_hook_registered = False

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.webhook_url = app.config.get('NOTIFICATION_WEBHOOK_URL')
        self.timeout = app.config.get('NOTIFICATION_TIMEOUT', 10.0)
        self.max_workers = app.config.get('NOTIFICATION_MAX_WORKERS', 4)
        self.logger = app.logger
        app.extensions['feedback_notifier'] = self

        if not self._exit_hook_registered:
            atexit.register(self.shutdown)
            self._exit_hook_registered = True

    # --- Resources ---

    def _get_client(self) -> httpx.Client:
        with self._lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(timeout=self.timeout, transport=self.transport)
            return self._client

    def _get_executor(self) -> futures.ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = futures.ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix='feedback-webhook',
                )
            return self._executor

    def use_transport(self, transport: httpx.BaseTransport | None):
        """Route webhook requests through a custom httpx transport (None restores the default)."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
            self.transport = transport

    # --- Delivery ---

    def notify_feedback(self, session_id: str, content: str) -> futures.Future | None:
        """
        Schedule delivery of `{content, sessionId}` to the webhook and return immediately.

        Returns:
            Future resolving to True/False for delivered/failed, or None when no
            webhook is configured.
        """
        if not self.webhook_url:
            self.logger.warning(f"NOTIFICATION_WEBHOOK_URL not configured; feedback for session {session_id} not relayed.")
            return None

        payload = {'content': content, 'sessionId': session_id}
        future = self._get_executor().submit(self._deliver_logged, payload)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        self.logger.debug(f"Feedback notification for session {session_id} scheduled.")
        return future

    def deliver(self, payload: dict) -> httpx.Response:
        """
        POST the payload to the webhook synchronously.

        Raises:
            NotificationFailure: On transport errors or a non-success status.
        """
        try:
            response = self._get_client().post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationFailure(f"Failed to send to webhook: {e}") from e

        if not response.is_success:
            raise NotificationFailure(
                f"Webhook failed with status: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def _deliver_logged(self, payload: dict) -> bool:
        session_id = payload.get('sessionId')
        try:
            response = self.deliver(payload)
        except NotificationFailure as e:
            detail = f" Error: {e.body}" if e.body else ""
            self.logger.error(f"Feedback notification for session {session_id} failed: {e}{detail}")
            return False
        except Exception as e:
            # Worker threads have nobody to propagate to
            self.logger.exception(f"Unexpected error notifying webhook for session {session_id}: {e}")
            return False
        self.logger.info(f"Feedback notification for session {session_id} delivered (status {response.status_code}).")
        return True

    def _forget(self, future):
        with self._lock:
            self._pending.discard(future)

    # --- Lifecycle ---

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight deliveries. Returns True if none are left pending."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = futures.wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True):
        """Stop accepting work, optionally wait for in-flight deliveries, close the client."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
