"""
Slack webhook client
Posts formatted block messages to the configured incoming webhook.

An unset webhook URL (or Slack's documentation placeholder) is a silent
no-op. Calls are made once with a timeout and never retried.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from vret_wash.error_handlers.logging import log_dispatch_failure

PLACEHOLDER_WEBHOOK_URL = 'https://hooks.slack.com/services/YOUR/WEBHOOK/URL'


@dataclass
class DispatchResult:
    """Outcome of one webhook delivery attempt"""
    delivered: bool
    skipped: bool = False
    error: Optional[str] = None
    error_id: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.delivered and not self.skipped


class WebhookNotifier:
    """Service class for Slack webhook delivery"""

    def __init__(self, app=None):
        self.logger = logging.getLogger(__name__)
        self.webhook_url = ''
        self.timeout = 10
        self.session = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize the notifier with Flask app config"""
        self.webhook_url = app.config.get('SLACK_WEBHOOK_URL', '') or ''
        self.timeout = app.config.get('WEBHOOK_TIMEOUT', 10)
        self.session = requests.Session()
        self.session.headers.update({
            'content-type': 'application/json',
            'user-agent': 'vret-wash-board/1.0 (+requests)',
        })
        app.extensions['webhook_notifier'] = self

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url) and self.webhook_url != PLACEHOLDER_WEBHOOK_URL

    def send(self, message: Dict[str, Any], operation: str = 'notification') -> DispatchResult:
        """
        Post a message to the webhook.

        Delivery failures are logged and reported in the result, never raised.
        """
        if not self.is_configured:
            self.logger.info(f"Slack webhook not configured. Skipping {operation}.")
            return DispatchResult(delivered=False, skipped=True)

        try:
            response = self.session.post(self.webhook_url, json=message, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            details = log_dispatch_failure(operation, e, {'text': message.get('text')})
            return DispatchResult(delivered=False, error=str(e), error_id=details['error_id'])

        self.logger.info(f"Slack {operation} sent: {message.get('text')}")
        return DispatchResult(delivered=True)


def get_notifier() -> WebhookNotifier:
    """Notifier registered on the current app"""
    from flask import current_app
    return current_app.extensions['webhook_notifier']
