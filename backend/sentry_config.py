"""
Sentry Error Monitoring Configuration
Error tracking for the Chainup verifier
"""
import os
import logging
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

# Submitted contract sources can be large and proprietary
SENSITIVE_KEYS = ['sourceCode', 'source_code', 'contractSourceCode', 'api_key', 'apikey', 'secret', 'password']


def filter_sensitive_data(event, hint):
    """Remove contract sources and secrets from Sentry events."""
    if 'request' in event and 'data' in event['request']:
        data = event['request']['data']
        if isinstance(data, dict):
            for key in SENSITIVE_KEYS:
                if key in data:
                    data[key] = '[FILTERED]'

    if 'request' in event and isinstance(event['request'].get('query_string'), str):
        if 'contractSourceCode' in event['request']['query_string']:
            event['request']['query_string'] = '[FILTERED]'

    return event


def init_sentry():
    """Initialize Sentry when SENTRY_DSN is set."""
    dsn = os.getenv("SENTRY_DSN")

    if not dsn:
        logger.info("[Sentry] No SENTRY_DSN found - error tracking disabled")
        return False

    environment = os.getenv("CHAINUP_ENV", "development")
    release = os.getenv("COMMIT_SHA", "local")

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,

        traces_sample_rate=0.2,

        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            ),
        ],

        before_send=filter_sensitive_data,
        send_default_pii=False,
        release=f"chainup-verifier@{release}",
    )

    logger.info(f"[Sentry] ✓ Initialized for {environment} (release: {release[:8]})")
    return True


def capture_verification_breadcrumb(method: str, address: str, details: dict = None):
    """Add breadcrumb for an explorer verification attempt."""
    sentry_sdk.add_breadcrumb(
        category="verification",
        message=f"{method} {address}",
        level="info",
        data=details or {}
    )
