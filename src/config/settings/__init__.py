"""Agregador de settings do zap-bridge.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_SESSION_NAME,
    BaseSettings,
    Environment,
    SessionSettings,
    get_base_settings,
    get_session_settings,
)

# Webhooks de saída
from config.settings.webhooks import (
    WILDCARD_EVENT,
    WebhookSettings,
    get_webhook_settings,
)

__all__ = [
    # Constants
    "DEFAULT_SESSION_NAME",
    "WILDCARD_EVENT",
    # Base
    "BaseSettings",
    "Environment",
    "SessionSettings",
    # Webhooks
    "WebhookSettings",
    "get_base_settings",
    "get_session_settings",
    "get_webhook_settings",
]
