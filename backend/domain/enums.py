"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class AssistantState(str, Enum):
    NOT_CONFIGURED = "NOT_CONFIGURED"
    CONFIGURING = "CONFIGURING"
    ACTIVE = "ACTIVE"
    RECONFIGURING = "RECONFIGURING"
    DEACTIVATING = "DEACTIVATING"
