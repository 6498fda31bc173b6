# school_admin/core/audit.py
"""
Audit trail for destructive or money-related actions.
Every entry is written as one JSON line to the audit log file.
"""
import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

# Configure dedicated audit logger
audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)
audit_logger.propagate = False  # Don't duplicate to root logger

logger = logging.getLogger(__name__)


def configure_audit_log(path: str) -> None:
    """
    Point the audit logger at `path`, replacing any previous file handler.
    Called once per application start-up.
    """
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(file_handler)


def close_audit_log() -> None:
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()


def log_action(
    action: str,
    resource_type: str,
    resource_id: str,
    request: Optional[Request] = None,
    details: Optional[dict] = None,
    status: str = "success"
) -> None:
    """
    Log an action to the audit log.

    Args:
        action: The action performed (e.g., "DELETE", "UPDATE", "CREATE")
        resource_type: Type of resource affected (e.g., "payment", "student")
        resource_id: Identifier of the affected resource
        request: FastAPI Request object to extract IP (optional)
        details: Additional context dictionary (optional)
        status: "success" or "failure"
    """
    # Extract client IP
    client_ip = "unknown"
    if request:
        # Check for forwarded headers (reverse proxy)
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action.upper(),
        "resource_type": resource_type,
        "resource_id": str(resource_id),
        "ip_address": client_ip,
        "status": status,
    }

    if details:
        log_entry["details"] = details

    audit_logger.info(json.dumps(log_entry, ensure_ascii=False, default=str))
    logger.debug(f"[AUDIT] {action.upper()} {resource_type}/{resource_id} from {client_ip}")
