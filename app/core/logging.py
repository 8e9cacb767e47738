"""Logging configuration for security and application events."""

import logging
import sys
from typing import Any

from app.core.config import get_settings

settings = get_settings()

# Logger for authentication and authorization events
security_logger = logging.getLogger("app.security")

# Logger for application events
app_logger = logging.getLogger("app")
app_logger.setLevel(settings.LOG_LEVEL.upper())

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(
    logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
)

# app.security propagates to app, so only the parent gets a handler
if not app_logger.handlers:
    app_logger.addHandler(console_handler)


def mask_email(email: str) -> str:
    """
    Mask email address for logging (show only first 3 chars and domain).

    Args:
        email: Email address to mask.

    Returns:
        Masked email string (e.g., "tes***@example.com").
    """
    if not email or "@" not in email:
        return "***"

    local_part, domain = email.split("@", 1)
    if len(local_part) <= 3:
        masked_local = "*" * len(local_part)
    else:
        masked_local = local_part[:3] + "***"

    return f"{masked_local}@{domain}"


def _with_ip(message: str, ip_address: str | None) -> str:
    return message + (f", ip={ip_address}" if ip_address else "")


def log_auth_success(
    user_id: str, email: str, tenant_id: str | None, ip_address: str | None = None
) -> None:
    """
    Log successful authentication.

    Args:
        user_id: User UUID.
        email: User email (will be masked).
        tenant_id: Tenant UUID, or None for the super admin.
        ip_address: Client IP address (optional).
    """
    security_logger.info(
        _with_ip(
            f"Authentication successful - user_id={user_id}, "
            f"email={mask_email(email)}, tenant_id={tenant_id}",
            ip_address,
        )
    )


def log_auth_failure(email: str, reason: str, ip_address: str | None = None) -> None:
    """
    Log failed authentication attempt.

    Args:
        email: User email (will be masked).
        reason: Internal reason code. Never returned to the client.
        ip_address: Client IP address (optional).
    """
    security_logger.warning(
        _with_ip(
            f"Authentication failed - email={mask_email(email)}, reason={reason}",
            ip_address,
        )
    )


def log_logout(user_id: str, ip_address: str | None = None) -> None:
    """Log user logout."""
    security_logger.info(_with_ip(f"User logged out - user_id={user_id}", ip_address))


def log_tenant_registered(tenant_id: str, subdomain: str, admin_email: str) -> None:
    """Log a new tenant registration."""
    security_logger.info(
        f"Tenant registered - tenant_id={tenant_id}, subdomain={subdomain}, "
        f"admin={mask_email(admin_email)}"
    )


def log_access_denied(
    user_id: str, operation: str, reason: str, details: dict[str, Any] | None = None
) -> None:
    """
    Log an authorization denial.

    Args:
        user_id: Caller's user UUID.
        operation: Operation that was attempted (e.g., 'delete_user').
        reason: Deny reason code.
        details: Extra context such as the rejected fields (optional).
    """
    message = f"Access denied - user_id={user_id}, operation={operation}, reason={reason}"
    if details:
        message += f", details={details}"
    security_logger.warning(message)


def get_client_ip(request: Any) -> str | None:
    """
    Extract the client IP address from a FastAPI request.

    Honors the first hop of X-Forwarded-For when running behind a proxy.

    Args:
        request: FastAPI Request object.

    Returns:
        IP address string, or None when unknown.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if getattr(request, "client", None):
        return request.client.host
    return None
