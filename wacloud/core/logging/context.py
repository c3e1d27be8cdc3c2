"""
Call context management using contextvars for automatic propagation.

The messenger sets the sender and recipient once per call; every logger
obtained through get_logger picks them up without manual parameter passing.
"""

from contextvars import ContextVar

_tenant_context: ContextVar[str | None] = ContextVar(
    "tenant_id", default=None
)  # Sender phone number id
_user_context: ContextVar[str | None] = ContextVar(
    "user_id", default=None
)  # Recipient of the outbound message


def set_request_context(
    tenant_id: str | None = None,
    user_id: str | None = None,
) -> None:
    """
    Set the call context for the current async context.

    Args:
        tenant_id: Sender identifier (phone_number_id)
        user_id: Recipient identifier (phone number or WhatsApp ID)
    """
    if tenant_id is not None:
        _tenant_context.set(tenant_id)
    if user_id is not None:
        _user_context.set(user_id)


def get_current_tenant_context() -> str | None:
    """Get the current sender ID from context variables."""
    return _tenant_context.get()


def get_current_user_context() -> str | None:
    """Get the current recipient ID from context variables."""
    return _user_context.get()


def clear_request_context() -> None:
    """
    Clear the call context.

    Context is isolated per task already; this is mostly useful for testing.
    """
    _tenant_context.set(None)
    _user_context.set(None)


def get_context_info() -> dict[str, str | None]:
    """Get current context information for debugging."""
    return {
        "tenant_id": get_current_tenant_context(),
        "user_id": get_current_user_context(),
    }
