"""
Router error handling utilities.

Decorator that turns service-layer exceptions into HTTPExceptions with the
status each PortalError carries.

Dependencies: fastapi, pydantic, user_portal.core.exceptions
System role: Uniform error-to-status mapping for every router
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from user_portal.core.exceptions import PortalError

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_portal_errors(operation: str) -> Callable[[F], F]:
    """
    Decorator factory mapping errors raised inside an endpoint.

    This centralizes:
    - Logging of errors with the operation name
    - PortalError subclasses to their own status (400/401/403/404/409/502/503)
    - Stray ValueErrors to 404 or 400 by message
    - Anything else to 500

    Args:
        operation: Short name used in log records and 500 messages
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except HTTPException:
                raise

            except PortalError as e:
                level = logging.ERROR if e.status_code >= 500 else logging.WARNING
                logger.log(
                    level,
                    f"{operation} failed",
                    extra={"status_code": e.status_code, "error": e.message, "details": e.details},
                )
                raise HTTPException(status_code=e.status_code, detail=e.message)

            except PydanticValidationError as e:
                logger.warning("Pydantic validation error", extra={"operation": operation, "error": str(e)})
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=e.errors(),
                )

            except ValueError as e:
                msg = str(e).lower()
                if "not found" in msg or "no encontrado" in msg:
                    logger.warning("Resource not found (ValueError)", extra={"error": str(e)})
                    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
                logger.warning("Invalid request (ValueError)", extra={"error": str(e)})
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

            except Exception as e:
                logger.exception(f"Unexpected failure in {operation}", extra={"error": str(e)})
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=f"Error interno del servidor durante {operation}",
                )

        return wrapper  # type: ignore

    return decorator
