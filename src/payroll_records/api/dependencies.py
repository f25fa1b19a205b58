"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from payroll_records.services.session import PayrollSession


def get_session(request: Request) -> PayrollSession:
    """Get the payroll session owned by the application."""
    session = getattr(request.app.state, "session", None)
    if session is None or session.closed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payroll session is not available",
        )
    return session


# Type alias for cleaner dependency injection
Session = Annotated[PayrollSession, Depends(get_session)]
