# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Storage errors
      • Generic Python exceptions
    """

    # Case 1 — PostgREST / Auth errors carry a message attribute
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2 — errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3 — plain string fallback
    return str(error) or "Error desconocido de Supabase"


def supabase_error(error: Exception, message: str = "Error de Supabase"):
    """
    Convert Supabase / database errors into clean HTTPExceptions.
    Always raises — caller should wrap with try/except.
    """

    detail = extract_supabase_error(error)
    logger.error(f"{message}: {detail}")

    raise HTTPException(
        status_code=500,
        detail=f"{message}: {detail}"
    )


def handle_supabase_error(error: Exception, operation: str = "Operación de base de datos", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what failed (e.g., "Error al registrar la cotización")
        status_code: HTTP status code (default 500)

    Returns:
        HTTPException with standardized error message
    """
    if isinstance(error, HTTPException):
        return error

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=409, detail=f"{operation}: el registro ya existe")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: referencia inválida")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: recurso no encontrado")
    else:
        return HTTPException(status_code=status_code, detail=operation)
