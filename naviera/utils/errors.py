from fastapi import HTTPException


class ConflictError(Exception):
    """La operación chocó con otra simultánea; el cliente puede reintentar."""


def to_http_exception(error: Exception) -> HTTPException:
    """
    Traduce las excepciones de reglas de negocio a respuestas HTTP:
    PermissionError -> 403, "no encontrado/a" -> 404, ConflictError -> 409,
    resto de ValueError -> 400.
    """
    detail = str(error)
    if isinstance(error, PermissionError):
        return HTTPException(status_code=403, detail=detail)
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=detail)
    if isinstance(error, LookupError) or "no encontrad" in detail:
        return HTTPException(status_code=404, detail=detail)
    return HTTPException(status_code=400, detail=detail)
