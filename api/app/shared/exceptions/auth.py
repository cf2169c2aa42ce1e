"""
Excepciones relacionadas con autorización de endpoints administrativos.
"""
from app.shared.exceptions.base import AppException


class UnauthorizedException(AppException):
    """Excepción para llamadas sin API key válida."""
    
    def __init__(self, message: str = "No autorizado"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED"
        )
