"""
Taxonomie des erreurs et traduction en réponses HTTP.

Trois catégories fermées:
- DOMAIN: AppError (règle métier, statut explicite) et HTTPException du framework
- VALIDATION: entrée invalide, toujours 400 avec la liste des problèmes par champ
- UNEXPECTED: tout le reste, 500 avec le message de l'exception tel quel
"""
from enum import Enum
from typing import Any, Dict, List, Tuple
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Préfixes de localisation ajoutés par FastAPI, retirés du chemin du champ
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class AppError(Exception):
    """Erreur métier portant un statut HTTP et un message destiné au client."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProductNotFoundError(AppError):
    def __init__(self, product_id: Any = None):
        super().__init__("product not found", status_code=404)
        self.product_id = product_id


class ErrorKind(str, Enum):
    DOMAIN = "domain"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"


def classify_error(exc: BaseException) -> ErrorKind:
    # L'ordre compte: une erreur métier n'est jamais traitée comme une erreur de validation
    if isinstance(exc, (AppError, StarletteHTTPException)):
        return ErrorKind.DOMAIN
    if isinstance(exc, (RequestValidationError, ValidationError)):
        return ErrorKind.VALIDATION
    return ErrorKind.UNEXPECTED


def validation_issues(exc: Exception) -> List[Dict[str, str]]:
    """Diagnostics par champ, au format {field, message, type}."""
    issues = []
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        issues.append({
            "field": ".".join(str(part) for part in loc),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        })
    return issues


def translate_error(exc: BaseException) -> Tuple[int, Dict[str, Any]]:
    """Point unique de conversion d'une erreur en (statut HTTP, corps JSON)."""
    kind = classify_error(exc)
    if kind is ErrorKind.DOMAIN:
        if isinstance(exc, AppError):
            return exc.status_code, {"message": exc.message}
        return exc.status_code, {"message": str(exc.detail)}
    if kind is ErrorKind.VALIDATION:
        return 400, {"message": "validation error", "issues": validation_issues(exc)}
    if kind is ErrorKind.UNEXPECTED:
        return 500, {"message": str(exc)}
    raise AssertionError(f"Unhandled error kind: {kind}")
