## Erros de domínio (os handlers em main.py convertem em JSON)
from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class PlanLimitExceeded(AuthorizationError):
    def __init__(self, plan: str):
        super().__init__(
            f"Widget limit reached for {plan} plan. Upgrade to create more widgets."
        )
        self.plan = plan


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class UpstreamError(AppError):
    """Falha em serviço externo (broker OAuth, webhook do n8n)."""

    status_code = 502
