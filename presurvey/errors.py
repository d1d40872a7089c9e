# presurvey/errors.py

from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    Error de negocio que se responde como {"error": ..., "hint": ...}.
    El front espera la llave "error", no el "detail" de HTTPException.
    """

    def __init__(self, status_code: int, error: str, hint: Optional[str] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.hint = hint

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class UpstreamError(Exception):
    """Falla al hablar con una API externa (red, status HTTP o payload)."""
