"""Detect the dialect of an already-parsed API description."""

from typing import Any

from swagger_diff.errors import DocumentLoadError

SWAGGER_2 = "swagger2"
OPENAPI_3 = "openapi3"


def detect_version(data: Any, source: str = "<document>") -> str:
    """Detect whether ``data`` is a Swagger 2.0 or an OpenAPI 3.x document.

    Returns: 'swagger2' or 'openapi3'.
    """
    if not isinstance(data, dict):
        raise DocumentLoadError(source, "top-level value is not a mapping")

    if "openapi" in data:
        if str(data["openapi"]).startswith("3."):
            return OPENAPI_3
        raise DocumentLoadError(source, f"unsupported openapi version {data['openapi']!r}")

    if "swagger" in data:
        if str(data["swagger"]).startswith("2."):
            return SWAGGER_2
        raise DocumentLoadError(source, f"unsupported swagger version {data['swagger']!r}")

    raise DocumentLoadError(source, "neither a 'swagger' nor an 'openapi' document")
