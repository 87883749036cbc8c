"""Error types raised by swagger-diff."""


class SwaggerDiffError(Exception):
    """Base class for every error raised by this package."""


class DocumentLoadError(SwaggerDiffError):
    """A document could not be read or is not a Swagger/OpenAPI description."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"cannot load api-doc from {source}: {reason}")
        self.source = source
        self.reason = reason


class MissingDocumentError(SwaggerDiffError, ValueError):
    """The diff engine was handed no document on one side."""

    def __init__(self, side: str):
        super().__init__(f"{side} document is missing; load it before comparing")
        self.side = side
