from __future__ import annotations


class ResumePipelineError(RuntimeError):
    status_code = 500
    retryable = False

    def __init__(self, message: str, *, code: str = "pipeline_error"):
        super().__init__(message)
        self.code = code

    def to_detail(self) -> dict[str, object]:
        return {"error": self.code, "message": str(self), "retryable": self.retryable}


class InputError(ResumePipelineError):
    status_code = 400

    def __init__(self, message: str, *, code: str = "invalid_input"):
        super().__init__(message, code=code)


class UpstreamError(ResumePipelineError):
    status_code = 502

    def __init__(self, message: str, *, code: str = "upstream_error"):
        super().__init__(message, code=code)


class UpstreamUnavailableError(UpstreamError):
    """Generic completion failure; callers degrade to fallback text."""

    retryable = True

    def __init__(self, message: str, *, code: str = "upstream_unavailable"):
        super().__init__(message, code=code)


class UpstreamMalformedError(UpstreamError):
    def __init__(self, message: str, *, code: str = "upstream_malformed"):
        super().__init__(message, code=code)


class UpstreamRateLimited(UpstreamError):
    status_code = 503
    retryable = True

    def __init__(self, message: str, *, code: str = "upstream_rate_limited"):
        super().__init__(message, code=code)


class UpstreamQuotaExceeded(UpstreamError):
    status_code = 429

    def __init__(self, message: str, *, code: str = "upstream_quota_exceeded"):
        super().__init__(message, code=code)


class ServiceTimeoutError(ResumePipelineError):
    status_code = 503
    retryable = True

    def __init__(self, message: str, *, code: str = "service_timeout"):
        super().__init__(message, code=code)


class RenderingError(ResumePipelineError):
    status_code = 500

    def __init__(self, message: str, *, code: str = "rendering_failed"):
        super().__init__(message, code=code)
