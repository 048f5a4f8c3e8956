class BaseAppError(Exception):
    def __init__(self, message: str = "An error occured"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(BaseAppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConfigurationError(BaseAppError):
    pass


class ProviderError(BaseAppError):
    """An external AI provider call failed or returned an unusable body."""

    def __init__(self, message: str = "AI provider call failed", provider: str | None = None):
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(ProviderError):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class ResponseParseError(ProviderError):
    pass


class PipelineStateError(BaseAppError):
    """A pipeline stage ran without the state fields it depends on."""


class ModerationProcessingError(BaseAppError):
    pass


class ImageGenerationError(BaseAppError):
    def __init__(self, message: str = "Image generation failed", status_code: int = 502):
        self.status_code = status_code
        super().__init__(message)
