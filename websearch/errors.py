# websearch/errors.py


class WebSearchError(Exception):
    """Base class for every error the `web` command reports to the user."""


class EncodingConversionError(WebSearchError):
    def __init__(self, encoding: str, message: str = None):
        self.encoding = encoding
        super().__init__(message or f"Could not convert string from '{encoding}' to 'UTF-8'.")


class UnsupportedEngineError(WebSearchError):
    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(f"Search engine '{engine}' not supported.")


class UnsupportedPlatformError(WebSearchError):
    def __init__(self, os_type: str):
        self.os_type = os_type
        super().__init__(f"Platform '{os_type}' not supported.")


class PathConversionError(WebSearchError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Could not convert '{path}' to a Windows path."
        if reason:
            message += f" {reason}"
        super().__init__(message)


class LaunchError(WebSearchError):
    """The opener program itself could not be started."""


class EngineConfigError(WebSearchError):
    """WEB_SEARCH_ENGINES could not be turned into an engine table."""
