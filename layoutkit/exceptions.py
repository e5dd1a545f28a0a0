class LayoutKitError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(LayoutKitError):
    # errors related to configuration.
    pass

class DiscoveryError(LayoutKitError):
    # errors while walking a file source for template fragments.
    pass

class PatternError(DiscoveryError):
    # empty or malformed glob pattern list.
    pass

class EmptySetError(DiscoveryError):
    # no file matched any pattern during composition.
    def __init__(self, message: str = "no templates discovered"):
        super().__init__(message)

class TemplateError(LayoutKitError):
    # errors related to template parsing and rendering.
    pass

class ParseError(TemplateError):
    # malformed fragment syntax; carries the offending path.
    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"failed to parse template '{path}': {detail}")

class ExecutionError(TemplateError):
    # runtime failure while rendering: undefined reference, data shape mismatch.
    def __init__(self, name: str, detail: str):
        self.name = name
        self.detail = detail
        super().__init__(f"failed to execute template '{name}': {detail}")

class EmptyLayoutError(TemplateError):
    # render attempted before a layout was composed.
    def __init__(self, message: str = "empty layout"):
        super().__init__(message)

class SourceError(LayoutKitError):
    # errors raised by a file source.
    pass

class NotFoundError(SourceError):
    # lookup of an unknown path or fragment name.
    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"not found: '{name}'")

class SourceReadError(SourceError):
    # the underlying file source failed; carries path and cause.
    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to read '{path}': {cause}")

class OutputError(LayoutKitError):
    # errors during output operations.
    pass
