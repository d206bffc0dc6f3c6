"""Template errors"""


class TemplateError(Exception):
    """A note template could not be compiled or rendered"""


class TemplateSyntaxError(TemplateError):
    """Malformed template source"""

    def __init__(self, message: str, lineno: int | None = None):
        self.message = message
        self.lineno = lineno
        if lineno is not None:
            message = f"{message} (line {lineno})"
        super().__init__(message)
