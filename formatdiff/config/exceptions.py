"""Errors raised while building or validating the formatdiff configuration.

Settings arrive through environment variables, so besides the dotted config
field an error can name the variable a user has to fix.
"""


class ConfigValidationError(ValueError):
    """A setting is unusable. The CLI reports it and exits with the invalid-args code."""

    def __init__(self, message: str, field: str | None = None, env_var: str | None = None):
        self.message = message
        self.field = field
        self.env_var = env_var
        super().__init__(f"{message} (check {env_var})" if env_var else message)


class FieldValidationError(ConfigValidationError):
    """One setting has a bad value, such as a non-numeric FORMATDIFF_STRIP."""


class CrossFieldValidationError(ConfigValidationError):
    """Settings that only fail together, e.g. two failure kinds sharing an exit code.

    ``fields`` lists every setting involved; ``field`` is their common section.
    """

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        self.fields = fields
        section = fields[0].partition(".")[0] if fields else None
        super().__init__(message, field=section)
