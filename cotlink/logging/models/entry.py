from typing import Any

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    """
    Base for every structured log entry. Subsystems subclass it in their
    ``logging_models.py`` with the fields they want rendered and stored.
    """

    message: str
    level: LogLevel

    def render(self, template: str, **context: Any) -> str:
        fields = {name: getattr(self, name) for name in self.__struct_fields__}
        fields["level"] = self.level.value
        fields.update(context)

        return template.format(**fields)
