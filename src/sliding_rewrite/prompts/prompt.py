import re

from pydantic import BaseModel

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Prompt(BaseModel):
    name: str
    version: str
    description: str
    inputs: dict[str, str] = {}
    template: str

    class Config:
        extra = "forbid"

    def render(self, **values: str) -> str:
        """Substitute `{{ name }}` placeholders. Unknown names are left alone."""

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in self.inputs:
                return match.group(0)
            if key not in values:
                raise KeyError(f"Prompt '{self.name}' requires input '{key}'")
            return values[key]

        return _PLACEHOLDER.sub(_replace, self.template)
