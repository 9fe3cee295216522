"""Shared pydantic configuration for wire models.

The UI speaks camelCase JSON; Python code uses snake_case attributes.
"""

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

CAMEL_CASE = ConfigDict(alias_generator=to_camel, populate_by_name=True)
