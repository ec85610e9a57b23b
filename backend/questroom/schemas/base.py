# backend/questroom/schemas/base.py

from pydantic.alias_generators import to_camel

# Dashboard speaks camelCase; snake_case is accepted on input too.
CAMEL_CONFIG = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}
