from pydantic import AliasGenerator, ConfigDict
from pydantic.alias_generators import to_camel

# Request bodies accept snake_case names and their camelCase spellings
# (``dateIn``, ``roleId``, ``isActive``). Unknown keys are rejected.
REQUEST_MODEL_CONFIG = ConfigDict(
    alias_generator=AliasGenerator(validation_alias=to_camel),
    populate_by_name=True,
    extra="forbid",
)
