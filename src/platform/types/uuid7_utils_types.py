"""
uuid_utils.UUID as a pydantic field type

Event and booking ids are uuid7 values from uuid_utils, which pydantic does
not know. Requests carry them as strings; entities hand them over as
uuid_utils.UUID; responses and OpenAPI always show a plain uuid string.

https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import PydanticCustomError, core_schema
from uuid_utils import UUID


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as e:
        raise PydanticCustomError(
            'uuid_parsing', 'Input is not a valid UUID: {value}', {'value': value}
        ) from e


class UtilsUUID7(UUID):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_string = core_schema.chain_schema(
            [
                core_schema.str_schema(strip_whitespace=True),
                core_schema.no_info_plain_validator_function(_parse_uuid),
            ]
        )
        return core_schema.json_or_python_schema(
            json_schema=from_string,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(UUID), from_string]
            ),
            serialization=core_schema.to_string_ser_schema(when_used='always'),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {'type': 'string', 'format': 'uuid'}
