from typing import Any, Type

from pydantic import BaseModel
from jsonschema import Draft202012Validator, ValidationError as JSValidationError


def jsonschema_to_pydantic_model(name: str, schema: dict) -> Type[BaseModel]:
    """
    Wrap a raw JSON Schema (as written for the chat-completions "parameters"
    field) in a BaseModel subclass so it can be used as a Tool.input_schema.

    The returned class:
      - reports the original schema via model_json_schema()
      - validates arguments with jsonschema in model_validate()
      - gives the validated dict back from model_dump()
    """
    Draft202012Validator.check_schema(schema)
    validator = Draft202012Validator(schema)

    class _SchemaModel(BaseModel):
        @classmethod
        def model_json_schema(cls, *args, **kwargs) -> dict:
            return schema

        @classmethod
        def model_validate(cls, obj: Any, *args, **kwargs):
            try:
                validator.validate(obj)
            except JSValidationError as e:
                raise ValueError(f"Arguments do not match schema for {name}: {e.message}") from e
            inst = cls.model_construct()
            inst.__dict__["_value"] = dict(obj)
            return inst

        def model_dump(self, *args, **kwargs):
            return dict(self.__dict__.get("_value") or {})

    _SchemaModel.__name__ = name
    _SchemaModel.__qualname__ = name
    return _SchemaModel
