"""
Validation utilities for tool arguments

Tool arguments come from the model and are checked like any untrusted
request body against the JSON-schema style parameter definitions the tools
are declared with. Only the subset of JSON schema the catalogue uses is
understood: object parameters with string/boolean properties, enums and a
required list.
"""

from typing import Any, Dict, Mapping, Optional

from .exceptions import InvalidParameterError, MissingParameterError

_TYPE_CHECKS = {
    "string": lambda value: isinstance(value, str),
    "boolean": lambda value: isinstance(value, bool),
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
}


def validate_tool_arguments(
    tool_name: str,
    parameters: Mapping[str, Any],
    arguments: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Check arguments against a tool's parameter schema.

    Optional parameters sent as null are dropped. Required strings must not
    be blank.

    Args:
        tool_name: Tool the arguments are for (used in error messages)
        parameters: The tool's "parameters" schema object
        arguments: Arguments as received from the model

    Returns:
        Cleaned arguments containing only declared, non-null parameters

    Raises:
        MissingParameterError: A required parameter is absent or null
        InvalidParameterError: Arguments are not an object, a parameter is
            undeclared, has the wrong type, a blank required string or a
            value outside its enum
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidParameterError(
            parameter_name="arguments",
            message=f"{tool_name} expects an object of named arguments",
            expected_type="object",
            actual_value=arguments,
        )

    properties: Mapping[str, Any] = parameters.get("properties", {})
    required = set(parameters.get("required", []))

    unknown = sorted(set(arguments) - set(properties))
    if unknown:
        raise InvalidParameterError(
            parameter_name=unknown[0],
            message=f"{tool_name} does not accept this parameter",
        )

    cleaned: Dict[str, Any] = {}
    for name, spec in properties.items():
        value = arguments.get(name)
        if value is None:
            if name in required:
                raise MissingParameterError(name, context=tool_name)
            continue

        expected_type = spec.get("type")
        check = _TYPE_CHECKS.get(expected_type)
        if check is not None and not check(value):
            raise InvalidParameterError(
                parameter_name=name,
                message=f"expected {expected_type}",
                expected_type=expected_type,
                actual_value=value,
            )

        if expected_type == "string" and name in required and not value.strip():
            raise InvalidParameterError(parameter_name=name, message="must not be blank")

        allowed = spec.get("enum")
        if allowed is not None and value not in allowed:
            raise InvalidParameterError(
                parameter_name=name,
                message=f"must be one of {', '.join(allowed)}",
                actual_value=value,
            )

        cleaned[name] = value

    return cleaned
