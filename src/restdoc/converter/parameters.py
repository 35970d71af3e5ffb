"""Merge path-level parameters into an operation's parameter list.

Parameters declared on a path item apply to every operation under it unless
the operation declares a parameter with the same ``name`` and ``in``, which
then replaces the inherited one entirely (no field-by-field merge).
"""

from __future__ import annotations

from typing import Optional, Sequence

from restdoc.models import ParameterObject


def parameter_key(parameter: ParameterObject) -> tuple[str, str]:
    """Identity of a parameter: its name and location."""
    return parameter.name, parameter.location.value


def resolve_parameters(
    operation_params: Optional[Sequence[ParameterObject]],
    path_params: Optional[Sequence[ParameterObject]],
) -> list[ParameterObject]:
    """Return the effective parameters of an operation.

    The result lists every operation parameter in declaration order,
    followed by the path parameters the operation does not override, also
    in declaration order.

    Args:
        operation_params: Parameters declared on the operation.
        path_params: Parameters declared on the enclosing path item.

    Returns:
        A new list. When one side is empty the other is returned as-is
        (copied).
    """
    if not path_params:
        return list(operation_params or [])
    if not operation_params:
        return list(path_params)

    # Path parameters can be overridden at the operation level
    overridden = {parameter_key(p) for p in operation_params}
    inherited = [p for p in path_params if parameter_key(p) not in overridden]
    return [*operation_params, *inherited]
