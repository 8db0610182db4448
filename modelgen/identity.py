"""Stable identifiers for model constructs.

Identifiers are version 5 UUIDs. The namespace string is first hashed into a
namespace UUID that acts as a fixed salt, and the qualified name is hashed
under it. The same (namespace, qualified name) pair therefore maps to the same
identifier in every process and on every run, independent of declaration
order.
"""

from uuid import NAMESPACE_OID, UUID, uuid5

from .errors import InvalidIdentifierInput

Identifier = UUID


def _check(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise InvalidIdentifierInput(
            f"{what} must be a string, got {type(value).__name__}", value
        )
    try:
        value.encode("utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise InvalidIdentifierInput(
            f"{what} {value!r} is not valid UTF-8: {e.reason}", value
        ) from e
    return value


def namespace_id(namespace: str) -> Identifier:
    """Return the salt UUID for a namespace.

    Args:
        namespace: The model namespace.

    Returns:
        The UUID every identifier of the namespace is derived from.

    Raises:
        InvalidIdentifierInput: If the namespace is not an encodable string.
    """
    return uuid5(NAMESPACE_OID, _check(namespace, "namespace"))


def resolve(namespace: str, qualified_name: str) -> Identifier:
    """Compute the identifier of a construct.

    Args:
        namespace: The model namespace (domain separation salt).
        qualified_name: Dotted name of the construct, e.g. ``Order.total``.

    Returns:
        A deterministic UUID for the pair.

    Raises:
        InvalidIdentifierInput: If either input is not an encodable string.
    """
    salt = namespace_id(namespace)
    return uuid5(salt, _check(qualified_name, "qualified name"))
