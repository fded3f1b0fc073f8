"""Attribute-compared building block for IDs and other immutable values."""


class ValueObject:
    """
    Equality, hashing and repr derived from instance attributes.

    Used under @dataclass(frozen=True); the typed IDs in
    value_objects/ids.py are the main subclasses.
    """

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.__dict__.items())))

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.__dict__.items())
        return f"{self.__class__.__name__}({fields})"
