from __future__ import annotations


class OsmReadError(Exception):
    """Base class for every error that can appear in the result sequence."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return f"Parse error: {self.msg}"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.msg == other.msg

    def __hash__(self) -> int:
        return hash((type(self), self.msg))


class AttributeValueError(OsmReadError):
    pass


class MissingAttributeError(OsmReadError):
    pass


class ObjectTypeError(OsmReadError):
    pass


class StructureError(OsmReadError):
    """Mis-nested elements, e.g. a <tag> outside of any object."""


class XmlSyntaxError(OsmReadError):
    """The tokenizer gave up; nothing follows this error in the sequence."""


class InputFormatError(ValueError):
    pass
