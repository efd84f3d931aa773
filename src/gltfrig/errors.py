"""
Import Errors

Exceptions raised while converting a glTF document into a skeleton and
animation clips.
"""


class GltfImportError(Exception):
    """The input document cannot be imported (missing or unsupported data)."""


class AccessorError(GltfImportError):
    """Accessor data does not have the element layout or count the importer needs."""


class ValidationError(Exception):
    """
    An internally built skeleton or animation failed validation.

    The naming and bind-pose fallback rules are meant to make this
    unreachable, so it points at an importer bug rather than bad input.
    """

    def __init__(self, subject: str, reason: str):
        self.subject = subject
        self.reason = reason
        super().__init__(f"{subject} failed validation: {reason}. This is likely a bug.")
