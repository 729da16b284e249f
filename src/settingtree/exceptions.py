"""Custom exceptions for settingtree."""


class SettingTreeError(Exception):
    """Base exception for settingtree operations."""


class StructureNotFoundError(SettingTreeError):
    """A block the macro format requires could not be located."""


class GenerationError(SettingTreeError):
    """Error while regenerating a macro from an edited tree."""


class RenameFormatError(SettingTreeError):
    """A name cannot be written as a quoted string in the setting format."""
