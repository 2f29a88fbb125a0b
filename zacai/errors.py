"""Exception types for ZacAI"""


class ZacAIError(Exception):
    """Base class for all ZacAI errors"""


class LookupFailure(ZacAIError):
    """An external lookup could not be completed (network, HTTP or payload error)"""


class StorageError(ZacAIError):
    """A knowledge collection could not be read or written"""


class ImportFormatError(ZacAIError):
    """An import document is not a ZacAI knowledge export"""
