"""Error taxonomy for subcast.

Public errors derive from SubcastError so the pipeline can turn any of them
into a single human-readable failure message. StoreError, ProviderError and
TransferError are raised by collaborators and absorbed by the acquisition and
translation fallback chains.
"""

from __future__ import annotations


class SubcastError(Exception):
    """Base class for all errors surfaced by subcast."""


class ConfigError(SubcastError):
    """Required credentials or settings are missing."""


class ValidationError(SubcastError):
    """Malformed input: missing field, disallowed URL scheme or host."""


class AcquisitionError(SubcastError):
    """Every acquisition strategy exhausted its budget."""


class TranscriptionError(SubcastError):
    """The transcription provider reported a terminal failure."""


class TranslationError(SubcastError):
    """The translation request itself is malformed."""


class StoreError(Exception):
    """Object store call failed."""


class ProviderError(Exception):
    """A translation provider returned an error or an empty result."""


class TransferError(Exception):
    """HTTP download failed: bad status, size cap, empty body or timeout."""
