"""
Custom exception hierarchy for the SOAR playbook converter.

This module provides structured exception handling for the different
kinds of errors that can occur while converting workflow_collections
(FSR) and playbook_collections (FAS) exports.
"""


class ConverterError(Exception):
    """
    Base exception class for all converter errors.

    All custom exceptions raised by soarconv inherit from this base class
    so callers can catch every conversion failure in one place.
    """
    pass


class ConfigurationError(ConverterError):
    """
    Exception raised for configuration-related errors.

    This includes:
    - Missing configuration files
    - Invalid JSON in configuration files
    - Invalid values in configuration sections
    - Step type registries that share an identifier
    """
    pass


class FormatMismatchError(ConverterError):
    """
    Exception raised when a document does not match the requested direction.

    The top-level ``type`` discriminator must be ``workflow_collections``
    for FSR to FAS and ``playbook_collections`` for FAS to FSR. This error
    is fatal: no partial output is produced.
    """
    pass


class InvalidDocumentError(ConverterError):
    """
    Exception raised when input text cannot be decoded as a JSON document.
    """
    pass
