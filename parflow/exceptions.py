"""
Custom exception classes for ParFlow.

This module defines the exception hierarchy used throughout ParFlow.
The metrics engine itself never raises for data problems: records that
cannot be normalized are dropped and aggregations degrade to empty results.
"""

from typing import Optional, Any, Dict


class ParFlowError(Exception):
    """
    Base exception for all ParFlow errors.
    
    All custom exceptions in this package should inherit from this class.
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(ParFlowError):
    """
    Raised when there are configuration-related errors.
    
    Examples:
    - Missing FitCSVTool jar
    - Invalid configuration values
    """
    pass


class DecodeError(ParFlowError):
    """
    Raised when a FIT file cannot be decoded.
    
    Examples:
    - Corrupted FIT files
    - External decoder exits with a nonzero status
    - Decoder output that cannot be parsed
    """
    pass


class DocumentError(ParFlowError):
    """Raised when a persisted document cannot be written."""
    pass


class InvalidParameterError(ParFlowError):
    """Raised when invalid parameters are provided to an aggregation"""
    pass
