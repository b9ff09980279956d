"""Security utilities for secret masking and safe logging."""

import re
import logging
from typing import Any, Dict, List, Optional, Union

# Patterns for detecting secrets
SECRET_PATTERNS = [
    # Firebase CI tokens (firebase login:ci)
    (r'1//[a-zA-Z0-9_-]{20,}', r'1//***MASKED***'),

    # Google OAuth access tokens
    (r'ya29\.[a-zA-Z0-9_.-]{20,}', r'ya29.***MASKED***'),

    # Token passed on a command line
    (r'(--token[=\s]+)(\S+)', r'\1***MASKED***'),

    # Bearer tokens
    (r'(bearer\s+)([a-zA-Z0-9_.-]{20,})', r'\1***MASKED***'),

    # Generic secrets
    (r'(token[_-]?=["\']?)([a-zA-Z0-9_./-]{16,})', r'\1***MASKED***'),
    (r'(password[_-]?=["\']?)([^\s"\']{8,})', r'\1***MASKED***'),
    (r'(secret[_-]?=["\']?)([^\s"\']{8,})', r'\1***MASKED***'),
]


class SecretMasker:
    """Utility class for masking secrets in logs and error messages."""

    def __init__(self, additional_patterns: Optional[list] = None):
        """
        Initialize secret masker.

        Args:
            additional_patterns: Additional regex patterns for masking
        """
        self.patterns = SECRET_PATTERNS.copy()
        if additional_patterns:
            self.patterns.extend(additional_patterns)

    def mask_string(self, text: str) -> str:
        """
        Mask secrets in a string.

        Args:
            text: Text that may contain secrets

        Returns:
            Text with secrets masked
        """
        if not isinstance(text, str):
            return str(text)

        masked_text = text
        for pattern, replacement in self.patterns:
            masked_text = re.sub(pattern, replacement, masked_text, flags=re.IGNORECASE)

        return masked_text

    def mask_command(self, command: List[str]) -> str:
        """
        Render a command line for logging with secrets masked.

        Args:
            command: Command and its arguments

        Returns:
            The masked, space-joined command line
        """
        masked = []
        hide_next = False
        for arg in command:
            if hide_next:
                masked.append('***MASKED***')
                hide_next = False
                continue
            if arg == '--token':
                hide_next = True
            masked.append(self.mask_string(arg))
        return ' '.join(masked)


# Global instance for easy access
default_masker = SecretMasker()


def mask_secrets(data: Union[str, List[str]]) -> str:
    """
    Convenience function to mask secrets in a string or command line.

    Args:
        data: String or argument list that may contain secrets

    Returns:
        Data with secrets masked
    """
    if isinstance(data, list):
        return default_masker.mask_command(data)
    return default_masker.mask_string(data)


class SecureLogger:
    """Logger wrapper that automatically masks secrets."""

    def __init__(self, logger: logging.Logger, masker: Optional[SecretMasker] = None):
        """
        Initialize secure logger.

        Args:
            logger: Underlying logger instance
            masker: Secret masker instance (uses default if None)
        """
        self.logger = logger
        self.masker = masker or default_masker

    def _safe_format(self, msg: str, *args) -> str:
        """Format message safely with secret masking."""
        try:
            if args:
                safe_args = tuple(self.masker.mask_string(str(arg)) for arg in args)
                formatted_msg = msg % safe_args
            else:
                formatted_msg = msg
            return self.masker.mask_string(formatted_msg)
        except (TypeError, ValueError):
            # Fallback if formatting fails
            return self.masker.mask_string(str(msg))

    def setLevel(self, level: int) -> None:
        self.logger.setLevel(level)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message with secret masking."""
        self.logger.debug(self._safe_format(msg, *args), **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log info message with secret masking."""
        self.logger.info(self._safe_format(msg, *args), **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message with secret masking."""
        self.logger.warning(self._safe_format(msg, *args), **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message with secret masking."""
        self.logger.error(self._safe_format(msg, *args), **kwargs)


def get_secure_logger(name: str) -> SecureLogger:
    """
    Get a secure logger instance.

    Args:
        name: Logger name

    Returns:
        SecureLogger instance
    """
    return SecureLogger(logging.getLogger(name))
