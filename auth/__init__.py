"""
Authentication and credential management modules
"""

from .secure_credentials import get_credential_manager, get_secure_credential, SecureCredentialManager

__all__ = ['get_credential_manager', 'get_secure_credential', 'SecureCredentialManager']
