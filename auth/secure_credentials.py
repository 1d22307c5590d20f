#!/usr/bin/env python3
"""
Secure Credential Manager for School2Cal
Fetches settings from Google Sheets via Google Apps Script, falling back to environment variables
"""

import os
from functools import lru_cache
from typing import Dict, Optional

import requests
from dotenv import load_dotenv

load_dotenv()

# Web App URL of the Apps Script that serves {"credentials": {...}} from a sheet
CREDENTIALS_URL = os.getenv('SCHOOL2CAL_CREDENTIALS_URL', '')

CREDENTIAL_KEYS = [
    'SEARCH_QUERY',
    'TARGET_CALENDAR_ID',
    'DAYS_TO_LOOK_BACK',
    'LABEL_NAME',
    'EVENT_TITLE_PREFIX',
    'GMAIL_USER_ID',
    'TIME_ZONE',
    'DAILY_RUN_HOUR',
    'DEDUPLICATE'
]

REQUIRED_KEYS = ['SEARCH_QUERY', 'TARGET_CALENDAR_ID']


class SecureCredentialManager:
    """Manages secure credential retrieval from Google Sheets"""

    def __init__(self, credentials_url: str = CREDENTIALS_URL):
        self.credentials_url = credentials_url
        self._credentials_cache = {}
        self._cache_loaded = False

    def _load_credentials(self) -> Dict[str, str]:
        """Load all credentials from Google Sheets (cached)"""
        if self._cache_loaded:
            return self._credentials_cache

        if self.credentials_url:
            try:
                print("[*] Loading settings from secure Google Sheets...")
                response = requests.get(self.credentials_url, timeout=10)
                response.raise_for_status()

                data = response.json()

                if 'error' in data:
                    raise ValueError(f"Server error: {data['error']}")
                if 'credentials' not in data:
                    raise ValueError("Invalid response format")

                self._credentials_cache = data['credentials']
                self._cache_loaded = True
                print(f"[+] Successfully loaded {len(self._credentials_cache)} settings")
                return self._credentials_cache

            except (requests.RequestException, ValueError) as e:
                print(f"[!] Error loading settings from Google Sheets: {e}")
                print("[!] Falling back to environment variables...")

        fallback_creds = {}
        for key in CREDENTIAL_KEYS:
            value = os.getenv(key, '')
            if value:
                fallback_creds[key] = value

        self._credentials_cache = fallback_creds
        self._cache_loaded = True
        return self._credentials_cache

    @lru_cache(maxsize=None)
    def get_credential(self, key: str) -> str:
        """Get a specific credential by key"""
        credentials = self._load_credentials()

        if credentials.get(key):
            return credentials[key]

        env_value = os.getenv(key, '')
        if env_value:
            print(f"[!] Using environment variable for {key}")
            return env_value

        raise ValueError(f"Credential '{key}' not found in secure storage or environment variables")

    def get_optional_credential(self, key: str) -> Optional[str]:
        try:
            return self.get_credential(key)
        except ValueError:
            return None

    def get_all_credentials(self) -> Dict[str, str]:
        """Get all available credentials"""
        return self._load_credentials()

    def validate_required_credentials(self) -> bool:
        """Validate that all required credentials are available"""
        credentials = self._load_credentials()
        missing_keys = [key for key in REQUIRED_KEYS
                        if not credentials.get(key) and not os.getenv(key)]

        if missing_keys:
            print(f"[!] Missing required settings: {missing_keys}")
            return False

        print("[+] All required settings are available")
        return True


# Global credential manager instance
_credential_manager = None


def get_credential_manager(credentials_url: str = CREDENTIALS_URL) -> SecureCredentialManager:
    """Get the global credential manager instance"""
    global _credential_manager
    if _credential_manager is None:
        _credential_manager = SecureCredentialManager(credentials_url)
    return _credential_manager


def get_secure_credential(key: str) -> str:
    """Convenience function to get a credential"""
    manager = get_credential_manager()
    return manager.get_credential(key)
