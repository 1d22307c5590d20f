"""
School2Cal configuration: defaults, optional YAML file, then secure credential store
"""

import os
from dataclasses import dataclass, fields
from typing import Dict, Optional

import yaml

from auth.secure_credentials import SecureCredentialManager, get_credential_manager

DEFAULT_CONFIG_FILE = 'school2cal.yaml'

PLACEHOLDER_VALUES = {
    'search_query': 'from:@yourschooldomain.org',
    'target_calendar_id': 'your_calendar_id@group.calendar.google.com',
}


@dataclass
class School2CalConfig:
    search_query: str = ''
    target_calendar_id: str = ''
    days_to_look_back: int = 7
    label_name: str = 'School-Processed'
    event_title_prefix: str = 'School Event: '
    gmail_user_id: str = 'me'
    time_zone: Optional[str] = None
    daily_run_hour: int = 6
    deduplicate: bool = False
    credentials_file: str = 'credentials.json'
    token_file: str = 'token.pickle'

    def validate(self):
        """Raise ValueError when a required setting is missing or still a placeholder"""
        for name in ('search_query', 'target_calendar_id'):
            value = getattr(self, name)
            if not value:
                raise ValueError(f"Missing required setting: {name}")
            if value == PLACEHOLDER_VALUES[name]:
                raise ValueError(f"Please set {name} to your own value (found placeholder '{value}')")
        if self.days_to_look_back < 1:
            raise ValueError("days_to_look_back must be at least 1")
        if not 0 <= self.daily_run_hour <= 23:
            raise ValueError("daily_run_hour must be between 0 and 23")


def _coerce(name: str, value):
    """Convert raw YAML/credential values to the type of the config field"""
    if value is None:
        return None
    if name in ('days_to_look_back', 'daily_run_hour'):
        return int(float(value))
    if name == 'deduplicate':
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
    return str(value)


def load_yaml_settings(path: str) -> Dict:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(config_path: Optional[str] = None,
                credential_manager: Optional[SecureCredentialManager] = None) -> School2CalConfig:
    """Build the configuration from defaults, the YAML file and the credential store"""
    values = {}
    known = {f.name for f in fields(School2CalConfig)}

    path = config_path or DEFAULT_CONFIG_FILE
    if os.path.exists(path):
        print(f"[*] Loading settings from {path}")
        for key, value in load_yaml_settings(path).items():
            if key not in known:
                print(f"[!] Ignoring unknown setting in {path}: {key}")
                continue
            values[key] = _coerce(key, value)
    elif config_path:
        raise ValueError(f"Config file not found: {config_path}")

    manager = credential_manager or get_credential_manager()
    for name in known:
        value = manager.get_optional_credential(name.upper())
        if value is not None:
            values[name] = _coerce(name, value)

    config = School2CalConfig(**values)
    config.validate()
    return config
