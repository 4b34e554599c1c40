"""
Bracket engine settings, loaded from YAML with environment overrides.
"""
import os
import re
import logging
import yaml

from tiesheet.errors import ConfigurationError

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
SETTINGS_FILE = os.path.join(BASE_DIR, 'data', 'settings.yaml')

RESEED_POLICIES = ('reject', 'regenerate', 'stale')

# env var name -> settings key
ENV_OVERRIDES = {
    'TIESHEET_CASCADE_INVALIDATION': 'cascade_invalidation',
    'TIESHEET_RESEED_MISMATCH': 'reseed_mismatch',
}


def _parse_bool(value, key):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('1', 'true', 'yes', 'on'):
            return True
        if lowered in ('0', 'false', 'no', 'off', ''):
            return False
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


class BracketSettings:
    """
    Options for the bracket engine.

    - cascade_invalidation: when a changed winner replaces a team in the
      next round, also clear results further along that path.
    - reseed_mismatch: what reseeding does when the new roster needs a
      different bracket size ('reject', 'regenerate' or 'stale').
    - final_round_name: display name of the last round.
    """

    def __init__(self, cascade_invalidation=False, reseed_mismatch='reject', final_round_name='Final'):
        self.cascade_invalidation = _parse_bool(cascade_invalidation, 'cascade_invalidation')
        if reseed_mismatch not in RESEED_POLICIES:
            raise ConfigurationError(
                f"reseed_mismatch must be one of {', '.join(RESEED_POLICIES)}, got {reseed_mismatch!r}"
            )
        self.reseed_mismatch = reseed_mismatch
        if not isinstance(final_round_name, str) or not final_round_name.strip():
            raise ConfigurationError("final_round_name must be a non-empty string")
        if re.fullmatch(r"Round \d+", final_round_name.strip()):
            raise ConfigurationError(f"final_round_name {final_round_name!r} clashes with the numbered round names")
        self.final_round_name = final_round_name

    def __repr__(self):
        return (f"BracketSettings(cascade_invalidation={self.cascade_invalidation}, "
                f"reseed_mismatch={self.reseed_mismatch}, final_round_name={self.final_round_name})")

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        if 'bracket_settings' in data:
            data = data['bracket_settings'] or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Bracket settings must be a mapping")
        known = {'cascade_invalidation', 'reseed_mismatch', 'final_round_name'}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown bracket settings: {', '.join(sorted(unknown))}")
        return cls(**data)


DEFAULT_SETTINGS = BracketSettings()


def load_settings(file_path=None):
    """
    Load settings from a YAML file, then apply TIESHEET_* environment
    overrides. A missing file yields the defaults.
    """
    file_path = file_path or os.environ.get('TIESHEET_SETTINGS_FILE', SETTINGS_FILE)
    data = {}
    if os.path.exists(file_path):
        with open(file_path, mode='r', encoding='utf-8') as file:
            try:
                data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Failed to parse {file_path}: {e}") from e
        logger.debug(f"Loaded bracket settings from {file_path}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"{file_path} must contain a mapping")
    if 'bracket_settings' in data:
        data = data['bracket_settings'] or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"bracket_settings in {file_path} must be a mapping")

    data = dict(data)
    for env_name, key in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value is not None:
            data[key] = env_value
    return BracketSettings.from_dict(data)
