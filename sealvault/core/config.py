"""
Secure Configuration Module
===========================

Immutable settings for the engine, the file workflows and the web API.

Sections:
    paths      where log files go
    security   password minimum, generated RSA key size, upload limit
    logging    level and which handlers to attach
    app        name and version reported by the API

Environment overrides use ``SEALVAULT_<SECTION>__<NAME>``, e.g.
``SEALVAULT_SECURITY__RSA_KEY_SIZE=3072``. Names that look like they
carry a credential are never read from the environment.

Wire-format parameters (PBKDF2 iterations, nonce/salt/tag sizes) are
not settings: changing them would orphan existing envelopes, so they
live next to the primitives as constants.
"""

from __future__ import annotations

import hashlib
import os
import platform
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Final, Optional

from sealvault.core.crypto.keypair import RSA_KEY_SIZE
from sealvault.security.constants import MIN_PASSWORD_LENGTH

ENV_PREFIX: Final[str] = "SEALVAULT"

_CREDENTIAL_WORDS: Final[frozenset[str]] = frozenset({
    "password", "secret", "token", "api_key",
    "private", "credential", "auth", "salt",
})


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _default_log_dir() -> Path:
    system = platform.system().lower()
    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "SealVault" / "Logs"
    if system == "darwin":
        return Path.home() / "Library" / "Logs" / "SealVault"
    state = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    return state / "SealVault" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    log_dir: Path = field(default_factory=_default_log_dir)

    def __post_init__(self) -> None:
        if not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


@dataclass(frozen=True, slots=True)
class SecurityConfig:
    """
    Policy knobs that do not affect the envelope format.

    Attributes:
        min_password_length: Shortest password accepted when sealing
        rsa_key_size: Modulus size for newly generated key pairs
        max_envelope_bytes: Largest request body the web API accepts
    """

    min_password_length: int = MIN_PASSWORD_LENGTH
    rsa_key_size: int = RSA_KEY_SIZE
    max_envelope_bytes: int = 16 * 1024 * 1024

    def __post_init__(self) -> None:
        if self.min_password_length < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Minimum password length must be at least {MIN_PASSWORD_LENGTH}")
        if self.rsa_key_size < RSA_KEY_SIZE:
            raise ValueError(f"RSA key size must be at least {RSA_KEY_SIZE} bits")
        if self.max_envelope_bytes <= 0:
            raise ValueError("Maximum envelope size must be positive")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    max_file_size_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False

    def __post_init__(self) -> None:
        if self.level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {self.level}")


@dataclass(frozen=True, slots=True)
class AppConfig:
    app_name: str = "SealVault"
    version: str = "0.1.0"


# "<section>.<env name>" -> (field name, parser)
# The password minimum goes by "min_length" since "password" names are never read
_OVERRIDES: Final[dict[str, dict[str, tuple[str, Callable[[str], Any]]]]] = {
    "paths": {
        "log_dir": ("log_dir", Path),
    },
    "security": {
        "min_length": ("min_password_length", int),
        "rsa_key_size": ("rsa_key_size", int),
        "max_envelope_bytes": ("max_envelope_bytes", int),
    },
    "logging": {
        "level": ("level", str),
        "max_file_size_bytes": ("max_file_size_bytes", int),
        "backup_count": ("backup_count", int),
        "enable_console": ("enable_console", _parse_bool),
        "enable_file": ("enable_file", _parse_bool),
        "enable_json": ("enable_json", _parse_bool),
    },
}

_SECTION_TYPES: Final[dict[str, type]] = {
    "paths": PathConfig,
    "security": SecurityConfig,
    "logging": LoggingConfig,
}


class SecureConfig:
    """
    Frozen bundle of the four configuration sections.

    Usage:
        config = SecureConfig.load()
        engine = EnvelopeEngine.from_config(config)

        # process-wide instance, as used by the web API
        config = SecureConfig.get_instance()
    """

    __slots__ = ("_paths", "_security", "_logging", "_app", "_frozen", "_config_hash")

    _instance: Optional[SecureConfig] = None

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        security: Optional[SecurityConfig] = None,
        logging: Optional[LoggingConfig] = None,
        app: Optional[AppConfig] = None,
    ) -> None:
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_security", security or SecurityConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_app", app or AppConfig())
        fingerprint = f"{self._paths}|{self._security}|{self._logging}|{self._app}"
        object.__setattr__(self, "_config_hash", hashlib.sha256(fingerprint.encode()).hexdigest()[:16])
        object.__setattr__(self, "_frozen", True)

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def security(self) -> SecurityConfig:
        return self._security

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def app(self) -> AppConfig:
        return self._app

    @property
    def config_hash(self) -> str:
        """Short digest identifying this exact configuration."""
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = ENV_PREFIX) -> SecureConfig:
        """
        Build a configuration from defaults plus environment overrides.

        Raises:
            ValueError: If an override cannot be parsed or fails validation
        """
        env = cls._parse_env_overrides(env_prefix)

        sections: dict[str, Any] = {}
        for section, known in _OVERRIDES.items():
            kwargs = {
                field_name: parse(env[f"{section}.{env_name}"])
                for env_name, (field_name, parse) in known.items()
                if f"{section}.{env_name}" in env
            }
            if kwargs:
                sections[section] = _SECTION_TYPES[section](**kwargs)

        return cls(**sections)

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Map ``PREFIX_SECTION__NAME`` variables to ``section.name`` keys."""
        head = f"{prefix.upper()}_"
        overrides: dict[str, str] = {}

        for key, value in os.environ.items():
            if not key.startswith(head):
                continue
            name = key[len(head):].lower().replace("__", ".")
            if any(word in name for word in _CREDENTIAL_WORDS):
                continue
            overrides[name] = value

        return overrides

    @classmethod
    def get_instance(cls) -> SecureConfig:
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide instance (tests only)."""
        cls._instance = None

    def ensure_directories(self) -> None:
        """Create the log directory, owner-only on POSIX."""
        log_dir = self._paths.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        if platform.system().lower() != "windows":
            log_dir.chmod(stat.S_IRWXU)

    def __repr__(self) -> str:
        return f"SecureConfig(hash={self._config_hash}, app={self._app.app_name})"

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError("SecureConfig is immutable after initialization")
        super().__setattr__(name, value)
