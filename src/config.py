# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the scramble word engine.

Handles loading configuration from YAML files and environment variables,
with validation.
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any


# Try to import yaml, fallback to None
try:
    import yaml
    HAS_YAML = True
except ImportError:
    HAS_YAML = False
    yaml = None


# Default model for AI operations
DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Environment variable naming the YAML config file
CONFIG_ENV = "SCRAMBLE_CONFIG"

VALID_MODES = ["curated", "hybrid", "unlimited-only"]
VALID_PROVIDERS = ["datamuse", "ai", "static"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class CacheConfig:
    """Configuration for the anagram cache."""
    capacity: int = 200
    storage_key: str = "scramble-generated-cache"
    quota_evict_count: int = 50


@dataclass
class StorageConfig:
    """Configuration for durable storage."""
    directory: str = "~/.scramble"
    quota_bytes: Optional[int] = None


@dataclass
class GenerationConfig:
    """Configuration for anagram generation."""
    mode: str = "hybrid"
    initial_difficulty: int = 1
    max_api_attempts: int = 3
    scramble_attempts: int = 5
    unlimited_enabled: bool = True


@dataclass
class WordSourceConfig:
    """Configuration for the remote word source."""
    provider: str = "datamuse"
    base_url: str = "https://api.datamuse.com/words"
    timeout_seconds: float = 0.5
    max_calls: int = 500
    static_words: List[str] = field(default_factory=list)


@dataclass
class AIConfig:
    """Configuration for Claude integration."""
    model: Optional[str] = None
    api_key: Optional[str] = None
    api_key_env: str = "ANTHROPIC_API_KEY"
    model_env: str = "ANTHROPIC_MODEL"
    contextual_hints: bool = True


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    directory: str = "./logs"
    level: str = "INFO"
    console: bool = True


@dataclass
class EngineConfig:
    """Complete configuration for the word engine."""
    cache: CacheConfig = field(default_factory=CacheConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    word_source: WordSourceConfig = field(default_factory=WordSourceConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Convert dicts to dataclass instances if needed."""
        if isinstance(self.cache, dict):
            self.cache = CacheConfig(**self.cache)
        if isinstance(self.storage, dict):
            self.storage = StorageConfig(**self.storage)
        if isinstance(self.generation, dict):
            self.generation = GenerationConfig(**self.generation)
        if isinstance(self.word_source, dict):
            self.word_source = WordSourceConfig(**self.word_source)
        if isinstance(self.ai, dict):
            self.ai = AIConfig(**self.ai)
        if isinstance(self.logging, dict):
            self.logging = LoggingConfig(**self.logging)

    @classmethod
    def from_yaml(cls, path: str) -> 'EngineConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            EngineConfig instance

        Raises:
            ConfigValidationError: If file doesn't exist or is invalid
        """
        if not HAS_YAML:
            raise ConfigValidationError(
                "PyYAML is required for YAML configuration. "
                "Install with: pip install pyyaml"
            )

        path = Path(path)
        if not path.exists():
            raise ConfigValidationError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineConfig':
        """
        Create EngineConfig from a dictionary.

        Unknown keys inside a section are rejected so typos surface early.
        """
        sections = {
            'cache': CacheConfig,
            'storage': StorageConfig,
            'generation': GenerationConfig,
            'word_source': WordSourceConfig,
            'ai': AIConfig,
            'logging': LoggingConfig,
        }

        unknown = set(data) - set(sections)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration sections: {sorted(unknown)}"
            )

        kwargs = {}
        for name, section_cls in sections.items():
            section_data = data.get(name) or {}
            if not isinstance(section_data, dict):
                raise ConfigValidationError(
                    f"Section '{name}' must be a mapping, got {type(section_data)}"
                )
            try:
                kwargs[name] = section_cls(**section_data)
            except TypeError as e:
                raise ConfigValidationError(f"Invalid '{name}' section: {e}")

        return cls(**kwargs)

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> 'EngineConfig':
        """
        Override settings from SCRAMBLE_* environment variables.

        Recognised: SCRAMBLE_MODE, SCRAMBLE_PROVIDER, SCRAMBLE_STORAGE_DIR,
        SCRAMBLE_LOG_LEVEL, SCRAMBLE_UNLIMITED_ENABLED.
        """
        env = os.environ if environ is None else environ

        if env.get("SCRAMBLE_MODE"):
            self.generation.mode = env["SCRAMBLE_MODE"]
        if env.get("SCRAMBLE_PROVIDER"):
            self.word_source.provider = env["SCRAMBLE_PROVIDER"]
        if env.get("SCRAMBLE_STORAGE_DIR"):
            self.storage.directory = env["SCRAMBLE_STORAGE_DIR"]
        if env.get("SCRAMBLE_LOG_LEVEL"):
            self.logging.level = env["SCRAMBLE_LOG_LEVEL"]
        if env.get("SCRAMBLE_UNLIMITED_ENABLED"):
            self.generation.unlimited_enabled = (
                env["SCRAMBLE_UNLIMITED_ENABLED"].strip().lower()
                in ("1", "true", "yes", "on")
            )

        return self

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.cache.capacity < 1:
            errors.append("cache.capacity must be at least 1")
        if self.cache.quota_evict_count < 1:
            errors.append("cache.quota_evict_count must be at least 1")
        if not self.cache.storage_key:
            errors.append("cache.storage_key cannot be empty")

        if self.storage.quota_bytes is not None and self.storage.quota_bytes <= 0:
            errors.append("storage.quota_bytes must be positive")

        if self.generation.mode not in VALID_MODES:
            errors.append(
                f"Invalid mode '{self.generation.mode}'. "
                f"Must be one of: {VALID_MODES}"
            )
        if not 1 <= self.generation.initial_difficulty <= 5:
            errors.append("generation.initial_difficulty must be between 1 and 5")
        if self.generation.max_api_attempts < 1:
            errors.append("generation.max_api_attempts must be at least 1")
        if self.generation.scramble_attempts < 1:
            errors.append("generation.scramble_attempts must be at least 1")

        if self.word_source.provider not in VALID_PROVIDERS:
            errors.append(
                f"Invalid word source '{self.word_source.provider}'. "
                f"Must be one of: {VALID_PROVIDERS}"
            )
        if self.word_source.timeout_seconds <= 0:
            errors.append("word_source.timeout_seconds must be positive")
        if self.word_source.max_calls < 0:
            errors.append("word_source.max_calls must be non-negative")
        if (self.word_source.provider == "static" and
                not self.word_source.static_words):
            errors.append("word_source.static_words is required for 'static'")

        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid log level '{self.logging.level}'. "
                f"Must be one of: {VALID_LOG_LEVELS}"
            )

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'cache': asdict(self.cache),
            'storage': asdict(self.storage),
            'generation': asdict(self.generation),
            'word_source': asdict(self.word_source),
            'ai': asdict(self.ai),
            'logging': asdict(self.logging),
        }


def discover_api_key(config: EngineConfig) -> Optional[str]:
    """
    Discover API key from multiple sources in priority order.

    Priority order:
    1. Config file api_key field
    2. Environment variable (ANTHROPIC_API_KEY or custom)
    3. Claude config directory (~/.claude/credentials.json)
    4. Anthropic config file (~/.anthropic/api_key)
    5. Anthropic config JSON (~/.config/anthropic/config.json)

    Args:
        config: EngineConfig instance

    Returns:
        API key string or None if not found
    """
    # Priority 1: Already in config
    if config.ai.api_key and config.ai.api_key != "null":
        return config.ai.api_key

    # Priority 2: Environment variable
    env_var = config.ai.api_key_env or "ANTHROPIC_API_KEY"
    if os.environ.get(env_var):
        return os.environ[env_var]

    # Priority 3: Claude config directory
    claude_creds = Path.home() / ".claude" / "credentials.json"
    if claude_creds.exists():
        try:
            creds = json.loads(claude_creds.read_text())
            if creds.get("api_key"):
                return creds["api_key"]
        except (json.JSONDecodeError, KeyError):
            pass

    # Priority 4: Anthropic config file (plain text)
    anthropic_key_file = Path.home() / ".anthropic" / "api_key"
    if anthropic_key_file.exists():
        key = anthropic_key_file.read_text().strip()
        if key:
            return key

    # Priority 5: Anthropic config JSON
    anthropic_config = Path.home() / ".config" / "anthropic" / "config.json"
    if anthropic_config.exists():
        try:
            cfg = json.loads(anthropic_config.read_text())
            if cfg.get("api_key"):
                return cfg["api_key"]
        except (json.JSONDecodeError, KeyError):
            pass

    return None


def get_model(config: EngineConfig) -> str:
    """
    Get AI model from config with fallback chain.

    Priority order:
    1. Config ai.model field
    2. Environment variable (ANTHROPIC_MODEL or custom)
    3. Default model
    """
    if config.ai.model and config.ai.model != "null":
        return config.ai.model

    env_var = config.ai.model_env or "ANTHROPIC_MODEL"
    if os.environ.get(env_var):
        return os.environ[env_var]

    return DEFAULT_MODEL


def load_config(path: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from a YAML file and the environment.

    Args:
        path: YAML file path; falls back to $SCRAMBLE_CONFIG, then defaults

    Returns:
        Fully resolved EngineConfig

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    path = path or os.environ.get(CONFIG_ENV)

    if path:
        config = EngineConfig.from_yaml(path)
    else:
        config = EngineConfig()

    config.apply_env()

    errors = config.validate()
    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config
