"""Configuration of the build engine."""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from .core.exceptions import ConfigError
from .core.golist import go_env

__all__ = ['BuildConfig', 'ConfigManager', 'default_install_root']


def default_install_root(env: Mapping[str, str] | None = None) -> Path | None:
    """
    Find where ``go install`` puts binaries.

    Order: ``$GOBIN``, ``go env GOBIN``, ``$(go env GOPATH)/bin``.
    """
    if env is None:
        env = os.environ
    gobin = env.get('GOBIN') or go_env('GOBIN')
    if gobin:
        return Path(gobin)
    gopath = env.get('GOPATH') or go_env('GOPATH')
    if gopath:
        # GOPATH may be a list, go install uses the first entry
        return Path(gopath.split(os.pathsep)[0]) / 'bin'
    return None


@dataclass
class BuildConfig:
    """Configuration of the build engine."""

    module_root: Path = Path('.')
    install_root: Path | None = None
    build_tags: str = ''
    manifest: Path = Path('go.mod')
    module_prefix: str | None = None
    jobs: int = 1

    def __post_init__(self):
        self.module_root = Path(self.module_root)
        self.manifest = Path(self.manifest)
        if self.install_root is not None:
            self.install_root = Path(self.install_root)
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")

    @property
    def manifest_path(self) -> Path:
        return self.module_root / self.manifest

    def target_dir(self, target: str) -> Path:
        return self.module_root / target

    def artifact_path(self, target: str) -> Path:
        """
        Where the installed binary of a target lives.

        :raises ConfigError: If the install root is unknown
        """
        if self.install_root is None:
            raise ConfigError("Install root is unknown, set YBUILD_INSTALL_ROOT or GOBIN")
        return self.install_root / Path(target).name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildConfig":
        """Create config from dictionary (flat, or with a [build] section)."""
        if "build" in data:
            data = data["build"]
        known = {f for f in cls.__dataclass_fields__}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "BuildConfig":
        """Create config from environment variables."""
        if env is None:
            env = os.environ

        install_root = env.get("YBUILD_INSTALL_ROOT")
        try:
            jobs = int(env.get("YBUILD_JOBS", "1"))
        except ValueError:
            raise ConfigError(f"YBUILD_JOBS must be an integer: {env['YBUILD_JOBS']!r}")

        return cls(
            module_root=Path(env.get("YBUILD_MODULE_ROOT", ".")),
            install_root=Path(install_root) if install_root else default_install_root(env),
            # BRUNO_CUS is the historical name of the tags variable
            build_tags=env.get("YBUILD_BUILD_TAGS", env.get("BRUNO_CUS", "")),
            jobs=jobs,
        )

    @classmethod
    def from_file(cls, config_path: Path, env: Mapping[str, str] | None = None) -> "BuildConfig":
        """
        Load configuration from TOML file.

        Values missing from the file are taken from the environment.

        :param config_path: Path to TOML configuration file
        :param env: Environment variables (defaults to ``os.environ``)
        :return: BuildConfig instance
        :raises ConfigError: If file doesn't exist or has invalid format
        """
        try:
            with open(config_path, 'rb') as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {config_path}")
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML configuration file {config_path}: {e}")

        file_config = cls.from_dict(data)
        table = data.get("build", data)
        # Only keys present in the file override the environment, even when set to a default
        overrides = {k: getattr(file_config, k) for k in table}
        return replace(cls.from_env(env), **overrides)


class ConfigManager:
    """Manages configuration loading."""

    DEFAULT_CONFIG_NAME = "ybuild.toml"
    DEFAULT_FALLBACK_CONFIG_PATH = Path.home() / ".ybuild" / "config.toml"

    @classmethod
    def load_config(cls, config_path: Path | None = None, env: Mapping[str, str] | None = None,
                    module_root: Path | None = None) -> BuildConfig:
        """
        Load configuration from various sources.

        Priority order:
        1. Provided config_path
        2. ybuild.toml in the module root
        3. Fallback config file in the home directory
        4. Environment variables only

        :param config_path: Optional path to config file
        :param env: Environment variables (defaults to ``os.environ``)
        :param module_root: Module root, used unless the config file sets one; also where to look
                            for ybuild.toml (defaults to ``$YBUILD_MODULE_ROOT`` or ".")
        :return: BuildConfig instance
        """
        if env is None:
            env = os.environ
        if module_root is not None:
            env = {**env, "YBUILD_MODULE_ROOT": str(module_root)}
        module_root = Path(env.get("YBUILD_MODULE_ROOT", "."))

        if config_path is not None:
            return BuildConfig.from_file(config_path, env)

        default_path = module_root / cls.DEFAULT_CONFIG_NAME
        if default_path.exists():
            return BuildConfig.from_file(default_path, env)
        if cls.DEFAULT_FALLBACK_CONFIG_PATH.exists():
            return BuildConfig.from_file(cls.DEFAULT_FALLBACK_CONFIG_PATH, env)

        return BuildConfig.from_env(env)
