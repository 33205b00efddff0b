from pathlib import Path

import pytest

from ybuild.config import BuildConfig, ConfigManager, default_install_root
from ybuild.core.exceptions import ConfigError


def __test_from_env__():
    config = BuildConfig.from_env({
        "YBUILD_INSTALL_ROOT": "/opt/bin",
        "YBUILD_BUILD_TAGS": "cus",
        "YBUILD_MODULE_ROOT": "/src/tools",
        "YBUILD_JOBS": "4",
    })
    assert config.install_root == Path("/opt/bin")
    assert config.build_tags == "cus"
    assert config.module_root == Path("/src/tools")
    assert config.jobs == 4
    assert config.manifest_path == Path("/src/tools/go.mod")
    assert config.target_dir("cmd/x") == Path("/src/tools/cmd/x")


def __test_from_env_legacy_tags_variable__():
    config = BuildConfig.from_env({"GOBIN": "/go/bin", "BRUNO_CUS": "bruno"})
    assert config.build_tags == "bruno"
    assert config.install_root == Path("/go/bin")

    config = BuildConfig.from_env({"GOBIN": "/go/bin", "BRUNO_CUS": "bruno", "YBUILD_BUILD_TAGS": ""})
    assert config.build_tags == ""


def __test_default_install_root__(monkeypatch):
    import ybuild.config

    monkeypatch.setattr(ybuild.config, "go_env", lambda name: "")
    assert default_install_root({"GOPATH": "/home/u/go:/other"}) == Path("/home/u/go/bin")
    assert default_install_root({"GOBIN": "/x", "GOPATH": "/home/u/go"}) == Path("/x")
    assert default_install_root({}) is None

    monkeypatch.setattr(ybuild.config, "go_env", lambda name: "/from/go/env" if name == "GOBIN" else "")
    assert default_install_root({}) == Path("/from/go/env")


def __test_invalid_jobs__():
    with pytest.raises(ConfigError):
        BuildConfig.from_env({"GOBIN": "/go/bin", "YBUILD_JOBS": "many"})
    with pytest.raises(ConfigError):
        BuildConfig(jobs=0)


def __test_artifact_path__():
    config = BuildConfig(install_root=Path("/go/bin"))
    assert config.artifact_path("foo") == Path("/go/bin/foo")
    assert config.artifact_path("cmd/foo") == Path("/go/bin/foo")

    with pytest.raises(ConfigError, match="Install root"):
        BuildConfig().artifact_path("foo")


def __test_from_file_overrides_env__(tmp_path):
    config_path = tmp_path / "ybuild.toml"
    config_path.write_text('[build]\ninstall_root = "/srv/bin"\njobs = 3\n')

    config = BuildConfig.from_file(config_path, {"GOBIN": "/go/bin", "YBUILD_BUILD_TAGS": "cus"})
    assert config.install_root == Path("/srv/bin")
    assert config.jobs == 3
    assert config.build_tags == "cus"


def __test_from_file_errors__(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        BuildConfig.from_file(tmp_path / "missing.toml", {})

    bad = tmp_path / "bad.toml"
    bad.write_text("[build\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        BuildConfig.from_file(bad, {})

    unknown = tmp_path / "unknown.toml"
    unknown.write_text('[build]\ncolour = "red"\n')
    with pytest.raises(ConfigError, match="colour"):
        BuildConfig.from_file(unknown, {})


def __test_load_config_finds_file_in_module_root__(tmp_path):
    (tmp_path / "ybuild.toml").write_text('[build]\nbuild_tags = "from-file"\n')
    env = {"GOBIN": "/go/bin", "YBUILD_MODULE_ROOT": str(tmp_path)}

    config = ConfigManager.load_config(env=env)
    assert config.build_tags == "from-file"
    assert config.module_root == tmp_path

    config = ConfigManager.load_config(env={"GOBIN": "/go/bin"}, module_root=tmp_path)
    assert config.build_tags == "from-file"
    assert config.module_root == tmp_path


def __test_load_config_env_only__(tmp_path):
    config = ConfigManager.load_config(env={"GOBIN": "/go/bin"}, module_root=tmp_path)
    if not ConfigManager.DEFAULT_FALLBACK_CONFIG_PATH.exists():
        assert config.install_root == Path("/go/bin")
        assert config.build_tags == ""


def __test_from_file_default_values_still_override_env__(tmp_path):
    config_path = tmp_path / "ybuild.toml"
    config_path.write_text('[build]\nbuild_tags = ""\njobs = 1\n')

    env = {"GOBIN": "/go/bin", "BRUNO_CUS": "bruno", "YBUILD_JOBS": "8"}
    config = BuildConfig.from_file(config_path, env)
    assert config.build_tags == ""
    assert config.jobs == 1
    assert config.install_root == Path("/go/bin")


def __test_load_config_applies_module_root__(tmp_path):
    config = ConfigManager.load_config(env={"GOBIN": "/go/bin"}, module_root=tmp_path)
    assert config.module_root == tmp_path
    assert config.manifest_path == tmp_path / "go.mod"
    assert config.target_dir("foo") == tmp_path / "foo"

    explicit = tmp_path / "explicit.toml"
    explicit.write_text('[build]\njobs = 2\n')
    config = ConfigManager.load_config(explicit, env={"GOBIN": "/go/bin"}, module_root=tmp_path)
    assert config.module_root == tmp_path
    assert config.jobs == 2

    # A module root set in the file wins
    explicit.write_text('[build]\nmodule_root = "/src/tools"\n')
    config = ConfigManager.load_config(explicit, env={"GOBIN": "/go/bin"}, module_root=tmp_path)
    assert config.module_root == Path("/src/tools")
