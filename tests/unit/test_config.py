"""Unit tests for `hearth.config`.

Covers env file layering, the environment policy and the assembly of
`Settings` from an environment mapping.
"""

from __future__ import annotations

import os
import tempfile
import warnings
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hearth.config import (
    DatabaseUrlNotSetError,
    Environment,
    Settings,
    apply_environment_policy,
    env_files_for,
    get_root_path,
    load_environment,
)
from hearth.errors import ConfigError, InvalidSettingError
from tests.fixtures.project import write_env_file

# pylint: disable=magic-value-comparison


class TestGetRootPath:
    """Tests for get_root_path."""

    @staticmethod
    def test_uses_hearth_root_when_set(tmp_path: Path):
        """HEARTH_ROOT selects the project root."""
        assert get_root_path({"HEARTH_ROOT": str(tmp_path)}) == tmp_path.resolve()

    @staticmethod
    def test_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Without HEARTH_ROOT the current directory is the root."""
        monkeypatch.chdir(tmp_path)
        assert get_root_path({}) == tmp_path.resolve()


def test_env_files_for_orders_base_files_first():
    """Base files come first, then the environment-specific ones."""
    assert env_files_for("prod") == [".env", ".env.local", ".env.prod", ".env.prod.local"]
    assert env_files_for(None) == [".env", ".env.local"]


class TestLoadEnvironment:
    """Tests for load_environment."""

    @staticmethod
    def test_missing_files_are_skipped(project_root: Path):
        """A root without env files loads nothing and does not fail."""
        environ: dict[str, str] = {}
        assert not load_environment(project_root, environ)
        assert not environ

    @staticmethod
    def test_later_files_win(project_root: Path, write_env):
        """Each layer overrides the keys of the layers before it."""
        write_env(".env", APP_ENV="test", A="env", B="env", C="env", D="env")
        write_env(".env.local", B="local", C="local", D="local")
        write_env(".env.test", C="test", D="test")
        write_env(".env.test.local", D="test.local")
        environ: dict[str, str] = {}

        load_environment(project_root, environ)

        assert environ["A"] == "env"
        assert environ["B"] == "local"
        assert environ["C"] == "test"
        assert environ["D"] == "test.local"

    @staticmethod
    def test_process_environment_is_never_overridden(project_root: Path, write_env):
        """Variables present before loading keep their values."""
        write_env(".env", DATABASE_URL="sqlite:///from-file.db", OTHER="file")
        environ = {"DATABASE_URL": "sqlite:///from-process.db"}

        loaded = load_environment(project_root, environ)

        assert environ["DATABASE_URL"] == "sqlite:///from-process.db"
        assert "DATABASE_URL" not in loaded
        assert loaded == {"OTHER": "file"}

    @staticmethod
    def test_app_env_from_process_selects_env_files(project_root: Path, write_env):
        """A process APP_ENV beats the one in .env when picking the layer files."""
        write_env(".env", APP_ENV="dev")
        write_env(".env.dev", WHO="dev")
        write_env(".env.prod", WHO="prod")
        environ = {"APP_ENV": "prod"}

        load_environment(project_root, environ)

        assert environ["WHO"] == "prod"

    @staticmethod
    def test_env_specific_files_skipped_without_app_env(project_root: Path, write_env):
        """Without APP_ENV only the base files are read."""
        write_env(".env", A="1")
        write_env(".env.dev", B="2")
        environ: dict[str, str] = {}

        load_environment(project_root, environ)

        assert environ == {"A": "1"}

    @staticmethod
    def test_applies_policy_of_loaded_environment(project_root: Path, write_env, no_rich_traceback):
        """The dev policy runs once the env files selected dev."""
        write_env(".env", APP_ENV="dev")

        load_environment(project_root, {})

        no_rich_traceback.assert_called_once_with()

    @staticmethod
    def test_defaults_to_os_environ(project_root: Path, write_env):
        """Without an explicit mapping the process environment is populated."""
        write_env(".env", LOG_LEVEL="warning")

        load_environment(project_root)

        assert os.environ["LOG_LEVEL"] == "warning"


@settings(max_examples=25, deadline=None)
@given(
    keys=st.sets(
        st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ_", min_size=1, max_size=8),
        min_size=1,
        max_size=5,
    ),
    data=st.data(),
)
def test_preexisting_keys_survive_any_layering(keys: set[str], data: st.DataObject):
    """Whatever the files contain, keys set before loading are untouched."""
    protected = data.draw(st.sets(st.sampled_from(sorted(keys))))
    environ = {key: "process" for key in protected}
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        for name in (".env", ".env.local"):
            write_env_file(root, name, **{key: name for key in keys})

        load_environment(root, environ)

    for key in keys:
        assert environ[key] == ("process" if key in protected else ".env.local")


class TestApplyEnvironmentPolicy:
    """Tests for apply_environment_policy."""

    @staticmethod
    def test_dev_enables_detailed_errors(no_rich_traceback):
        """dev installs rich tracebacks and shows every warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            assert apply_environment_policy("dev") is Environment.DEV
            assert warnings.filters[0][0] == "default"
        no_rich_traceback.assert_called_once_with()

    @staticmethod
    @pytest.mark.parametrize("env", ["test", "prod"])
    def test_test_and_prod_change_nothing(env: str, no_rich_traceback):
        """test and prod keep the interpreter defaults."""
        assert apply_environment_policy(env) is Environment(env)
        no_rich_traceback.assert_not_called()

    @staticmethod
    def test_unknown_environment_has_no_policy(no_rich_traceback):
        """Other names are accepted but apply nothing."""
        assert apply_environment_policy("staging") is None
        no_rich_traceback.assert_not_called()


class TestSettings:
    """Tests for Settings."""

    @staticmethod
    def test_defaults(tmp_path: Path):
        """Unset variables fall back to the documented defaults."""
        s = Settings.from_environ({}, tmp_path)
        assert s.app_env == "dev"
        assert s.app_debug is False
        assert s.database_url is None
        assert s.mailer_dsn is None
        assert s.log_level == "debug"
        assert s.cache_default_lifespan == 3600
        assert s.environment is Environment.DEV

    @staticmethod
    def test_reads_every_variable(tmp_path: Path):
        """Each variable maps onto its field."""
        s = Settings.from_environ(
            {
                "APP_ENV": "prod",
                "APP_DEBUG": "true",
                "DATABASE_URL": "sqlite:///app.db",
                "MAILER_DSN": "null://null",
                "LOG_PATH": "/logs/",
                "LOG_LEVEL": "error",
                "CACHE_PATH": "/tmp-cache/",
                "CACHE_DEFAULT_LIFESPAN": "60",
                "TWIG_TEMPLATE_PATH": "/views",
            },
            tmp_path,
        )
        assert s.app_env == "prod"
        assert s.app_debug is True
        assert s.get_db_url() == "sqlite:///app.db"
        assert s.mailer_dsn == "null://null"
        assert s.log_level == "error"
        assert s.cache_default_lifespan == 60
        assert s.log_dir == tmp_path / "logs" / "prod"
        assert s.cache_dir == tmp_path / "tmp-cache" / "prod"
        assert s.template_dir == tmp_path / "views"
        assert s.template_cache_dir == tmp_path / "tmp-cache" / "prod" / "jinja"

    @staticmethod
    def test_default_paths_are_below_root(tmp_path: Path):
        """The default fragments resolve below the project root, per environment."""
        s = Settings.from_environ({"APP_ENV": "test"}, tmp_path)
        assert s.log_dir == tmp_path / "var" / "log" / "test"
        assert s.cache_dir == tmp_path / "var" / "cache" / "test"
        assert s.template_dir == tmp_path / "templates"

    @staticmethod
    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on"])
    def test_truthy_debug_values(tmp_path: Path, value: str):
        """Common truthy spellings enable debug."""
        assert Settings.from_environ({"APP_DEBUG": value}, tmp_path).app_debug is True

    @staticmethod
    @pytest.mark.parametrize("value", ["", "0", "false", "no", "off", "nope"])
    def test_other_debug_values(tmp_path: Path, value: str):
        """Anything else disables debug."""
        assert Settings.from_environ({"APP_DEBUG": value}, tmp_path).app_debug is False

    @staticmethod
    def test_empty_values_are_unset(tmp_path: Path):
        """An empty value behaves like a missing variable."""
        s = Settings.from_environ(
            {"APP_ENV": "", "DATABASE_URL": "", "CACHE_DEFAULT_LIFESPAN": ""}, tmp_path
        )
        assert s.app_env == "dev"
        assert s.database_url is None
        assert s.cache_default_lifespan == 3600

    @staticmethod
    def test_invalid_lifespan_raises(tmp_path: Path):
        """A non-integer lifespan is rejected with the variable name."""
        with pytest.raises(InvalidSettingError, match="CACHE_DEFAULT_LIFESPAN") as exc_info:
            Settings.from_environ({"CACHE_DEFAULT_LIFESPAN": "soon"}, tmp_path)
        assert exc_info.value.value == "soon"

    @staticmethod
    def test_get_db_url_raises_when_missing(tmp_path: Path):
        """A missing database URL raises a ConfigError subclass."""
        with pytest.raises(DatabaseUrlNotSetError, match="DATABASE_URL is not set"):
            Settings(root_path=tmp_path).get_db_url()
        assert issubclass(DatabaseUrlNotSetError, ConfigError)

    @staticmethod
    def test_unknown_environment(tmp_path: Path):
        """An unknown APP_ENV is kept but maps to no Environment."""
        s = Settings.from_environ({"APP_ENV": "staging"}, tmp_path)
        assert s.app_env == "staging"
        assert s.environment is None
        assert s.log_dir == tmp_path / "var" / "log" / "staging"

    @staticmethod
    def test_root_defaults_to_hearth_root(tmp_path: Path):
        """Without an explicit root, HEARTH_ROOT from the mapping is used."""
        s = Settings.from_environ({"HEARTH_ROOT": str(tmp_path)})
        assert s.root_path == tmp_path.resolve()

    @staticmethod
    def test_settings_are_immutable(tmp_path: Path):
        """Settings cannot be modified after construction."""
        s = Settings(root_path=tmp_path)
        with pytest.raises(AttributeError):
            s.app_env = "prod"  # type: ignore[misc]
