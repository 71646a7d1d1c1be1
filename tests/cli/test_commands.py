"""
Tests for goup CLI command implementations.

Commands are called with parsed arguments; network-facing services are
patched at the command module boundary.
"""

import argparse
import sys
from unittest.mock import Mock, patch

import pytest

from goup.cli.commands import default, install, ls, ls_ver, remove, search
from goup.core.exceptions import (
    GoupError,
    NoMatchingReleaseError,
    VersionNotInstalledError,
)
from goup.toolchain.models import Release
from goup.toolchain.store import INSTALLED_MARKER
from tests.fixtures.releases import release_dict

needs_symlinks = pytest.mark.skipif(
    sys.platform == "win32", reason="symlinks need privileges on Windows"
)


def make_args(**kwargs):
    defaults = {"config": None, "yes": False, "verbose": False, "quiet": False}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


@pytest.fixture
def home(isolated_home, goup_home, monkeypatch):
    """Point GOUP_HOME at an empty goup directory."""
    monkeypatch.setenv("GOUP_HOME", str(goup_home))
    return goup_home


def add_version(home, name):
    path = home / name
    (path / "bin").mkdir(parents=True)
    (path / INSTALLED_MARKER).touch()
    return path


class TestResolveRelease:
    """Test install.resolve_release selection rules."""

    def test_latest_when_empty(self):
        service = Mock()

        assert install.resolve_release(service, "") is service.latest.return_value
        service.filter.assert_not_called()

    def test_exact_match_wins(self):
        releases = [Release.from_dict(release_dict(v)) for v in ("go1.21", "go1.21.5")]
        service = Mock()
        service.filter.return_value = releases

        assert install.resolve_release(service, "1.21").version == "go1.21"

    def test_newest_prefix_match(self):
        releases = [
            Release.from_dict(release_dict(v)) for v in ("go1.21rc2", "go1.21.0", "go1.21.5")
        ]
        service = Mock()
        service.filter.return_value = releases

        assert install.resolve_release(service, "1.21").version == "go1.21.5"

    def test_prefix_stops_at_component_boundary(self):
        """Test '1.2' picks go1.2.x rather than go1.20 or go1.25.0."""
        releases = [
            Release.from_dict(release_dict(v)) for v in ("go1.2.2", "go1.20", "go1.25.0")
        ]
        service = Mock()
        service.filter.return_value = releases

        assert install.resolve_release(service, "1.2").version == "go1.2.2"

    def test_prefix_accepts_prerelease(self):
        releases = [Release.from_dict(release_dict(v)) for v in ("go1.22rc1", "go1.220")]
        service = Mock()
        service.filter.return_value = releases

        assert install.resolve_release(service, "go1.22").version == "go1.22rc1"

    def test_only_longer_components(self):
        releases = [Release.from_dict(release_dict(v)) for v in ("go1.20", "go1.25.0")]
        service = Mock()
        service.filter.return_value = releases

        with pytest.raises(NoMatchingReleaseError):
            install.resolve_release(service, "1.2")

    def test_no_match(self):
        service = Mock()
        service.filter.return_value = []

        with pytest.raises(NoMatchingReleaseError, match="no matched go version found"):
            install.resolve_release(service, "1.99")


class TestInstallCommand:
    """Test install command dispatch."""

    @needs_symlinks
    def test_installs_and_activates(self, home):
        release = Release.from_dict(release_dict("go1.21.5"))

        def fake_install(rel):
            add_version(home, rel.version)

        with patch.object(install, "GoReleaseService") as mock_service, patch.object(
            install, "ReleaseInstaller"
        ) as mock_installer:
            mock_service.return_value.filter.return_value = [release]
            mock_installer.return_value.install.side_effect = fake_install

            assert install.run(make_args(go_version="1.21.5", cl=None, host="go.dev")) == 0

        mock_service.assert_called_once_with("go.dev")
        assert (home / "current").resolve() == (home / "go1.21.5").resolve()

    @needs_symlinks
    def test_tip_builds_from_source(self, home):
        def fake_build(cl):
            (home / "gotip" / "bin").mkdir(parents=True)
            return home / "gotip"

        with patch.object(install, "SourceBuilder") as mock_builder:
            mock_builder.return_value.install.side_effect = fake_build

            assert install.run(make_args(go_version="tip", cl="227037", host=None)) == 0

        mock_builder.return_value.install.assert_called_once_with("227037")
        assert (home / "current").resolve() == (home / "gotip").resolve()

    def test_yes_flag_reaches_builder(self, home):
        with patch.object(install, "SourceBuilder") as mock_builder, patch.object(
            install, "ActivationSwitch"
        ):
            install.run(make_args(go_version="tip", cl=None, host=None, yes=True))

        config = mock_builder.call_args.args[0]
        assert config.assume_yes is True

    def test_cl_without_tip(self, home):
        with pytest.raises(GoupError, match="only be given with 'tip'"):
            install.run(make_args(go_version="1.21.5", cl="227037", host=None))

    def test_failed_install_does_not_activate(self, home):
        with patch.object(install, "GoReleaseService") as mock_service, patch.object(
            install, "ReleaseInstaller"
        ) as mock_installer, patch.object(install, "ActivationSwitch") as mock_switch:
            mock_service.return_value.latest.return_value = Release.from_dict(
                release_dict("go1.21.5")
            )
            mock_installer.return_value.install.side_effect = GoupError("boom")

            with pytest.raises(GoupError):
                install.run(make_args(go_version=None, cl=None, host=None))

        mock_switch.assert_not_called()


@needs_symlinks
class TestDefaultCommand:
    """Test default command."""

    def test_sets_default(self, home):
        add_version(home, "go1.21.5")

        assert default.run(make_args(go_version="1.21.5")) == 0
        assert (home / "current").resolve() == (home / "go1.21.5").resolve()

    def test_not_installed(self, home):
        with pytest.raises(VersionNotInstalledError):
            default.run(make_args(go_version="1.19"))


class TestLsCommand:
    """Test ls command."""

    @needs_symlinks
    def test_marks_current(self, home, capsys):
        add_version(home, "go1.20.12")
        add_version(home, "go1.21.5")
        default.run(make_args(go_version="go1.21.5"))

        assert ls.run(make_args()) == 0

        assert capsys.readouterr().out.splitlines() == ["  go1.20.12", "* go1.21.5"]

    def test_incomplete_version(self, home, capsys):
        (home / "go1.22rc1").mkdir()

        ls.run(make_args())

        assert capsys.readouterr().out.splitlines() == ["  go1.22rc1 (incomplete)"]

    def test_nothing_installed(self, home, capsys):
        assert ls.run(make_args()) == 0
        assert capsys.readouterr().out == ""


class TestLsVerCommand:
    """Test ls-ver command."""

    def test_strips_go_prefix(self, home, capsys):
        releases = [Release.from_dict(release_dict(v)) for v in ("go1.21rc2", "go1.21.5")]

        with patch.object(ls_ver, "GoReleaseService") as mock_service:
            mock_service.return_value.search.return_value = releases
            assert ls_ver.run(make_args(filter="1.21")) == 0

        mock_service.return_value.search.assert_called_once_with("1.21")
        assert capsys.readouterr().out.splitlines() == ["1.21rc2", "1.21.5"]


class TestSearchCommand:
    """Test search command."""

    def test_lists_tags(self, home, capsys, monkeypatch):
        monkeypatch.setenv("GOUP_GO_SOURCE_GIT_URL", "https://git.test/go")

        with patch.object(search, "list_tag_versions", return_value=["1.21.0", "1.21.5"]) as mock_list:
            assert search.run(make_args(regexp="1.21")) == 0

        mock_list.assert_called_once_with("1.21", "https://git.test/go")
        assert capsys.readouterr().out.splitlines() == ["1.21.0", "1.21.5"]


class TestRemoveCommand:
    """Test remove command."""

    def test_removes_version(self, home):
        path = add_version(home, "go1.20.12")

        assert remove.run(make_args(go_version="1.20.12")) == 0
        assert not path.exists()

    @needs_symlinks
    def test_refuses_default(self, home):
        path = add_version(home, "go1.21.5")
        default.run(make_args(go_version="go1.21.5"))

        with pytest.raises(GoupError, match="default Go version"):
            remove.run(make_args(go_version="go1.21.5"))

        assert path.exists()
