"""
Shared test fixtures for the GeekyMenu test suite.

Provides temporary application directories, descriptor files and
settings files that use real file I/O (no mocking of the filesystem).
"""

import pytest
import toml


FIREFOX_DESKTOP = """\
[Desktop Entry]
Type=Application
Name=Firefox
GenericName=Web Browser
Comment=Browse the World Wide Web
Exec=firefox %u
Terminal=false
Icon=firefox
"""

FILES_DESKTOP = """\
[Desktop Entry]
Type=Application
Name=Files
Comment=Access and organize files
Exec=nautilus --new-window %U
Icon=org.gnome.Nautilus
"""

HTOP_DESKTOP = """\
[Desktop Entry]
Type=Application
Name=htop
Comment=Show System Processes
Exec=htop
Terminal=true
"""

BROKEN_DESKTOP = """\
[Desktop Entry]
Type=Application
Name=Broken
Comment=No Exec line here
"""


@pytest.fixture
def write_desktop(tmp_path):
    """Factory writing a descriptor below tmp_path and returning its path."""
    def _write(relpath: str, content: str):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def app_root(tmp_path, write_desktop):
    """A populated application directory with one nested vendor folder."""
    write_desktop("apps/firefox.desktop", FIREFOX_DESKTOP)
    write_desktop("apps/org.gnome.Nautilus.desktop", FILES_DESKTOP)
    write_desktop("apps/vendor/htop.desktop", HTOP_DESKTOP)
    write_desktop("apps/broken.desktop", BROKEN_DESKTOP)
    write_desktop("apps/README.txt", "not a descriptor")
    return tmp_path / "apps"


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "scanner": {"extra_dirs": ["~/apps"], "max_depth": 8, "dedupe": True},
        "session": {"page_step": 5},
        "logging": {"level": "INFO", "file": ""},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
