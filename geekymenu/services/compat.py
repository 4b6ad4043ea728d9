"""
Compatibility Report - Check which application sources this system has.

Backs `geekymenu --check`. For every known application directory it
reports whether the directory exists, how many descriptors it holds and
how many of those parse into launchable entries, then prints a verdict
per source (traditional, Flatpak, Snap, Nix).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from geekymenu.services.desktop_entry import Entry, parse_desktop_file
from geekymenu.services.scanner import app_dir_categories, find_desktop_files_in_dir

SAMPLE_LIMIT = 10
SAMPLES_PER_DIR = 3

# (marker path, platform name, package manager feature)
_DISTRO_MARKERS = [
    ("/etc/debian_version", "Debian/Ubuntu", "apt"),
    ("/etc/redhat-release", "Red Hat/Fedora", "rpm"),
    ("/etc/arch-release", "Arch Linux", "pacman"),
]

_INSTALL_HINTS = {
    "nix": "Nix: nix-env -iA nixpkgs.firefox nixpkgs.chromium",
    "flatpak": "Flatpak: flatpak install org.mozilla.firefox",
    "snap": "Snap: snap install firefox",
    "apt": "APT: sudo apt install firefox chromium-browser",
    "rpm": "DNF: sudo dnf install firefox chromium",
    "pacman": "Pacman: sudo pacman -S firefox chromium",
}


@dataclass
class PlatformInfo:
    """Detected distribution and available package managers."""
    name: str
    features: list[str] = field(default_factory=list)


@dataclass
class DirResult:
    """Scan outcome for one application directory."""
    path: str
    exists: bool
    files: int = 0
    apps: list[Entry] = field(default_factory=list)


@dataclass
class CategoryResult:
    """Scan outcome for one application source."""
    key: str
    name: str
    dirs: list[DirResult] = field(default_factory=list)

    @property
    def files(self) -> int:
        return sum(d.files for d in self.dirs)

    @property
    def apps(self) -> int:
        return sum(len(d.apps) for d in self.dirs)


def detect_platform(exists: Callable[[str], bool] = os.path.exists,
                    home: Optional[Path] = None) -> PlatformInfo:
    """
    Guess the distribution from marker files.

    Args:
        exists: Path probe, injectable for tests
        home: Home directory used for per-user Flatpak detection
    """
    home = home or Path.home()
    platform = PlatformInfo(name="Generic Linux")

    if exists("/etc/nixos") or exists("/run/current-system"):
        platform.name = "NixOS"
        platform.features.append("nix")
    else:
        for marker, name, feature in _DISTRO_MARKERS:
            if exists(marker):
                platform.name = name
                platform.features.append(feature)
                break

    if exists("/var/lib/flatpak") or exists(str(home / ".local" / "share" / "flatpak")):
        platform.features.append("flatpak")
    if exists("/var/lib/snapd") or exists("/snap"):
        platform.features.append("snap")
    if exists("/nix") and "nix" not in platform.features:
        platform.features.append("nix")

    return platform


def collect_results(categories: dict[str, dict]) -> list[CategoryResult]:
    """Scan every directory of every category and parse what is found."""
    results = []
    for key, info in categories.items():
        category = CategoryResult(key=key, name=info["name"])
        for path in info["paths"]:
            if not os.path.isdir(path):
                category.dirs.append(DirResult(path=path, exists=False))
                continue
            files = find_desktop_files_in_dir(path)
            apps = [e for e in map(parse_desktop_file, files) if e is not None]
            category.dirs.append(DirResult(path=path, exists=True, files=len(files), apps=apps))
        results.append(category)
    return results


def format_report(platform: PlatformInfo, results: list[CategoryResult]) -> list[str]:
    """Render the report as printable lines."""
    lines = [
        "GeekyMenu Cross-Platform Compatibility Test",
        "=" * 43,
        "",
        f"Platform: {platform.name}",
        f"Package managers: {', '.join(platform.features) or 'none detected'}",
        "",
    ]

    total_files = sum(c.files for c in results)
    total_apps = sum(c.apps for c in results)

    for category in results:
        lines.append(f"{category.name}:")
        for d in category.dirs:
            if d.exists:
                lines.append(f"   ✓ {d.path} ({d.files} files, {len(d.apps)} apps)")
            else:
                lines.append(f"   ✗ {d.path} (not found)")
        if category.apps:
            lines.append(f"   Total: {category.files} files, {category.apps} applications")
        lines.append("")

    lines += [
        "Summary:",
        f"   Total .desktop files found: {total_files}",
        f"   Total valid applications: {total_apps}",
        "",
        "Recommendations:",
    ]

    if total_apps == 0:
        lines.append("   No applications found! GeekyMenu will show '(No matches)'")
        lines.append("")
        lines.append("   Install some applications:")
        for feature in platform.features:
            if feature in _INSTALL_HINTS:
                lines.append(f"   • {_INSTALL_HINTS[feature]}")
    else:
        lines.append(f"   Found {total_apps} applications - GeekyMenu should work great!")
        lines.append("")
        lines.append("   Applications by source:")
        for category in results:
            if category.apps:
                lines.append(f"   • {category.name}: {category.apps} apps")
    lines.append("")

    lines.append("Sample Applications Found:")
    samples = _sample_lines(results)
    if not samples:
        lines.append("   (No applications to display)")
    else:
        lines.extend(samples)
        shown = sum(1 for s in samples if s.startswith("     • "))
        if total_apps > shown:
            lines.append(f"   ... and {total_apps - shown} more applications")
    lines.append("")

    lines.append("Compatibility Verdict:")
    for category in results:
        status = "Working" if category.apps else "No apps found"
        lines.append(f"   {category.name}: {status}")
    lines.append("")

    if total_apps:
        lines.append("GeekyMenu is compatible with your system!")
        lines.append("   Launch with: geekymenu")
        lines.append("   Debug with: geekymenu --debug")
    else:
        lines.append("GeekyMenu needs applications to be useful.")
        lines.append("   Install some GUI applications and run this test again.")

    return lines


def _sample_lines(results: list[CategoryResult]) -> list[str]:
    """Up to SAMPLE_LIMIT app names, a few per directory, grouped by source."""
    lines = []
    shown = 0
    for category in results:
        if not category.apps or shown >= SAMPLE_LIMIT:
            continue
        lines.append(f"   {category.name}:")
        for d in category.dirs:
            for app in d.apps[:SAMPLES_PER_DIR]:
                if shown >= SAMPLE_LIMIT:
                    break
                suffix = f" - {app.comment}" if app.comment else ""
                lines.append(f"     • {app.name}{suffix}")
                shown += 1
    return lines


def run_compatibility_check(out: Callable[[str], None] = print,
                            categories: Optional[dict[str, dict]] = None,
                            platform: Optional[PlatformInfo] = None) -> int:
    """
    Print the compatibility report.

    Returns:
        Exit status: 0 if any application was found, 1 otherwise
    """
    categories = categories if categories is not None else app_dir_categories()
    platform = platform or detect_platform()
    results = collect_results(categories)

    for line in format_report(platform, results):
        out(line)

    return 0 if any(c.apps for c in results) else 1
