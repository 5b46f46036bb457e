from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


# BROWSER_PROFILE_DIR value that selects the installed Chrome's own user data directory
SYSTEM_PROFILE = "system"

_LINUX_BINARIES = ("google-chrome", "google-chrome-stable", "chromium", "chromium-browser")


def _chrome_candidates(platform: str, home: Path, env: dict) -> List[Path]:
    if platform.startswith("win"):
        local = Path(env.get("LOCALAPPDATA") or home / "AppData" / "Local")
        return [
            Path(env.get("PROGRAMFILES") or r"C:\Program Files") / "Google" / "Chrome" / "Application" / "chrome.exe",
            Path(env.get("PROGRAMFILES(X86)") or r"C:\Program Files (x86)") / "Google" / "Chrome" / "Application" / "chrome.exe",
            local / "Google" / "Chrome" / "Application" / "chrome.exe",
            local / "Google" / "Chrome Beta" / "Application" / "chrome.exe",
        ]
    if platform == "darwin":
        bundle = Path("Google Chrome.app") / "Contents" / "MacOS" / "Google Chrome"
        return [Path("/Applications") / bundle, home / "Applications" / bundle]
    found = [shutil.which(name) for name in _LINUX_BINARIES]
    return [Path(p) for p in found if p] + [Path("/opt/google/chrome/chrome")]


def find_chrome_executable(
    platform: Optional[str] = None, home: Optional[Path] = None, env: Optional[dict] = None
) -> Optional[Path]:
    """First installed Chrome binary among the usual install locations, or None."""
    platform = platform or sys.platform
    home = home or Path.home()
    env = os.environ if env is None else env
    for candidate in _chrome_candidates(platform, home, env):
        if candidate.is_file():
            return candidate
    return None


def chrome_user_data_dir(platform: Optional[str] = None, home: Optional[Path] = None, env: Optional[dict] = None) -> Path:
    """Default Chrome "User Data" directory for the platform (may not exist)."""
    platform = platform or sys.platform
    home = home or Path.home()
    env = os.environ if env is None else env
    if platform.startswith("win"):
        local = Path(env.get("LOCALAPPDATA") or home / "AppData" / "Local")
        return local / "Google" / "Chrome" / "User Data"
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Google" / "Chrome"
    return home / ".config" / "google-chrome"


@dataclass
class ChromeReport:
    executable: Optional[Path]
    user_data_dir: Path

    @property
    def user_data_exists(self) -> bool:
        return self.user_data_dir.is_dir()

    @property
    def has_local_state(self) -> bool:
        # Present once Chrome has created at least one profile
        return (self.user_data_dir / "Local State").is_file()

    def lines(self) -> List[str]:
        return [
            f"Chrome executable: {self.executable or 'NOT FOUND'}",
            f"User data directory: {self.user_data_dir}",
            f"User data directory exists: {self.user_data_exists}",
            f"Local State present: {self.has_local_state}",
        ]


def inspect_chrome(platform: Optional[str] = None, home: Optional[Path] = None, env: Optional[dict] = None) -> ChromeReport:
    return ChromeReport(
        executable=find_chrome_executable(platform, home, env),
        user_data_dir=chrome_user_data_dir(platform, home, env),
    )
