# websearch/modules/application_control.py
import enum
import os
import subprocess
import sys
from dataclasses import dataclass

from websearch.errors import (
    LaunchError,
    PathConversionError,
    UnsupportedPlatformError,
)


class Platform(enum.Enum):
    DARWIN = "darwin"
    CYGWIN = "cygwin"
    LINUX = "linux"
    WINDOWS = "windows"


# OS identity prefixes ($OSTYPE style) and the platform each one selects.
OS_TYPE_PREFIXES = (
    ("darwin", Platform.DARWIN),
    ("cygwin", Platform.CYGWIN),
    ("linux", Platform.LINUX),
    ("msys", Platform.WINDOWS),
    ("win32", Platform.WINDOWS),
)

# "Open with the default application" command for each platform.
# Values are argv prefixes; the target is appended as the last argument.
OPEN_COMMANDS = {
    Platform.DARWIN: ["open"],
    Platform.CYGWIN: ["cygstart"],
    Platform.LINUX: ["xdg-open"],
    Platform.WINDOWS: ["start", ""],  # shell builtin
}
WSL_OPEN_COMMAND = ["cmd.exe", "/c", "start", ""]

WSL_KERNEL_MARKER = "icrosoft"  # Microsoft / microsoft

# cmd.exe metacharacters; WSL interop passes unquoted arguments straight through.
CMD_METACHARACTERS = "^&|<>"


@dataclass(frozen=True)
class OpenTarget:
    target: str

    @property
    def is_web_url(self) -> bool:
        return self.target.startswith(("http://", "https://"))

    @property
    def is_existing_path(self) -> bool:
        return os.path.exists(self.target)


def detect_platform(os_type: str) -> Platform:
    """Maps an OS identity string such as 'linux-gnu' or 'darwin23' to a Platform."""
    for prefix, platform_tag in OS_TYPE_PREFIXES:
        if os_type.startswith(prefix):
            return platform_tag
    raise UnsupportedPlatformError(os_type)


def is_wsl(kernel_release: str) -> bool:
    return WSL_KERNEL_MARKER in (kernel_release or "")


def resolve_open_command(platform_tag: Platform, wsl: bool = False) -> list:
    """
    Returns the argv prefix that opens a URL or file on `platform_tag`.

    WSL is not a platform of its own: a Linux kernel running on a Windows host
    hands the target over to the Windows shell instead of xdg-open.
    """
    if platform_tag is Platform.LINUX and wsl:
        return list(WSL_OPEN_COMMAND)
    return list(OPEN_COMMANDS[platform_tag])


def cmd_escape(arg: str) -> str:
    """Caret-escapes cmd.exe metacharacters so '&' in a URL is not a command separator."""
    return "".join("^" + char if char in CMD_METACHARACTERS else char for char in arg)


def to_windows_path(path: str) -> str:
    """Converts a WSL path to its Windows form using `wslpath -w`."""
    absolute = os.path.abspath(path)
    try:
        result = subprocess.run(
            ["wslpath", "-w", absolute], capture_output=True, text=True, check=True
        )
    except FileNotFoundError:
        raise PathConversionError(absolute, "wslpath not found.") from None
    except subprocess.CalledProcessError as e:
        raise PathConversionError(absolute, (e.stderr or "").strip()) from None
    return result.stdout.strip()


class DetachedLauncher:
    """
    Starts a program and forgets about it.

    Output is discarded and the child is never waited on. On POSIX it gets its
    own process group so it outlives the terminal that started it. Only a
    failure to spawn the program is reported.
    """

    def launch(self, argv: list, shell: bool = False):
        popen_kwargs = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if hasattr(os, "setpgrp"):
            popen_kwargs["preexec_fn"] = os.setpgrp
        command = argv
        if shell:
            command = " ".join([argv[0]] + [f'"{arg}"' for arg in argv[1:]])
        try:
            subprocess.Popen(command, shell=shell, **popen_kwargs)
        except OSError as e:
            raise LaunchError(
                f"Command or application '{argv[0]}' could not be started: {e}"
            ) from None


class Opener:
    def __init__(self, os_type: str, kernel_release: str = "", browser: str = None,
                 launcher: DetachedLauncher = None, verbose: bool = False):
        self.os_type = os_type
        self.kernel_release = kernel_release
        self.browser = browser
        self.launcher = launcher or DetachedLauncher()
        self.verbose = verbose

    def open(self, target: str):
        """
        Opens a URL or file with the default application, detached.

        If a browser override is configured and the target is an http(s) URL,
        the browser is run directly and platform detection is skipped.

        Raises:
            UnsupportedPlatformError: the OS identity is not recognised.
            PathConversionError: a WSL file path could not be translated.
            LaunchError: the opener program could not be started.
        """
        open_target = OpenTarget(target)

        if self.browser and open_target.is_web_url:
            self._launch([self.browser, open_target.target])
            return

        platform_tag = detect_platform(self.os_type)
        wsl = platform_tag is Platform.LINUX and is_wsl(self.kernel_release)

        path = open_target.target
        if wsl and open_target.is_existing_path:
            path = to_windows_path(path)

        if wsl:
            path = cmd_escape(path)

        command = resolve_open_command(platform_tag, wsl)
        # 'start' is a cmd.exe builtin and needs a shell.
        self._launch(command + [path], shell=platform_tag is Platform.WINDOWS)

    def _launch(self, argv: list, shell: bool = False):
        if self.verbose:
            print(f"Attempting to run: {argv} with shell={shell}", file=sys.stderr)
        self.launcher.launch(argv, shell=shell)

