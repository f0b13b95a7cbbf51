"""
Wallpaper Handler

Apply a fetched image as the desktop wallpaper by running the user's 'set_command' from the config,
for example:

    "set_command": "swww img {path}"
    "set_command": "gsettings set org.gnome.desktop.background picture-uri file://{path}"

The template is split on whitespace and every occurrence of {path} in the resulting tokens is
replaced with the absolute image path. Quoting is not supported, so an argument cannot contain
spaces itself; the image path may, since it is substituted after splitting.
"""

import subprocess
from pathlib import Path
from typing import Optional, Union


class MissingApplyCommand(Exception):
    """
    Raised when applying a wallpaper is requested but no 'set_command' is configured.
    """

    pass


class ApplyCommandFailed(Exception):
    """
    Raised when the wallpaper command could not be launched or exited with an error.
    """

    def __init__(self, msg: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(msg)


def build_command(template: str, img_path: Union[str, Path]) -> list[str]:
    path = str(Path(img_path).expanduser().resolve())
    return [token.replace("{path}", path) for token in template.split()]


def apply_wallpaper(
    template: Optional[str], img_path: Union[str, Path]
) -> subprocess.CompletedProcess:
    """
    Run the configured wallpaper command for img_path. Raise MissingApplyCommand without a template
    and ApplyCommandFailed when the command can't run or exits non-zero.
    """

    if template is None or not template.strip():
        raise MissingApplyCommand("No 'set_command' entry present in config")

    command = build_command(template, img_path)

    try:
        process = subprocess.run(
            command,
            text=True,
            stdin=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            stdout=subprocess.PIPE,
        )

    except OSError as error:
        raise ApplyCommandFailed(f"Failed to assign wallpaper: {error}")

    if process.returncode != 0:
        stderr = (process.stderr or "").strip()
        raise ApplyCommandFailed(
            f"Failed to assign wallpaper: {stderr or f'{command[0]} exited with status {process.returncode}'}",
            returncode=process.returncode,
            stderr=stderr,
        )

    return process
