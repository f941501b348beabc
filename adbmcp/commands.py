"""
ADB command builder.

Pure functions that turn an operation and its parameters into the argument
vector handed to the adb binary. Nothing here runs a process or checks that
a serial or package exists; that is up to the caller.

Argument vectors are executed without a local shell, so serials, paths and
package names travel as single arguments. ``render_command`` gives the
canonical one-line form used in logs and error messages.
"""

import shlex

from adbmcp.security import quote_for_device_shell

PROP_MODEL = "ro.product.model"
PROP_ANDROID_VERSION = "ro.build.version.release"

# Fixed capture location for screenshots; concurrent captures on one device share it
SCREENSHOT_DEVICE_PATH = "/sdcard/screenshot.png"

DEVICES = ["devices"]
START_SERVER = ["start-server"]
KILL_SERVER = ["kill-server"]


def render_command(args: list[str]) -> str:
    """Render an argument vector as a single shell-quoted line."""
    return shlex.join(args)


def _device(serial: str, *args: str) -> list[str]:
    return ["-s", serial, *args]


# Device info
def get_properties(serial: str) -> list[str]:
    return _device(serial, "shell", "getprop")


def get_property(serial: str, name: str) -> list[str]:
    return _device(serial, "shell", "getprop", name)


def get_model(serial: str) -> list[str]:
    return get_property(serial, PROP_MODEL)


def get_android_version(serial: str) -> list[str]:
    return get_property(serial, PROP_ANDROID_VERSION)


# Package management
def list_packages(serial: str) -> list[str]:
    return _device(serial, "shell", "pm", "list", "packages")


def install_app(serial: str, apk_path: str) -> list[str]:
    return _device(serial, "install", apk_path)


def uninstall_app(serial: str, package: str) -> list[str]:
    return _device(serial, "uninstall", package)


# App control
def start_app(serial: str, package: str) -> list[str]:
    return _device(serial, "shell", "monkey", "-p", package, "1")


def stop_app(serial: str, package: str) -> list[str]:
    return _device(serial, "shell", "am", "force-stop", package)


# Input
def tap(serial: str, x: int, y: int) -> list[str]:
    return _device(serial, "shell", "input", "tap", str(x), str(y))


def swipe(serial: str, start_x: int, start_y: int, end_x: int, end_y: int) -> list[str]:
    coords = [str(v) for v in (start_x, start_y, end_x, end_y)]
    return _device(serial, "shell", "input", "swipe", *coords)


def encode_input_text(text: str) -> str:
    """Encode text for ``input text``.

    Spaces become ``%s``, which ``input`` turns back into spaces on the
    device, and the result is quoted as one word for the device shell.
    ``input`` has no way to type a literal ``%s``, so such text is refused.

    Args:
        text: Text to type

    Returns:
        A single device-shell word

    Raises:
        ValueError: If the text contains ``%s``
    """
    if "%s" in text:
        raise ValueError("Text containing '%s' cannot be typed with input text")
    return quote_for_device_shell(text.replace(" ", "%s"))


def input_text(serial: str, text: str) -> list[str]:
    return _device(serial, "shell", "input", "text", encode_input_text(text))


def press_key(serial: str, keycode: str | int) -> list[str]:
    return _device(serial, "shell", "input", "keyevent", str(keycode))


# Screenshots and files
def take_screenshot(serial: str, device_path: str = SCREENSHOT_DEVICE_PATH) -> list[str]:
    return _device(serial, "shell", "screencap", "-p", device_path)


def pull_file(serial: str, device_path: str, local_path: str) -> list[str]:
    return _device(serial, "pull", device_path, local_path)


def remove_file(serial: str, device_path: str) -> list[str]:
    return _device(serial, "shell", "rm", device_path)


# Network connections
def connect(host: str) -> list[str]:
    return ["connect", host]


def disconnect(host: str) -> list[str]:
    return ["disconnect", host]
