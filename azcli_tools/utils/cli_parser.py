"""Utilities for parsing Azure CLI output."""

from __future__ import annotations

import re

from azcli_tools.models.login import DeviceCodePrompt

# ---------------------------------------------------------------------------
# Device-code prompt
# ---------------------------------------------------------------------------
#
# "To sign in, use a web browser to open the page https://microsoft.com/devicelogin
#  and enter the code ERAL5J27G to authenticate."

DEVICE_CODE_MARKER = "To sign in"
DEVICE_CODE_TOKEN = "code"

_URL_RE = re.compile(r"open the page\s+(\S+)\s+and enter the code", re.IGNORECASE)
_CODE_RE = re.compile(r"enter the code\s+(\S+)", re.IGNORECASE)


def is_device_code_prompt(line: str) -> bool:
    return DEVICE_CODE_MARKER in line and DEVICE_CODE_TOKEN in line


def parse_device_code_prompt(line: str) -> DeviceCodePrompt | None:
    """Return the URL and code from a device-code prompt line, or None."""
    if not is_device_code_prompt(line):
        return None
    url_m = _URL_RE.search(line)
    code_m = _CODE_RE.search(line)
    if not url_m or not code_m:
        return None
    return DeviceCodePrompt(
        url=url_m.group(1).strip(),
        code=code_m.group(1).strip(),
        line=line.strip(),
    )


# ---------------------------------------------------------------------------
# Secret redaction
# ---------------------------------------------------------------------------

_SECRET_FLAG_RE = re.compile(
    r"(?<!\S)(--(?:password|client-secret|secret)|-p)(\s+|=)('[^']*'|\"[^\"]*\"|\S+)",
)


def redact_command(command: str) -> str:
    """Mask values passed to password-like flags before logging."""
    return _SECRET_FLAG_RE.sub(r"\1\2***", command)
