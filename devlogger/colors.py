"""ANSI styling — semantic style names and deterministic per-label colors."""

import hashlib
import re

# (open, close) ANSI sequences per semantic style
STYLES = {
    "bold": ("\033[1m", "\033[22m"),
    "underline": ("\033[4m", "\033[24m"),
    "black": ("\033[30m", "\033[39m"),
    "red": ("\033[31m", "\033[39m"),
    "green": ("\033[32m", "\033[39m"),
    "yellow": ("\033[33m", "\033[39m"),
    "blue": ("\033[34m", "\033[39m"),
    "magenta": ("\033[35m", "\033[39m"),
    "cyan": ("\033[36m", "\033[39m"),
    "white": ("\033[37m", "\033[39m"),
    "gray": ("\033[90m", "\033[39m"),
    "bg_red": ("\033[41m", "\033[49m"),
    "bg_green": ("\033[42m", "\033[49m"),
    "bg_yellow": ("\033[43m", "\033[49m"),
    "bg_cyan": ("\033[46m", "\033[49m"),
}

GROUP_PALETTE = ("cyan", "magenta", "yellow", "green", "red", "blue")

ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")


class Styler:
    """Applies named styles to text, or passes text through when disabled.

    Styles are listed outermost first: ``styler("x", "bg_red", "white")``
    wraps a white foreground inside a red background.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def __call__(self, text, *styles: str) -> str:
        text = str(text)
        if not self.enabled:
            return text
        for name in reversed(styles):
            opening, closing = STYLES[name]
            text = f"{opening}{text}{closing}"
        return text


def strip_ansi(text: str) -> str:
    """Remove ANSI styling sequences, leaving the visible text."""
    return ANSI_PATTERN.sub("", text)


def deterministic_index(seed: str, pool_size: int) -> int:
    """Stable index in [0, pool_size) derived from the md5 digest of *seed*."""
    digest = hashlib.md5(seed.encode("utf-8", "surrogatepass")).digest()
    return digest[0] % pool_size


def color_for(label: str) -> str:
    """Palette color assigned to a group label, stable across runs."""
    return GROUP_PALETTE[deterministic_index(label, len(GROUP_PALETTE))]
