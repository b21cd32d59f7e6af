from __future__ import annotations
import shutil
from typing import Callable
from . import __version__

BANNER = r"""
 ____  _____ ____  __  __
|  _ \|__  // ___||  \/  |
| | | | / / \___ \| |\/| |
| |_| |/ /_  ___) | |  | |
|____//____||____/|_|  |_|
"""

def print_banner() -> None:
    width = shutil.get_terminal_size((80, 20)).columns
    print()
    for line in BANNER.strip("\n").splitlines():
        print(line.center(width).rstrip())
    print()
    print(f"DZSM v{__version__} - DayZ Server Manager".center(width).rstrip())
    print()

def prompt_yes_no(prompt: str, default: bool = False, *, input_fn: Callable[[str], str] = input) -> bool:
    options = "(Y/n)" if default else "(y/N)"
    while True:
        try:
            answer = input_fn(f"{prompt} {options}: ").strip().lower()
        except EOFError:
            return default
        if answer == "":
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        print("Please enter 'y' or 'n'")

def make_confirm(assume_yes: bool, default: bool = False) -> Callable[[str], bool]:
    if assume_yes:
        return lambda _prompt: True
    return lambda prompt: prompt_yes_no(prompt, default)
