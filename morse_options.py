#!/usr/bin/env python3
"""
Morse Codec Options

Symbols, script priority order and invalid-character policy used by the codec
and the playback scheduler.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Tuple

from morse_characters import Script


DEFAULT_SCRIPT_ORDER: Tuple[Script, ...] = tuple(Script)


class KeepInvalidCharacter:
    """Invalid-character policy that echoes the character unchanged."""

    def resolve(self, character: str) -> str:
        return character

    def __repr__(self):
        return 'KeepInvalidCharacter()'

    def __eq__(self, other):
        return isinstance(other, KeepInvalidCharacter)

    def __hash__(self):
        return hash(KeepInvalidCharacter)


class ReplaceInvalidCharacter:
    """Invalid-character policy that substitutes a fixed marker."""

    def __init__(self, marker: str = '?'):
        if not isinstance(marker, str) or len(marker) != 1:
            raise ValueError(f"marker must be a single character, got {marker!r}")
        self.marker = marker

    def resolve(self, character: str) -> str:
        return self.marker

    def __repr__(self):
        return f'ReplaceInvalidCharacter({self.marker!r})'

    def __eq__(self, other):
        return isinstance(other, ReplaceInvalidCharacter) and other.marker == self.marker

    def __hash__(self):
        return hash((ReplaceInvalidCharacter, self.marker))


@dataclass(frozen=True)
class Options:
    """
    Encoding/decoding configuration.

    Options are immutable; build a new codec to use different options.

    Attributes:
        dot: Symbol for a short mark
        dash: Symbol for a long mark
        space: Symbol for a word gap
        separator: Symbol placed between encoded characters
        script_order: Scripts to use, highest lookup priority first
        invalid_character_policy: Object with ``resolve(character)`` used for
            characters missing from every active script
    """
    dot: str = '.'
    dash: str = '-'
    space: str = '/'
    separator: str = ' '
    script_order: Tuple[Script, ...] = DEFAULT_SCRIPT_ORDER
    invalid_character_policy: object = field(default_factory=KeepInvalidCharacter)

    def __post_init__(self):
        object.__setattr__(self, 'script_order', tuple(self.script_order))

        symbols = {
            'dot': self.dot,
            'dash': self.dash,
            'space': self.space,
            'separator': self.separator,
        }
        for name, symbol in symbols.items():
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise ValueError(f"{name} must be a single character, got {symbol!r}")
        if len(set(symbols.values())) != len(symbols):
            raise ValueError(f"dot, dash, space and separator must be distinct: {symbols}")

        for script in self.script_order:
            if not isinstance(script, Script):
                raise ValueError(f"Unknown script in script_order: {script!r}")

        if not callable(getattr(self.invalid_character_policy, 'resolve', None)):
            raise ValueError("invalid_character_policy must provide resolve(character)")

    def replace(self, **changes) -> 'Options':
        """Return a copy of these options with some fields changed."""
        return dataclasses.replace(self, **changes)


def parse_script_order(value: str) -> Tuple[Script, ...]:
    """
    Parse a comma-separated list of script names.

    Args:
        value: Names such as "latin,numbers,cyrillic" (case-insensitive,
            '-' accepted for '_')

    Returns:
        Tuple of scripts in the given order
    """
    scripts = []
    for name in value.split(','):
        name = name.strip().lower().replace('-', '_')
        if not name:
            continue
        try:
            scripts.append(Script(name))
        except ValueError:
            known = ', '.join(s.value for s in Script)
            raise ValueError(f"Unknown script '{name}' (known: {known})") from None
    return tuple(scripts)

