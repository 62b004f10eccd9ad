#!/usr/bin/env python3
"""
Morse Code Codec

This module encodes text into Morse code strings and decodes Morse code
strings back into text. Both directions are total: characters missing from
the active tables go through the invalid-character policy, and unknown
Morse tokens are echoed unchanged.
"""

import json
import sys
from typing import Dict, Iterable, Optional

from morse_characters import Script, resolve_characters
from morse_options import Options, ReplaceInvalidCharacter, parse_script_order


class MorseCode:
    """
    Encoder/decoder bound to one set of options.

    Lookup priority follows ``options.script_order``. Several scripts reuse
    the same patterns (Latin 'A', Cyrillic 'А', Greek 'Α' and Hebrew 'א' are
    all dot-dash), so decoding picks the character of the first script that
    claims a pattern; later claims for the same pattern are ignored.

    Scripts missing from ``script_order`` are not consulted at all, and the
    invalid-character policy's output is emitted as is, without mark
    substitution. With only Latin active, "A0" therefore encodes as ".- 0":
    the digit is passed through verbatim rather than played as a pattern.
    """

    def __init__(self, options: Optional[Options] = None, debug: bool = False):
        """
        Initialize the codec.

        Args:
            options: Codec options (defaults: '.', '-', '/', ' ', all scripts)
            debug: Enable debug output
        """
        self.options = options if options is not None else Options()
        self.debug = debug

        self.characters = resolve_characters(self.options)
        self._symbols = self._translate_patterns(self.characters)
        self._reverse_index: Optional[Dict[str, str]] = None

    def encode(self, text: str) -> str:
        """
        Encode text into Morse code.

        Args:
            text: Text to encode; case is folded to upper case

        Returns:
            Encoded string with characters joined by the separator
        """
        separator = self.options.separator
        policy = self.options.invalid_character_policy

        pieces = []
        for character in self._normalize(text).upper():
            for table in self._symbols.values():
                if character in table:
                    pieces.append(table[character])
                    break
            else:
                replacement = policy.resolve(character)
                if self.debug:
                    print(f"Unmapped character: {character!r} -> {replacement!r}",
                          file=sys.stderr)
                pieces.append(replacement)

        return separator.join(pieces)

    def decode(self, morse: str) -> str:
        """
        Decode Morse code into text.

        Args:
            morse: Encoded string; whitespace counts as a separator

        Returns:
            Decoded text. Tokens with no matching pattern are copied verbatim.
        """
        index = self.reverse_index()
        normalized = self._normalize(morse)
        if not normalized:
            return ''

        decoded = []
        for token in normalized.split(self.options.separator):
            if token in index:
                decoded.append(index[token])
            else:
                if self.debug and token:
                    print(f"Unknown token: {token!r}", file=sys.stderr)
                decoded.append(token)

        return ''.join(decoded)

    def reverse_index(self) -> Dict[str, str]:
        """
        Get the symbol pattern -> character index used for decoding.

        Built on first use. The first script (in priority order) to claim a
        pattern keeps it.

        Returns:
            Dictionary of symbol-substituted pattern to character
        """
        if self._reverse_index is None:
            index: Dict[str, str] = {}
            for table in self._symbols.values():
                for character, pattern in table.items():
                    index.setdefault(pattern, character)
            self._reverse_index = index
        return self._reverse_index

    def _normalize(self, text: str) -> str:
        separator = self.options.separator
        replaced = ''.join(separator if c.isspace() else c for c in text)
        return replaced.strip(separator)

    def _translate_patterns(
        self,
        characters: Dict[Script, Dict[str, str]]
    ) -> Dict[Script, Dict[str, str]]:
        """
        Swap '0'/'1' marks for the dot/dash symbols in every pattern.

        The word-gap entry of the Latin table already holds the space symbol
        and is left alone.

        Args:
            characters: Merged table with 0/1 patterns

        Returns:
            Table of the same shape with display symbols
        """
        translation = str.maketrans({'0': self.options.dot, '1': self.options.dash})
        separator = self.options.separator

        symbols = {}
        for script, table in characters.items():
            symbols[script] = {
                character: (pattern if script is Script.LATIN and character == separator
                            else pattern.translate(translation))
                for character, pattern in table.items()
            }
        return symbols


_default_codec: Optional[MorseCode] = None


def _codec_for(options: Optional[Options]) -> MorseCode:
    global _default_codec
    if options is not None:
        return MorseCode(options)
    if _default_codec is None:
        _default_codec = MorseCode()
    return _default_codec


def encode(text: str, options: Optional[Options] = None) -> str:
    """Encode text with the given options (defaults if None)."""
    return _codec_for(options).encode(text)


def decode(morse: str, options: Optional[Options] = None) -> str:
    """Decode Morse code with the given options (defaults if None)."""
    return _codec_for(options).decode(morse)


def options_from_args(args) -> Options:
    """
    Build codec options from parsed command line arguments.

    Args:
        args: Namespace with dot, dash, space, separator, scripts and invalid

    Returns:
        Options instance
    """
    changes = {
        'dot': args.dot,
        'dash': args.dash,
        'space': args.space,
        'separator': args.separator,
    }
    if args.scripts:
        changes['script_order'] = parse_script_order(args.scripts)
    if args.invalid is not None:
        changes['invalid_character_policy'] = ReplaceInvalidCharacter(args.invalid)
    return Options(**changes)


def add_options_arguments(parser):
    """Add the codec option flags to an argument parser."""
    parser.add_argument('--dot', default='.', help="Dot symbol (default: '.')")
    parser.add_argument('--dash', default='-', help="Dash symbol (default: '-')")
    parser.add_argument('--space', default='/', help="Word gap symbol (default: '/')")
    parser.add_argument(
        '--separator',
        default=' ',
        help="Character separator symbol (default: ' ')"
    )
    parser.add_argument(
        '--scripts',
        help='Comma-separated script priority order (default: all scripts)'
    )
    parser.add_argument(
        '--invalid',
        help='Replace unmapped characters with this marker (default: keep them)'
    )


def _read_inputs(values: Iterable[str]) -> Iterable[str]:
    values = list(values)
    if values:
        yield ' '.join(values)
        return
    for line in sys.stdin:
        line = line.rstrip('\n')
        if line.strip():
            yield line


def main():
    """Command line interface for the codec."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Encode text to Morse code or decode Morse code to text'
    )
    parser.add_argument(
        'command',
        choices=['encode', 'decode'],
        help='Direction of the conversion'
    )
    parser.add_argument(
        'text',
        nargs='*',
        help='Input text (default: read lines from stdin)'
    )
    add_options_arguments(parser)
    parser.add_argument(
        '--json',
        action='store_true',
        help='Write JSON lines with input and output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug output'
    )

    args = parser.parse_args()

    try:
        options = options_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    codec = MorseCode(options, debug=args.debug)
    convert = codec.encode if args.command == 'encode' else codec.decode

    try:
        for value in _read_inputs(args.text):
            result = convert(value)
            if args.json:
                print(json.dumps({'input': value, 'output': result}, ensure_ascii=False))
            else:
                print(result)
    except BrokenPipeError:
        pass

    return 0


if __name__ == '__main__':
    sys.exit(main())
