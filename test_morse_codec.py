#!/usr/bin/env python3
"""
Test script for the Morse codec

Checks encoding and decoding across scripts, custom symbols, script priority
and the handling of unmapped characters and unknown tokens.
"""

import sys

from morse_characters import Script, base_characters, resolve_characters
from morse_codec import MorseCode, decode, encode
from morse_options import (
    DEFAULT_SCRIPT_ORDER,
    Options,
    ReplaceInvalidCharacter,
    parse_script_order,
)


PANGRAM = "the quick brown fox jumps over the lazy dog"
PANGRAM_MORSE = (
    "- .... . / --.- ..- .. -.-. -.- / -... .-. --- .-- -. / ..-. --- -..- / "
    ".--- ..- -- .--. ... / --- ...- . .-. / - .... . / .-.. .- --.. -.-- / -.. --- --."
)


def test_sos():
    """Literal SOS in both directions."""
    codec = MorseCode()
    assert codec.encode("SOS") == "... --- ..."
    assert codec.decode("... --- ...") == "SOS"
    assert codec.encode("sos") == "... --- ..."


def test_english_alphabet():
    codec = MorseCode()
    assert codec.encode(PANGRAM) == PANGRAM_MORSE
    assert codec.decode(PANGRAM_MORSE) == PANGRAM.upper()


def test_custom_symbols():
    """Custom dot/dash/space symbols only change the marks."""
    options = Options(dot='•', dash='–', space='\\')
    codec = MorseCode(options)

    expected = PANGRAM_MORSE.replace('.', '•').replace('-', '–').replace('/', '\\')
    assert codec.encode(PANGRAM) == expected
    assert codec.decode(expected) == PANGRAM.upper()

    default = MorseCode().encode("HELLO WORLD")
    custom = MorseCode(Options(dot='*', dash='=')).encode("HELLO WORLD")
    assert custom.replace('*', '.').replace('=', '-') == default
    assert [i for i, c in enumerate(custom) if c == ' '] == \
        [i for i, c in enumerate(default) if c == ' ']


def test_swapped_marks():
    """Dot and dash may use the pattern digits themselves."""
    codec = MorseCode(Options(dot='1', dash='0'))
    assert codec.encode("A") == "10"
    assert codec.encode("N") == "01"
    assert codec.decode("10 01") == "AN"


def test_numbers():
    codec = MorseCode()
    digits_morse = "----- .---- ..--- ...-- ....- ..... -.... --... ---.. ----."
    assert codec.encode("0123456789") == digits_morse
    assert codec.decode(digits_morse) == "0123456789"


def test_punctuation():
    codec = MorseCode()
    assert codec.encode(".,?'!/(") == ".-.-.- --..-- ..--.. .----. -.-.-- -..-. -.--."
    assert codec.encode(")&:;=¿¡") == "-.--.- .-... ---... -.-.-. -...- ..-.- --...-"
    assert codec.decode(".-.-.- --..-- ..--.. .----. -.-.-- -..-. -.--.") == ".,?'!/("
    assert codec.decode("-.--.- .-... ---... -.-.-. -...- ..-.- --...-") == ")&:;=¿¡"


def test_latin_extended():
    codec = MorseCode()
    cases = {
        "ÃÁÅÀÂÄ": ".--.- .--.- .--.- .--.- .--.- .-.-",
        "ĄÆÇĆĈČ": ".-.- .-.- -.-.. -.-.. -.-.. --.",
        "ĘÐÈËĘÉ": "..-.. ..--. .-..- ..-.. ..-.. ..-..",
        "ÊĞĜĤİÏ": "-..-. --.-. --.-. ---- .-..- -..--",
        "ÌĴŁŃÑÓ": ".---. .---. .-..- --.-- --.-- ---.",
        "ÒÖÔØŚŞ": "---. ---. ---. ---. ...-... .--..",
        # ß upper-cases to SS
        "ȘŠŜßÞÜ": "---- ---- ...-. ... ... .--.. ..--",
        "ÙŬŽŹŻ": "..-- ..-- --..- --..-. --..-",
    }
    for text, morse in cases.items():
        assert codec.encode(text) == morse, text


def test_empty_and_whitespace():
    codec = MorseCode()
    assert codec.encode("") == ""
    assert codec.decode("") == ""
    assert codec.encode("   \n\t ") == ""
    assert codec.decode("   ") == ""
    assert codec.encode("  SOS \n") == "... --- ..."
    assert codec.encode("A\tB") == ".- / -..."
    assert codec.decode("  .-\n-...  ") == "AB"


def test_no_pattern_digits_in_output():
    for options in (Options(), Options(dot='•', dash='–'), Options(dot='x', dash='y')):
        result = MorseCode(options).encode(PANGRAM + " 0123456789")
        assert result
        assert '0' not in result and '1' not in result


def test_round_trip_default_scripts():
    """Latin, digits and punctuation decode back to the upper-cased text."""
    codec = MorseCode()
    texts = [
        "hello world",
        "CQ CQ DE N4LSJ",
        "meet @ 10:30, ok?",
        "what's up (really)!",
    ]
    for text in texts:
        assert codec.decode(codec.encode(text)) == text.upper(), text


def test_round_trip_single_script():
    cyrillic = MorseCode(Options(script_order=(Script.CYRILLIC,)))
    assert cyrillic.encode("совет мост") == "... --- .-- . - / -- --- ... -"
    assert cyrillic.decode(cyrillic.encode("совет мост")) == "СОВЕТ МОСТ"

    # И shares its pattern with І, which comes first by code point
    assert cyrillic.decode(cyrillic.encode("мир")) == "МІР"

    greek = MorseCode(Options(script_order=(Script.GREEK,)))
    assert greek.decode(greek.encode("ΑΒΓ ΔΕ")) == "ΑΒΓ ΔΕ"

    korean = MorseCode(Options(script_order=(Script.KOREAN,)))
    assert korean.decode(korean.encode("ㄱㅏ")) == "ㄱㅏ"


def test_shared_patterns_decode_by_priority():
    latin_first = MorseCode(Options(script_order=(Script.LATIN, Script.CYRILLIC)))
    cyrillic_first = MorseCode(Options(script_order=(Script.CYRILLIC, Script.LATIN)))

    assert latin_first.decode(".-") == "A"
    assert cyrillic_first.decode(".-") == "А"

    # Default order puts Latin ahead of every other script
    assert MorseCode().decode(MorseCode().encode("ΑΒΓ")) == "ABG"


def test_lowest_code_point_wins_within_script():
    index = MorseCode().reverse_index()
    assert index[".--.-"] == "À"
    assert index["..-.."] == "É"
    assert index["---."] == "Ò"
    assert index["..--"] == "Ù"
    assert index["/"] == " "

    cyrillic = MorseCode(Options(script_order=(Script.CYRILLIC,))).reverse_index()
    assert cyrillic[".."] == "І"
    assert cyrillic["..-.."] == "Є"


def test_round_trip_every_script():
    """Each script on its own decodes back every character that owns its pattern."""
    for script, table in base_characters().items():
        codec = MorseCode(Options(script_order=(script,)))
        index = codec.reverse_index()
        owners = [c for c in table if c.upper() == c and index.get(codec.encode(c)) == c]
        assert owners, script

        half = len(owners) // 2
        text = ''.join(owners[:half]) + ' ' + ''.join(owners[half:])
        assert codec.decode(codec.encode(text)) == text.strip(), script


def test_unmapped_characters():
    codec = MorseCode()
    assert codec.encode("A#B") == ".- # -..."
    assert codec.decode(".- # -...") == "A#B"

    replaced = MorseCode(Options(invalid_character_policy=ReplaceInvalidCharacter('?')))
    assert replaced.encode("A#B") == ".- ? -..."

    # Policy output is never translated into marks
    latin_only = MorseCode(Options(script_order=(Script.LATIN,)))
    assert latin_only.encode("A0") == ".- 0"


def test_unknown_tokens_pass_through():
    codec = MorseCode()
    assert codec.decode(".- ........ -") == "A........T"
    assert codec.decode("xyz .-") == "xyzA"


def test_custom_separator():
    codec = MorseCode(Options(separator='|'))
    assert codec.encode("A B") == ".-|/|-..."
    assert codec.encode("|A|") == ".-"
    # The word gap decodes back to the separator symbol itself
    assert codec.decode(".-|/|-...") == "A|B"
    assert codec.decode("  .- -... ") == "AB"


def test_registry():
    characters = resolve_characters(Options())
    assert list(characters) == list(DEFAULT_SCRIPT_ORDER)
    assert characters[Script.LATIN][' '] == '/'
    assert ' ' not in base_characters()[Script.LATIN]

    greek_only = resolve_characters(Options(script_order=(Script.GREEK,)))
    assert list(greek_only) == [Script.GREEK, Script.LATIN]
    assert greek_only[Script.LATIN] == {' ': '/'}

    reordered = resolve_characters(Options(script_order=(Script.THAI, Script.LATIN, Script.THAI)))
    assert list(reordered) == [Script.THAI, Script.LATIN]


def test_base_tables():
    tables = base_characters()
    assert list(tables) == list(Script)
    assert len(tables[Script.LATIN]) == 26
    assert len(tables[Script.NUMBERS]) == 10
    assert len(tables[Script.PUNCTUATION]) == 20
    for script, table in tables.items():
        for character, pattern in table.items():
            assert pattern and set(pattern) <= {'0', '1'}, (script, character)

    try:
        tables[Script.LATIN]['A'] = '1'
    except TypeError:
        pass
    else:
        raise AssertionError("base tables must be read-only")


def test_options_validation():
    for bad in ({'dot': '..'}, {'dash': '.'}, {'space': ' '}, {'separator': ''},
                {'script_order': ('latin',)}, {'invalid_character_policy': object()}):
        try:
            Options(**bad)
        except ValueError:
            continue
        raise AssertionError(f"Options({bad}) should be rejected")

    for marker in ('', '??', None):
        try:
            ReplaceInvalidCharacter(marker)
        except ValueError:
            continue
        raise AssertionError(f"ReplaceInvalidCharacter({marker!r}) should be rejected")

    options = Options().replace(dot='•')
    assert options.dot == '•' and options.dash == '-'


def test_parse_script_order():
    assert parse_script_order("latin, Cyrillic") == (Script.LATIN, Script.CYRILLIC)
    assert parse_script_order("latin-extended") == (Script.LATIN_EXTENDED,)
    try:
        parse_script_order("klingon")
    except ValueError:
        pass
    else:
        raise AssertionError("unknown script names must be rejected")


def test_module_functions():
    assert encode("SOS") == "... --- ..."
    assert decode("... --- ...") == "SOS"
    assert encode("A", Options(dot='*')) == "*-"


def main():
    """Run all tests."""
    print("\n")
    print("*" * 60)
    print("* Morse Codec Test Suite")
    print("*" * 60)
    print("\n")

    tests = [(name, func) for name, func in sorted(globals().items())
             if name.startswith('test_') and callable(func)]

    failed = 0
    for name, func in tests:
        try:
            func()
            print(f"✓ {name}")
        except AssertionError as e:
            failed += 1
            print(f"✗ {name}: {e}")

    print("=" * 60)
    print(f"Test Summary: {len(tests) - failed} passed, {failed} failed")
    print("=" * 60)

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
