#!/usr/bin/env python3
"""
Demo script for the Morse codec

Encodes and decodes sample messages in several scripts, then renders one of
them to a WAV file.
"""

import sys

from morse_audio import render_morse, save_wav
from morse_characters import Script
from morse_codec import MorseCode
from morse_options import Options
from morse_playback import time_unit_from_wpm, total_duration_ms


def demo_message(text, options=None, description=""):
    """Demonstrate a round trip through the codec."""
    print("\n" + "=" * 70)
    print(f"  {description}")
    print("=" * 70)

    codec = MorseCode(options)
    morse = codec.encode(text)
    decoded = codec.decode(morse)

    print(f"   Text:    {text}")
    print(f"   Morse:   {morse}")
    print(f"   Decoded: {decoded}")

    duration = total_duration_ms(morse, codec.options, time_unit_from_wpm(20))
    print(f"   Playing time at 20 WPM: {duration / 1000:.2f}s")


def main():
    """Run demo."""
    print("\n" + "*" * 70)
    print("*" + " " * 68 + "*")
    print("*" + "  Morse Codec - Demo".center(68) + "*")
    print("*" + " " * 68 + "*")
    print("*" * 70)

    demos = [
        ("CQ CQ DE N4LSJ", None, 'Sample 1: Amateur Radio Call'),
        ("SOS", Options(dot='•', dash='–', space='\\'), 'Sample 2: Custom Symbols'),
        ("совет мост", Options(script_order=(Script.CYRILLIC,)), 'Sample 3: Cyrillic Only'),
        ("ΑΒΓ", None, 'Sample 4: Greek With Latin Priority'),
    ]

    for text, options, description in demos:
        demo_message(text, options, description)

    output = 'demo.wav'
    sample_rate = 48000
    morse = MorseCode().encode("CQ CQ DE N4LSJ")
    save_wav(output, render_morse(morse, time_unit=time_unit_from_wpm(20), sample_rate=sample_rate),
             sample_rate)

    print("\n" + "=" * 70)
    print("  Demo Complete!")
    print("=" * 70)
    print(f"\nRendered audio written to {output}")
    print("\nTo encode your own text:")
    print("  python morse_codec.py encode 'your text here'")
    print("  python morse_audio.py 'your text here' -o message.wav")
    print()


if __name__ == '__main__':
    sys.exit(main())
