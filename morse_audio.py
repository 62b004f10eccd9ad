#!/usr/bin/env python3
"""
Morse Audio Output

Audio backends for the playback scheduler: an offline renderer that builds a
sample buffer (and WAV file) from the scheduler's events, and a live backend
that keys a sine tone on the default sound device.
"""

import sys
import threading
import wave
from typing import Iterable, List, Optional

import numpy as np
from scipy.signal import windows

from morse_codec import MorseCode, add_options_arguments, options_from_args
from morse_options import Options
from morse_playback import (
    DEFAULT_FREQUENCY,
    DEFAULT_WPM,
    EventKind,
    PlaybackEvent,
    PlaybackScheduler,
    Player,
    plan_events,
    time_unit_from_wpm,
)


def generate_tone(
    frequency: float,
    duration_ms: float,
    sample_rate: int,
    amplitude: float = 0.3,
    ramp_ms: float = 2.0
) -> np.ndarray:
    """
    Generate a keyed sine tone.

    Args:
        frequency: Tone frequency in Hz
        duration_ms: Duration in milliseconds
        sample_rate: Sample rate in Hz
        amplitude: Amplitude (0-1)
        ramp_ms: Rise/fall time in milliseconds to reduce key clicks

    Returns:
        Audio samples
    """
    num_samples = int(round(duration_ms * sample_rate / 1000.0))
    t = np.arange(num_samples) / sample_rate
    tone = amplitude * np.sin(2 * np.pi * frequency * t)

    # Rise/fall from the two halves of a Hann window
    ramp_samples = int(ramp_ms * sample_rate / 1000.0)
    if ramp_samples > 0 and num_samples > 2 * ramp_samples:
        ramp = windows.hann(2 * ramp_samples)
        envelope = np.ones(num_samples)
        envelope[:ramp_samples] = ramp[:ramp_samples]
        envelope[-ramp_samples:] = ramp[ramp_samples:]
        tone = tone * envelope

    return tone


def generate_silence(duration_ms: float, sample_rate: int) -> np.ndarray:
    return np.zeros(int(round(duration_ms * sample_rate / 1000.0)))


def render_events(
    events: Iterable[PlaybackEvent],
    frequency: float = DEFAULT_FREQUENCY,
    time_unit: int = 60,
    sample_rate: int = 48000,
    amplitude: float = 0.3
) -> np.ndarray:
    """
    Render playback events to audio samples.

    Args:
        events: Tone/silence events
        frequency: Tone frequency in Hz
        time_unit: Base duration in milliseconds
        sample_rate: Sample rate in Hz
        amplitude: Tone amplitude (0-1)

    Returns:
        Audio samples
    """
    segments = []
    for event in events:
        duration_ms = event.duration_ms(time_unit)
        if event.kind is EventKind.TONE:
            segments.append(generate_tone(frequency, duration_ms, sample_rate, amplitude))
        else:
            segments.append(generate_silence(duration_ms, sample_rate))

    if segments:
        return np.concatenate(segments)
    return np.array([])


def render_morse(
    morse: str,
    options: Optional[Options] = None,
    frequency: float = DEFAULT_FREQUENCY,
    time_unit: int = 60,
    sample_rate: int = 48000,
    amplitude: float = 0.3
) -> np.ndarray:
    """Render an encoded string to audio samples without real-time waiting."""
    return render_events(
        plan_events(morse, options),
        frequency=frequency,
        time_unit=time_unit,
        sample_rate=sample_rate,
        amplitude=amplitude
    )


def save_wav(filename: str, audio: np.ndarray, sample_rate: int):
    """Save audio to a 16-bit mono WAV file."""
    audio_int = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)

    with wave.open(filename, 'wb') as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(audio_int.tobytes())


class ToneRenderer:
    """
    Offline backend that records a scheduler run as audio samples.

    Pass the renderer as both the scheduler's backend and its on_event hook;
    each event is appended to the buffer as it is emitted, so a cancelled run
    yields only the part played before cancellation.
    """

    def __init__(
        self,
        sample_rate: int = 48000,
        amplitude: float = 0.3,
        ramp_ms: float = 2.0
    ):
        self.sample_rate = sample_rate
        self.amplitude = amplitude
        self.ramp_ms = ramp_ms

        self.frequency = DEFAULT_FREQUENCY
        self.tone_on = False
        self.closed = False
        self.segments: List[np.ndarray] = []

    def start_tone(self, frequency: float):
        self.frequency = frequency
        self.tone_on = True

    def stop_tone(self):
        self.tone_on = False

    def close(self):
        self.closed = True

    def on_event(self, event: PlaybackEvent, duration_ms: int):
        if event.kind is EventKind.TONE:
            self.segments.append(generate_tone(
                self.frequency, duration_ms, self.sample_rate,
                self.amplitude, self.ramp_ms
            ))
        else:
            self.segments.append(generate_silence(duration_ms, self.sample_rate))

    @property
    def audio(self) -> np.ndarray:
        if self.segments:
            return np.concatenate(self.segments)
        return np.array([])


class SounddeviceBackend:
    """
    Live backend keying a sine tone on an audio output device.

    Raises RuntimeError when the sounddevice package or an output device is
    not available.
    """

    def __init__(
        self,
        sample_rate: int = 48000,
        amplitude: float = 0.3,
        device=None
    ):
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise RuntimeError(f"sounddevice not available: {e}") from e

        self.sample_rate = sample_rate
        self.amplitude = amplitude

        self._lock = threading.Lock()
        self._frequency: Optional[float] = None
        self._phase = 0

        try:
            self._stream = sd.OutputStream(
                samplerate=sample_rate,
                channels=1,
                dtype='float32',
                device=device,
                callback=self._callback
            )
            self._stream.start()
        except Exception as e:
            raise RuntimeError(f"Cannot open audio output: {e}") from e

    def _callback(self, outdata, frames, time, status):
        with self._lock:
            frequency = self._frequency
            phase = self._phase
            self._phase += frames

        if frequency is None:
            outdata.fill(0)
            return

        t = (phase + np.arange(frames)) / self.sample_rate
        outdata[:, 0] = self.amplitude * np.sin(2 * np.pi * frequency * t)

    def start_tone(self, frequency: float):
        with self._lock:
            self._frequency = frequency
            self._phase = 0

    def stop_tone(self):
        with self._lock:
            self._frequency = None

    def close(self):
        self._stream.stop()
        self._stream.close()


def main():
    """Command line interface for rendering or playing Morse audio."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Render text as Morse code audio'
    )
    parser.add_argument('text', nargs='+', help='Text to send')
    parser.add_argument(
        '-o', '--output',
        help='Output WAV file (default: play on the sound device)'
    )
    parser.add_argument(
        '--wpm',
        type=float,
        default=DEFAULT_WPM,
        help=f'Speed in words per minute (default: {DEFAULT_WPM})'
    )
    parser.add_argument(
        '--frequency',
        type=float,
        default=DEFAULT_FREQUENCY,
        help=f'Tone frequency in Hz (default: {DEFAULT_FREQUENCY:.0f})'
    )
    parser.add_argument(
        '--sample-rate',
        type=int,
        default=48000,
        help='Sample rate in Hz (default: 48000)'
    )
    add_options_arguments(parser)
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug output'
    )

    args = parser.parse_args()

    try:
        options = options_from_args(args)
        time_unit = time_unit_from_wpm(args.wpm)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    morse = MorseCode(options, debug=args.debug).encode(' '.join(args.text))
    print(morse)

    if args.output:
        renderer = ToneRenderer(sample_rate=args.sample_rate)
        scheduler = PlaybackScheduler(
            morse,
            options=options,
            backend=renderer,
            frequency=args.frequency,
            time_unit=time_unit,
            on_event=renderer.on_event,
            delay=lambda seconds: None,
            debug=args.debug
        )
        scheduler.run()
        save_wav(args.output, renderer.audio, args.sample_rate)
        if args.debug:
            print(f"Wrote {len(renderer.audio) / args.sample_rate:.2f}s to {args.output}",
                  file=sys.stderr)
        return 0

    player = Player(
        lambda: SounddeviceBackend(sample_rate=args.sample_rate),
        debug=args.debug
    )
    result = player.play_morse(morse, options, frequency=args.frequency, time_unit=time_unit)
    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    try:
        result.scheduler.join()
    except KeyboardInterrupt:
        pass
    finally:
        player.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
