#!/usr/bin/env python3
"""
Morse Playback Scheduler

Turns an encoded Morse string into a timed sequence of tone and silence
events. The scheduler is a small state machine that suspends once per event
through a delay capability and checks a cancellation token every time it
resumes. The audio itself is produced by a backend object:

    backend.start_tone(frequency)
    backend.stop_tone()
    backend.close()

Timing ratios (in time units): dot 1, dash 3, gap after a mark 1,
separator/word gap 3, unknown symbol 7 followed by a 1 unit gap.
"""

import enum
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from morse_options import Options


DOT_UNITS = 1
DASH_UNITS = 3
MARK_GAP_UNITS = 1
CHARACTER_GAP_UNITS = 3
UNKNOWN_UNITS = 7

DEFAULT_FREQUENCY = 700.0
DEFAULT_WPM = 20


class EventKind(enum.Enum):
    TONE = 'tone'
    SILENCE = 'silence'


@dataclass(frozen=True)
class PlaybackEvent:
    """A tone or silence interval measured in time units."""
    kind: EventKind
    units: int

    def duration_ms(self, time_unit: int) -> int:
        return self.units * time_unit


class PlaybackState(enum.Enum):
    ADVANCING = 'advancing'
    EMITTING_TONE = 'emitting_tone'
    EMITTING_SILENCE = 'emitting_silence'
    FINISHED = 'finished'
    CANCELLED = 'cancelled'


TERMINAL_STATES = (PlaybackState.FINISHED, PlaybackState.CANCELLED)


def time_unit_from_wpm(wpm: float) -> int:
    """
    Convert a speed in words per minute to a time unit.

    Uses the PARIS standard word (50 units), so 20 WPM gives 60 ms.

    Args:
        wpm: Words per minute

    Returns:
        Time unit in milliseconds
    """
    if wpm <= 0:
        raise ValueError(f"wpm must be positive, got {wpm}")
    return max(1, int(round(1200 / wpm)))


def plan_events(morse: str, options: Optional[Options] = None) -> Iterator[PlaybackEvent]:
    """
    Translate an encoded string into tone/silence events.

    Args:
        morse: Encoded Morse string
        options: Options giving the dot, dash, space and separator symbols

    Yields:
        Playback events in the order they must be played
    """
    options = options if options is not None else Options()

    for symbol in morse:
        if symbol == options.dot:
            yield PlaybackEvent(EventKind.TONE, DOT_UNITS)
            yield PlaybackEvent(EventKind.SILENCE, MARK_GAP_UNITS)
        elif symbol == options.dash:
            yield PlaybackEvent(EventKind.TONE, DASH_UNITS)
            yield PlaybackEvent(EventKind.SILENCE, MARK_GAP_UNITS)
        elif symbol == options.separator or symbol == options.space:
            yield PlaybackEvent(EventKind.SILENCE, CHARACTER_GAP_UNITS)
        else:
            yield PlaybackEvent(EventKind.SILENCE, UNKNOWN_UNITS)
            yield PlaybackEvent(EventKind.SILENCE, MARK_GAP_UNITS)


def total_duration_ms(morse: str, options: Optional[Options] = None, time_unit: int = 60) -> int:
    """Total playing time of an encoded string in milliseconds."""
    return sum(event.duration_ms(time_unit) for event in plan_events(morse, options))


class CancellationToken:
    """Cancellation flag that can also be waited on."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep for up to `seconds`; returns True if cancelled meanwhile."""
        return self._event.wait(seconds)


class RecordingBackend:
    """Backend that only records the calls it receives."""

    def __init__(self):
        self.calls: List[Tuple] = []
        self.closed = False

    def start_tone(self, frequency: float):
        self.calls.append(('start', frequency))

    def stop_tone(self):
        self.calls.append(('stop',))

    def close(self):
        self.closed = True
        self.calls.append(('close',))


class PlaybackScheduler:
    """
    Plays one encoded string as a cancellable sequence of timed steps.

    Each call to step() performs one transition:

        ADVANCING        -> EMITTING_TONE / EMITTING_SILENCE / FINISHED
        EMITTING_TONE    -> ADVANCING (after the delay, tone stopped)
        EMITTING_SILENCE -> ADVANCING (after the delay)
        any              -> CANCELLED (on cancel(), or at the next step once
                                      a shared token is cancelled)

    The completion callback runs exactly once on reaching FINISHED and never
    after cancellation.
    """

    def __init__(
        self,
        morse: str,
        options: Optional[Options] = None,
        backend=None,
        frequency: float = DEFAULT_FREQUENCY,
        time_unit: int = 60,
        on_complete: Optional[Callable[[], None]] = None,
        on_event: Optional[Callable[[PlaybackEvent, int], None]] = None,
        delay: Optional[Callable[[float], object]] = None,
        token: Optional[CancellationToken] = None,
        debug: bool = False
    ):
        """
        Initialize the scheduler.

        Args:
            morse: Encoded Morse string to play
            options: Options giving the symbols (defaults if None)
            backend: Tone generator (start_tone/stop_tone/close)
            frequency: Tone frequency in Hz
            time_unit: Base duration in milliseconds
            on_complete: Called once when the whole string has been played
            on_event: Called with (event, duration_ms) as each event starts
            delay: Called with a duration in seconds to suspend the run;
                defaults to waiting on the cancellation token
            token: Cancellation token (a new one if None)
            debug: Enable debug output
        """
        if time_unit <= 0:
            raise ValueError(f"time_unit must be positive, got {time_unit}")

        self.morse = morse
        self.options = options if options is not None else Options()
        self.backend = backend if backend is not None else RecordingBackend()
        self.frequency = frequency
        self.time_unit = time_unit
        self.on_complete = on_complete
        self.on_event = on_event
        self.token = token if token is not None else CancellationToken()
        self.delay = delay if delay is not None else self.token.wait
        self.debug = debug

        self.state = PlaybackState.ADVANCING
        self.current: Optional[PlaybackEvent] = None
        self._events = plan_events(morse, self.options)
        self._tone_active = False
        self._lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def step(self) -> PlaybackState:
        """
        Perform one state transition.

        Returns:
            State after the transition
        """
        with self._lock:
            if self.done:
                return self.state
            if self.token.cancelled:
                self._set_cancelled()
                return self.state
            if self.state is PlaybackState.ADVANCING:
                self._advance()
                if self.state is not PlaybackState.FINISHED:
                    return self.state
            event = self.current

        if event is None:
            # Called without the lock so the callback may start another run.
            if self.on_complete is not None:
                self.on_complete()
            return self.state

        self.delay(event.duration_ms(self.time_unit) / 1000.0)

        with self._lock:
            if self.done:
                return self.state
            if self._tone_active:
                self.backend.stop_tone()
                self._tone_active = False
            if self.token.cancelled:
                self._set_cancelled()
            else:
                self.state = PlaybackState.ADVANCING
            return self.state

    def run(self) -> PlaybackState:
        """
        Step until finished or cancelled.

        Returns:
            Final state
        """
        while not self.done:
            self.step()
        return self.state

    def start(self) -> threading.Thread:
        """Run the scheduler on a background thread."""
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None):
        # A completion callback may start the next run from this thread.
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def cancel(self):
        """
        Cancel the run.

        Takes effect immediately: an active tone is stopped and, once this
        returns, the backend receives no further calls and no completion or
        event callback follows.
        """
        with self._lock:
            if self.debug:
                print(f"Cancel requested in state {self.state.value}", file=sys.stderr)
            self.token.cancel()
            if not self.done:
                self._set_cancelled()

    def _advance(self):
        event = next(self._events, None)
        if event is None:
            self.current = None
            self.state = PlaybackState.FINISHED
            if self.debug:
                print("Playback finished", file=sys.stderr)
            return

        self.current = event
        duration_ms = event.duration_ms(self.time_unit)
        if self.debug:
            print(f"{event.kind.value} {duration_ms}ms", file=sys.stderr)
        if event.kind is EventKind.TONE:
            self.backend.start_tone(self.frequency)
            self._tone_active = True
            self.state = PlaybackState.EMITTING_TONE
        else:
            self.state = PlaybackState.EMITTING_SILENCE

        if self.on_event is not None:
            self.on_event(event, duration_ms)

    def _set_cancelled(self):
        if self._tone_active:
            self.backend.stop_tone()
            self._tone_active = False
        self.current = None
        self.state = PlaybackState.CANCELLED
        if self.debug:
            print("Playback cancelled", file=sys.stderr)


@dataclass
class PlaybackResult:
    """Outcome of a playback, speech or clipboard request."""
    ok: bool
    error: Optional[str] = None
    scheduler: Optional[PlaybackScheduler] = None


class Player:
    """
    Owner of the tone generator for successive playback runs.

    Starting a new run cancels the current one and closes its backend before
    a new backend is created, so two runs never share or overlap on the
    output device. Concurrent calls are serialized; the replaced run's thread
    is joined once the new run has started.
    """

    def __init__(
        self,
        backend_factory: Callable[[], object],
        speak: Optional[Callable[[str], None]] = None,
        clipboard: Optional[Callable[[str], None]] = None,
        delay: Optional[Callable[[float], object]] = None,
        debug: bool = False
    ):
        """
        Initialize the player.

        Args:
            backend_factory: Creates a fresh tone backend for each run
            speak: Speech synthesis collaborator for play_text
            clipboard: Clipboard collaborator for copy_to_clipboard
            delay: Delay capability passed to each scheduler
            debug: Enable debug output
        """
        self.backend_factory = backend_factory
        self.speak = speak
        self.clipboard = clipboard
        self.delay = delay
        self.debug = debug

        # Held while one run is swapped for the next
        self._lock = threading.RLock()
        self._active: Optional[Tuple[PlaybackScheduler, object]] = None

    @property
    def active(self) -> Optional[PlaybackScheduler]:
        active = self._active
        return active[0] if active is not None else None

    def play_morse(
        self,
        pattern: str,
        options: Optional[Options] = None,
        frequency: float = DEFAULT_FREQUENCY,
        time_unit: int = 60,
        on_complete: Optional[Callable[[], None]] = None,
        on_event: Optional[Callable[[PlaybackEvent, int], None]] = None
    ) -> PlaybackResult:
        """
        Play an encoded string, replacing any run in progress.

        Args:
            pattern: Encoded Morse string
            options: Options giving the symbols
            frequency: Tone frequency in Hz
            time_unit: Base duration in milliseconds
            on_complete: Called once the run finishes (not if replaced)
            on_event: Called with (event, duration_ms) for each event

        Returns:
            PlaybackResult holding the started scheduler, or the error if no
            backend could be created
        """
        if time_unit <= 0:
            raise ValueError(f"time_unit must be positive, got {time_unit}")

        with self._lock:
            previous = self._release()

            try:
                backend = self.backend_factory()
            except Exception as e:
                if self.debug:
                    print(f"Audio backend unavailable: {e}", file=sys.stderr)
                result = PlaybackResult(ok=False, error=f"Audio backend unavailable: {e}")
            else:
                try:
                    scheduler = PlaybackScheduler(
                        pattern,
                        options=options,
                        backend=backend,
                        frequency=frequency,
                        time_unit=time_unit,
                        on_complete=on_complete,
                        on_event=on_event,
                        delay=self.delay,
                        debug=self.debug
                    )
                except Exception:
                    backend.close()
                    raise
                self._active = (scheduler, backend)
                scheduler.start()
                result = PlaybackResult(ok=True, scheduler=scheduler)

        # Joined outside the lock: the old run's completion callback may be
        # waiting to start a run of its own.
        if previous is not None:
            previous.join()
        return result

    def stop(self):
        """Cancel the current run and tear down its backend."""
        with self._lock:
            previous = self._release()
        if previous is not None:
            previous.join()

    def _release(self) -> Optional[PlaybackScheduler]:
        active = self._active
        self._active = None
        if active is None:
            return None

        scheduler, backend = active
        if self.debug and not scheduler.done:
            print("Replacing active playback run", file=sys.stderr)
        # After cancel() returns the scheduler no longer touches the backend.
        scheduler.cancel()
        backend.close()
        return scheduler

    def close(self):
        self.stop()

    def play_text(self, text: str, on_complete: Optional[Callable[[], None]] = None) -> PlaybackResult:
        """
        Speak plain text through the speech collaborator.

        Args:
            text: Text to speak
            on_complete: Called after the text was handed to the speech backend

        Returns:
            PlaybackResult describing success or the failure
        """
        if self.speak is None:
            return PlaybackResult(ok=False, error='No speech backend configured')
        try:
            self.speak(text)
        except Exception as e:
            return PlaybackResult(ok=False, error=f"Speech backend failed: {e}")
        if on_complete is not None:
            on_complete()
        return PlaybackResult(ok=True)

    def copy_to_clipboard(self, text: str) -> PlaybackResult:
        """
        Copy text through the clipboard collaborator.

        Args:
            text: Text to copy

        Returns:
            PlaybackResult describing success or the failure
        """
        if self.clipboard is None:
            return PlaybackResult(ok=False, error='No clipboard backend configured')
        try:
            self.clipboard(text)
        except Exception as e:
            return PlaybackResult(ok=False, error=f"Clipboard backend failed: {e}")
        return PlaybackResult(ok=True)
