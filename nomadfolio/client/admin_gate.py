"""
Hidden Admin Entry
==================

Two ways into the admin login from the public site: pressing the logo three
times within two seconds of the first press, or a small always-visible control.
This hides the login, it does not protect anything.

Transitions are pure functions of explicit state and a caller-supplied
clock, so no UI timer is involved.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

PRESS_THRESHOLD = 3
PRESS_WINDOW_SECONDS = 2.0

LOCKED = 'locked'
LOGIN_PROMPT = 'login-prompt'
AUTHENTICATED = 'authenticated'


@dataclass(frozen=True)
class LogoCounter:
    count: int = 0
    window_start: Optional[float] = None


def _window_expired(counter, now):
    return counter.window_start is not None and now - counter.window_start > PRESS_WINDOW_SECONDS


def press_logo(counter, now):
    """Register a logo press at time now; returns (counter, triggered)

    The window opens at the first press and lasts PRESS_WINDOW_SECONDS;
    later presses do not extend it.
    """
    if counter.window_start is None or _window_expired(counter, now):
        counter = LogoCounter(0, now)

    count = counter.count + 1
    if count >= PRESS_THRESHOLD:
        return LogoCounter(), True
    return LogoCounter(count, counter.window_start), False


def counter_at(counter, now):
    """Counter as seen at time now (an expired window reads as empty)"""
    if _window_expired(counter, now):
        return LogoCounter()
    return counter


@dataclass(frozen=True)
class AdminGate:
    state: str = LOCKED
    counter: LogoCounter = field(default_factory=LogoCounter)


def trigger(gate):
    """Open the login prompt (the always-visible control calls this directly)"""
    if gate.state != LOCKED:
        return gate
    return replace(gate, state=LOGIN_PROMPT, counter=LogoCounter())


def logo_pressed(gate, now):
    if gate.state != LOCKED:
        return gate
    counter, triggered = press_logo(gate.counter, now)
    gate = replace(gate, counter=counter)
    return trigger(gate) if triggered else gate


def cancel(gate):
    if gate.state != LOGIN_PROMPT:
        return gate
    return replace(gate, state=LOCKED)


def login_succeeded(gate):
    if gate.state != LOGIN_PROMPT:
        return gate
    return replace(gate, state=AUTHENTICATED)


def logout(gate):
    if gate.state != AUTHENTICATED:
        return gate
    return AdminGate()
