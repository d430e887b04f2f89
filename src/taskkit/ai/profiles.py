"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: profiles.py.
"""

from __future__ import annotations

from .runtime.contracts import (
    CooldownPolicy,
    PersistencePolicy,
    RetryPolicy,
    ThrottlePolicy,
)


PROFILES = {
    "default": {
        "retry": RetryPolicy(max_retries=2, backoff_base_s=1.0),
        "cooldown": CooldownPolicy(cooldown_s=30 * 60.0),
        "throttle": ThrottlePolicy(max_calls=5, window_s=60.0),
        "persistence": PersistencePolicy(debounce_s=0.75),
    },
    "offline_friendly": {
        "retry": RetryPolicy(max_retries=1, backoff_base_s=2.0),
        "cooldown": CooldownPolicy(cooldown_s=60 * 60.0),
        "throttle": ThrottlePolicy(max_calls=3, window_s=60.0),
        "persistence": PersistencePolicy(debounce_s=2.0),
    },
    "testing": {
        "retry": RetryPolicy(max_retries=2, backoff_base_s=0.0),
        "cooldown": CooldownPolicy(cooldown_s=30 * 60.0),
        "throttle": ThrottlePolicy(max_calls=5, window_s=60.0),
        "persistence": PersistencePolicy(debounce_s=0.01),
    },
}
