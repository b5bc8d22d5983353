"""Pushover alerts for failed calendar runs."""

from __future__ import annotations

import os

import requests

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


def send_error_notification(message: str, title: str = "VCT-CN Calendar Error") -> bool:
    """Push an error message to Pushover.

    Credentials come from PUSHOVER_USER_KEY and PUSHOVER_API_TOKEN. Returns
    False, without raising, when they are missing or the push fails.
    """
    user_key = os.environ.get("PUSHOVER_USER_KEY", "")
    api_token = os.environ.get("PUSHOVER_API_TOKEN", "")
    if not user_key or not api_token:
        print("  Pushover not configured, skipping notification")
        return False

    payload = {
        "token": api_token,
        "user": user_key,
        "title": title,
        "message": message,
        "priority": 0,
    }
    try:
        resp = requests.post(PUSHOVER_URL, data=payload, timeout=10)
        resp.raise_for_status()
    except requests.RequestException as e:
        print(f"  Failed to send Pushover notification: {e}")
        return False

    print(f"  Pushover notification sent: {title}")
    return True
