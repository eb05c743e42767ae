from slackbridge.utils.helpers import call_with_fallback

__all__ = ["call_with_fallback"]
