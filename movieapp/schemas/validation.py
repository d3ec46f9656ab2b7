"""Input sanitization helpers with XSS protection"""

import html
import re
import bleach

# Allowed HTML tags for user input
ALLOWED_TAGS = ['b', 'i', 'u', 'em', 'strong', 'p', 'br']

DANGEROUS_PATTERNS = [
    r'<script[^>]*>',
    r'javascript:',
    r'<[^>]*\bon\w+\s*=',
    r'<iframe',
]


class SafeStringMixin:
    """Mixin for XSS-safe string validation"""

    @staticmethod
    def sanitize_html(value: str) -> str:
        """Strip disallowed tags, leaving the text itself as the user typed it"""
        if not value:
            return value
        # bleach escapes text nodes; clients escape on render, so undo that here
        return html.unescape(bleach.clean(value, tags=ALLOWED_TAGS, strip=True))

    @staticmethod
    def validate_no_script(value: str) -> str:
        """Block common XSS patterns"""
        if not value:
            return value

        for pattern in DANGEROUS_PATTERNS:
            if re.search(pattern, value, re.IGNORECASE):
                raise ValueError("Invalid characters detected")

        return value
