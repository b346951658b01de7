import re

# Checked in order; the first hit names the kind of detail that was blocked.
CONTACT_PATTERNS = (
    ('email', re.compile(r'[A-Za-z0-9._%+-]+\s*(?:@|\(at\)|\[at\])\s*[A-Za-z0-9.-]+\.[A-Za-z]{2,}', re.IGNORECASE)),
    ('phone', re.compile(r'(?:\+?\d[\s\-()]{0,2}){9,}')),
    ('link', re.compile(r'(?:https?://|www\.)\S+|\b[a-z0-9-]+\.(?:com|net|org|ng|io|co|me|app|biz|info)\b', re.IGNORECASE)),
    ('social', re.compile(r'\b(?:whats\s*app|wa\.me|telegram|t\.me|instagram|facebook|snapchat|tiktok)\b', re.IGNORECASE)),
    ('handle', re.compile(r'(?<![\w.])@[A-Za-z0-9_.]{3,}')),
)

CONTACT_BLOCKED_MESSAGE = (
    "Sharing contact details is disabled until payment is secured in escrow. "
    "Keep the conversation on WorkBee to stay protected."
)


def find_contact_detail(text):
    """Return the kind of contact detail found in text, or None."""
    for kind, pattern in CONTACT_PATTERNS:
        if pattern.search(text):
            return kind
    return None


def contains_contact_details(text):
    return find_contact_detail(text) is not None
