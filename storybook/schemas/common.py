from typing import Optional
import re


def sanitize_text(value: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    """Strip markup and surrounding whitespace. Blank input becomes ''."""
    if value is None:
        return None
    text = re.sub(r'<[^>]*>', '', str(value)).strip()
    if max_length is not None and len(text) > max_length:
        raise ValueError(f'Must be at most {max_length} characters.')
    return text
