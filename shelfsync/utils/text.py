# shelfsync/utils/text.py
import re
import unicodedata
from typing import Optional

_NON_WORD = re.compile(r'[^a-z0-9]+')
_LEADING_ARTICLE = re.compile(r'^(?:the|a|an)\s+')

def clean_name(name: Optional[str]) -> str:
    """Normalise a title or name for loose equality checks.

    Lower-cases, strips accents, drops a leading article and every
    non-alphanumeric character: "The Left Hand of Darkness!" -> "lefthandofdarkness"
    """
    if not name:
        return ''
    normalized = unicodedata.normalize('NFKD', name)
    ascii_name = normalized.encode('ascii', 'ignore').decode('ascii').lower().strip()
    ascii_name = _LEADING_ARTICLE.sub('', ascii_name)
    return _NON_WORD.sub('', ascii_name)
