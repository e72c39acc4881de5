"""This script is used to sanitize file and directory names."""
import re

URL = re.compile(r'https?:\S+', re.IGNORECASE)
EMOTICON = re.compile(r':\w+:')
# Private-use code points Slack clients historically emitted for emoji
EMOJI = re.compile('[\ue000-\uefff\uf040-\uf0ff]')
DISALLOWED = re.compile(r'[^\w\s-]')


def normalize(text, filetype=None):
    """
    Sanitize free text into a name that is safe on any filesystem:
    drop embedded URLs, a trailing `.filetype`, `:emoticon:` tokens and emoji,
    keep only letters, digits, whitespace, hyphens and underscores,
    then collapse repeated hyphens and underscores, fold whitespace
    into single spaces and trim.

    Applying it twice yields the same result as applying it once.
    """
    normalized = URL.sub('', text)
    if filetype:
        normalized = re.sub(r'\.' + re.escape(filetype) + r'$', '', normalized, flags=re.IGNORECASE)
    normalized = EMOTICON.sub('', normalized)
    normalized = EMOJI.sub('', normalized)
    normalized = DISALLOWED.sub('', normalized)

    normalized = re.sub(r'-{2,}', '-', normalized)
    normalized = re.sub(r'_{2,}', '_', normalized)
    normalized = re.sub(r'\s+', ' ', normalized)
    return normalized.strip()


def fit(name, length, size):
    """Cut `name` to at most `length` characters and `size` UTF-8 bytes."""
    name = name[:length]
    while len(name.encode('utf-8')) > size:
        name = name[:-1]
    return name
