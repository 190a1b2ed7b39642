"""Vendor normalization and fuzzy matching primitives.

Bank descriptions for the same merchant drift between statements: reference
numbers change, processors wrap the merchant name ("PAYPAL INST XFER
SPOTIFY*REF123"), and boilerplate words like DEBIT or ACH come and go. The
helpers here reduce a description to a comparable vendor string and decide
whether two descriptions name the same vendor.
"""

import math
import re
from collections import Counter
from typing import Iterable, List, Optional

from rapidfuzz.distance import Levenshtein

# Words banks wrap around the real merchant name
BOILERPLATE_TOKENS = {
    "ach",
    "xfer",
    "transfer",
    "debit",
    "credit",
    "withdrawal",
    "payment",
    "purchase",
    "refund",
    "inst",
    "paypal",
    "pos",
}

# Too generic to identify a vendor on their own
STOPWORDS = {
    "the", "and", "inc", "llc", "com", "www", "card", "web", "online", "ref",
    "subscription", "membership", "monthly", "autopay", "bill", "recurring",
}

SUBSCRIPTION_KEYWORDS = ("netflix", "spotify", "subscription", "membership")

INCOME_KEYWORDS = ("salary", "paycheck", "payroll", "income")

CHECK_PATTERNS = [
    re.compile(r"check\s*#", re.IGNORECASE),
    re.compile(r"^chk\b", re.IGNORECASE),
    re.compile(r"^check$", re.IGNORECASE),
    re.compile(r"^ck\b", re.IGNORECASE),
    re.compile(r"^ck\s*#?\d", re.IGNORECASE),
]

# Max edit distance as a share of the longer string
SIMILARITY_TOLERANCE = 0.2

_PROCESSOR_PREFIX = re.compile(r"^\s*(paypal|square|venmo|sq|tst|pp)\b[\s*]*", re.IGNORECASE)
_REFERENCE_TOKEN = re.compile(r"^(ref|id|conf)?#?\d+$", re.IGNORECASE)
_TRAILING_DIGITS = re.compile(r"\s*\d{4,}\s*$")
_NOISE = re.compile(r"[^a-z0-9&.' ]+")
_WHITESPACE = re.compile(r"\s+")


def _strip_leading_boilerplate(words: List[str]) -> List[str]:
    while words and words[0].lower() in BOILERPLATE_TOKENS:
        words = words[1:]
    return words


def extract_processor_merchant(description: str) -> Optional[str]:
    """
    Pull the real merchant out of a payment-processor pass-through line.

    Examples:
        "PAYPAL INST XFER SPOTIFY*REF123" -> "SPOTIFY"
        "SQ *BLUE BOTTLE COFFEE"          -> "BLUE BOTTLE COFFEE"

    Returns None when the description is not a processor line.
    """
    if not description:
        return None
    match = _PROCESSOR_PREFIX.match(description)
    if not match:
        return None

    rest = description[match.end():].strip()
    if "*" in rest:
        left, right = rest.split("*", 1)
        left_words = _strip_leading_boilerplate(left.split())
        if left_words:
            # "SPOTIFY*REF123": merchant sits right before the star
            return left_words[-1]
        right_words = [w for w in right.split() if not _REFERENCE_TOKEN.match(w)]
        merchant = " ".join(right_words)
    else:
        words = [w for w in _strip_leading_boilerplate(rest.split()) if not _REFERENCE_TOKEN.match(w)]
        merchant = " ".join(words)

    merchant = _TRAILING_DIGITS.sub("", merchant).strip()
    return merchant or None


def normalize_vendor(description: Optional[str]) -> str:
    """Reduce a description to a comparable lowercase vendor string"""
    if not description:
        return ""
    text = extract_processor_merchant(description) or description
    text = _NOISE.sub(" ", text.lower())
    words = [w for w in text.split() if w not in BOILERPLATE_TOKENS]
    text = " ".join(words)
    # Account / reference numbers at the end
    text = _TRAILING_DIGITS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def vendor_tokens(description: Optional[str]) -> List[str]:
    """Significant words of the normalized vendor, in order, without duplicates"""
    tokens = []
    for word in normalize_vendor(description).split():
        word = word.strip(".'&")
        if len(word) < 3 or word in STOPWORDS:
            continue
        if not any(ch.isalpha() for ch in word):
            continue
        if word not in tokens:
            tokens.append(word)
    return tokens


def _within_tolerance(a: str, b: str) -> bool:
    max_distance = max(len(a), len(b)) * SIMILARITY_TOLERANCE
    return Levenshtein.distance(a, b) <= max_distance


def is_vendor_similar(description_a: Optional[str], description_b: Optional[str]) -> bool:
    """True when two descriptions normalize to the same or nearly the same vendor"""
    if description_a == description_b:
        return True
    norm_a = normalize_vendor(description_a)
    norm_b = normalize_vendor(description_b)
    if not norm_a or not norm_b:
        return False
    if norm_a == norm_b:
        return True
    return _within_tolerance(norm_a, norm_b)


def tokens_match(token_a: str, token_b: str) -> bool:
    """Exact or typo-tolerant token equality"""
    return token_a == token_b or _within_tolerance(token_a, token_b)


def same_vendor(description_a: Optional[str], description_b: Optional[str]) -> bool:
    """Similar vendor strings, or the same leading vendor token"""
    if is_vendor_similar(description_a, description_b):
        return True
    tokens_a = vendor_tokens(description_a)
    tokens_b = vendor_tokens(description_b)
    return bool(tokens_a and tokens_b) and tokens_match(tokens_a[0], tokens_b[0])


def shares_vendor_token(descriptions: Iterable[Optional[str]], min_share: float = 0.5) -> bool:
    """
    Check that some vendor token is common to enough of the descriptions.

    A token must appear in at least max(2, ceil(n * min_share)) members, so
    two unrelated purchases of the same amount never pass.
    """
    token_sets = [vendor_tokens(d) for d in descriptions]
    if len(token_sets) < 2:
        return False

    required = max(2, math.ceil(len(token_sets) * min_share))
    candidates = Counter(token for tokens in token_sets for token in tokens)
    for candidate, _ in candidates.most_common():
        holders = sum(
            1 for tokens in token_sets
            if any(tokens_match(candidate, t) for t in tokens)
        )
        if holders >= required:
            return True
    return False


def is_check_transaction(description: Optional[str]) -> bool:
    """Paper checks: 'CHECK #1043', 'CHK 1043', 'CK#1043'"""
    if not description:
        return False
    text = description.strip()
    return any(pattern.search(text) for pattern in CHECK_PATTERNS)


def is_subscription_vendor(description: Optional[str]) -> bool:
    """Known subscription services recur reliably even with sparse history"""
    normalized = normalize_vendor(description)
    return any(keyword in normalized for keyword in SUBSCRIPTION_KEYWORDS)


def is_income_like(description: Optional[str], category: Optional[str] = None) -> bool:
    """Salary-style deposits by category or description keyword"""
    if category == "Salary":
        return True
    if not description:
        return False
    lowered = description.lower()
    return any(keyword in lowered for keyword in INCOME_KEYWORDS)


def income_key(description: Optional[str]) -> str:
    """Near-exact grouping key for deposits: case, spacing and trailing refs folded"""
    if not description:
        return "unknown"
    text = _WHITESPACE.sub(" ", description.lower()).strip()
    return _TRAILING_DIGITS.sub("", text).strip() or text


def amount_bucket(amount_cents: int, bucket_cents: int = 5) -> int:
    """Index of the fixed-width amount bucket an absolute amount rounds into"""
    return int(math.floor(abs(amount_cents) / bucket_cents + 0.5))
