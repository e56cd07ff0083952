"""
Detection of labels hidden among decoy characters.

Some sites keep labels such as "Sponsored" readable for humans while making them
hard to match for scripts: the label is split into single-character spans and
extra spans hidden with CSS are interleaved. A naive text read then yields
something like ``ddSQpOonhsortied``.
"""


def has_hidden_word(needle: str, haystack: str) -> bool:
    """
    Check whether every character of ``needle`` occurs in ``haystack`` in order.

    Characters of ``haystack`` that do not match the next expected character are
    treated as decoys and skipped. Matching is case sensitive.

    Args:
        needle: The label to look for.
        haystack: The text as read from the document.

    Returns:
        True if ``needle`` is a subsequence of ``haystack``.
    """
    remaining = iter(needle)
    expected = next(remaining, None)

    for char in haystack:
        if expected is None:
            break
        if char == expected:
            expected = next(remaining, None)

    return expected is None
