"""``;``-joined lists of sub-records."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from hmsrecords.exceptions import MalformedSubRecord
from hmsrecords.grammar import ITEM_SEP

T = TypeVar("T")


def encode_list(items: Iterable[T], encoder: Callable[[T], str]) -> str:
    """Join encoded items with ``;``. An empty list encodes to ""."""
    return ITEM_SEP.join(encoder(item) for item in items)


def decode_list(text: str, decoder: Callable[[str], T]) -> list[T]:
    """Split on ``;`` and decode every token, failing on the first bad one.

    An empty string is an empty list; the decoder is never called with "".
    On failure the raised MalformedSubRecord (or InvalidStatus) gets the
    0-based index of the offending token, and no partial list is returned.
    """
    if text == "":
        return []

    items: list[T] = []
    for index, token in enumerate(text.split(ITEM_SEP)):
        try:
            items.append(decoder(token))
        except MalformedSubRecord as e:
            e.index = index
            raise
    return items
