"""
Doxygen search index loader.

Doxygen writes its client-side search index as JavaScript shards, one per
leading character (``search/all_63.js`` holds the ``c`` symbols). Each
shard is a ``var searchData=[...]`` array of rows::

    ['cli_2eh',['CLI.h',['../_c_l_i_8h.html',1,'']]]

that is ``[key, [label, occurrence, occurrence, ...]]`` with every
occurrence being ``[anchor, parent_frame, description]``.

This module decodes those shards into an immutable SymbolIndexTable and
answers prefix queries against it.
"""

from __future__ import annotations

import glob
import html
import json
import logging
import os
import re
from dataclasses import dataclass

log = logging.getLogger("mkdocs.plugins.doxysearch")


class MalformedEntry(ValueError):
    """A search index row is missing its key, label or occurrences."""

    def __init__(self, message, index=None):
        if index is not None:
            message = f"row {index}: {message}"
        super().__init__(message)
        self.index = index


# ── Key normalization ──


def _is_key_char(ch):
    return ("a" <= ch <= "z") or ("0" <= ch <= "9") or ord(ch) > 127


def normalize_key(text):
    """Lowercase ``text`` and escape it the way Doxygen builds search keys.

    ASCII letters and digits pass through, non-ASCII characters are kept,
    everything else becomes ``_xx`` per UTF-8 byte (``.`` -> ``_2e``).
    """
    out = []
    for ch in text.lower():
        if _is_key_char(ch):
            out.append(ch)
        else:
            out.extend(f"_{b:02x}" for b in ch.encode("utf-8"))
    return "".join(out)


# ── Records ──


@dataclass(frozen=True)
class Occurrence:
    anchor: str
    description: str = ""
    parent_frame: bool = True

    @property
    def text(self):
        return html.unescape(self.description)

    def url(self, base_url=""):
        # Anchors are written relative to the search/ directory
        anchor = self.anchor
        if anchor.startswith("../"):
            anchor = anchor[3:]
        if not base_url:
            return anchor
        return f"{base_url.rstrip('/')}/{anchor}"


@dataclass(frozen=True)
class Entry:
    key: str
    label: str
    occurrences: tuple[Occurrence, ...]

    @property
    def first(self):
        return self.occurrences[0]


def _coerce_occurrence(raw, index):
    if isinstance(raw, Occurrence):
        occ = raw
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        occ = Occurrence(anchor=raw[0], description=raw[1] or "")
    elif isinstance(raw, (list, tuple)) and len(raw) == 3:
        occ = Occurrence(anchor=raw[0], description=raw[2] or "", parent_frame=bool(raw[1]))
    else:
        raise MalformedEntry(f"bad occurrence {raw!r}", index)
    if not isinstance(occ.anchor, str) or not occ.anchor:
        raise MalformedEntry("occurrence without anchor", index)
    if not isinstance(occ.description, str):
        raise MalformedEntry(f"bad description {occ.description!r}", index)
    return occ


def _coerce_row(row, index):
    if isinstance(row, Entry):
        key, label, occs = row.key, row.label, row.occurrences
    elif isinstance(row, (list, tuple)) and len(row) == 3:
        key, label, occs = row
    else:
        raise MalformedEntry(f"expected (key, label, occurrences), got {row!r}", index)
    if not isinstance(key, str) or not key:
        raise MalformedEntry("missing key", index)
    if not isinstance(label, str) or not label:
        raise MalformedEntry(f"missing label for key {key!r}", index)
    if not isinstance(occs, (list, tuple)) or not occs:
        raise MalformedEntry(f"no occurrences for key {key!r}", index)
    return key.lower(), label, tuple(_coerce_occurrence(o, index) for o in occs)


def _merge_sorted(rows):
    merged = {}
    for key, label, occs in rows:
        prev = merged.get(key)
        if prev is None:
            merged[key] = Entry(key=key, label=label, occurrences=occs)
        else:
            merged[key] = Entry(key=key, label=prev.label, occurrences=prev.occurrences + occs)
    # dicts keep insertion order, so sorted() is stable across equal keys
    return tuple(sorted(merged.values(), key=lambda e: e.key.casefold()))


# ── Table ──


class SearchResults:
    """Lazy view over the entries of a table that match one prefix.

    Iterating twice scans the table twice and yields the same entries.
    """

    def __init__(self, entries, needles):
        self._entries = entries
        self._needles = needles

    def __iter__(self):
        if not self._needles:
            return
        for entry in self._entries:
            if entry.key.startswith(self._needles):
                yield entry

    def __bool__(self):
        return next(iter(self), None) is not None

    def __repr__(self):
        return f"SearchResults({self._needles!r})"


class SymbolIndexTable:
    def __init__(self, entries=()):
        self._entries = tuple(entries)
        self._by_key = {e.key: e for e in self._entries}

    @classmethod
    def load(cls, rows):
        """Validate ``(key, label, occurrences)`` rows and build a table.

        Raises MalformedEntry for the first row that lacks a key, a label
        or at least one occurrence.
        """
        coerced = [_coerce_row(row, i) for i, row in enumerate(rows)]
        return cls(_merge_sorted(coerced))

    @classmethod
    def merge(cls, *tables):
        rows = [(e.key, e.label, e.occurrences) for t in tables for e in t]
        return cls(_merge_sorted(rows))

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self):
        return f"<SymbolIndexTable {len(self._entries)} entries>"

    def search(self, prefix):
        prefix = (prefix or "").strip()
        if not prefix:
            return SearchResults(self._entries, ())
        needles = tuple(dict.fromkeys((normalize_key(prefix), prefix.lower())))
        return SearchResults(self._entries, needles)

    def lookup(self, name):
        if not name:
            return None
        return self._by_key.get(normalize_key(name)) or self._by_key.get(name.lower())


# ── Shard decoding ──

_SEARCHDATA_RE = re.compile(r"^\s*var\s+searchData\s*=\s*(\[.*\])\s*;?\s*$", re.DOTALL)
_JS_STRING_RE = re.compile(r"'((?:[^'\\]|\\.)*)'", re.DOTALL)
_JS_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.DOTALL)
_JS_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def _js_unescape(m):
    seq = m.group(1)
    if len(seq) > 1:
        return chr(int(seq[1:], 16))
    return _JS_SIMPLE_ESCAPES.get(seq, seq)


def _js_string_to_json(m):
    return json.dumps(_JS_ESCAPE_RE.sub(_js_unescape, m.group(1)))


def parse_search_data(text):
    """Decode a Doxygen ``searchData`` shard into ``(key, label, occurrences)`` rows."""
    m = _SEARCHDATA_RE.match(text)
    if not m:
        raise MalformedEntry("not a Doxygen searchData array")
    try:
        data = json.loads(_JS_STRING_RE.sub(_js_string_to_json, m.group(1)))
    except ValueError as exc:
        raise MalformedEntry(f"cannot decode searchData: {exc}") from exc

    rows = []
    for i, item in enumerate(data):
        if not isinstance(item, list) or len(item) != 2 or not isinstance(item[1], list):
            raise MalformedEntry(f"bad searchData row {item!r}", i)
        key, body = item
        if not body:
            raise MalformedEntry(f"missing label for key {key!r}", i)
        rows.append((key, body[0], body[1:]))
    return rows


def load_shard(path):
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    rows = parse_search_data(text)
    log.debug("doxysearch: %d rows in %s", len(rows), path)
    return SymbolIndexTable.load(rows)


def discover_shards(directory, pattern="all_*.js"):
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"search index directory not found: {directory}")
    return sorted(glob.glob(os.path.join(directory, pattern)))


def load_shards(directory, pattern="all_*.js"):
    """Load every shard in ``directory`` matching ``pattern`` into one table."""
    tables = [load_shard(p) for p in discover_shards(directory, pattern)]
    return SymbolIndexTable.merge(*tables)
