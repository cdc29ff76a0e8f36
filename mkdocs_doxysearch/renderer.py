"""
Markdown renderer for search index entries.

Turns Entry objects from the index into Markdown lists with links into the
Doxygen HTML tree.
"""

from __future__ import annotations


class RenderConfig:
    def __init__(
        self,
        *,
        heading_level=2,
        base_url="",
        show_description=True,
        max_results=0,
    ):
        self.heading_level = heading_level
        self.base_url = base_url
        self.show_description = show_description
        self.max_results = max_results


def _heading(text, level):
    return f"{'#' * level} {text}"


def _md_escape(text):
    for ch in "\\|*_[]":
        text = text.replace(ch, "\\" + ch)
    return text


def symbol_link(entry, cfg=None):
    if cfg is None:
        cfg = RenderConfig()
    return f"[`{entry.label}`]({entry.first.url(cfg.base_url)})"


def render_entry(entry, cfg=None):
    if cfg is None:
        cfg = RenderConfig()

    line = f"- {symbol_link(entry, cfg)}"
    if len(entry.occurrences) == 1:
        desc = entry.first.text
        if cfg.show_description and desc:
            line += f" — {_md_escape(desc)}"
        return line

    parts = [line]
    for occ in entry.occurrences:
        desc = occ.text if cfg.show_description else ""
        text = _md_escape(desc) if desc else entry.label
        parts.append(f"    - [{text}]({occ.url(cfg.base_url)})")
    return "\n".join(parts)


def render_results(entries, cfg=None, *, title=None, prefix=""):
    if cfg is None:
        cfg = RenderConfig()
    parts = []
    if title:
        parts += [_heading(title, cfg.heading_level), ""]

    items = []
    for entry in entries:
        if cfg.max_results > 0 and len(items) >= cfg.max_results:
            break
        items.append(render_entry(entry, cfg))

    if items:
        parts += items
    else:
        parts.append(f"*No symbols match `{prefix}`.*")
    parts.append("")
    return "\n".join(parts)
