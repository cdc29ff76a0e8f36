"""
MkDocs plugin exposing a Doxygen search index to Markdown pages.

Loads the ``search/all_*.js`` shards Doxygen generates, merges them into a
single SymbolIndexTable at config time, and expands ``::: doxysearch``
directives and ``:doxy:`Name``` roles into links to the Doxygen pages.
"""

from __future__ import annotations

import logging
import os
import re

from mkdocs.config import config_options
from mkdocs.config.base import Config as MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin

from .index import MalformedEntry, SymbolIndexTable, discover_shards, load_shard
from .renderer import RenderConfig, render_results, symbol_link

log = logging.getLogger("mkdocs.plugins.doxysearch")

_DIRECTIVE_RE = re.compile(
    r"^(?P<indent>[ \t]*):::[ \t]+doxysearch[ \t]*(?:\n|$)"
    r"(?P<body>(?:(?P=indent)[ \t]+:\w+:.*(?:\n|$))*)",
    re.MULTILINE,
)
_OPTION_RE = re.compile(r"^\s+:(\w+):\s*(.+)$", re.MULTILINE)
_DOXY_ROLE_RE = re.compile(r":doxy:`([^`]+)`")


class DoxysearchConfig(MkDocsConfig):
    search_dir = config_options.Type(str, default="")
    shard_pattern = config_options.Type(str, default="all_*.js")
    html_url = config_options.Type(str, default="")
    heading_level = config_options.Type(int, default=2)
    max_results = config_options.Type(int, default=0)
    show_description = config_options.Type(bool, default=True)
    auto_xref = config_options.Type(bool, default=True)
    strict = config_options.Type(bool, default=False)


class DoxysearchPlugin(BasePlugin[DoxysearchConfig]):

    def __init__(self):
        super().__init__()
        self._table = SymbolIndexTable()
        self._shards = []

    @property
    def table(self):
        return self._table

    # ── Index loading ──

    def _search_dir(self, config_dir):
        d = self.config.get("search_dir", "")
        if not d:
            return ""
        if not os.path.isabs(d):
            d = os.path.normpath(os.path.join(config_dir, d))
        return d

    def _load_index(self, search_dir):
        try:
            paths = discover_shards(search_dir, self.config.get("shard_pattern", "all_*.js"))
        except FileNotFoundError:
            log.error("doxysearch: search index directory missing: %s", search_dir)
            return SymbolIndexTable()

        tables = []
        for path in paths:
            try:
                tables.append(load_shard(path))
            except MalformedEntry as exc:
                if self.config.get("strict", False):
                    raise PluginError(f"doxysearch: malformed shard {path}: {exc}") from exc
                log.error("doxysearch: skipping malformed shard %s: %s", path, exc)
                continue
            self._shards.append(path)
        if not paths:
            log.warning("doxysearch: no shards matching %s in %s",
                        self.config.get("shard_pattern"), search_dir)
        return SymbolIndexTable.merge(*tables)

    def _rcfg(self):
        return RenderConfig(
            heading_level=self.config.get("heading_level", 2),
            base_url=self.config.get("html_url", ""),
            show_description=self.config.get("show_description", True),
            max_results=self.config.get("max_results", 0),
        )

    # ── Markdown rewriting ──

    def _handle_directive(self, match):
        opts = {}
        for m in _OPTION_RE.finditer(match.group("body")):
            opts[m.group(1)] = m.group(2).strip()
        prefix = opts.get("prefix", "")
        if not prefix:
            return "<!-- doxysearch: missing :prefix: -->\n"
        cfg = self._rcfg()
        if "limit" in opts:
            try:
                cfg.max_results = int(opts["limit"])
            except ValueError:
                pass
        if "heading_level" in opts:
            try:
                cfg.heading_level = int(opts["heading_level"])
            except ValueError:
                pass
        return render_results(
            self._table.search(prefix), cfg, title=opts.get("title"), prefix=prefix
        )

    def _apply_xrefs(self, markdown):
        cfg = self._rcfg()

        def replace_role(m):
            name = m.group(1).strip()
            entry = self._table.lookup(name)
            if entry is None:
                log.debug("doxysearch: unresolved symbol %s", name)
                return f"`{name}`"
            return symbol_link(entry, cfg)

        return _DOXY_ROLE_RE.sub(replace_role, markdown)

    # ── MkDocs lifecycle hooks ──

    def on_config(self, config, **kwargs):
        config_dir = os.path.dirname(config.get("config_file_path", "") or "") or os.getcwd()
        self._shards = []
        self._table = SymbolIndexTable()

        search_dir = self._search_dir(config_dir)
        if not search_dir:
            log.warning("doxysearch: search_dir not set, index is empty")
            return config

        # Doxygen pages live outside docs_dir, so MkDocs cannot validate links into them
        try:
            config["validation"]["links"]["unrecognized_links"] = 0
        except (KeyError, TypeError):
            pass

        self._table = self._load_index(search_dir)
        log.info(
            "doxysearch: %d symbols indexed from %d shards", len(self._table), len(self._shards)
        )
        return config

    def on_page_markdown(self, markdown, *, page, config, files, **kwargs):
        md = _DIRECTIVE_RE.sub(self._handle_directive, markdown)
        if self.config.get("auto_xref", True):
            md = self._apply_xrefs(md)
        return md
