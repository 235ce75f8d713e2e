"""
npm command table — every binding the facade exposes.

Each entry maps a dotted binding name ("dist_tags.list") to the npm
subcommand it runs, the options it accepts, any options it always adds,
and the parser applied to its output. The facade builds its attribute
tree from this table; nothing else knows the npm command surface.
"""

from __future__ import annotations

from typing import Any

from npm_facade.core.models.command import CommandSpec

# ── Option allow-lists ──────────────────────────────────────────

# Accepted by every npm subcommand
COMMON_OPTIONS = frozenset({
    "registry",
    "loglevel",
    "silent",
    "quiet",
    "verbose",
    "json",
    "parseable",
    "long",
    "userconfig",
    "globalconfig",
    "prefix",
    "global",
    "cache",
    "color",
    "no-color",
    "usage",
    "yes",
    "offline",
    "prefer-offline",
    "prefer-online",
    "proxy",
    "https-proxy",
    "noproxy",
    "strict-ssl",
    "ca",
    "cafile",
    "fetch-retries",
    "fetch-timeout",
    "workspace",
    "workspaces",
    "include-workspace-root",
    "scope",
    "dry-run",
    "node-options",
    "timing",
    "logs-dir",
    "logs-max",
    "update-notifier",
})

_AUTH = frozenset({"otp"})

_LOGIN = frozenset({"auth-type", "always-auth"})

_SCRIPTS = frozenset({
    "ignore-scripts",
    "foreground-scripts",
    "script-shell",
})

_INSTALL = _SCRIPTS | frozenset({
    "save",
    "no-save",
    "save-prod",
    "save-dev",
    "save-optional",
    "save-peer",
    "save-exact",
    "save-bundle",
    "save-prefix",
    "production",
    "only",
    "omit",
    "include",
    "dry-run",
    "force",
    "legacy-peer-deps",
    "strict-peer-deps",
    "package-lock",
    "no-package-lock",
    "package-lock-only",
    "no-shrinkwrap",
    "no-optional",
    "audit",
    "no-audit",
    "fund",
    "no-fund",
    "bin-links",
    "no-bin-links",
    "install-links",
    "install-strategy",
    "global-style",
    "legacy-bundling",
    "prefer-dedupe",
    "link",
    "tag",
    "audit-level",
    "engine-strict",
    "before",
    "cpu",
    "os",
    "libc",
    "lockfile-version",
})

_LIST = frozenset({
    "all",
    "depth",
    "link",
    "omit",
    "include",
    "unicode",
    "prod",
    "production",
    "dev",
    "only",
    "package-lock-only",
    "before",
})

_RUN = _SCRIPTS | frozenset({"if-present"})

_CACHE = frozenset({"force"})

_CONFIG = frozenset({"location", "editor"})

_PACK = _SCRIPTS | frozenset({"dry-run", "pack-destination"})

_PUBLISH = _AUTH | _SCRIPTS | frozenset({
    "tag",
    "access",
    "dry-run",
    "provenance",
    "provenance-file",
})

_SEARCH = frozenset({
    "description",
    "searchopts",
    "searchexclude",
    "searchlimit",
    "searchstaleness",
})

_UNINSTALL = _SCRIPTS | frozenset({
    "save",
    "no-save",
    "save-dev",
    "save-optional",
    "save-prod",
    "package-lock",
    "no-package-lock",
})

_VERSION = _SCRIPTS | frozenset({
    "allow-same-version",
    "commit-hooks",
    "git-tag-version",
    "no-git-tag-version",
    "preid",
    "sign-git-tag",
    "message",
})

_UNPUBLISH = _AUTH | frozenset({"force", "dry-run"})


def _spec(
    name: str,
    extra: frozenset[str] = frozenset(),
    *,
    post_process: str = "raw",
    fixed_options: dict[str, Any] | None = None,
) -> CommandSpec:
    return CommandSpec(
        name=name,
        possible_options=COMMON_OPTIONS | extra,
        fixed_options=fixed_options or {},
        post_process=post_process,
    )


# ── Bindings ────────────────────────────────────────────────────

COMMANDS: dict[str, CommandSpec] = {
    # access (auth)
    "access.public": _spec("access public", _AUTH),
    "access.restricted": _spec("access restricted", _AUTH),
    "access.grant": _spec("access grant", _AUTH),
    "access.revoke": _spec("access revoke", _AUTH),
    "access.list_packages": _spec("access ls-packages", post_process="json"),
    "access.list_collaborators": _spec("access ls-collaborators", post_process="json"),
    # auth
    "add_user": _spec("adduser", _LOGIN),
    "login": _spec("login", _LOGIN),
    "bin": _spec("bin"),
    "build": _spec("build", _SCRIPTS),
    # cache
    "cache.add": _spec("cache add", _CACHE),
    "cache.clean": _spec("cache clean", _CACHE),
    "cache.verify": _spec("cache verify", _CACHE),
    # config
    "config.get": _spec("config get", _CONFIG, post_process="config_value"),
    "config.set": _spec("config set", _CONFIG),
    "config.delete": _spec("config delete", _CONFIG),
    "config.list": _spec("config list", _CONFIG, post_process="ini"),
    "dedupe": _spec("dedupe", _INSTALL),
    "deprecate": _spec("deprecate", _AUTH),
    # dist-tag (auth)
    "dist_tags.add": _spec("dist-tag add", _AUTH),
    "dist_tags.remove": _spec("dist-tag rm", _AUTH),
    "dist_tags.list": _spec("dist-tag ls", post_process="lines"),
    "install": _spec("install", _INSTALL),
    "link": _spec("link", _INSTALL),
    "list": _spec("list", _LIST),
    "outdated": _spec("outdated", _LIST),
    # owner (auth)
    "owner.add": _spec("owner add", _AUTH),
    "owner.remove": _spec("owner rm", _AUTH),
    "owner.list": _spec("owner ls", post_process="lines"),
    "pack": _spec("pack", _PACK),
    "ping": _spec("ping"),
    "prefix": _spec("prefix"),
    "prune": _spec("prune", _INSTALL),
    "publish": _spec("publish", _PUBLISH),
    "rebuild": _spec("rebuild", _INSTALL),
    "restart": _spec("restart", _RUN),
    "root": _spec("root"),
    "run": _spec("run", _RUN),
    "search": _spec("search", _SEARCH, post_process="json", fixed_options={"json": True}),
    "shrinkwrap": _spec("shrinkwrap"),
    "star": _spec("star", _AUTH),
    "unstar": _spec("unstar", _AUTH),
    "stars": _spec("stars"),
    "start": _spec("start", _RUN),
    "stop": _spec("stop", _RUN),
    # team
    "team.create": _spec("team create", _AUTH),
    "team.destroy": _spec("team destroy", _AUTH),
    "team.add": _spec("team add", _AUTH),
    "team.remove": _spec("team rm", _AUTH),
    "team.list": _spec("team ls", post_process="json"),
    "test": _spec("test", _RUN),
    "uninstall": _spec("uninstall", _UNINSTALL),
    "unpublish": _spec("unpublish", _UNPUBLISH),
    "update": _spec("update", _INSTALL),
    "version": _spec("version", _VERSION),
    "view": _spec("view"),
    "show": _spec("show"),
    "info": _spec("info"),
    "who_am_i": _spec("whoami"),
}
