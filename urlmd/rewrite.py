"""Host-specific URL rewriting: turn an input URL into a :class:`FetchPlan`.

Rules form an ordered table.  The first rule whose host predicate matches
rewrites the URL and chooses the redirect policy; URLs that match no rule
are fetched as-is with redirects followed.

Adding a rule::

    from urlmd.rewrite import RewriteRule, build_fetch_plan

    nitter = RewriteRule(
        name="nitter",
        matches=lambda host: host == "nitter.example",
        rewrite=lambda parts: parts._replace(netloc="nitter.net"),
        redirect="follow",
    )
    plan = build_fetch_plan("https://nitter.example/x", extra_rules=[nitter])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import NamedTuple
from urllib.parse import SplitResult, urlsplit, urlunsplit

from urlmd.extractors.urlnorm import host_matches, to_url_string
from urlmd.items import FetchPlan, RedirectPolicy
from urlmd.settings import Settings

logger = logging.getLogger(__name__)

TWITTER_DOMAINS: tuple[str, ...] = ("twitter.com", "x.com")


class RewriteRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]
    rewrite: Callable[[SplitResult], SplitResult]
    redirect: RedirectPolicy = "follow"


def twitter_mirror_rule(mirror_host: str) -> RewriteRule:
    """Send twitter.com / x.com (and subdomains) to *mirror_host*.

    The mirror answers with a redirect whose body already holds the
    rendered post, so redirects must not be followed.
    """
    return RewriteRule(
        name="twitter_mirror",
        matches=lambda host: host_matches(host, TWITTER_DOMAINS),
        rewrite=lambda parts: parts._replace(netloc=mirror_host),
        redirect="manual",
    )


def default_rules(settings: Settings) -> tuple[RewriteRule, ...]:
    return (twitter_mirror_rule(settings.twitter_mirror_host),)


def build_fetch_plan(
    url: str | SplitResult,
    settings: Settings | None = None,
    extra_rules: Iterable[RewriteRule] = (),
) -> FetchPlan:
    """Return the :class:`FetchPlan` for *url*.

    Built-in rules are evaluated before *extra_rules*; the first match wins.

    Raises:
        ValueError: If *url* has no scheme or host.
    """
    settings = settings or Settings()
    href = to_url_string(url)
    parts = urlsplit(href)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Invalid URL: {href!r}")

    host = parts.hostname.lower()
    redirect: RedirectPolicy = "follow"
    for rule in (*default_rules(settings), *extra_rules):
        if rule.matches(host):
            parts = rule.rewrite(parts)
            redirect = rule.redirect
            logger.debug("rewrite rule %s applied to %s", rule.name, href)
            break

    return FetchPlan(
        destination_url=urlunsplit(parts),
        redirect=redirect,
        headers={"User-Agent": settings.user_agent},
    )
