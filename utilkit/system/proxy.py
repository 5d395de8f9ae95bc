"""
HTTP proxy configuration.

**Two ways to route HTTP through a proxy**:
  1. enable_proxy / disable_proxy set or clear the HTTP_PROXY environment
     variable. This is process-wide and unsynchronized, so only call them
     during single-threaded startup.
  2. build_session returns a requests.Session whose proxies are set
     explicitly, from an argument or from Settings.http_proxy. Nothing global
     changes, so different sessions can use different proxies.
"""

import logging
import os
from typing import Optional

import requests

from utilkit import __version__
from utilkit.config.settings import get_settings

logger = logging.getLogger(__name__)

PROXY_ENV_VAR = "HTTP_PROXY"


def enable_proxy(proxy: str) -> None:
    """Set HTTP_PROXY for this process (and children spawned afterwards)."""
    logger.info("Enabling HTTP proxy %s", proxy)
    os.environ[PROXY_ENV_VAR] = proxy


def disable_proxy() -> None:
    """Remove HTTP_PROXY from this process's environment (no-op if unset)."""
    os.environ.pop(PROXY_ENV_VAR, None)


def build_session(proxy: Optional[str] = None) -> requests.Session:
    """
    Create a requests.Session with an explicit proxy configuration.

    Args:
        proxy: Proxy URL such as "http://127.0.0.1:8888". None falls back to
               Settings.http_proxy; if that is unset too, the session connects
               directly and ignores proxy environment variables.

    Returns:
        Configured requests.Session.

    Example:
        >>> session = build_session("http://127.0.0.1:8888")
        >>> session.proxies["http"]
        'http://127.0.0.1:8888'
    """
    if proxy is None:
        proxy = get_settings().http_proxy

    session = requests.Session()
    session.headers.update({"User-Agent": f"utilkit/{__version__}"})

    # Without trust_env, requests would merge HTTP_PROXY & co. back in
    session.trust_env = False
    if proxy:
        session.proxies.update({"http": proxy, "https": proxy})

    return session
