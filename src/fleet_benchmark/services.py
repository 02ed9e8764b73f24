"""Wait for the benchmark's data stores to accept TCP connections."""

import logging
import socket
import time
from contextlib import closing
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from sqlalchemy.engine import make_url

from .config import Config

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"postgresql": 5432, "mongodb": 27017, "redis": 6379}


def check_port(host: str, port: int) -> bool:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.settimeout(2)
        return sock.connect_ex((host, port)) == 0


def wait_for_service(host: str, port: int, timeout: float = 60, interval: float = 2) -> bool:
    start_time = time.monotonic()
    while time.monotonic() - start_time < timeout:
        if check_port(host, port):
            logger.info(f"{host}:{port} is available")
            return True
        logger.info(f"Waiting for {host}:{port}...")
        time.sleep(interval)
    logger.error(f"Timeout waiting for {host}:{port}")
    return False


def _endpoint(url: str, default_port: int) -> Optional[Tuple[str, int]]:
    netloc = urlparse(url).netloc.rpartition("@")[2]
    if not netloc:
        return None
    # mongodb URLs may list several hosts; probe the first
    first = urlparse("//" + netloc.split(",")[0])
    if not first.hostname:
        return None
    return first.hostname, first.port or default_port


def service_endpoints(config: Config) -> List[Tuple[str, str, int]]:
    """(name, host, port) for each network store in the configuration."""
    endpoints = []

    sql_url = make_url(config.relational.url)
    if sql_url.host:
        default = DEFAULT_PORTS.get(sql_url.get_backend_name(), 5432)
        endpoints.append(("relational", sql_url.host, sql_url.port or default))

    for name, url, default in (
        ("document", config.document.url, DEFAULT_PORTS["mongodb"]),
        ("key_value", config.key_value.url, DEFAULT_PORTS["redis"]),
    ):
        endpoint = _endpoint(url, default)
        if endpoint is not None:
            endpoints.append((name, *endpoint))
    return endpoints


def wait_for_services(config: Config, timeout: float = 60) -> bool:
    for name, host, port in service_endpoints(config):
        logger.info(f"Checking {name} store at {host}:{port}")
        if not wait_for_service(host, port, timeout=timeout):
            return False
    logger.info("All services are available")
    return True
