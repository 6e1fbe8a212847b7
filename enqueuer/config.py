"""Producer configuration — every tunable via keyword or ENQUEUER_* environment variables."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class TLSConfig(BaseModel):
    """Client TLS parameters, passed unchanged to whichever topology gets built."""

    model_config = ConfigDict(frozen=True)

    ca_certs: Optional[str] = None
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    cert_reqs: Literal["required", "optional", "none"] = "required"
    check_hostname: bool = True

    def connection_kwargs(self) -> dict:
        return {
            "ssl_ca_certs": self.ca_certs,
            "ssl_certfile": self.certfile,
            "ssl_keyfile": self.keyfile,
            "ssl_cert_reqs": self.cert_reqs,
            "ssl_check_hostname": self.check_hostname,
        }


class Options(BaseSettings):
    # --- Topology (exactly one) ---
    server_addr: str = ""  # host:port
    sentinel_addrs: str = ""  # comma-separated host:port list
    redis_master_name: str = ""

    # --- Connection ---
    database: int = 0
    password: str = ""
    pool_size: int = 0  # <= 0 means 1
    tls: Optional[TLSConfig] = None

    # --- Identity ---
    process_id: str = ""
    namespace: str = ""

    # --- Consumer ---
    poll_interval: timedelta = timedelta(0)  # <= 0 means 15s

    model_config = SettingsConfigDict(
        env_prefix="ENQUEUER_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_options() -> Options:
    """Get cached env-loaded options."""
    return Options()
