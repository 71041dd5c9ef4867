from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class GalleryConfig:
    account_id: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    bucket_name: str = ""
    public_domain: str = ""
    local_source: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GalleryConfig":
        env = os.environ if environ is None else environ
        return cls(
            account_id=env.get("R2_ACCOUNT_ID", ""),
            access_key_id=env.get("R2_ACCESS_KEY_ID", ""),
            secret_access_key=env.get("R2_SECRET_ACCESS_KEY", ""),
            bucket_name=env.get("R2_BUCKET_NAME", ""),
            public_domain=env.get("R2_PUBLIC_DOMAIN", ""),
            local_source=env.get("LOCAL_SOURCE", ""),
        )

    @property
    def has_r2_credentials(self) -> bool:
        return bool(self.account_id and self.access_key_id and self.secret_access_key)
