from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel

from .rules import POLLING_INTERVAL_SECONDS, REQUEST_TIMEOUT_SECONDS

ENV_PREFIX = "CLINICSHEETS_"

DEFAULT_DOCTORS_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vR-JME6LR_R-EW2xbHGu22JBdEXN5_wiayzwaZqaihS6IyHCjeEqoZKF3YItNoOmSRymeyECjnoQXN1"
    "/pub?output=csv"
)
DEFAULT_PATIENTS_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vTyFSHcy1tmkb1sk7VJJbakrbMTQRYv8KopB5rg1_JVXMwV3Jxg9W63EOEMZ-juwrPd7s1FKZD1eOQK"
    "/pub?output=csv"
)


class Settings(BaseModel):
    doctors_url: str = DEFAULT_DOCTORS_URL
    patients_url: str = DEFAULT_PATIENTS_URL
    polling_interval: float = POLLING_INTERVAL_SECONDS
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    refresh_on_startup: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from CLINICSHEETS_* variables.

        Unset variables keep their defaults; values are validated by pydantic.
        """
        env = os.environ if environ is None else environ
        values = {}
        for field in cls.model_fields:
            key = ENV_PREFIX + field.upper()
            if key in env:
                values[field] = env[key]
        return cls(**values)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
