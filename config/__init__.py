import os

ENVIRONMENTS = {
    "development": "config.development",
    "dev": "config.development",
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module() -> str:
    """Settings module for APP_ENV (unset means development).

    An unknown APP_ENV raises instead of silently running with dev settings.
    """
    env = os.getenv("APP_ENV", "").strip().lower() or "development"
    try:
        return ENVIRONMENTS[env]
    except KeyError:
        raise ValueError(f"Unknown APP_ENV {env!r}; expected one of {sorted(ENVIRONMENTS)}") from None
