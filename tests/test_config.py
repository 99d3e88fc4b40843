from activity_booking.config import Settings


def test_settings_normalize_env_values(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    monkeypatch.setenv("CORS_ORIGINS", " https://ops.example.dz, ,https://app.example.dz ")

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.cors_origin_list() == ["https://ops.example.dz", "https://app.example.dz"]


def test_settings_ignore_unknown_env_file_keys(tmp_path, monkeypatch):
    monkeypatch.delenv("DB_POOL_SIZE", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("DB_POOL_SIZE=3\nSMTP_HOST=mail.example.dz\n")

    settings = Settings(_env_file=env_file)

    assert settings.db_pool_size == 3
    assert not hasattr(settings, "smtp_host")


def test_table_registry_matches_models():
    import activity_booking.models  # noqa: F401
    from activity_booking.db import ALL_TABLE_NAMES, Base

    assert set(Base.metadata.tables) == set(ALL_TABLE_NAMES)
