"""Tests for the error boundary."""

import logging

from stockroom.domain.exceptions import (
    InsufficientStockError,
    InvalidIdError,
    ProductNotFoundError,
    ValidationError,
)
from stockroom.infrastructure.config import Settings
from stockroom.infrastructure.errors import catch_error


def _settings(monkeypatch, environment="development") -> Settings:
    monkeypatch.setenv("ENVIRONMENT", environment)
    return Settings()


class TestCatchError:

    def test_insufficient_stock(self, monkeypatch):
        status, body = catch_error(
            InsufficientStockError("p1", "red", requested=3, available=2), _settings(monkeypatch)
        )
        assert status == 400
        assert body["error"] == "INSUFFICIENT_STOCK"
        assert body["details"] == {
            "productId": "p1", "variantKey": "red", "requested": 3, "available": 2,
        }

    def test_not_found(self, monkeypatch):
        status, body = catch_error(ProductNotFoundError("p1"), _settings(monkeypatch))
        assert status == 404
        assert body["error"] == "PRODUCT_NOT_FOUND"

    def test_invalid_id(self, monkeypatch):
        status, body = catch_error(InvalidIdError("Invalid product id"), _settings(monkeypatch))
        assert (status, body["error"]) == (400, "INVALID_ID")
        assert "details" not in body

    def test_validation_errors_listed(self, monkeypatch):
        exc = ValidationError("bad", errors=[{"field": "name", "message": "required"}])
        _, body = catch_error(exc, _settings(monkeypatch))
        assert body["details"]["errors"] == [{"field": "name", "message": "required"}]

    def test_unexpected_error_hidden(self, monkeypatch, caplog):
        with caplog.at_level(logging.ERROR):
            status, body = catch_error(RuntimeError("db password is hunter2"), _settings(monkeypatch))
        assert status == 500
        assert body == {"error": "INTERNAL_SERVER_ERROR"}
        assert caplog.records[0].exc_info is not None

    def test_production_logs_without_traceback(self, monkeypatch, caplog):
        with caplog.at_level(logging.ERROR):
            catch_error(RuntimeError("secret"), _settings(monkeypatch, "production"))
        record = caplog.records[0]
        assert record.exc_info is None
        assert "secret" not in caplog.text


class TestSettings:

    def test_defaults(self, monkeypatch):
        for key in ("MONGODB_URI", "DB_NAME", "MAX_VARIANT_COMBINATIONS", "DEFAULT_CURRENCY"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings()
        assert settings.MONGODB_URI == "mongodb://localhost:27017"
        assert settings.DB_NAME == "stockroom"
        assert settings.MAX_VARIANT_COMBINATIONS == 500
        assert settings.DEFAULT_CURRENCY == "AED"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_VARIANT_COMBINATIONS", "64")
        monkeypatch.setenv("DEFAULT_CURRENCY", "usd")
        settings = Settings()
        assert settings.MAX_VARIANT_COMBINATIONS == 64
        assert settings.DEFAULT_CURRENCY == "USD"
