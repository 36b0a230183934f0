"""Unit tests for the stock ledger and stock status."""

import pytest

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.stock import StockStatus, VariantStock, get_product_stock_info


def _ledger(**counts: int) -> list[VariantStock]:
    return [VariantStock(combination_key=k, stock_count=v) for k, v in counts.items()]


class TestVariantStock:

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            VariantStock(combination_key="red", stock_count=-1)

    def test_non_integer_count_rejected(self):
        with pytest.raises(ValidationError):
            VariantStock(combination_key="red", stock_count=1.5)

    def test_empty_key_rejected(self):
        with pytest.raises(ValidationError):
            VariantStock(combination_key="", stock_count=1)


class TestGetProductStockInfo:

    def test_empty_ledger_is_in_stock(self):
        info = get_product_stock_info([])
        assert info.total_stock == 0
        assert info.status == StockStatus.IN_STOCK

    def test_all_zero_is_out_of_stock(self):
        info = get_product_stock_info(_ledger(red=0, blue=0))
        assert info.total_stock == 0
        assert info.status == StockStatus.OUT_OF_STOCK

    def test_single_zero_entry_is_out_of_stock(self):
        assert get_product_stock_info(_ledger(default=0)).status == StockStatus.OUT_OF_STOCK

    def test_some_zero_is_partial(self):
        info = get_product_stock_info(_ledger(red=0, blue=5))
        assert info.total_stock == 5
        assert info.status == StockStatus.PARTIAL_STOCK_OUT

    def test_all_positive_is_in_stock(self):
        info = get_product_stock_info(_ledger(red=2, blue=3))
        assert info.total_stock == 5
        assert info.status == StockStatus.IN_STOCK

    def test_status_values(self):
        assert StockStatus.PARTIAL_STOCK_OUT.value == "PARTIAL_STOCK_OUT"
