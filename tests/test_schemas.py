from datetime import datetime

import pytest
from pydantic import ValidationError

from kassa.schemas.chat import ChatMessageCreate
from kassa.schemas.product import ProductCreate
from kassa.schemas.transaction import QuickTransactionCreate, TransactionCreate, TransactionFilter
from kassa.schemas.user import ChangePasswordRequest, RegisterRequest, UpdateUsernameRequest
from kassa.utils import constants


def error_message(exc_info) -> str:
    return exc_info.value.errors()[0]["msg"].removeprefix("Value error, ")


class TestUserSchemas:
    def test_register_normalizes_email(self):
        request = RegisterRequest(email="  Kasir@Kassa.Kilat ", password="rahasia123")
        assert request.email == "kasir@kassa.kilat"
        assert request.username is None

    def test_register_rejects_bad_email(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(email="bukan-email", password="rahasia123")
        assert error_message(exc_info) == "Format email tidak valid."

    def test_register_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(email="kasir@kassa.kilat", password="12345")
        assert error_message(exc_info) == constants.MSG_PASSWORD_TOO_SHORT_REGISTER

    def test_username_needs_two_characters(self):
        with pytest.raises(ValidationError) as exc_info:
            UpdateUsernameRequest(username=" a ")
        assert error_message(exc_info) == constants.MSG_USERNAME_TOO_SHORT
        assert UpdateUsernameRequest(username="  ab ").username == "ab"

    def test_password_mismatch_checked_first(self):
        with pytest.raises(ValidationError) as exc_info:
            ChangePasswordRequest(current_password="lama123", new_password="123", confirm_password="456")
        assert error_message(exc_info) == constants.MSG_PASSWORD_MISMATCH

    def test_new_password_too_short(self):
        with pytest.raises(ValidationError) as exc_info:
            ChangePasswordRequest(current_password="lama123", new_password="123", confirm_password="123")
        assert error_message(exc_info) == constants.MSG_PASSWORD_TOO_SHORT


class TestProductSchemas:
    def test_name_is_trimmed(self):
        product = ProductCreate(name="  Kopi Susu ", price=18000)
        assert product.name == "Kopi Susu"
        assert product.price == 18000

    def test_short_name(self):
        with pytest.raises(ValidationError) as exc_info:
            ProductCreate(name="K", price=1000)
        assert error_message(exc_info) == constants.MSG_PRODUCT_NAME_TOO_SHORT

    def test_negative_price(self):
        with pytest.raises(ValidationError) as exc_info:
            ProductCreate(name="Kopi", price=-1)
        assert error_message(exc_info) == constants.MSG_PRODUCT_PRICE_NEGATIVE

    def test_zero_price_allowed(self):
        assert ProductCreate(name="Air Putih", price=0).price == 0


class TestTransactionSchemas:
    def test_defaults(self):
        request = TransactionCreate(product_id="p1", payments=[{"method": "Tunai", "amount": 5000}])
        assert request.quantity == 1

    def test_quantity_at_least_one(self):
        with pytest.raises(ValidationError) as exc_info:
            TransactionCreate(product_id="p1", quantity=0, payments=[{"method": "Tunai", "amount": 0}])
        assert error_message(exc_info) == constants.MSG_QUANTITY_MIN

    def test_payments_required(self):
        with pytest.raises(ValidationError) as exc_info:
            TransactionCreate(product_id="p1", payments=[])
        assert error_message(exc_info) == constants.MSG_PAYMENT_REQUIRED

    def test_blank_product(self):
        with pytest.raises(ValidationError) as exc_info:
            TransactionCreate(product_id="  ", payments=[{"method": "Tunai", "amount": 0}])
        assert error_message(exc_info) == constants.MSG_PRODUCT_REQUIRED

    def test_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            TransactionCreate(product_id="p1", payments=[{"method": "Kartu", "amount": 5000}])

    def test_negative_payment_amount(self):
        with pytest.raises(ValidationError) as exc_info:
            TransactionCreate(product_id="p1", payments=[{"method": "QR", "amount": -5}])
        assert error_message(exc_info) == constants.MSG_PAYMENT_AMOUNT_NEGATIVE

    def test_quick_entry_defaults_to_cash(self):
        request = QuickTransactionCreate(product_name="Roti", price=1500)
        assert request.payment_method == "Tunai"
        assert request.quantity == 1

    def test_quick_entry_negative_price(self):
        with pytest.raises(ValidationError) as exc_info:
            QuickTransactionCreate(product_name="Roti", price=-1500)
        assert error_message(exc_info) == constants.MSG_PRICE_NEGATIVE

    def test_filter_range_must_move_forward(self):
        with pytest.raises(ValidationError) as exc_info:
            TransactionFilter(start=datetime(2026, 10, 16), end=datetime(2026, 10, 15))
        assert error_message(exc_info) == constants.MSG_INVALID_DATE_RANGE

    def test_filter_open_ended(self):
        flt = TransactionFilter(start=datetime(2026, 10, 1))
        assert flt.end is None
        assert not flt.today


class TestChatSchemas:
    def test_text_is_cleaned(self):
        assert ChatMessageCreate(text="  halo\x00 ").text == "halo"

    def test_blank_text(self):
        with pytest.raises(ValidationError) as exc_info:
            ChatMessageCreate(text="   ")
        assert error_message(exc_info) == constants.MSG_EMPTY_MESSAGE
