"""Application tests for the coupon registry: create, read, edit, delete, activate."""

import uuid
from datetime import timedelta

import pytest
from promotions.coupon.coupon import Coupon
from promotions.coupon.creation import CreateCoupon
from promotions.coupon.deletion import DeleteCoupon
from promotions.coupon.editing import EditCoupon
from promotions.coupon.lifecycle import ActivateCoupon, DeactivateCoupon
from promotions.coupon.queries import get_coupon, list_coupons
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _create(window, **overrides):
    fields = {
        "code": "SAVE20",
        "discount_type": "percentage",
        "discount_value": 20.0,
        "product_ids": [],
        "valid_from": window[0],
        "valid_until": window[1],
        "usage_limit": 100,
    }
    fields.update(overrides)
    return current_domain.process(CreateCoupon(**fields), asynchronous=False)


def _edit(coupon_id, **fields):
    return current_domain.process(
        EditCoupon(coupon_id=coupon_id, provided_fields=sorted(fields), **fields),
        asynchronous=False,
    )


class TestCreateCoupon:
    def test_create_then_get_returns_equivalent_record(self, window, make_product):
        lamp = make_product()
        coupon_id = _create(window, product_ids=[str(lamp.id)])

        coupon = get_coupon(coupon_id)
        assert coupon["code"] == "SAVE20"
        assert coupon["discount_type"] == "percentage"
        assert coupon["discount_value"] == 20.0
        assert coupon["usage_limit"] == 100
        assert coupon["is_active"] is True
        assert coupon["product_ids"] == [str(lamp.id)]
        assert coupon["products"] == [{"id": str(lamp.id), "name": "Desk Lamp"}]

    def test_missing_field_is_rejected(self, window):
        with pytest.raises(ValidationError):
            CreateCoupon(
                code="SAVE20",
                discount_type="percentage",
                discount_value=20.0,
                valid_from=window[0],
                valid_until=window[1],
            )

    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(days=-1), timedelta(days=-365)])
    def test_window_must_be_ordered(self, window, offset):
        with pytest.raises(ValidationError) as exc:
            _create(window, valid_until=window[0] + offset)
        assert "Valid Until must be later than Valid From" in exc.value.messages["valid_until"]
        assert current_domain.repository_for(Coupon).list_all() == []

    def test_duplicate_code_is_rejected(self, window):
        _create(window)
        with pytest.raises(ValidationError) as exc:
            _create(window, discount_value=5.0)
        assert exc.value.messages["code"] == ["Coupon code already exists"]
        assert len(current_domain.repository_for(Coupon).list_all()) == 1

    def test_codes_are_case_sensitive(self, window):
        _create(window, code="SAVE20")
        _create(window, code="save20")
        assert len(current_domain.repository_for(Coupon).list_all()) == 2

    def test_malformed_product_id_is_rejected(self, window):
        with pytest.raises(ValidationError) as exc:
            _create(window, product_ids=["not-an-id"])
        assert exc.value.messages["product_ids"] == ["Invalid product ID"]


class TestReadCoupons:
    def test_list_resolves_product_names(self, window, make_product):
        lamp = make_product()
        desk = make_product(name="Desk", sku="DESK-001", price=250.0)
        _create(window, code="A10", product_ids=[str(lamp.id), str(desk.id)])
        _create(window, code="B20")

        coupons = list_coupons()
        assert [c["code"] for c in coupons] == ["A10", "B20"]
        assert {p["name"] for p in coupons[0]["products"]} == {"Desk Lamp", "Desk"}
        assert coupons[1]["products"] == []

    def test_dangling_product_reference_is_skipped(self, window):
        _create(window, product_ids=[str(uuid.uuid4())])
        assert list_coupons()[0]["products"] == []

    def test_get_with_malformed_id(self):
        with pytest.raises(ValidationError) as exc:
            get_coupon("12345")
        assert exc.value.messages["coupon_id"] == ["Invalid coupon ID"]

    def test_get_missing_coupon(self):
        with pytest.raises(ObjectNotFoundError):
            get_coupon(str(uuid.uuid4()))


class TestEditCoupon:
    def test_edit_code(self, window):
        coupon_id = _create(window)
        _edit(coupon_id, code="SAVE25")
        assert get_coupon(coupon_id)["code"] == "SAVE25"

    def test_edit_keeping_own_code_is_allowed(self, window):
        coupon_id = _create(window)
        _edit(coupon_id, code="SAVE20", usage_limit=5)
        coupon = get_coupon(coupon_id)
        assert coupon["code"] == "SAVE20"
        assert coupon["usage_limit"] == 5

    def test_edit_to_another_coupons_code_is_rejected(self, window):
        _create(window, code="TAKEN")
        coupon_id = _create(window, code="MINE")
        with pytest.raises(ValidationError) as exc:
            _edit(coupon_id, code="TAKEN")
        assert exc.value.messages["code"] == ["Coupon code already exists"]
        assert get_coupon(coupon_id)["code"] == "MINE"

    def test_edit_only_valid_from_leaves_window_unchanged(self, window):
        coupon_id = _create(window)
        before = current_domain.repository_for(Coupon).get(coupon_id)

        _edit(coupon_id, valid_from=window[0] - timedelta(days=7))

        after = current_domain.repository_for(Coupon).get(coupon_id)
        assert after.valid_from == before.valid_from
        assert after.valid_until == before.valid_until

    def test_edit_window_with_both_bounds(self, window):
        coupon_id = _create(window)
        new_from, new_until = window[0] + timedelta(days=1), window[1] + timedelta(days=1)

        _edit(coupon_id, valid_from=new_from, valid_until=new_until)

        coupon = current_domain.repository_for(Coupon).get(coupon_id)
        assert coupon.valid_from == new_from
        assert coupon.valid_until == new_until

    def test_edit_reversed_window_is_rejected(self, window):
        coupon_id = _create(window)
        with pytest.raises(ValidationError):
            _edit(coupon_id, valid_from=window[1], valid_until=window[0])

        coupon = current_domain.repository_for(Coupon).get(coupon_id)
        assert coupon.valid_from == window[0]
        assert coupon.valid_until == window[1]

    def test_edit_overwrites_falsy_values(self, window, make_product):
        lamp = make_product()
        coupon_id = _create(window, product_ids=[str(lamp.id)])

        _edit(coupon_id, usage_limit=0, product_ids=[])

        coupon = get_coupon(coupon_id)
        assert coupon["usage_limit"] == 0
        assert coupon["product_ids"] == []

    def test_fields_not_provided_are_untouched(self, window):
        coupon_id = _create(window)
        current_domain.process(
            EditCoupon(coupon_id=coupon_id, code="SAVE30", usage_limit=0, provided_fields=["code"]),
            asynchronous=False,
        )
        coupon = get_coupon(coupon_id)
        assert coupon["code"] == "SAVE30"
        assert coupon["usage_limit"] == 100

    def test_edit_product_ids(self, window, make_product):
        lamp = make_product()
        coupon_id = _create(window)
        _edit(coupon_id, product_ids=[str(lamp.id)])
        assert get_coupon(coupon_id)["products"] == [{"id": str(lamp.id), "name": "Desk Lamp"}]

    def test_edit_malformed_id(self):
        with pytest.raises(ValidationError):
            _edit("bogus", code="X")

    def test_edit_missing_coupon(self):
        with pytest.raises(ObjectNotFoundError):
            _edit(str(uuid.uuid4()), code="X")


class TestDeleteCoupon:
    def test_delete(self, window):
        coupon_id = _create(window)
        current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            get_coupon(coupon_id)

    def test_delete_leaves_other_coupons(self, window):
        keep_id = _create(window, code="KEEP")
        drop_id = _create(window, code="DROP")
        current_domain.process(DeleteCoupon(coupon_id=drop_id), asynchronous=False)
        assert [c["id"] for c in list_coupons()] == [keep_id]

    def test_delete_malformed_id(self):
        with pytest.raises(ValidationError):
            current_domain.process(DeleteCoupon(coupon_id="bogus"), asynchronous=False)

    def test_delete_missing_coupon(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteCoupon(coupon_id=str(uuid.uuid4())), asynchronous=False)


class TestCouponLifecycle:
    def test_deactivate_then_activate(self, window):
        coupon_id = _create(window)

        current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
        assert get_coupon(coupon_id)["is_active"] is False

        current_domain.process(ActivateCoupon(coupon_id=coupon_id), asynchronous=False)
        assert get_coupon(coupon_id)["is_active"] is True
