from datetime import datetime

import pytest

from conftest import salon_data

from salonbook import catalog
from salonbook.data import DEFAULT_SERVICE_CATEGORIES
from salonbook.errors import (
    AuthorizationError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from salonbook.models import Salon, Service, ServiceCategory, SpecialOffer


def offer_data(salon_id, **overrides):
    data = {
        "salon_id": salon_id,
        "title": "عرض اليوم الوطني",
        "original_price": 300,
        "discounted_price": 200,
        "start_date": datetime(2026, 9, 20),
        "end_date": datetime(2026, 9, 30),
    }
    data.update(overrides)
    return data


@pytest.mark.catalog
class TestSalons:
    """Test suite for salon creation and updates."""

    def test_owner_forced_to_caller(self, store, owner, other_owner, owner_caller):
        salon = catalog.create_salon(
            store, salon_data(owner_id=other_owner.id, rating=5, review_count=99), owner_caller
        )

        assert salon.owner_id == owner.id
        assert salon.rating == 0
        assert salon.review_count == 0
        assert catalog.get_salon(store, salon.id).name == "Lamsat Salon"

    def test_customer_cannot_create(self, store, customer_caller):
        with pytest.raises(AuthorizationError):
            catalog.create_salon(store, salon_data(), customer_caller)
        assert catalog.list_salons(store) == []

    def test_anonymous_cannot_create(self, store):
        with pytest.raises(UnauthenticatedError):
            catalog.create_salon(store, salon_data(), None)

    def test_missing_fields(self, store, owner_caller):
        data = salon_data()
        del data["city"]

        with pytest.raises(ValidationError) as exc:
            catalog.create_salon(store, data, owner_caller)
        assert exc.value.fields == ["salon.city"]

    def test_partial_update_by_owner(self, store, salon, owner_caller):
        updated = catalog.update_salon(store, salon.id, {"name": "Lamsat VIP"}, owner_caller)

        assert updated.name == "Lamsat VIP"
        assert updated.district == "Olaya"

    def test_rating_not_writable(self, store, salon, owner_caller):
        updated = catalog.update_salon(
            store, salon.id, {"rating": 5, "review_count": 100, "owner_id": 999}, owner_caller
        )
        assert (updated.rating, updated.review_count) == (0, 0)
        assert updated.owner_id == salon.owner_id

    def test_admin_updates_any_salon(self, store, salon, admin_caller):
        assert catalog.update_salon(store, salon.id, {"status": "suspended"}, admin_caller).status == "suspended"

    @pytest.mark.parametrize("field", ["name", "address", "city", "district", "phone", "is_female_only", "status"])
    def test_null_required_field_rejected(self, store, salon, owner_caller, field):
        """Test an explicit null on a required column fails before anything is written."""
        with pytest.raises(ValidationError) as exc:
            catalog.update_salon(store, salon.id, {field: None}, owner_caller)

        assert exc.value.fields == [f"salon.{field}"]
        refreshed = store.get(Salon, salon.id)
        assert refreshed.name == "Lamsat Salon"
        assert refreshed.status == "active"

    def test_null_optional_field_allowed(self, store, owner, owner_caller):
        salon = catalog.create_salon(store, salon_data(description="Old text"), owner_caller)
        updated = catalog.update_salon(store, salon.id, {"description": None}, owner_caller)
        assert updated.description is None

    def test_unknown_salon_status(self, store, salon, owner_caller):
        with pytest.raises(ValidationError) as exc:
            catalog.update_salon(store, salon.id, {"status": "closed-forever"}, owner_caller)

        assert exc.value.fields == ["salon.status"]
        assert store.get(Salon, salon.id).status == "active"

    def test_other_owner_cannot_update(self, store, salon, other_owner_caller, customer_caller):
        for caller in (other_owner_caller, customer_caller):
            with pytest.raises(AuthorizationError):
                catalog.update_salon(store, salon.id, {"name": "Mine now"}, caller)
        assert store.get(Salon, salon.id).name == "Lamsat Salon"

    def test_update_missing_salon(self, store, owner_caller):
        with pytest.raises(NotFoundError):
            catalog.update_salon(store, 999, {"name": "x"}, owner_caller)

    def test_get_missing_salon(self, store):
        with pytest.raises(NotFoundError):
            catalog.get_salon(store, 999)


@pytest.mark.catalog
class TestServiceCategories:
    def test_seed_is_idempotent(self, store):
        assert catalog.seed_service_categories(store) == len(DEFAULT_SERVICE_CATEGORIES)
        assert catalog.seed_service_categories(store) == 0

        names = [c.name_en for c in catalog.list_service_categories(store)]
        assert names == [c["name_en"] for c in DEFAULT_SERVICE_CATEGORIES]

    def test_seed_skips_non_empty_table(self, store):
        store.insert(ServiceCategory, {"name": "أظافر", "name_en": "Nails"})

        assert catalog.seed_service_categories(store) == 0
        assert store.count(ServiceCategory) == 1


@pytest.mark.catalog
class TestServices:
    """Test suite for service management."""

    def service_data(self, salon_id, category_id, **overrides):
        data = {
            "salon_id": salon_id, "category_id": category_id,
            "name": "Blow dry", "price": 60, "duration_minutes": 25,
        }
        data.update(overrides)
        return data

    def test_owner_adds_service(self, store, salon, category, owner_caller):
        service = catalog.create_service(store, self.service_data(salon.id, category.id), owner_caller)

        assert service.is_active is True
        assert [s.id for s in catalog.list_services(store, salon.id)] == [service.id]

    def test_other_owner_cannot_add(self, store, salon, category, other_owner_caller):
        with pytest.raises(AuthorizationError):
            catalog.create_service(store, self.service_data(salon.id, category.id), other_owner_caller)

    def test_unknown_salon(self, store, category, owner_caller):
        with pytest.raises(NotFoundError):
            catalog.create_service(store, self.service_data(999, category.id), owner_caller)

    def test_unknown_category(self, store, salon, owner_caller):
        with pytest.raises(NotFoundError):
            catalog.create_service(store, self.service_data(salon.id, 999), owner_caller)

    @pytest.mark.parametrize("field", ["price", "duration_minutes"])
    def test_non_positive_values(self, store, salon, category, owner_caller, field):
        data = self.service_data(salon.id, category.id, **{field: 0})

        with pytest.raises(ValidationError) as exc:
            catalog.create_service(store, data, owner_caller)
        assert exc.value.fields == [f"service.{field}"]

    def test_owner_updates_service(self, store, services, owner_caller):
        updated = catalog.update_service(store, services[0].id, {"price": 120}, owner_caller)

        assert updated.price == 120
        assert updated.name == "Haircut"

    @pytest.mark.parametrize("field", ["category_id", "name", "price", "duration_minutes", "is_active"])
    def test_null_required_field_rejected(self, store, services, owner_caller, field):
        with pytest.raises(ValidationError) as exc:
            catalog.update_service(store, services[0].id, {field: None}, owner_caller)

        assert exc.value.fields == [f"service.{field}"]
        refreshed = store.get(Service, services[0].id)
        assert (refreshed.price, refreshed.is_active) == (100, True)

    def test_salon_id_not_movable(self, store, services, other_salon, owner_caller):
        updated = catalog.update_service(store, services[0].id, {"salon_id": other_salon.id}, owner_caller)
        assert updated.salon_id == services[0].salon_id

    def test_owner_deletes_service(self, store, services, owner_caller):
        assert catalog.delete_service(store, services[1].id, owner_caller) is True
        assert store.get(Service, services[1].id) is None

    def test_non_owner_cannot_touch_service(self, store, services, other_owner_caller, admin_caller, customer_caller):
        for caller in (other_owner_caller, admin_caller, customer_caller):
            with pytest.raises(AuthorizationError):
                catalog.update_service(store, services[0].id, {"price": 1}, caller)
            with pytest.raises(AuthorizationError):
                catalog.delete_service(store, services[0].id, caller)
        assert store.get(Service, services[0].id).price == 100

    def test_missing_service(self, store, owner_caller):
        with pytest.raises(NotFoundError):
            catalog.update_service(store, 999, {"price": 1}, owner_caller)
        with pytest.raises(NotFoundError):
            catalog.delete_service(store, 999, owner_caller)


@pytest.mark.catalog
class TestSpecialOffers:
    def test_owner_creates_offer(self, store, salon, owner_caller):
        offer = catalog.create_special_offer(store, offer_data(salon.id), owner_caller)

        assert offer.id is not None
        assert [o.id for o in catalog.list_special_offers(store)] == [offer.id]

    def test_salon_listing_shows_active_only(self, store, salon, owner_caller):
        active = catalog.create_special_offer(store, offer_data(salon.id), owner_caller)
        catalog.create_special_offer(store, offer_data(salon.id, is_active=False), owner_caller)

        assert [o.id for o in catalog.list_special_offers_for_salon(store, salon.id)] == [active.id]
        assert len(catalog.list_special_offers(store)) == 2

    def test_other_owner_cannot_create(self, store, salon, other_owner_caller):
        with pytest.raises(AuthorizationError):
            catalog.create_special_offer(store, offer_data(salon.id), other_owner_caller)
        assert store.list(SpecialOffer) == []

    def test_dates_compared_in_utc(self, store, salon, owner_caller):
        """Test 02:00 Riyadh time and 23:30 UTC the evening before are ordered correctly."""
        data = offer_data(
            salon.id, start_date="2026-09-20T02:00:00+03:00", end_date="2026-09-19T23:30:00"
        )

        offer = catalog.create_special_offer(store, data, owner_caller)

        stored = store.get(SpecialOffer, offer.id)
        assert stored.start_date.replace(tzinfo=None) == datetime(2026, 9, 19, 23, 0)

    def test_end_before_start(self, store, salon, owner_caller):
        data = offer_data(salon.id, end_date=datetime(2026, 9, 1))

        with pytest.raises(ValidationError) as exc:
            catalog.create_special_offer(store, data, owner_caller)
        assert exc.value.fields == ["offer.end_date"]

    def test_unknown_salon(self, store, owner_caller):
        with pytest.raises(NotFoundError):
            catalog.create_special_offer(store, offer_data(999), owner_caller)
