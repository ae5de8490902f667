"""Unit tests for the default roster."""
import pytest

from cedoi.core.enums import Role
from cedoi.seed import DEFAULT_MEMBERS, seed_default_users
from tests.utils import make_user


@pytest.mark.unit
class TestSeed:

    def test_seeds_empty_store(self, store):
        created = seed_default_users(store)

        assert len(created) == len(DEFAULT_MEMBERS) == 13
        roles = [u.role for u in store.get_all_users()]
        assert roles.count(Role.CHAIRMAN) == 1
        assert roles.count(Role.SONAI) == 1

    def test_leaves_existing_users_alone(self, store):
        make_user(store, "prabu@cedoi.com", "Prabu")
        assert seed_default_users(store) == []
        assert len(store.get_all_users()) == 1

    def test_qr_codes_are_unique(self):
        codes = [member.qr_code for member in DEFAULT_MEMBERS]
        assert len(set(codes)) == len(codes)

    def test_replace_users_is_idempotent(self, store):
        first = store.replace_users(DEFAULT_MEMBERS)
        second = store.replace_users(DEFAULT_MEMBERS)
        assert sorted(str(u.id) for u in first) == sorted(str(u.id) for u in second)
