"""Tests for Apollo/Loxo record normalization."""

from recruitcrm.recruiting.services.source_normalizers import (
    SOURCE_NORMALIZERS,
    apollo_person_to_payload,
    generate_data_hash,
    loxo_contact_to_payload,
)


class TestApolloNormalizer:
    """Apollo people search records."""

    def test_maps_identity_and_company(self, apollo_person):
        payload = apollo_person_to_payload(apollo_person)

        assert payload.source == "apollo"
        assert payload.apollo_id == "5f2a9c"
        assert payload.external_id == "5f2a9c"
        assert payload.full_name == "Jane Doe"
        assert payload.phone == "+31 6 1234 5678"
        assert payload.current_title == "Staff Engineer"
        assert payload.current_company == "Globex"
        assert payload.industry == "Software"
        assert payload.seniority_level == "senior"
        assert payload.departments == ["engineering"]

    def test_keeps_a_copy_of_the_raw_record(self, apollo_person):
        payload = apollo_person_to_payload(apollo_person)
        apollo_person["title"] = "changed"

        assert payload.apollo_raw_data["title"] == "Staff Engineer"
        assert payload.loxo_raw_data is None

    def test_workflow_fields_left_unset(self, apollo_person):
        payload = apollo_person_to_payload(apollo_person)

        assert payload.contact_status is None
        assert payload.priority is None
        assert payload.status is None
        assert payload.embedding_status is None

    def test_full_name_built_from_parts(self):
        payload = apollo_person_to_payload({"id": "x", "first_name": "Ann", "last_name": "Lee"})
        assert payload.full_name == "Ann Lee"

    def test_sparse_record(self):
        payload = apollo_person_to_payload({"id": "x"})
        assert payload.phone is None
        assert payload.current_company is None
        assert payload.full_name is None


class TestLoxoNormalizer:
    """Loxo contact records."""

    def test_maps_fields_with_fallbacks(self, loxo_contact):
        payload = loxo_contact_to_payload(loxo_contact)

        assert payload.source == "loxo"
        assert payload.loxo_id == "48213"
        assert payload.external_id == "48213"
        assert payload.full_name == "Sam Okafor"
        assert payload.current_title == "Data Lead"
        assert payload.current_company == "Initech"
        assert payload.headline == "Data platform lead"
        assert payload.skills == ["Python", "dbt"]
        assert payload.tags == ["data"]
        assert payload.employment_history == [{"company": "Initech", "title": "Data Lead"}]
        assert payload.loxo_raw_data["id"] == 48213

    def test_explicit_current_fields_win(self, loxo_contact):
        loxo_contact["current_title"] = "Head of Data"
        loxo_contact["current_company"] = "Initrode"

        payload = loxo_contact_to_payload(loxo_contact)

        assert payload.current_title == "Head of Data"
        assert payload.current_company == "Initrode"


class TestGenerateDataHash:
    """Raw record hashing."""

    def test_key_order_does_not_matter(self):
        assert generate_data_hash({"a": 1, "b": [1, 2]}) == generate_data_hash({"b": [1, 2], "a": 1})

    def test_values_matter(self):
        assert generate_data_hash({"a": 1}) != generate_data_hash({"a": 2})


def test_normalizers_registered_by_source():
    assert SOURCE_NORMALIZERS["apollo"] is apollo_person_to_payload
    assert SOURCE_NORMALIZERS["loxo"] is loxo_contact_to_payload
