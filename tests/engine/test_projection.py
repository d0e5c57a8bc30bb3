"""Tests for projecting payloads onto operation selections."""

from __future__ import annotations

import copy
from typing import Any, cast

import pytest
from graphql import parse
from graphql.language.ast import FragmentDefinitionNode, OperationDefinitionNode

from gqlmock.engine.errors import OperationNotFoundError
from gqlmock.engine.projection import collect_fields, project


class TestProjectBasics:
    def test_single_field(self):
        assert project({"name": "msw"}, parse("query { name }")) == {"name": "msw"}

    def test_extra_payload_keys_are_dropped(self):
        assert project({"name": "msw", "version": 2}, parse("{ name }")) == {"name": "msw"}

    def test_absent_fields_are_omitted(self):
        assert project({"name": "msw"}, parse("{ name version }")) == {"name": "msw"}

    def test_null_values_pass_through(self):
        assert project({"user": None}, parse("{ user { id } }")) == {"user": None}

    def test_scalar_under_selection_is_copied(self):
        assert project({"user": "jack"}, parse("{ user { id } }")) == {"user": "jack"}

    def test_object_without_selection_is_copied_whole(self):
        payload = {"settings": {"theme": "dark", "beta": True}}
        assert project(payload, parse("{ settings }")) == payload

    def test_aliases_use_response_keys(self):
        payload = {"user": {"id": "1", "name": "Jack"}}
        assert project(payload, parse("{ me: user { id } }")) == {"me": {"id": "1"}}

    def test_aliased_payload_keys_win(self):
        payload = {"small": "s.png", "pic": "default.png"}
        assert project(payload, parse("{ small: pic }")) == {"small": "s.png"}

    def test_nested_lists(self):
        payload = {"grid": [[{"x": 1, "y": 2}], [None, {"x": 3, "y": 4}]]}
        assert project(payload, parse("{ grid { x } }")) == {
            "grid": [[{"x": 1}], [None, {"x": 3}]]
        }

    def test_payload_is_not_mutated(self, accounts: dict[str, Any]):
        payload = {"user": accounts["jill"]}
        before = copy.deepcopy(payload)
        project(payload, parse("{ user { id pastEmployers { id } } }"))
        assert payload == before


class TestProjectOperations:
    def test_deep_picks_fields_from_queries(self, accounts: dict[str, Any]):
        jack, business = accounts["jack"], accounts["business"]
        result = project(
            {"user": jack, "business": business, "unknown": None},
            parse(
                """
                query($businessId: String!) {
                  user {
                    __typename
                    id
                    pastEmployers { id type }
                  }
                  business(id: $businessId) {
                    type
                    productSKUs
                    employees {
                      name
                      employer { id }
                    }
                  }
                }
                """
            ),
        )
        assert result == {
            "user": {
                "__typename": "Account",
                "id": jack["id"],
                "pastEmployers": [None, {"id": "1357924680", "type": "Startup"}],
            },
            "business": {
                "type": "SME",
                "productSKUs": ["sku1", "sku2"],
                "employees": [
                    {"name": "Jack", "employer": {"id": business["id"]}},
                    {"name": "Jill", "employer": None},
                ],
            },
        }

    def test_deep_picks_fields_from_mutations(self, accounts: dict[str, Any]):
        jack, business = accounts["jack"], accounts["business"]
        result = project(
            {"addEmployee": business, "leaveBusiness": jack},
            parse(
                """
                mutation($userId: String!, $businessId: String!) {
                  addEmployee(businessId: $businessId, employeeId: $userId) {
                    id
                    employees { id employer { id } }
                  }
                  leaveBusiness(businessId: $businessId, employeeId: $userId) {
                    id
                    pastEmployers { id employees { id } }
                  }
                }
                """
            ),
        )
        assert result == {
            "addEmployee": {
                "id": business["id"],
                "employees": [
                    {"id": jack["id"], "employer": {"id": business["id"]}},
                    {"id": accounts["jill"]["id"], "employer": None},
                ],
            },
            "leaveBusiness": {
                "id": jack["id"],
                "pastEmployers": [None, {"id": "1357924680", "employees": []}],
            },
        }

    def test_deep_picks_fields_from_subscriptions(self, accounts: dict[str, Any]):
        result = project(
            {"onUserUpdate": accounts["jack"]},
            parse("subscription { onUserUpdate { name employer { type } } }"),
        )
        assert result == {"onUserUpdate": {"name": "Jack", "employer": {"type": "SME"}}}

    def test_circular_payload_stops_at_query_depth(self):
        user: dict[str, Any] = {"name": "Ann", "age": 40}
        sibling: dict[str, Any] = {"name": "Bob", "age": 42}
        user["siblings"] = [sibling]
        user["eldestSibling"] = sibling
        sibling["siblings"] = [user]
        sibling["eldestSibling"] = user

        result = project(
            {"user": user},
            parse("query { user { name siblings { name } eldestSibling { age } } }"),
        )
        assert result == {
            "user": {
                "name": "Ann",
                "siblings": [{"name": "Bob"}],
                "eldestSibling": {"age": 42},
            }
        }

    def test_anonymous_operation_when_no_name_is_passed(self, accounts: dict[str, Any]):
        document = parse(
            """
            query { user { __typename id } }
            query GetUserName { user { name } }
            """
        )
        assert project({"user": accounts["jack"]}, document) == {
            "user": {"__typename": "Account", "id": "123456789"}
        }

    def test_named_operation_among_several(self, accounts: dict[str, Any]):
        document = parse(
            """
            query GetBusiness { business { id } }
            query GetUserName { user { name } }
            """
        )
        result = project(
            {"user": accounts["jack"], "business": accounts["business"]},
            document,
            "GetUserName",
        )
        assert result == {"user": {"name": "Jack"}}

    def test_named_operations_without_name_raise(self):
        document = parse("query A { a } query B { b }")
        with pytest.raises(
            OperationNotFoundError,
            match="Unable to find anonymous query, pass operationName to choose an operation",
        ):
            project({"a": 1}, document)

    def test_unknown_operation_name_raises(self):
        document = parse("query { a } query GetUserName { b }")
        with pytest.raises(
            OperationNotFoundError, match='Unable to find operation named "UnknownOperation"'
        ):
            project({"a": 1}, document, "UnknownOperation")


class TestFragments:
    def test_named_and_nested_fragments(self, accounts: dict[str, Any]):
        jack, jill, business = accounts["jack"], accounts["jill"], accounts["business"]
        business_fields = {
            "id": business["id"],
            "type": "SME",
            "employees": [
                {"id": jack["id"], "employer": {"id": business["id"]}},
                {"id": jill["id"], "employer": None},
            ],
        }
        result = project(
            {"user": jack, "business": business},
            parse(
                """
                query {
                  user { ...UserFields }
                  business { ...BusinessFields }
                }

                fragment UserFields on Account {
                  name
                  employer { ...BusinessFields }
                }

                fragment BusinessFields on Business {
                  id
                  type
                  employees {
                    ... on Account {
                      id
                      employer { id }
                    }
                  }
                }
                """
            ),
        )
        assert result == {
            "user": {"name": "Jack", "employer": business_fields},
            "business": business_fields,
        }

    def test_fragment_spread_equals_inlined_selection(self, accounts: dict[str, Any]):
        payload = {"user": accounts["jack"]}
        with_fragment = project(
            payload,
            parse("{ user { ...A } } fragment A on Account { name ...B } fragment B on Account { id }"),
        )
        inlined = project(payload, parse("{ user { name id } }"))
        assert with_fragment == inlined

    def test_mutually_recursive_fragments_terminate(self, accounts: dict[str, Any]):
        document = parse(
            """
            { user { ...A } }
            fragment A on Account { id ...B }
            fragment B on Account { name ...A }
            """
        )
        assert project({"user": accounts["jack"]}, document) == {
            "user": {"id": "123456789", "name": "Jack"}
        }

    def test_conditional_fragments_are_combined_without_schema(
        self, accounts: dict[str, Any]
    ):
        combined = {"id": "1357902468", "type": "unknown", "name": None}
        user = {
            "name": "Jack",
            "relationships": [accounts["business"], accounts["jill"], combined],
        }
        result = project(
            {"user": user},
            parse(
                """
                query {
                  user {
                    relationships {
                      ...UserFields
                      ... on Business { id type }
                    }
                  }
                }

                fragment UserFields on Account { id name }
                """
            ),
        )
        assert result == {
            "user": {
                "relationships": [
                    {"id": "0864297531", "type": "SME"},
                    {"id": "0987654321", "name": "Jill"},
                    combined,
                ]
            }
        }


class TestFieldMerging:
    def test_same_field_sub_selections_are_merged(self, accounts: dict[str, Any]):
        result = project(
            {"user": accounts["jack"]},
            parse("{ user { id } user { name employer { id } } user { employer { type } } }"),
        )
        assert result == {
            "user": {
                "id": "123456789",
                "name": "Jack",
                "employer": {"id": "0864297531", "type": "SME"},
            }
        }

    def test_collect_fields_groups_by_response_key(self):
        document = parse("{ a b: a a { x } ...F } fragment F on Query { b }")
        operation = cast(OperationDefinitionNode, document.definitions[0])
        fragments = {"F": cast(FragmentDefinitionNode, document.definitions[1])}
        fields = collect_fields(fragments, {}, [operation.selection_set])
        assert list(fields) == ["a", "b"]
        assert len(fields["a"]) == 2
        assert len(fields["b"]) == 2


class TestDirectives:
    @pytest.mark.parametrize(
        ("skip_id", "skip_name", "expected"),
        [
            (False, False, {"id": "123456789", "name": "Jack"}),
            (False, True, {"id": "123456789"}),
            (True, False, {"name": "Jack"}),
            (True, True, {}),
        ],
    )
    def test_skip(self, accounts: dict[str, Any], skip_id, skip_name, expected):
        document = parse(
            """
            query($skipId: Boolean!, $skipName: Boolean!) {
              user {
                id @skip(if: $skipId)
                name @skip(if: $skipName)
              }
            }
            """
        )
        result = project(
            {"user": accounts["jack"]},
            document,
            None,
            {"skipId": skip_id, "skipName": skip_name},
        )
        assert result == {"user": expected}

    @pytest.mark.parametrize(
        ("include_id", "include_name", "expected"),
        [
            (True, True, {"id": "123456789", "name": "Jack"}),
            (True, False, {"id": "123456789"}),
            (False, True, {"name": "Jack"}),
            (False, False, {}),
        ],
    )
    def test_include(self, accounts: dict[str, Any], include_id, include_name, expected):
        document = parse(
            """
            query($includeId: Boolean!, $includeName: Boolean!) {
              user {
                id @include(if: $includeId)
                name @include(if: $includeName)
              }
            }
            """
        )
        result = project(
            {"user": accounts["jack"]},
            document,
            None,
            {"includeId": include_id, "includeName": include_name},
        )
        assert result == {"user": expected}

    @pytest.mark.parametrize(
        ("include", "skip", "kept"),
        [
            (True, False, True),
            (True, True, False),
            (False, False, False),
            (False, True, False),
        ],
    )
    def test_skip_and_include_combined(self, accounts: dict[str, Any], include, skip, kept):
        document = parse(
            """
            query($include: Boolean!, $skip: Boolean!) {
              user { id @include(if: $include) @skip(if: $skip) }
            }
            """
        )
        result = project(
            {"user": accounts["jack"]}, document, None, {"include": include, "skip": skip}
        )
        assert result == {"user": {"id": "123456789"} if kept else {}}

    def test_literal_arguments(self, accounts: dict[str, Any]):
        document = parse("{ user { id @skip(if: true) name @include(if: true) } }")
        assert project({"user": accounts["jack"]}, document) == {"user": {"name": "Jack"}}

    def test_directives_on_fragments(self, accounts: dict[str, Any]):
        document = parse(
            """
            query($withName: Boolean = false) {
              user {
                ... on Account @include(if: $withName) { name }
                ...Ids @skip(if: false)
              }
            }
            fragment Ids on Account { id }
            """
        )
        assert project({"user": accounts["jack"]}, document) == {"user": {"id": "123456789"}}
        assert project({"user": accounts["jack"]}, document, None, {"withName": True}) == {
            "user": {"name": "Jack", "id": "123456789"}
        }
