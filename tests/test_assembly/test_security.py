"""Tests for specwright.assembly.security -- OR/AND composition and opt-out."""

from __future__ import annotations

from specwright.assembly.security import (
    any_of,
    create_requirement,
    effective_security,
    inherit_security,
    opt_out_of_security,
    require_all,
    set_operation_security,
)


class TestRequirements:
    def test_create_requirement_defaults_to_no_scopes(self) -> None:
        assert create_requirement("ApiKey") == {"ApiKey": []}

    def test_create_requirement_with_scopes(self) -> None:
        assert create_requirement("OAuth", ("read", "write")) == {"OAuth": ["read", "write"]}

    def test_require_all_combines_schemes(self) -> None:
        combined = require_all(create_requirement("ApiKey"), create_requirement("OAuth", ["read"]))
        assert combined == {"ApiKey": [], "OAuth": ["read"]}

    def test_require_all_unions_scopes_in_order(self) -> None:
        combined = require_all({"OAuth": ["read", "write"]}, {"OAuth": ["write", "admin"]})
        assert combined == {"OAuth": ["read", "write", "admin"]}

    def test_any_of_copies(self) -> None:
        original = {"OAuth": ["read"]}
        alternatives = any_of(original, {"ApiKey": []})
        assert alternatives == [{"OAuth": ["read"]}, {"ApiKey": []}]
        alternatives[0]["OAuth"].append("write")
        assert original == {"OAuth": ["read"]}

    def test_any_of_nothing_is_empty_list(self) -> None:
        assert any_of() == []


class TestOperationSecurity:
    """Absent and empty security must stay distinct."""

    def test_set_operation_security(self) -> None:
        operation: dict = {}
        set_operation_security(operation, [{"ApiKey": []}])
        assert operation["security"] == [{"ApiKey": []}]

    def test_opt_out_sets_empty_list(self) -> None:
        operation: dict = {}
        opt_out_of_security(operation)
        assert "security" in operation
        assert operation["security"] == []

    def test_inherit_removes_key(self) -> None:
        operation = {"security": []}
        inherit_security(operation)
        assert "security" not in operation

    def test_inherit_when_absent_is_noop(self) -> None:
        operation: dict = {"summary": "x"}
        inherit_security(operation)
        assert operation == {"summary": "x"}


class TestEffectiveSecurity:
    GLOBAL = [{"ApiKey": []}]

    def test_absent_inherits_global(self) -> None:
        assert effective_security(self.GLOBAL, {}) == self.GLOBAL

    def test_empty_list_overrides_global(self) -> None:
        assert effective_security(self.GLOBAL, {"security": []}) == []

    def test_operation_list_wins(self) -> None:
        own = [{"OAuth": ["read"]}]
        assert effective_security(self.GLOBAL, {"security": own}) == own

    def test_nothing_declared(self) -> None:
        assert effective_security(None, {}) is None
