import pytest

from storage_guard.analysis.compatibility import (
    assert_storage_upgrade_safe,
    get_storage_upgrade_errors,
    get_storage_upgrade_operations,
    is_safe,
    match_storage_item,
    to_upgrade_error,
)
from storage_guard.analysis.levenshtein import Operation
from storage_guard.core.errors import StorageUpgradeError, StorageUpgradeErrors

UINT256 = ("t_uint256", "uint256")
ADDRESS = ("t_address", "address")
STRING = ("t_string_storage", "string")
BALANCES = ("t_mapping(t_address,t_uint256)", "mapping(address => uint256)")


def field(label, type_):
    return (label, type_[0], type_[1])


def actions(operations):
    return [op.action for op in operations]


# --- Pairwise classifier ---


@pytest.mark.parametrize(
    "original_field, updated_field, expected",
    [
        (field("x", UINT256), field("x", UINT256), "equal"),
        (field("x", UINT256), field("y", UINT256), "typechange"),
        (field("x", UINT256), field("x", ADDRESS), "rename"),
        (field("x", UINT256), field("y", ADDRESS), "replace"),
    ],
)
def test_classifier(layout_factory, original_field, updated_field, expected):
    original = layout_factory(original_field)
    updated = layout_factory(updated_field)

    match = match_storage_item(original, updated)

    assert match(original.storage[0], updated.storage[0]) == expected


def test_classifier_compares_rendered_labels_not_keys(layout_factory):
    # Same source type, different AST ids in the two compilations
    original = layout_factory(("pos", "t_struct(Position)12_storage", "struct Vault.Position"))
    updated = layout_factory(("pos", "t_struct(Position)57_storage", "struct Vault.Position"))

    match = match_storage_item(original, updated)

    assert match(original.storage[0], updated.storage[0]) == "equal"


def test_classifier_uses_each_layouts_own_types(layout_factory):
    original = layout_factory(("x", "t_key", "uint256"))
    updated = layout_factory(("x", "t_key", "uint128"))

    match = match_storage_item(original, updated)

    assert match(original.storage[0], updated.storage[0]) == "rename"


# --- Verdicts ---


def test_unchanged_layout_is_safe(layout_factory):
    layout = layout_factory(field("owner", ADDRESS), field("balances", BALANCES))

    assert actions(get_storage_upgrade_operations(layout, layout)) == ["equal", "equal"]
    assert get_storage_upgrade_errors(layout, layout) == []
    assert assert_storage_upgrade_safe(layout, layout) is None


def test_appending_variables_is_safe(layout_factory):
    original = layout_factory(field("owner", ADDRESS))
    updated = layout_factory(field("owner", ADDRESS), field("balance", UINT256))

    assert actions(get_storage_upgrade_operations(original, updated)) == ["equal"]
    assert_storage_upgrade_safe(original, updated)


def test_appending_to_longer_layout_is_safe(layout_factory):
    original = layout_factory(field("owner", ADDRESS), field("balances", BALANCES), field("paused", ("t_bool", "bool")))
    updated = layout_factory(
        field("owner", ADDRESS),
        field("balances", BALANCES),
        field("paused", ("t_bool", "bool")),
        field("fee", UINT256),
        field("treasury", ADDRESS),
    )

    assert get_storage_upgrade_errors(original, updated) == []
    assert_storage_upgrade_safe(original, updated)


def test_renaming_a_variable_is_safe(layout_factory):
    original = layout_factory(field("owner", ADDRESS))
    updated = layout_factory(field("admin", ADDRESS))

    ops = get_storage_upgrade_operations(original, updated)

    assert actions(ops) == ["typechange"]
    assert_storage_upgrade_safe(original, updated)


def test_changing_a_type_is_unsafe(layout_factory):
    original = layout_factory(field("a", UINT256))
    updated = layout_factory(field("a", STRING))

    errors = get_storage_upgrade_errors(original, updated)
    assert actions(errors) == ["rename"]

    with pytest.raises(StorageUpgradeErrors) as excinfo:
        assert_storage_upgrade_safe(original, updated)

    assert excinfo.value.errors == [StorageUpgradeError(location="Token.sol:1", action="rename", label="a")]


def test_replacing_a_variable_is_unsafe(layout_factory):
    original = layout_factory(field("owner", ADDRESS), field("fee", UINT256))
    updated = layout_factory(field("owner", ADDRESS), field("name", STRING))

    with pytest.raises(StorageUpgradeErrors) as excinfo:
        assert_storage_upgrade_safe(original, updated)

    assert [(e.action, e.label) for e in excinfo.value.errors] == [("replace", "name")]


def test_insertion_in_the_middle_is_unsafe(layout_factory):
    original = layout_factory(field("owner", ADDRESS), field("balances", BALANCES))
    updated = layout_factory(field("owner", ADDRESS), field("fee", UINT256), field("balances", BALANCES))

    errors = get_storage_upgrade_errors(original, updated)

    assert actions(errors) == ["insert"]
    assert errors[0].updated.label == "fee"


def test_deletion_is_unsafe(layout_factory):
    original = layout_factory(field("owner", ADDRESS), field("fee", UINT256), field("balances", BALANCES))
    updated = layout_factory(field("owner", ADDRESS), field("balances", BALANCES))

    with pytest.raises(StorageUpgradeErrors) as excinfo:
        assert_storage_upgrade_safe(original, updated)

    # Deleted variables are reported at their original location
    assert excinfo.value.errors == [StorageUpgradeError(location="Token.sol:2", action="delete", label="fee")]


def test_reordering_is_unsafe(layout_factory):
    original = layout_factory(field("owner", ADDRESS), field("supply", UINT256))
    updated = layout_factory(field("supply", UINT256), field("owner", ADDRESS))

    errors = get_storage_upgrade_errors(original, updated)

    assert errors
    assert all(not is_safe(op) for op in errors)


def test_every_unsafe_change_is_reported(layout_factory):
    original = layout_factory(field("a", UINT256), field("b", ADDRESS), field("c", BALANCES))
    updated = layout_factory(field("a", STRING), field("b", ADDRESS), field("c", UINT256))

    with pytest.raises(StorageUpgradeErrors) as excinfo:
        assert_storage_upgrade_safe(original, updated)

    assert [(e.action, e.label) for e in excinfo.value.errors] == [("rename", "a"), ("rename", "c")]


def test_comparison_is_deterministic(layout_factory):
    original = layout_factory(field("a", UINT256), field("b", ADDRESS), field("c", BALANCES))
    updated = layout_factory(field("b", ADDRESS), field("x", UINT256), field("c", STRING), field("d", UINT256))

    first = get_storage_upgrade_operations(original, updated)
    second = get_storage_upgrade_operations(original, updated)

    assert first == second


def test_unknown_actions_are_unsafe():
    assert is_safe(Operation("equal"))
    assert is_safe(Operation("typechange"))
    assert not is_safe(Operation("rename"))
    assert not is_safe(Operation("replace"))
    assert not is_safe(Operation("delete"))
    assert not is_safe(Operation("shrink"))


def test_to_upgrade_error_without_items():
    assert to_upgrade_error(Operation("shrink")) == StorageUpgradeError(
        location="unknown", action="shrink", label="unknown"
    )


def test_error_message_lists_details(layout_factory):
    original = layout_factory(field("a", UINT256))
    updated = layout_factory(field("a", STRING))

    with pytest.raises(StorageUpgradeErrors) as excinfo:
        assert_storage_upgrade_safe(original, updated)

    assert str(excinfo.value) == "New storage layout is incompatible\n\nToken.sol:1: rename of variable a"
