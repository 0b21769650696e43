from scheduhub.models.subscription import Allowed, DenialReason, Denied, Limit, SubscriptionTier
from scheduhub.models.workspace import Employee, Workspace
from scheduhub.services.entitlement_evaluator import (
    can_add_employee,
    can_create_workspace,
    can_workspace_add_employee,
    count_owned_workspaces,
    count_workspace_members,
    describe_tier,
    summarize_usage,
)


def make_workspace(workspace_id: str = "ws-1", owner_id: str = "owner-1", employee_ids: tuple = ()) -> Workspace:
    return Workspace(
        workspace_id=workspace_id,
        name=f"Workspace {workspace_id}",
        owner_id=owner_id,
        employees=[Employee(user_id=user_id) for user_id in employee_ids],
    )


def test_count_owned_workspaces():
    workspaces = [
        make_workspace("ws-1", owner_id="owner-1"),
        make_workspace("ws-2", owner_id="owner-2"),
        make_workspace("ws-3", owner_id="owner-1"),
    ]
    assert count_owned_workspaces(workspaces, "owner-1") == 2
    assert count_owned_workspaces(workspaces, "owner-2") == 1
    assert count_owned_workspaces(workspaces, "someone-else") == 0


def test_count_owned_workspaces_missing_input():
    assert count_owned_workspaces([], "owner-1") == 0
    assert count_owned_workspaces(None, None) == 0
    assert count_owned_workspaces([make_workspace()], None) == 0
    assert count_owned_workspaces([make_workspace()], "") == 0


def test_count_members_adds_unlisted_owner():
    assert count_workspace_members(make_workspace(employee_ids=())) == 1
    assert count_workspace_members(make_workspace(employee_ids=("a", "b"))) == 3


def test_count_members_does_not_double_count_listed_owner():
    assert count_workspace_members(make_workspace(employee_ids=("owner-1",))) == 1
    assert count_workspace_members(make_workspace(employee_ids=("owner-1", "a", "b"))) == 3


def test_count_members_without_workspace():
    assert count_workspace_members(None) == 0


def test_basic_allows_one_workspace():
    assert can_create_workspace(SubscriptionTier.BASIC, 0) == Allowed()

    decision = can_create_workspace(SubscriptionTier.BASIC, 1)
    assert isinstance(decision, Denied)
    assert decision.allowed is False
    assert decision.reason == DenialReason.WORKSPACE_LIMIT_REACHED
    assert decision.reason.value == "workspace_limit_reached"
    assert decision.limit == 1


def test_extended_allows_three_workspaces():
    assert can_create_workspace("extended", 2).allowed is True

    decision = can_create_workspace("extended", 3)
    assert decision.allowed is False
    assert decision.limit == 3


def test_unlimited_never_denies():
    for count in (0, 1, 10, 1_000_000):
        assert can_create_workspace(SubscriptionTier.UNLIMITED, count).allowed is True
        assert can_add_employee(SubscriptionTier.UNLIMITED, count).allowed is True


def test_unknown_tier_is_evaluated_as_basic():
    assert can_create_workspace("platinum", 1).allowed is False
    assert can_add_employee(None, 8).allowed is False
    assert can_add_employee(None, 7).allowed is True


def test_missing_count_reads_as_zero():
    assert can_create_workspace(SubscriptionTier.BASIC, None).allowed is True


def test_employee_limit_is_inclusive():
    assert can_add_employee(SubscriptionTier.BASIC, 7).allowed is True

    decision = can_add_employee(SubscriptionTier.BASIC, 8)
    assert isinstance(decision, Denied)
    assert decision.reason == DenialReason.EMPLOYEE_LIMIT_REACHED
    assert decision.limit == 8

    assert can_add_employee(SubscriptionTier.EXTENDED, 14).allowed is True
    assert can_add_employee(SubscriptionTier.EXTENDED, 15).allowed is False


def test_workspace_add_employee_reports_usage_when_allowed():
    workspace = make_workspace(employee_ids=("a", "b"))
    decision = can_workspace_add_employee(SubscriptionTier.BASIC, workspace)

    assert isinstance(decision, Allowed)
    assert decision.current_count == 3
    assert decision.limit == Limit.bounded(8)


def test_workspace_add_employee_denied_at_limit():
    # Seven listed employees plus the unlisted owner
    workspace = make_workspace(employee_ids=tuple(f"user-{i}" for i in range(7)))
    decision = can_workspace_add_employee(SubscriptionTier.BASIC, workspace)

    assert isinstance(decision, Denied)
    assert decision.reason == DenialReason.EMPLOYEE_LIMIT_REACHED
    assert decision.current_count == 8
    assert decision.limit == 8


def test_workspace_add_employee_counts_listed_owner_once():
    employee_ids = ("owner-1",) + tuple(f"user-{i}" for i in range(6))
    decision = can_workspace_add_employee(SubscriptionTier.BASIC, make_workspace(employee_ids=employee_ids))

    assert decision.allowed is True
    assert decision.current_count == 7


def test_workspace_add_employee_unlimited():
    workspace = make_workspace(employee_ids=tuple(f"user-{i}" for i in range(100)))
    decision = can_workspace_add_employee(SubscriptionTier.UNLIMITED, workspace)

    assert decision.allowed is True
    assert decision.limit.is_unbounded
    assert decision.model_dump()["limit"] == "Unlimited"


def test_describe_tier():
    info = describe_tier(SubscriptionTier.EXTENDED)
    assert info.tier == SubscriptionTier.EXTENDED
    assert info.name == "Extended"
    assert info.name_key == "subscriptions.tiers.extended.name"
    assert info.max_workspaces == 3
    assert info.max_employees == 15
    assert info.is_unlimited is False


def test_describe_unlimited_tier_uses_label():
    info = describe_tier("unlimited")
    assert info.max_workspaces == "Unlimited"
    assert info.max_employees == "Unlimited"
    assert info.is_unlimited is True

    # The label is display only, comparisons still allow any count
    assert can_create_workspace("unlimited", 10**9).allowed is True


def test_describe_unknown_tier_describes_basic():
    info = describe_tier("gold")
    assert info.tier == SubscriptionTier.BASIC
    assert info.max_workspaces == 1
    assert info.is_unlimited is False


def test_decisions_are_repeatable():
    workspace = make_workspace(employee_ids=("a",))
    assert can_workspace_add_employee("basic", workspace) == can_workspace_add_employee("basic", workspace)
    assert can_create_workspace("basic", 1) == can_create_workspace("basic", 1)
    assert describe_tier("extended") == describe_tier("extended")
    assert count_workspace_members(workspace) == count_workspace_members(workspace)


def test_summarize_usage():
    workspaces = [
        make_workspace("ws-1", owner_id="owner-1", employee_ids=("a", "b")),
        make_workspace("ws-2", owner_id="owner-2", employee_ids=("owner-1",)),
    ]
    summary = summarize_usage(SubscriptionTier.BASIC, workspaces, "owner-1")

    assert summary.owned_workspaces == 1
    assert summary.workspace_limit == Limit.bounded(1)
    assert summary.can_create_workspace is False
    assert [usage.workspace_id for usage in summary.workspaces] == ["ws-1"]
    assert summary.workspaces[0].member_count == 3
    assert summary.workspaces[0].can_add_employee is True

    dumped = summary.model_dump(mode="json")
    assert dumped["workspace_limit"] == 1
    assert dumped["workspaces"][0]["member_limit"] == 8
    assert dumped["tier"]["tier"] == "basic"


def test_summarize_usage_without_workspaces():
    summary = summarize_usage(SubscriptionTier.UNLIMITED, None, None)

    assert summary.owned_workspaces == 0
    assert summary.can_create_workspace is True
    assert summary.workspaces == []
    assert summary.model_dump(mode="json")["workspace_limit"] == "Unlimited"
